import uuid

from sqlalchemy import Column, Date, DateTime, String

from app.core.database import Base
from app.core.utils import current_time


class Ticket(Base):
    __tablename__ = 'tickets'

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = Column(String, index=True, nullable=False)
    ticket_code = Column(String, index=True, nullable=False, unique=True)
    qr_payload = Column(String, nullable=True)
    status = Column(String, index=True, nullable=False, default='active')
    valid_for_date = Column(Date, nullable=True)

    # Denormalized for the scanner display
    attendee_name = Column(String, nullable=True)
    attendee_email = Column(String, nullable=True)
    ticket_tier = Column(String, nullable=True)

    created_at = Column(DateTime, default=current_time)
    updated_at = Column(DateTime, default=current_time, onupdate=current_time)
