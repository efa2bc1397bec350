from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from app.core.database import Base
from app.core.utils import current_time


class TicketCheckIn(Base):
    __tablename__ = 'ticket_checkins'

    id = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
        unique=True,
        index=True,
    )
    # One check-in per ticket, enforced by the database
    ticket_id = Column(
        String,
        ForeignKey('tickets.id'),
        nullable=False,
        unique=True,
    )
    event_id = Column(String, index=True, nullable=False)
    checked_in_by = Column(String, nullable=False)
    device_info = Column(String, nullable=True)
    checked_in_at = Column(DateTime, nullable=False, default=current_time)
