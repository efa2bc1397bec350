import uuid

from sqlalchemy import Column, DateTime, String

from app.core.database import Base
from app.core.utils import current_time


class Profile(Base):
    __tablename__ = 'profiles'

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String, index=True, nullable=True)
    full_name = Column(String, nullable=True)
    role = Column(String, nullable=False, default='attendee')

    created_at = Column(DateTime, default=current_time)
    updated_at = Column(DateTime, default=current_time, onupdate=current_time)
