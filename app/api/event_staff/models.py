from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint

from app.core.database import Base
from app.core.utils import current_time


class EventStaff(Base):
    __tablename__ = 'event_staff'
    __table_args__ = (
        UniqueConstraint('event_id', 'user_id', name='uq_event_staff_event_user'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    event_id = Column(String, index=True, nullable=False)
    user_id = Column(String, ForeignKey('profiles.id'), index=True, nullable=False)
    role = Column(String, nullable=False, default='staff')

    created_at = Column(DateTime, default=current_time)
