from pydantic import BaseModel


class EventStaffCreate(BaseModel):
    event_id: str
    user_id: str
    role: str = 'staff'
