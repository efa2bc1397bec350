import uuid
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ProfileRole(str, Enum):
    ATTENDEE = 'attendee'
    STAFF = 'staff'
    ORGANIZER = 'organizer'
    ADMIN = 'admin'


# Roles allowed to check in tickets for any event
GLOBAL_CHECK_IN_ROLES = (ProfileRole.ADMIN, ProfileRole.ORGANIZER)


class ProfileCreate(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    email: Optional[str] = None
    full_name: Optional[str] = None
    role: ProfileRole = ProfileRole.ATTENDEE

    model_config = ConfigDict(use_enum_values=True)
