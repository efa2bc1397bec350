import uuid
from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TicketStatus(str, Enum):
    ACTIVE = 'active'
    USED = 'used'
    REFUNDED = 'refunded'
    CANCELLED = 'cancelled'


class AdmissionStatus(str, Enum):
    NOT_VALID_YET = 'not_valid_yet'
    EXPIRED = 'expired'
    VALID = 'valid'


class TicketIssue(BaseModel):
    event_id: str
    valid_for_date: Optional[date] = None
    attendee_name: Optional[str] = None
    attendee_email: Optional[str] = None
    ticket_tier: Optional[str] = None


class InternalTicketCreate(TicketIssue):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    ticket_code: str
    qr_payload: str
    status: TicketStatus = TicketStatus.ACTIVE

    model_config = ConfigDict(use_enum_values=True)


class TicketFilter(BaseModel):
    event_id: Optional[str] = None
    status: Optional[TicketStatus] = None

    model_config = ConfigDict(use_enum_values=True)


class TicketStats(BaseModel):
    total: int
    checked_in: int
