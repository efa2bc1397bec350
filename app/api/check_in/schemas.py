from datetime import date, datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

from app.api.tickets.schemas import TicketStats

DEFAULT_ATTENDEE_NAME = 'Guest'
DEFAULT_TICKET_TIER = 'Standard'


class InternalCheckInCreate(BaseModel):
    ticket_id: str
    event_id: str
    checked_in_by: str
    device_info: Optional[str] = None


class VerifyQRRequest(BaseModel):
    qr_payload: str
    event_id: str
    device_info: Optional[str] = None

    @field_validator('qr_payload', 'event_id')
    def validate_required(cls, v, info):
        if not v:
            raise ValueError(f'{info.field_name} required')
        return v

    @field_validator('device_info', mode='before')
    def validate_device_info(cls, v):
        # Only non-empty strings are stored
        if not isinstance(v, str) or not v:
            return None
        return v


class ScanResult(BaseModel):
    attendee_name: str = DEFAULT_ATTENDEE_NAME
    ticket_tier: str = DEFAULT_TICKET_TIER


class CheckedIn(ScanResult):
    ok: Literal[True] = True
    status: Literal['checked_in'] = 'checked_in'
    ticket_id: str
    checked_in_by: str
    checked_in_at: datetime
    stats: TicketStats


class AlreadyCheckedIn(ScanResult):
    ok: Literal[False] = False
    status: Literal['already_checked_in'] = 'already_checked_in'
    checked_in_at: Optional[datetime] = None
    checked_in_by: Optional[str] = None
    stats: TicketStats


class NotValidYet(ScanResult):
    ok: Literal[False] = False
    status: Literal['not_valid_yet'] = 'not_valid_yet'
    valid_for_date: date
    message: str = 'Ticket not valid yet'


class Expired(ScanResult):
    ok: Literal[False] = False
    status: Literal['expired'] = 'expired'
    valid_for_date: date
    message: str = 'Ticket expired'


CheckInResult = Annotated[
    Union[CheckedIn, AlreadyCheckedIn, NotValidYet, Expired],
    Field(discriminator='status'),
]
