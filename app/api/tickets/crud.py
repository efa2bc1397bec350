from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from app.api.base_crud import CRUDBase
from app.core.exceptions.check_in_exceptions import (
    MissingValidDate,
    TicketNotFound,
    WrongEvent,
)
from app.core.exceptions.database_exceptions import DuplicateKeyError
from app.core.logger import logger
from app.core.ticket_tokens import generate_ticket_code, sign_as_token

from . import models, schemas

ISSUE_ATTEMPTS = 3


def admission_status(valid_for_date: date, today: date) -> schemas.AdmissionStatus:
    """A ticket admits on exactly one calendar day."""
    if today < valid_for_date:
        return schemas.AdmissionStatus.NOT_VALID_YET
    if today > valid_for_date:
        return schemas.AdmissionStatus.EXPIRED
    return schemas.AdmissionStatus.VALID


class CRUDTicket(CRUDBase[models.Ticket, schemas.InternalTicketCreate]):
    def get_by_code(self, db: Session, code: str) -> Optional[models.Ticket]:
        return db.query(self.model).filter(self.model.ticket_code == code).first()

    def get_for_event(self, db: Session, code: str, event_id: str) -> models.Ticket:
        ticket = self.get_by_code(db, code)
        logger.info('Ticket with code %s found: %s', code, ticket is not None)
        if not ticket:
            raise TicketNotFound()

        if ticket.event_id != event_id:
            logger.warning(
                'Ticket %s belongs to event %s, scanned at %s',
                ticket.id,
                ticket.event_id,
                event_id,
            )
            raise WrongEvent()

        if not ticket.valid_for_date:
            logger.error('Ticket %s has no valid date', ticket.id)
            raise MissingValidDate()

        return ticket

    def get_stats(self, db: Session, event_id: str) -> schemas.TicketStats:
        total = self.count(db, schemas.TicketFilter(event_id=event_id))
        checked_in = self.count(
            db,
            schemas.TicketFilter(event_id=event_id, status=schemas.TicketStatus.USED),
        )
        return schemas.TicketStats(total=total, checked_in=checked_in)

    def issue(
        self, db: Session, obj: schemas.TicketIssue, secret: str
    ) -> models.Ticket:
        """Create an active ticket with a fresh code and its signed QR payload."""
        for attempt in range(1, ISSUE_ATTEMPTS + 1):
            ticket_code = generate_ticket_code()
            new_ticket = schemas.InternalTicketCreate(
                **obj.model_dump(),
                ticket_code=ticket_code,
                qr_payload=sign_as_token(secret, ticket_code),
            )
            try:
                return self.create(db, new_ticket)
            except DuplicateKeyError:
                if attempt == ISSUE_ATTEMPTS:
                    raise
                logger.warning('Ticket code collision, retrying (%s)', attempt)


ticket = CRUDTicket(models.Ticket)
