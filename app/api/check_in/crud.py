from datetime import date
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.base_crud import CRUDBase, is_unique_violation
from app.api.tickets.crud import admission_status
from app.api.tickets.crud import ticket as ticket_crud
from app.api.tickets.models import Ticket
from app.api.tickets.schemas import AdmissionStatus, TicketStatus
from app.core.exceptions.check_in_exceptions import CheckInFailed, InvalidQRCode
from app.core.exceptions.database_exceptions import DuplicateKeyError
from app.core.logger import logger
from app.core.security import TokenData
from app.core.ticket_tokens import verify

from . import models, schemas


def _display_fields(ticket: Ticket) -> dict:
    return {
        'attendee_name': ticket.attendee_name or schemas.DEFAULT_ATTENDEE_NAME,
        'ticket_tier': ticket.ticket_tier or schemas.DEFAULT_TICKET_TIER,
    }


class CRUDTicketCheckIn(
    CRUDBase[models.TicketCheckIn, schemas.InternalCheckInCreate]
):
    def get_by_ticket_id(
        self, db: Session, ticket_id: str
    ) -> Optional[models.TicketCheckIn]:
        return (
            db.query(self.model).filter(self.model.ticket_id == ticket_id).first()
        )

    def record(
        self,
        db: Session,
        ticket: Ticket,
        checked_in_by: str,
        device_info: Optional[str] = None,
    ) -> models.TicketCheckIn:
        """
        Insert the check-in and mark the ticket used in one transaction.

        Raises DuplicateKeyError when another check-in for the ticket already
        exists. Any other storage failure leaves nothing persisted.
        """
        obj = schemas.InternalCheckInCreate(
            ticket_id=ticket.id,
            event_id=ticket.event_id,
            checked_in_by=checked_in_by,
            device_info=device_info,
        )
        new_check_in = self.model(**obj.model_dump())
        try:
            db.add(new_check_in)
            db.flush()
            ticket.status = TicketStatus.USED.value
            db.commit()
        except IntegrityError as e:
            db.rollback()
            if is_unique_violation(e):
                raise DuplicateKeyError(self.model.__name__, str(e.orig))
            logger.error('Integrity error recording check-in: %s', str(e))
            raise CheckInFailed()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error('SQL error recording check-in: %s', str(e))
            raise CheckInFailed()

        db.refresh(new_check_in)
        return new_check_in

    def _already_checked_in(
        self,
        db: Session,
        ticket: Ticket,
        existing: Optional[models.TicketCheckIn],
    ) -> schemas.AlreadyCheckedIn:
        return schemas.AlreadyCheckedIn(
            checked_in_at=existing.checked_in_at if existing else None,
            checked_in_by=existing.checked_in_by if existing else None,
            stats=ticket_crud.get_stats(db, ticket.event_id),
            **_display_fields(ticket),
        )

    def check_in(
        self,
        db: Session,
        ticket: Ticket,
        user: TokenData,
        device_info: Optional[str] = None,
    ) -> schemas.CheckInResult:
        """First insert wins, every other scan of the ticket is already_checked_in."""
        existing = self.get_by_ticket_id(db, ticket.id)
        if existing:
            logger.info('Ticket %s already checked in', ticket.id)
            return self._already_checked_in(db, ticket, existing)

        try:
            new_check_in = self.record(db, ticket, user.user_id, device_info)
        except DuplicateKeyError:
            logger.info('Concurrent check-in for ticket %s lost the race', ticket.id)
            existing = self.get_by_ticket_id(db, ticket.id)
            return self._already_checked_in(db, ticket, existing)

        logger.info('Ticket %s checked in by %s', ticket.id, user.user_id)
        return schemas.CheckedIn(
            ticket_id=ticket.id,
            checked_in_by=new_check_in.checked_in_by,
            checked_in_at=new_check_in.checked_in_at,
            stats=ticket_crud.get_stats(db, ticket.event_id),
            **_display_fields(ticket),
        )

    def new_qr_check_in(
        self,
        db: Session,
        *,
        qr_payload: str,
        event_id: str,
        user: TokenData,
        today: date,
        secret: str,
        device_info: Optional[str] = None,
    ) -> schemas.CheckInResult:
        verification = verify(secret, qr_payload)
        if not verification.valid:
            logger.warning('Invalid QR payload scanned for event %s', event_id)
            raise InvalidQRCode()

        ticket = ticket_crud.get_for_event(db, verification.ticket_code, event_id)

        admission = admission_status(ticket.valid_for_date, today)
        if admission == AdmissionStatus.NOT_VALID_YET:
            logger.info('Ticket %s not valid until %s', ticket.id, ticket.valid_for_date)
            return schemas.NotValidYet(
                valid_for_date=ticket.valid_for_date, **_display_fields(ticket)
            )
        if admission == AdmissionStatus.EXPIRED:
            logger.info('Ticket %s expired on %s', ticket.id, ticket.valid_for_date)
            return schemas.Expired(
                valid_for_date=ticket.valid_for_date, **_display_fields(ticket)
            )

        return self.check_in(db, ticket, user, device_info)


check_in = CRUDTicketCheckIn(models.TicketCheckIn)
