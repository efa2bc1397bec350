from typing import Optional

from sqlalchemy.orm import Session

from app.api.base_crud import CRUDBase
from app.api.profiles.crud import profile as profile_crud
from app.api.profiles.schemas import GLOBAL_CHECK_IN_ROLES
from app.core.exceptions.check_in_exceptions import Forbidden
from app.core.logger import logger
from app.core.security import TokenData

from . import models, schemas


class CRUDEventStaff(CRUDBase[models.EventStaff, schemas.EventStaffCreate]):
    def get_assignment(
        self, db: Session, event_id: str, user_id: str
    ) -> Optional[models.EventStaff]:
        return (
            db.query(self.model)
            .filter(self.model.event_id == event_id, self.model.user_id == user_id)
            .first()
        )

    def authorize(self, db: Session, event_id: str, user: TokenData) -> None:
        """
        Allow the user to check in tickets for the event or raise Forbidden.

        Admins and organizers are trusted for every event, other roles need a
        staff assignment for this event.
        """
        profile = profile_crud.get_by_id(db, user.user_id)
        if not profile:
            logger.warning('Profile %s not found', user.user_id)
            raise Forbidden('User profile not found')

        if profile.role in GLOBAL_CHECK_IN_ROLES:
            logger.info('User %s authorized by role %s', user.user_id, profile.role)
            return

        if self.get_assignment(db, event_id, user.user_id):
            logger.info('User %s is staff for event %s', user.user_id, event_id)
            return

        logger.warning('User %s is not staff for event %s', user.user_id, event_id)
        raise Forbidden()


event_staff = CRUDEventStaff(models.EventStaff)
