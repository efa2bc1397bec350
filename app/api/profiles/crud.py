from typing import Optional

from sqlalchemy.orm import Session

from app.api.base_crud import CRUDBase

from . import models, schemas


class CRUDProfile(CRUDBase[models.Profile, schemas.ProfileCreate]):
    def get_by_id(self, db: Session, id: str) -> Optional[models.Profile]:
        return db.query(self.model).filter(self.model.id == id).first()


profile = CRUDProfile(models.Profile)
