from typing import Generic, Optional, Type, TypeVar

from psycopg2 import errors as pg_errors
from pydantic import BaseModel
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.declarative import DeclarativeMeta
from sqlalchemy.orm import Query, Session

from app.core.exceptions.database_exceptions import DuplicateKeyError
from app.core.logger import logger

ModelType = TypeVar('ModelType', bound=DeclarativeMeta)
CreateSchemaType = TypeVar('CreateSchemaType', bound=BaseModel)

SQLITE_UNIQUE_VIOLATION = 'UNIQUE constraint failed'


def is_unique_violation(error: IntegrityError) -> bool:
    """True when the driver reports a unique constraint violation (SQLSTATE 23505)."""
    if isinstance(error.orig, pg_errors.UniqueViolation):
        return True
    return SQLITE_UNIQUE_VIOLATION in str(error.orig)


class CRUDBase(Generic[ModelType, CreateSchemaType]):
    def __init__(self, model: Type[ModelType]):
        self.model = model

    def _apply_filters(
        self, query: Query, filters: Optional[BaseModel] = None
    ) -> Query:
        """Override this method to implement filter logic"""
        if not filters:
            return query

        for field, value in filters.model_dump(exclude_none=True).items():
            if hasattr(self.model, field):
                query = query.filter(getattr(self.model, field) == value)
        return query

    def create(self, db: Session, obj: CreateSchemaType) -> ModelType:
        """Create a new record."""
        try:
            # Only keep fields that map to columns
            obj_data = obj.model_dump()
            model_columns = self.model.__table__.columns.keys()
            filtered_data = {k: v for k, v in obj_data.items() if k in model_columns}

            db_obj = self.model(**filtered_data)
            db.add(db_obj)
            db.commit()
            db.refresh(db_obj)
            return db_obj
        except IntegrityError as e:
            logger.error('Error creating %s: %s', self.model.__name__, str(e))
            db.rollback()
            if is_unique_violation(e):
                raise DuplicateKeyError(self.model.__name__, str(e.orig))
            raise
        except Exception as e:
            logger.error('SQL error creating %s: %s', self.model.__name__, str(e))
            db.rollback()
            raise e

    def count(self, db: Session, filters: Optional[BaseModel] = None) -> int:
        """Count records matching the filters."""
        query = db.query(func.count(self.model.id))
        query = self._apply_filters(query, filters)
        return query.scalar() or 0
