"""Base repository: primary-key lookup and store-error translation."""

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from annoflow.domain.exceptions import PersistenceException
from annoflow.infrastructure.persistence.database import Base
from annoflow.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository for ORM-backed stores that return domain entities.

    Subclasses map ORM rows to entities; writes go through _flush so
    SQLAlchemy errors surface as PersistenceException.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def _get_model(self, entity_id: str) -> ModelType | None:
        """Return a single ORM row by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def _flush(self, operation: str) -> None:
        """Flush pending changes; raise PersistenceException on store failure."""
        try:
            await self.db.flush()
        except SQLAlchemyError as e:
            logger.error("%s: %s failed", self.model.__name__, operation, exc_info=True)
            raise PersistenceException(operation, str(e)) from e
