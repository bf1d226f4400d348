"""Base repository with project-scoped queries."""

from typing import Generic, TypeVar, Type
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with project-scoped query methods.

    Models without a ``project_id`` column are queried unscoped; pass
    ``project_id=None`` for those.
    """

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        """Initialize repository with model and session."""
        self.model = model
        self.session = session

    def _scoped(self, stmt, project_id: str | None):
        if project_id is not None and hasattr(self.model, "project_id"):
            stmt = stmt.where(self.model.project_id == project_id)
        return stmt

    async def get_by_id(self, project_id: str | None, id) -> ModelType | None:
        """Get entity by ID, scoped to project."""
        stmt = self._scoped(select(self.model).where(self.model.id == id), project_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, project_id: str | None, **data) -> ModelType:
        """Create new entity with project_id."""
        if project_id is not None and hasattr(self.model, "project_id"):
            data["project_id"] = project_id
        instance = self.model(**data)
        self.session.add(instance)
        await self.session.commit()
        await self.session.refresh(instance)
        return instance

