"""Prompt repository."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import contains_eager

from app.persistence.models.prompt import Prompt, PromptTranslation, PromptVersion, VersionStatus
from app.persistence.repositories.base import BaseRepository


class PromptRepository(BaseRepository[Prompt]):
    """Repository for Prompt, PromptVersion and PromptTranslation entities."""

    def __init__(self, session: AsyncSession):
        """Initialize prompt repository."""
        super().__init__(Prompt, session)

    async def get_by_key(self, project_id: str, key: str) -> Prompt | None:
        """Get a prompt by its project-scoped key."""
        stmt = select(Prompt).where(Prompt.project_id == project_id, Prompt.key == key)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_versions(self, project_id: str, key: str) -> list[PromptVersion]:
        """Get all versions of a prompt, newest first, with ``version.prompt`` loaded."""
        stmt = (
            select(PromptVersion)
            .join(PromptVersion.prompt)
            .options(contains_eager(PromptVersion.prompt))
            .execution_options(populate_existing=True)
            .where(Prompt.project_id == project_id, Prompt.key == key)
            .order_by(PromptVersion.created_at.desc(), PromptVersion.id.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().unique().all())

    async def get_version_by_tag(self, prompt_id: int, version_tag: str) -> PromptVersion | None:
        """Get a specific version of a prompt."""
        stmt = select(PromptVersion).where(
            PromptVersion.prompt_id == prompt_id,
            PromptVersion.version_tag == version_tag,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_active_versions(self, prompt_id: int) -> list[PromptVersion]:
        """Get the versions currently marked active."""
        stmt = select(PromptVersion).where(
            PromptVersion.prompt_id == prompt_id,
            PromptVersion.status == VersionStatus.ACTIVE.value,
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_translation(self, version_id: int, language_code: str) -> PromptTranslation | None:
        """Get the translation of a version for a language."""
        stmt = select(PromptTranslation).where(
            PromptTranslation.version_id == version_id,
            PromptTranslation.language_code == language_code,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
