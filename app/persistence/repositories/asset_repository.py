"""Prompt asset repository."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.persistence.models.asset import AssetTranslation, PromptAsset, PromptAssetVersion
from app.persistence.models.prompt import Prompt, VersionStatus
from app.persistence.repositories.base import BaseRepository


class AssetRepository(BaseRepository[PromptAsset]):
    """Repository for PromptAsset, PromptAssetVersion and AssetTranslation entities."""

    def __init__(self, session: AsyncSession):
        """Initialize asset repository."""
        super().__init__(PromptAsset, session)

    async def get_by_key(
        self, project_id: str, prompt_key: str, asset_key: str
    ) -> PromptAsset | None:
        """Get an asset of a prompt with all of its versions loaded."""
        stmt = (
            select(PromptAsset)
            .join(PromptAsset.prompt)
            .options(selectinload(PromptAsset.versions))
            .execution_options(populate_existing=True)
            .where(
                Prompt.project_id == project_id,
                Prompt.key == prompt_key,
                PromptAsset.key == asset_key,
            )
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_version_by_tag(self, asset_id: int, version_tag: str) -> PromptAssetVersion | None:
        """Get a specific version of an asset."""
        stmt = select(PromptAssetVersion).where(
            PromptAssetVersion.asset_id == asset_id,
            PromptAssetVersion.version_tag == version_tag,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_active_versions(self, asset_id: int) -> list[PromptAssetVersion]:
        """Get the asset versions currently marked active."""
        stmt = select(PromptAssetVersion).where(
            PromptAssetVersion.asset_id == asset_id,
            PromptAssetVersion.status == VersionStatus.ACTIVE.value,
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_translation(self, version_id: int, language_code: str) -> AssetTranslation | None:
        """Get the translation of an asset version for a language."""
        stmt = select(AssetTranslation).where(
            AssetTranslation.version_id == version_id,
            AssetTranslation.language_code == language_code,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
