"""SQL implementation of the read-only prompt store."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.prompts.errors import PromptNotFoundError
from app.domain.prompts.selector import select_version
from app.persistence.models.asset import AssetTranslation, PromptAsset
from app.persistence.models.prompt import PromptTranslation, PromptVersion
from app.persistence.repositories.asset_repository import AssetRepository
from app.persistence.repositories.prompt_repository import PromptRepository

logger = logging.getLogger(__name__)


class SqlPromptStore:
    """Prompt store backed by the application database."""

    def __init__(self, session: AsyncSession):
        self.prompts = PromptRepository(session)
        self.assets = AssetRepository(session)

    async def get_prompt_version(
        self, project_id: str, prompt_key: str, version_tag: str | None
    ) -> PromptVersion:
        prompt = await self.prompts.get_by_key(project_id, prompt_key)
        if prompt is None:
            logger.info(
                "Prompt not found",
                extra={"prompt_key": prompt_key, "target_project_id": project_id},
            )
            raise PromptNotFoundError(project_id, prompt_key)

        versions = await self.prompts.get_versions(project_id, prompt_key)
        return select_version(
            versions,
            version_tag,
            subject=f'prompt "{prompt_key}" in project "{project_id}"',
        )

    async def get_prompt_translation(
        self, version_id: int, language_code: str
    ) -> PromptTranslation | None:
        return await self.prompts.get_translation(version_id, language_code)

    async def get_asset(
        self, project_id: str, prompt_key: str, asset_key: str
    ) -> PromptAsset | None:
        return await self.assets.get_by_key(project_id, prompt_key, asset_key)

    async def get_asset_translation(
        self, asset_version_id: int, language_code: str
    ) -> AssetTranslation | None:
        return await self.assets.get_translation(asset_version_id, language_code)
