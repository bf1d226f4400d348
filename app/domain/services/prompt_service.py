"""Prompt service for managing the prompt catalog and executing prompts."""

import logging
from typing import Any, Mapping

from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.prompts.cache import get_prompt_cache
from app.domain.prompts.errors import NotFoundError, PromptNotFoundError, VersionNotFoundError
from app.domain.prompts.resolver import PromptResolver
from app.domain.prompts.types import LATEST, ResolutionResult
from app.persistence.models.asset import AssetTranslation, PromptAsset, PromptAssetVersion
from app.persistence.models.project import Project
from app.persistence.models.prompt import (
    Prompt,
    PromptTranslation,
    PromptType,
    PromptVersion,
    VersionStatus,
)
from app.persistence.prompt_store import SqlPromptStore
from app.persistence.repositories.asset_repository import AssetRepository
from app.persistence.repositories.project_repository import ProjectRepository
from app.persistence.repositories.prompt_repository import PromptRepository
from app.settings import settings

logger = logging.getLogger(__name__)


class PromptService:
    """Service for prompt catalog management and prompt execution."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize prompt service."""
        self.session = session
        self.project_repo = ProjectRepository(session)
        self.prompt_repo = PromptRepository(session)
        self.asset_repo = AssetRepository(session)

    def _invalidate(self, project_id: str) -> None:
        get_prompt_cache().invalidate(project_id)

    async def _get_prompt(self, project_id: str, prompt_key: str) -> Prompt:
        prompt = await self.prompt_repo.get_by_key(project_id, prompt_key)
        if prompt is None:
            raise PromptNotFoundError(project_id, prompt_key)
        return prompt

    async def _get_version(self, project_id: str, prompt_key: str, version_tag: str) -> PromptVersion:
        prompt = await self._get_prompt(project_id, prompt_key)
        version = await self.prompt_repo.get_version_by_tag(prompt.id, version_tag)
        if version is None:
            raise VersionNotFoundError(
                f'prompt "{prompt_key}" in project "{project_id}"', version_tag
            )
        return version

    async def _get_asset(self, project_id: str, prompt_key: str, asset_key: str) -> PromptAsset:
        asset = await self.asset_repo.get_by_key(project_id, prompt_key, asset_key)
        if asset is None:
            raise NotFoundError(
                f'Asset "{asset_key}" not found for prompt "{prompt_key}" in project "{project_id}".'
            )
        return asset

    async def create_project(self, project_id: str, name: str) -> Project:
        """Create the project that owns a set of prompts."""
        project = await self.project_repo.create(None, id=project_id, name=name)
        logger.info("Project created", extra={"target_project_id": project_id})
        return project

    async def create_prompt(
        self,
        project_id: str,
        key: str,
        name: str | None = None,
        prompt_type: PromptType | str = PromptType.SYSTEM,
    ) -> Prompt:
        """Create a prompt under a project.

        Args:
            project_id: Owning project
            key: Immutable key, unique within the project
            name: Display name (defaults to the key)
            prompt_type: Role the prompt plays

        Returns:
            Created prompt

        Raises:
            NotFoundError: If the project does not exist
        """
        if await self.project_repo.get_by_id(None, project_id) is None:
            raise NotFoundError(f'Project "{project_id}" not found.')

        prompt = await self.prompt_repo.create(
            project_id,
            key=key,
            name=name or key,
            type=PromptType(prompt_type).value,
        )
        self._invalidate(project_id)
        logger.info("Prompt created", extra={"prompt_key": key, "prompt_id": prompt.id})
        return prompt

    async def add_version(
        self,
        project_id: str,
        prompt_key: str,
        version_tag: str,
        prompt_text: str,
        language_code: str = "en",
        status: VersionStatus | str = VersionStatus.DRAFT,
        change_message: str | None = None,
    ) -> PromptVersion:
        """Add a new version of a prompt.

        Adding an active version demotes any other active version.
        """
        prompt = await self._get_prompt(project_id, prompt_key)
        status = VersionStatus(status)
        if status is VersionStatus.ACTIVE:
            await self._demote_active(await self.prompt_repo.get_active_versions(prompt.id))

        version = PromptVersion(
            prompt_id=prompt.id,
            version_tag=version_tag,
            prompt_text=prompt_text,
            language_code=language_code,
            status=status.value,
            change_message=change_message,
        )
        self.session.add(version)
        await self.session.commit()
        await self.session.refresh(version)

        self._invalidate(project_id)
        logger.info(
            "Prompt version added",
            extra={"prompt_key": prompt_key, "version_tag": version_tag, "status": status.value},
        )
        return version

    async def activate_version(self, project_id: str, prompt_key: str, version_tag: str) -> PromptVersion:
        """Make one version active; other active versions become inactive."""
        version = await self._get_version(project_id, prompt_key, version_tag)
        others = [
            v for v in await self.prompt_repo.get_active_versions(version.prompt_id)
            if v.id != version.id
        ]
        await self._demote_active(others)

        version.status = VersionStatus.ACTIVE.value
        await self.session.commit()
        await self.session.refresh(version)

        self._invalidate(project_id)
        logger.info(
            "Prompt version activated",
            extra={"prompt_key": prompt_key, "version_tag": version_tag, "demoted": len(others)},
        )
        return version

    async def _demote_active(self, versions) -> None:
        for v in versions:
            v.status = VersionStatus.INACTIVE.value
        await self.session.flush()

    async def upsert_translation(
        self,
        project_id: str,
        prompt_key: str,
        version_tag: str,
        language_code: str,
        prompt_text: str,
    ) -> PromptTranslation:
        """Create or replace a version's text for a language."""
        version = await self._get_version(project_id, prompt_key, version_tag)
        translation = await self.prompt_repo.get_translation(version.id, language_code)
        if translation is None:
            translation = PromptTranslation(
                version_id=version.id, language_code=language_code, prompt_text=prompt_text
            )
            self.session.add(translation)
        else:
            translation.prompt_text = prompt_text
        await self.session.commit()
        await self.session.refresh(translation)

        self._invalidate(project_id)
        return translation

    async def create_asset(
        self, project_id: str, prompt_key: str, key: str, name: str | None = None
    ) -> PromptAsset:
        """Create an asset owned by a prompt."""
        prompt = await self._get_prompt(project_id, prompt_key)
        asset = PromptAsset(prompt_id=prompt.id, key=key, name=name)
        self.session.add(asset)
        await self.session.commit()
        await self.session.refresh(asset)

        self._invalidate(project_id)
        logger.info("Asset created", extra={"prompt_key": prompt_key, "asset_key": key})
        return asset

    async def add_asset_version(
        self,
        project_id: str,
        prompt_key: str,
        asset_key: str,
        version_tag: str,
        value: str,
        language_code: str = "en",
        status: VersionStatus | str = VersionStatus.DRAFT,
        change_message: str | None = None,
    ) -> PromptAssetVersion:
        """Add a new version of an asset.

        Adding an active version demotes any other active version.
        """
        asset = await self._get_asset(project_id, prompt_key, asset_key)
        status = VersionStatus(status)
        if status is VersionStatus.ACTIVE:
            await self._demote_active(await self.asset_repo.get_active_versions(asset.id))

        version = PromptAssetVersion(
            asset_id=asset.id,
            version_tag=version_tag,
            value=value,
            language_code=language_code,
            status=status.value,
            change_message=change_message,
        )
        self.session.add(version)
        await self.session.commit()
        await self.session.refresh(version)

        self._invalidate(project_id)
        return version

    async def upsert_asset_translation(
        self,
        project_id: str,
        prompt_key: str,
        asset_key: str,
        version_tag: str,
        language_code: str,
        value: str,
    ) -> AssetTranslation:
        """Create or replace an asset version's value for a language."""
        asset = await self._get_asset(project_id, prompt_key, asset_key)
        version = await self.asset_repo.get_version_by_tag(asset.id, version_tag)
        if version is None:
            raise VersionNotFoundError(f'asset "{asset_key}" of prompt "{prompt_key}"', version_tag)

        translation = await self.asset_repo.get_translation(version.id, language_code)
        if translation is None:
            translation = AssetTranslation(
                version_id=version.id, language_code=language_code, value=value
            )
            self.session.add(translation)
        else:
            translation.value = value
        await self.session.commit()
        await self.session.refresh(translation)

        self._invalidate(project_id)
        return translation

    async def execute_prompt(
        self,
        project_id: str,
        prompt_key: str,
        version_tag: str | None = LATEST,
        language_code: str | None = None,
        variables: Mapping[str, Any] | None = None,
        raw_only: bool = False,
    ) -> ResolutionResult:
        """Resolve a stored prompt into its final text.

        Raises:
            NotFoundError: If the prompt, version or a tagged asset version is missing
            CircularReferenceError: If prompt references form a cycle
            MaxDepthExceededError: If references nest too deeply
        """
        resolver = PromptResolver(
            SqlPromptStore(self.session),
            max_depth=settings.prompt_max_depth,
            cache=get_prompt_cache() if settings.prompt_cache_enabled else None,
        )
        return await resolver.resolve(
            project_id,
            prompt_key,
            version_tag=version_tag,
            language_code=language_code,
            variables=variables,
            raw_only=raw_only,
        )
