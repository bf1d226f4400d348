"""Resolution of ``{{asset:<key>}}`` and ``{{asset:<key>:<versionTag>}}``."""

import logging
from dataclasses import dataclass, field
from typing import Any

from app.domain.prompts.errors import AssetVersionNotFoundError
from app.domain.prompts.placeholders import Placeholder, PlaceholderKind, scan, substitute
from app.domain.prompts.selector import is_latest, select_text, select_version
from app.domain.prompts.store import PromptStore
from app.domain.prompts.types import ResolvedAsset, TextSelection

logger = logging.getLogger(__name__)


@dataclass
class AssetResolution:
    """Text after asset substitution, with its audit entries."""
    text: str
    assets: list[ResolvedAsset] = field(default_factory=list)
    unresolved: list[str] = field(default_factory=list)


class AssetResolver:
    """Substitutes asset placeholders with the selected asset text."""

    def __init__(self, store: PromptStore) -> None:
        self.store = store

    async def resolve(
        self,
        text: str,
        project_id: str,
        prompt_key: str,
        language_code: str | None = None,
    ) -> AssetResolution:
        """Resolve every asset placeholder in text.

        Assets are looked up among the assets of ``prompt_key``. A missing
        asset, or an untagged placeholder of an asset without versions,
        is left untouched and reported as unresolved.

        Raises:
            AssetVersionNotFoundError: If an explicitly tagged version does
                not exist, including when the asset has no versions at all
        """
        placeholders = scan(text, [PlaceholderKind.ASSET])
        if not placeholders:
            return AssetResolution(text=text)

        logger.debug(
            "Resolving asset placeholders",
            extra={"prompt_key": prompt_key, "placeholder_count": len(placeholders)},
        )

        assets_by_key: dict[str, Any] = {}
        selections: dict[tuple[str, str | None], tuple[Any, TextSelection]] = {}
        result = AssetResolution(text=text)
        recorded: set[str] = set()

        for placeholder in placeholders:
            if placeholder.key not in assets_by_key:
                assets_by_key[placeholder.key] = await self.store.get_asset(
                    project_id, prompt_key, placeholder.key
                )
            asset = assets_by_key[placeholder.key]

            if asset is None:
                self._mark_unresolved(
                    result, placeholder, prompt_key,
                    "Asset not found, leaving placeholder untouched",
                )
                continue
            if not asset.versions and is_latest(placeholder.version_tag):
                self._mark_unresolved(
                    result, placeholder, prompt_key,
                    "Asset has no versions, leaving placeholder untouched",
                )
                continue

            selection_key = (placeholder.key, placeholder.version_tag)
            if selection_key not in selections:
                selections[selection_key] = await self._select(asset, placeholder, prompt_key, language_code)

            if placeholder.raw in recorded:
                continue
            recorded.add(placeholder.raw)
            version, selection = selections[selection_key]
            result.assets.append(
                ResolvedAsset(
                    key=asset.key,
                    placeholder=placeholder.raw,
                    version_id=version.id,
                    version_tag=version.version_tag,
                    language_source=selection.language_source,
                )
            )

        def replace(placeholder: Placeholder) -> str | None:
            selected = selections.get((placeholder.key, placeholder.version_tag))
            return selected[1].text if selected else None

        result.text = substitute(text, [PlaceholderKind.ASSET], replace)
        return result

    def _mark_unresolved(
        self, result: AssetResolution, placeholder: Placeholder, prompt_key: str, message: str
    ) -> None:
        if placeholder.raw in result.unresolved:
            return
        result.unresolved.append(placeholder.raw)
        logger.warning(
            message,
            extra={
                "prompt_key": prompt_key,
                "asset_key": placeholder.key,
                "placeholder": placeholder.raw,
            },
        )

    async def _select(
        self,
        asset: Any,
        placeholder: Placeholder,
        prompt_key: str,
        language_code: str | None,
    ) -> tuple[Any, TextSelection]:
        version = select_version(
            asset.versions,
            placeholder.version_tag,
            subject=f'asset "{placeholder.key}" of prompt "{prompt_key}"',
            error_cls=AssetVersionNotFoundError,
        )

        translation = None
        if language_code:
            translation = await self.store.get_asset_translation(version.id, language_code)
            if translation is None:
                logger.warning(
                    "No asset translation, using base value",
                    extra={
                        "asset_key": placeholder.key,
                        "version_tag": version.version_tag,
                        "language_code": language_code,
                    },
                )

        selection = select_text(
            version.value,
            getattr(version, "language_code", None),
            translation.value if translation is not None else None,
            language_code,
        )
        return version, selection
