"""Top-level prompt resolution.

A resolution runs through these stages:

    SELECT_VERSION -> SELECT_LANGUAGE_TEXT
        -> RAW_RETURN                                      (raw_only=True)
        -> RESOLVE_ASSETS -> RESOLVE_VARIABLES -> RESOLVE_REFERENCES
    -> DONE

Prompt references recurse back into the pipeline with a copied context, so
concurrent resolutions share no mutable state. Any NotFoundError,
CircularReferenceError or MaxDepthExceededError aborts the whole resolution
and no partial text is returned.
"""

import logging
from typing import Any, Mapping

from app.domain.prompts.assets import AssetResolver
from app.domain.prompts.cache import PromptCache
from app.domain.prompts.errors import MaxDepthExceededError
from app.domain.prompts.references import ReferenceResolver, merge_unique
from app.domain.prompts.selector import select_text
from app.domain.prompts.store import PromptStore
from app.domain.prompts.types import (
    LATEST,
    ResolutionContext,
    ResolutionMetadata,
    ResolutionResult,
    SelectedPrompt,
)
from app.domain.prompts.variables import substitute_variables

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 5


class PromptResolver:
    """Resolves a stored prompt into a flat string ready for a model."""

    def __init__(
        self,
        store: PromptStore,
        max_depth: int = DEFAULT_MAX_DEPTH,
        cache: PromptCache | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            store: Read-only lookups against the prompt catalog
            max_depth: Nesting bound for prompt references
            cache: Optional cache for version/language selection
        """
        self.store = store
        self.max_depth = max_depth
        self.cache = cache
        self.assets = AssetResolver(store)
        self.references = ReferenceResolver(self._resolve)

    async def resolve(
        self,
        project_id: str,
        prompt_key: str,
        version_tag: str | None = LATEST,
        language_code: str | None = None,
        variables: Mapping[str, Any] | None = None,
        raw_only: bool = False,
    ) -> ResolutionResult:
        """Resolve a prompt and everything it references.

        Args:
            project_id: Project owning the prompt
            prompt_key: Project-scoped prompt key
            version_tag: Explicit version tag, or "latest"
            language_code: Optional language for translations
            variables: Values for variable placeholders
            raw_only: Return the selected text without rendering it

        Returns:
            Resolved text and metadata

        Raises:
            NotFoundError: If the prompt, version or a tagged asset version is missing
            CircularReferenceError: If prompt references form a cycle
            MaxDepthExceededError: If references nest deeper than max_depth
        """
        context = ResolutionContext.root(project_id, prompt_key, language_code, variables)
        logger.info(
            "Resolving prompt",
            extra={
                "prompt_key": prompt_key,
                "version_tag": version_tag or LATEST,
                "language_code": language_code,
                "raw_only": raw_only,
            },
        )
        return await self._resolve(project_id, prompt_key, version_tag, context, raw_only=raw_only)

    async def _resolve(
        self,
        project_id: str,
        prompt_key: str,
        version_tag: str | None,
        context: ResolutionContext,
        raw_only: bool = False,
    ) -> ResolutionResult:
        if context.depth >= self.max_depth:
            logger.warning(
                "Maximum prompt reference depth reached",
                extra={"prompt_key": prompt_key, "depth": context.depth, "max_depth": self.max_depth},
            )
            raise MaxDepthExceededError(self.max_depth, prompt_key)

        selected = await self.select(project_id, prompt_key, version_tag, context.language_code)
        selection = selected.selection
        metadata = ResolutionMetadata(
            project_id=project_id,
            prompt_id=selected.prompt_id,
            prompt_key=selected.prompt_key,
            prompt_type=selected.prompt_type,
            version_id=selected.version_id,
            version_tag=selected.version_tag,
            requested_language=context.language_code,
            language_code=selection.language_code,
            fallback=selection.fallback,
            variables_provided=list(context.variables),
        )

        if raw_only:
            return ResolutionResult(text=selection.text, metadata=metadata)

        assets = await self.assets.resolve(
            selection.text, project_id, selected.prompt_key, context.language_code
        )
        variables = substitute_variables(assets.text, context.variables)
        references = await self.references.resolve(variables.text, project_id, context)

        metadata.assets = assets.assets
        metadata.prompts = references.prompts
        metadata.unresolved_assets = list(assets.unresolved)
        merge_unique(metadata.unresolved_assets, references.unresolved_assets)
        metadata.unresolved_variables = list(variables.unresolved)
        merge_unique(metadata.unresolved_variables, references.unresolved_variables)

        logger.debug(
            "Prompt resolved",
            extra={
                "prompt_key": selected.prompt_key,
                "version_tag": selected.version_tag,
                "depth": context.depth,
                "assets_resolved": len(metadata.assets),
                "prompts_resolved": len(metadata.prompts),
                "unresolved_count": len(metadata.unresolved_assets) + len(metadata.unresolved_variables),
            },
        )
        return ResolutionResult(text=references.text, metadata=metadata)

    async def select(
        self,
        project_id: str,
        prompt_key: str,
        version_tag: str | None,
        language_code: str | None,
    ) -> SelectedPrompt:
        """Select a version and its language text, going through the cache if set."""
        cache_key = PromptCache.make_key(project_id, prompt_key, version_tag, language_code)
        if self.cache is not None:
            cached = self.cache.get(cache_key)
            if cached is not None:
                return cached

        version = await self.store.get_prompt_version(project_id, prompt_key, version_tag)

        translation = None
        if language_code:
            translation = await self.store.get_prompt_translation(version.id, language_code)
            if translation is None:
                logger.debug(
                    "No prompt translation, using base text",
                    extra={"prompt_key": prompt_key, "language_code": language_code},
                )

        prompt = version.prompt
        selected = SelectedPrompt(
            project_id=project_id,
            prompt_id=prompt.id,
            prompt_key=prompt.key,
            prompt_type=prompt.type,
            version_id=version.id,
            version_tag=version.version_tag,
            selection=select_text(
                version.prompt_text,
                version.language_code,
                translation.prompt_text if translation is not None else None,
                language_code,
            ),
        )
        if self.cache is not None:
            self.cache.set(cache_key, selected)
        return selected
