"""Expansion of ``{{prompt:...}}`` references by recursive resolution."""

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable

from app.domain.prompts.errors import CircularReferenceError
from app.domain.prompts.placeholders import PlaceholderKind, split
from app.domain.prompts.types import (
    LATEST,
    ResolutionContext,
    ResolutionResult,
    ResolvedPromptReference,
    visit_key,
)

logger = logging.getLogger(__name__)

NestedResolver = Callable[[str, str, str, ResolutionContext], Awaitable[ResolutionResult]]


def merge_unique(target: list[str], items: list[str]) -> None:
    """Append items not already present, keeping first-seen order."""
    for item in items:
        if item not in target:
            target.append(item)


@dataclass
class ReferenceResolution:
    """Text with references expanded, plus everything learned from nested calls."""
    text: str
    prompts: list[ResolvedPromptReference] = field(default_factory=list)
    unresolved_assets: list[str] = field(default_factory=list)
    unresolved_variables: list[str] = field(default_factory=list)


class ReferenceResolver:
    """Expands prompt references one level per call.

    ``resolve_nested(project_id, prompt_key, version_tag, context)`` runs the
    full pipeline for a referenced prompt. Expanded text is spliced in as-is
    and never scanned again at this level.
    """

    def __init__(self, resolve_nested: NestedResolver) -> None:
        self.resolve_nested = resolve_nested

    async def resolve(
        self, text: str, project_id: str, context: ResolutionContext
    ) -> ReferenceResolution:
        """Expand every prompt reference in text, left to right.

        Raises:
            CircularReferenceError: If a reference points at an ancestor
            NotFoundError: If a referenced prompt or version does not exist
            MaxDepthExceededError: If the reference chain is too deep
        """
        result = ReferenceResolution(text=text)
        parts: list[str] = []

        for segment in split(text):
            if isinstance(segment, str):
                parts.append(segment)
                continue
            if segment.kind is not PlaceholderKind.PROMPT:
                parts.append(segment.raw)
                continue

            target_project = segment.project_id or project_id
            key = visit_key(target_project, segment.key)
            if key in context.visited:
                error = CircularReferenceError(context.visited + (key,))
                logger.error(str(error), extra={"chain": list(error.chain)})
                raise error

            version_tag = segment.version_tag or LATEST
            logger.debug(
                "Resolving nested prompt reference",
                extra={
                    "placeholder": segment.raw,
                    "target_project_id": target_project,
                    "target_prompt_key": segment.key,
                    "version_tag": version_tag,
                    "depth": context.depth + 1,
                },
            )
            nested = await self.resolve_nested(
                target_project, segment.key, version_tag, context.descend(key)
            )

            parts.append(nested.text)
            meta = nested.metadata
            result.prompts.append(
                ResolvedPromptReference(
                    placeholder=segment.raw,
                    project_id=target_project,
                    prompt_key=meta.prompt_key,
                    prompt_id=meta.prompt_id,
                    requested_version_tag=version_tag,
                    version_id=meta.version_id,
                    version_tag=meta.version_tag,
                    language_code=meta.language_code,
                    fallback=meta.fallback,
                    depth=context.depth + 1,
                )
            )
            result.prompts.extend(meta.prompts)
            merge_unique(result.unresolved_assets, meta.unresolved_assets)
            merge_unique(result.unresolved_variables, meta.unresolved_variables)

        result.text = "".join(parts)
        return result
