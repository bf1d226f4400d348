"""Recursive prompt template resolution.

This module turns stored prompt text into the final string sent to a model:
- Placeholders: ``{{asset:...}}``, ``{{variable:...}}``, ``{{prompt:...}}`` and bare ``{{name}}``
- Selector: version tag and language fallback rules
- Resolver: assets, then variables, then nested prompt references
"""

from app.domain.prompts.errors import (
    AssetVersionNotFoundError,
    CircularReferenceError,
    MaxDepthExceededError,
    NotFoundError,
    PromptNotFoundError,
    PromptResolutionError,
    VersionNotFoundError,
)
from app.domain.prompts.resolver import PromptResolver
from app.domain.prompts.types import ResolutionMetadata, ResolutionResult

__all__ = [
    "AssetVersionNotFoundError",
    "CircularReferenceError",
    "MaxDepthExceededError",
    "NotFoundError",
    "PromptNotFoundError",
    "PromptResolutionError",
    "PromptResolver",
    "ResolutionMetadata",
    "ResolutionResult",
    "VersionNotFoundError",
]
