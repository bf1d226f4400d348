"""API schemas package."""

from app.api.schemas.serve_prompt import (
    ResolutionMetadataResponse,
    ResolvedAssetResponse,
    ResolvedPromptReferenceResponse,
    ServePromptRequest,
    ServePromptResponse,
)

__all__ = [
    "ResolutionMetadataResponse",
    "ResolvedAssetResponse",
    "ResolvedPromptReferenceResponse",
    "ServePromptRequest",
    "ServePromptResponse",
]
