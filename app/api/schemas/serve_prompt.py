"""Serve-prompt request and response schemas."""

from typing import Any

from pydantic import BaseModel, Field

from app.domain.prompts.types import FallbackKind, LanguageSource


class ServePromptRequest(BaseModel):
    """Prompt execution request."""

    variables: dict[str, Any] = Field(default_factory=dict)


class ResolvedAssetResponse(BaseModel):
    """Asset substituted during resolution."""

    key: str
    placeholder: str
    version_id: int
    version_tag: str
    language_source: LanguageSource

    class Config:
        from_attributes = True


class ResolvedPromptReferenceResponse(BaseModel):
    """Nested prompt expanded during resolution."""

    placeholder: str
    project_id: str
    prompt_key: str
    prompt_id: int
    requested_version_tag: str
    version_id: int
    version_tag: str
    language_code: str | None
    fallback: FallbackKind
    depth: int

    class Config:
        from_attributes = True


class ResolutionMetadataResponse(BaseModel):
    """Audit trail of a resolution."""

    project_id: str
    prompt_id: int
    prompt_key: str
    prompt_type: str
    version_id: int
    version_tag: str
    requested_language: str | None
    language_code: str | None
    fallback: FallbackKind
    assets: list[ResolvedAssetResponse]
    prompts: list[ResolvedPromptReferenceResponse]
    variables_provided: list[str]
    unresolved_assets: list[str]
    unresolved_variables: list[str]

    class Config:
        from_attributes = True


class ServePromptResponse(BaseModel):
    """Prompt execution response."""

    processed_prompt: str
    metadata: ResolutionMetadataResponse
