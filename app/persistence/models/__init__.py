"""Database models."""

from app.persistence.models.asset import AssetTranslation, PromptAsset, PromptAssetVersion
from app.persistence.models.project import Project
from app.persistence.models.prompt import (
    Prompt,
    PromptTranslation,
    PromptType,
    PromptVersion,
    VersionStatus,
)

__all__ = [
    "AssetTranslation",
    "Project",
    "Prompt",
    "PromptAsset",
    "PromptAssetVersion",
    "PromptTranslation",
    "PromptType",
    "PromptVersion",
    "VersionStatus",
]
