"""Repository implementations."""

from app.persistence.repositories.asset_repository import AssetRepository
from app.persistence.repositories.base import BaseRepository
from app.persistence.repositories.project_repository import ProjectRepository
from app.persistence.repositories.prompt_repository import PromptRepository

__all__ = [
    "AssetRepository",
    "BaseRepository",
    "ProjectRepository",
    "PromptRepository",
]
