"""Domain services."""

from app.domain.services.prompt_service import PromptService

__all__ = ["PromptService"]
