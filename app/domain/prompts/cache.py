"""Optional read-through cache for version/language selection."""

import time
from typing import Optional

from app.domain.prompts.types import LATEST, SelectedPrompt
from app.settings import settings


class PromptCache:
    """Simple in-memory cache of selected prompt text with TTL.

    Only the version/language selection is cached; assets, variables and
    references are resolved on every request.
    """

    def __init__(self, ttl_seconds: int = 300) -> None:
        self.ttl_seconds = ttl_seconds
        # {cache_key: (selected_prompt, timestamp)}
        self._cache: dict[str, tuple[SelectedPrompt, float]] = {}

    @staticmethod
    def make_key(
        project_id: str, prompt_key: str, version_tag: str | None, language_code: str | None
    ) -> str:
        """Build the cache key for a selection."""
        return f"project:{project_id}|prompt:{prompt_key}|tag:{version_tag or LATEST}|lang:{language_code or ''}"

    def get(self, key: str) -> SelectedPrompt | None:
        """Get a cached selection if not expired."""
        if key in self._cache:
            selected, timestamp = self._cache[key]
            if time.time() - timestamp < self.ttl_seconds:
                return selected
            # Expired - remove from cache
            del self._cache[key]
        return None

    def set(self, key: str, selected: SelectedPrompt) -> None:
        """Cache a selection with current timestamp."""
        self._cache[key] = (selected, time.time())

    def invalidate(self, project_id: str | None = None) -> None:
        """Invalidate entries for a project, or all if project_id is None."""
        if project_id is None:
            self._cache.clear()
            return
        prefix = f"project:{project_id}|"
        for key in [k for k in self._cache if k.startswith(prefix)]:
            del self._cache[key]

    def __len__(self) -> int:
        return len(self._cache)


# Singleton instance
_prompt_cache: Optional[PromptCache] = None


def get_prompt_cache() -> PromptCache:
    """Get the shared prompt cache instance."""
    global _prompt_cache
    if _prompt_cache is None:
        _prompt_cache = PromptCache(ttl_seconds=settings.prompt_cache_ttl_seconds)
    return _prompt_cache
