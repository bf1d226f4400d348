"""Read-only storage interface consumed by the resolver."""

from typing import Any, Protocol


class PromptStore(Protocol):
    """Lookups the resolution pipeline needs from the backing store.

    Implementations must not mutate anything. Returned objects only need the
    attributes the pipeline reads:

    - version: ``id``, ``version_tag``, ``prompt_text``, ``language_code``,
      ``status``, ``created_at`` and ``prompt`` (``id``, ``key``, ``type``)
    - translation: ``prompt_text`` or ``value``
    - asset: ``id``, ``key`` and ``versions`` (each with ``id``,
      ``version_tag``, ``value``, ``language_code``, ``status``, ``created_at``)
    """

    async def get_prompt_version(self, project_id: str, prompt_key: str, version_tag: str | None) -> Any:
        """Return the selected prompt version.

        Raises:
            PromptNotFoundError: If the prompt does not exist
            VersionNotFoundError: If no version matches
        """
        ...

    async def get_prompt_translation(self, version_id: Any, language_code: str) -> Any | None:
        ...

    async def get_asset(self, project_id: str, prompt_key: str, asset_key: str) -> Any | None:
        ...

    async def get_asset_translation(self, asset_version_id: Any, language_code: str) -> Any | None:
        ...
