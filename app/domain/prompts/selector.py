"""Version and language selection.

The same two-step rule is applied to prompt versions and asset versions:

1. An explicit tag must match exactly. ``latest`` (or no tag) picks the
   active version, falling back to the most recently created one.
2. A translation for the requested language replaces the base text;
   otherwise the base text is used.
"""

from datetime import datetime
from typing import Any, Iterable, Protocol

from app.domain.prompts.errors import VersionNotFoundError
from app.domain.prompts.types import ACTIVE_STATUS, LATEST, FallbackKind, TextSelection


class VersionLike(Protocol):
    id: Any
    version_tag: str
    status: str
    created_at: datetime


def is_latest(version_tag: str | None) -> bool:
    """Whether a tag asks for the default version rather than a specific one."""
    return not version_tag or version_tag == LATEST


def _recency(version: VersionLike) -> tuple:
    return (version.created_at or datetime.min, version.id or 0)


def select_version(
    versions: Iterable[VersionLike],
    version_tag: str | None,
    subject: str,
    error_cls: type[VersionNotFoundError] = VersionNotFoundError,
) -> VersionLike:
    """Pick one version.

    Args:
        versions: Candidate versions, in any order
        version_tag: Explicit tag, or "latest"/None for the default version
        subject: Human readable name of the owner, used in error messages
        error_cls: Error raised when nothing matches

    Returns:
        The selected version

    Raises:
        VersionNotFoundError: If the explicit tag does not exist or there
            are no versions at all
    """
    candidates = list(versions)

    if not is_latest(version_tag):
        for version in candidates:
            if version.version_tag == version_tag:
                return version
        raise error_cls(subject, version_tag)

    if not candidates:
        raise error_cls(subject, version_tag)

    newest_first = sorted(candidates, key=_recency, reverse=True)
    for version in newest_first:
        if version.status == ACTIVE_STATUS:
            return version
    return newest_first[0]


def select_text(
    base_text: str,
    base_language: str | None,
    translation_text: str | None,
    requested_language: str | None,
) -> TextSelection:
    """Apply the language fallback to a selected version."""
    if requested_language and translation_text is not None:
        return TextSelection(
            text=translation_text,
            language_code=requested_language,
            fallback=FallbackKind.EXACT,
            requested_language=requested_language,
        )
    return TextSelection(
        text=base_text,
        language_code=base_language,
        fallback=FallbackKind.BASE,
        requested_language=requested_language,
    )
