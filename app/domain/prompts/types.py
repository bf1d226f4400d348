"""Value types shared by the prompt resolution pipeline."""

import enum
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping

LATEST = "latest"
ACTIVE_STATUS = "active"


class FallbackKind(str, enum.Enum):
    """Whether a translation or the version's base text was used."""
    EXACT = "exact"
    BASE = "base"


class LanguageSource(str, enum.Enum):
    """Audit tag recorded for each resolved asset."""
    EXACT = "exact"
    BASE = "base"  # no language requested
    BASE_FALLBACK = "base_fallback"  # language requested, no translation


@dataclass(frozen=True)
class TextSelection:
    """Text picked for a version after applying the language fallback."""
    text: str
    language_code: str | None
    fallback: FallbackKind
    requested_language: str | None = None

    @property
    def language_source(self) -> LanguageSource:
        if self.fallback is FallbackKind.EXACT:
            return LanguageSource.EXACT
        if self.requested_language:
            return LanguageSource.BASE_FALLBACK
        return LanguageSource.BASE


@dataclass(frozen=True)
class SelectedPrompt:
    """Outcome of version and language selection for one prompt.

    Holds plain values only so it can be cached between requests.
    """
    project_id: str
    prompt_id: Any
    prompt_key: str
    prompt_type: str
    version_id: Any
    version_tag: str
    selection: TextSelection


@dataclass
class ResolvedAsset:
    """One asset placeholder that was substituted."""
    key: str
    placeholder: str
    version_id: Any
    version_tag: str
    language_source: LanguageSource


@dataclass
class ResolvedPromptReference:
    """One nested prompt reference that was expanded."""
    placeholder: str
    project_id: str
    prompt_key: str
    prompt_id: Any
    requested_version_tag: str
    version_id: Any
    version_tag: str
    language_code: str | None
    fallback: FallbackKind
    depth: int


@dataclass
class ResolutionMetadata:
    """Audit trail of a resolution."""
    project_id: str
    prompt_id: Any
    prompt_key: str
    prompt_type: str
    version_id: Any
    version_tag: str
    requested_language: str | None
    language_code: str | None
    fallback: FallbackKind
    assets: list[ResolvedAsset] = field(default_factory=list)
    prompts: list[ResolvedPromptReference] = field(default_factory=list)
    variables_provided: list[str] = field(default_factory=list)
    unresolved_assets: list[str] = field(default_factory=list)
    unresolved_variables: list[str] = field(default_factory=list)


@dataclass
class ResolutionResult:
    """Final text plus metadata returned to callers."""
    text: str
    metadata: ResolutionMetadata


def visit_key(project_id: str, prompt_key: str) -> str:
    """Key identifying a prompt in a reference chain."""
    return f"{project_id}/{prompt_key}"


@dataclass(frozen=True)
class ResolutionContext:
    """Per-call state handed down the recursion by value.

    ``visited`` only ever holds the ancestors of the current call, so sibling
    references to the same prompt are not mistaken for cycles.
    """
    visited: tuple[str, ...] = ()
    depth: int = 0
    language_code: str | None = None
    variables: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def root(
        cls,
        project_id: str,
        prompt_key: str,
        language_code: str | None = None,
        variables: Mapping[str, Any] | None = None,
    ) -> "ResolutionContext":
        return cls(
            visited=(visit_key(project_id, prompt_key),),
            depth=0,
            language_code=language_code,
            variables=MappingProxyType(dict(variables or {})),
        )

    def descend(self, key: str) -> "ResolutionContext":
        """Context for a nested reference identified by ``key``."""
        return replace(self, visited=self.visited + (key,), depth=self.depth + 1)
