"""Tokenizer and classifier for ``{{...}}`` placeholders.

Four grammars share the double-brace syntax and are tried in this order:

    {{asset:<key>}}            {{asset:<key>:<versionTag>}}
    {{variable:<name>}}
    {{prompt:<key>}}           {{prompt:<projectId>/<key>}}
    {{prompt:<key>:<tag>}}     {{prompt:<projectId>/<key>:<tag>}}
    {{<name>}}                 bare variable, lowest priority

Spans that do not classify (empty content, a prefix with no target) and
unbalanced braces are kept verbatim.
"""

import enum
import re
from dataclasses import dataclass, field
from typing import Callable, Iterable, Union

PLACEHOLDER_PATTERN = re.compile(r"\{\{([^{}]*)\}\}")

ASSET_PREFIX = "asset"
VARIABLE_PREFIX = "variable"
PROMPT_PREFIX = "prompt"


class PlaceholderKind(str, enum.Enum):
    """Grammar a placeholder belongs to."""
    ASSET = "asset"
    VARIABLE = "variable"
    PROMPT = "prompt"
    BARE = "bare"


@dataclass(frozen=True)
class Placeholder:
    """A classified ``{{...}}`` span.

    ``key`` is the asset key, variable name or prompt key depending on kind.
    ``start`` and ``end`` are offsets of the span in the scanned text.
    """
    raw: str
    kind: PlaceholderKind
    key: str
    version_tag: str | None = None
    project_id: str | None = None
    start: int = field(default=0, compare=False)
    end: int = field(default=0, compare=False)


Segment = Union[str, Placeholder]


def classify(content: str, start: int = 0) -> Placeholder | None:
    """Classify the text between the braces of one span.

    Returns None when the span is not a placeholder.
    """
    raw = "{{" + content + "}}"
    end = start + len(raw)
    stripped = content.strip()
    if not stripped:
        return None

    prefix, sep, rest = stripped.partition(":")
    if sep:
        prefix = prefix.strip()

        if prefix == ASSET_PREFIX:
            key, _, tag = rest.partition(":")
            key = key.strip()
            if not key:
                return None
            return Placeholder(raw, PlaceholderKind.ASSET, key, tag.strip() or None, start=start, end=end)

        if prefix == VARIABLE_PREFIX:
            name = rest.strip()
            if not name:
                return None
            return Placeholder(raw, PlaceholderKind.VARIABLE, name, start=start, end=end)

        if prefix == PROMPT_PREFIX:
            ref, _, tag = rest.partition(":")
            project_id, slash, key = ref.partition("/")
            if slash:
                project_id = project_id.strip()
                key = key.strip()
                if not project_id:
                    return None
            else:
                key = project_id.strip()
                project_id = None
            if not key:
                return None
            return Placeholder(
                raw, PlaceholderKind.PROMPT, key, tag.strip() or None, project_id, start=start, end=end
            )

    return Placeholder(raw, PlaceholderKind.BARE, stripped, start=start, end=end)


def split(text: str) -> list[Segment]:
    """Split text into literal strings and placeholders, left to right."""
    segments: list[Segment] = []
    position = 0
    for match in PLACEHOLDER_PATTERN.finditer(text):
        placeholder = classify(match.group(1), match.start())
        if placeholder is None:
            continue
        if match.start() > position:
            segments.append(text[position:match.start()])
        segments.append(placeholder)
        position = match.end()
    if position < len(text):
        segments.append(text[position:])
    return segments


def scan(text: str, kinds: Iterable[PlaceholderKind] | None = None) -> list[Placeholder]:
    """Return the placeholders found in text, optionally filtered by kind."""
    wanted = set(kinds) if kinds is not None else None
    return [
        segment
        for segment in split(text)
        if isinstance(segment, Placeholder) and (wanted is None or segment.kind in wanted)
    ]


def substitute(
    text: str,
    kinds: Iterable[PlaceholderKind],
    replace: Callable[[Placeholder], str | None],
) -> str:
    """Replace placeholders of the given kinds in a single pass.

    ``replace`` returns the substitution, or None to keep the raw span.
    Substituted values are not scanned again.
    """
    wanted = set(kinds)
    parts: list[str] = []
    for segment in split(text):
        if isinstance(segment, str):
            parts.append(segment)
            continue
        value = replace(segment) if segment.kind in wanted else None
        parts.append(segment.raw if value is None else value)
    return "".join(parts)
