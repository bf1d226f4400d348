"""Substitution of caller-supplied variables."""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from app.domain.prompts.placeholders import Placeholder, PlaceholderKind, substitute

logger = logging.getLogger(__name__)


@dataclass
class VariableSubstitution:
    """Text after variable substitution and the names that were missing."""
    text: str
    unresolved: list[str] = field(default_factory=list)


def stringify(value: Any) -> str:
    """String form of a variable value."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, ensure_ascii=False, default=str)
    return str(value)


def substitute_variables(text: str, variables: Mapping[str, Any]) -> VariableSubstitution:
    """Replace ``{{variable:<name>}}`` first, then bare ``{{<name>}}``.

    Unknown names are left in place and reported, never raised.
    """
    result = VariableSubstitution(text=text)

    def replace(placeholder: Placeholder) -> str | None:
        if placeholder.key in variables:
            return stringify(variables[placeholder.key])
        if placeholder.key not in result.unresolved:
            result.unresolved.append(placeholder.key)
            logger.warning(
                "Variable not provided, leaving placeholder untouched",
                extra={"variable": placeholder.key, "placeholder": placeholder.raw},
            )
        return None

    text = substitute(text, [PlaceholderKind.VARIABLE], replace)
    result.text = substitute(text, [PlaceholderKind.BARE], replace)
    return result
