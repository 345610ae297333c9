"""Allow-list validation for values placed on the solver command line."""

from __future__ import annotations

import re
from typing import Any

from .errors import InvalidInputError

# Cube notation: letters, digits, apostrophe, space, parentheses, hyphen, brackets.
SAFE_INPUT = re.compile(r"[A-Za-z0-9' ()\-\[\]]*")


def sanitize(value: Any) -> str:
    """Return ``value`` trimmed if it only holds cube-notation characters.

    Non-string values (including ``None`` for absent fields) yield ``""``.
    Strings with any other character raise :class:`InvalidInputError`.
    """
    if not isinstance(value, str):
        return ""
    trimmed = value.strip()
    if not SAFE_INPUT.fullmatch(trimmed):
        raise InvalidInputError()
    return trimmed
