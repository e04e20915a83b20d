"""
Rights vocabulary.

This defines WHAT a membership can grant, not HOW it is checked.
The checking happens in gatehouse.auth.permissions.

Memberships store their rights as text ("READ | WRITE | DELETE"). That text is
parsed into a set of ``Right`` tags and checked by exact set membership, so a
stray token like "READONLY" grants nothing.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Iterable


class Right(str, Enum):
    """A unit of permission within a group."""

    READ = "READ"
    WRITE = "WRITE"
    DELETE = "DELETE"


# Granted to the account that creates a group
FULL_RIGHTS: frozenset[Right] = frozenset({Right.READ, Right.WRITE, Right.DELETE})

_SEPARATORS = re.compile(r"[|,\s]+")


def parse_rights(value: str | Iterable[str] | None) -> frozenset[Right]:
    """
    Parse stored rights into a set of tags.

    Accepts the stored text form or any iterable of tag names.
    Tags are case-sensitive; unknown tokens are dropped.
    """
    if value is None:
        return frozenset()
    if isinstance(value, str):
        tokens = _SEPARATORS.split(value)
    else:
        tokens = [str(getattr(v, "value", v)) for v in value]

    rights = set()
    for token in tokens:
        try:
            rights.add(Right(token.strip()))
        except ValueError:
            continue
    return frozenset(rights)


def format_rights(rights: Iterable[Right | str]) -> str:
    """Render rights in the stored text form, in READ, WRITE, DELETE order."""
    parsed = parse_rights(rights)
    return " | ".join(r.value for r in Right if r in parsed)


def has_right(rights: str | Iterable[str] | None, required: Right | str) -> bool:
    """Check if stored rights include the required tag."""
    try:
        required = Right(getattr(required, "value", required))
    except ValueError:
        return False
    return required in parse_rights(rights)
