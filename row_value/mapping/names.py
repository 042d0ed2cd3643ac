"""Field-name normalization."""

from __future__ import annotations


def normalize_field_name(name: str) -> str:
    """Canonicalize a column, property or parameter name for matching.

    Underscores are dropped and case is folded, so ``user_id``, ``UserId``
    and ``USERID`` all match.
    """
    return name.replace("_", "").lower()
