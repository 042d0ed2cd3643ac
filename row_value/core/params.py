"""SQL parameter handling.

Converts `:name` parameter syntax to driver-specific format and encodes
typed values into parameter dicts. String literals and PostgreSQL
`::typecast` syntax are never treated as parameters.
"""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Mapping
from functools import lru_cache
from typing import Any

from pydantic import BaseModel

# Matches :name but not ::typecast and not inside words
# Negative lookbehind for : (handles ::), \w (handles mid-word colons)
PARAM_PATTERN = re.compile(r"(?<![:\w]):([a-zA-Z_]\w*)")

# Matches single-quoted string literals (with escaped quotes handled)
_STRING_LITERAL_PATTERN = re.compile(r"'(?:[^'\\]|\\.)*'")


def normalize_params(sql: str, paramstyle: str) -> str:
    """Convert :name parameters to the target param style.

    Args:
        sql: SQL string with :name parameters.
        paramstyle: Target style - 'named' (no conversion) or 'pyformat' (%(name)s).

    Returns:
        SQL with parameters converted to the target style.
    """
    if paramstyle == "named":
        return sql
    return _convert_to_pyformat(sql)


@lru_cache(maxsize=256)
def _convert_to_pyformat(sql: str) -> str:
    """Convert :name params to %(name)s, preserving string literals."""
    return substitute_params(sql, r"%(\1)s")


def substitute_params(sql: str, replacement: Any) -> str:
    """Apply a PARAM_PATTERN substitution outside string literals.

    Args:
        sql: SQL string with :name parameters.
        replacement: Replacement string or callable, as for re.sub.
    """
    # Tokenize: split into string literals and non-literal segments
    parts: list[str] = []
    last_end = 0

    for match in _STRING_LITERAL_PATTERN.finditer(sql):
        start, end = match.span()
        if start > last_end:
            parts.append(PARAM_PATTERN.sub(replacement, sql[last_end:start]))
        # Keep string literal as-is
        parts.append(match.group())
        last_end = end

    if last_end < len(sql):
        parts.append(PARAM_PATTERN.sub(replacement, sql[last_end:]))

    return "".join(parts)


def param_names(sql: str) -> list[str]:
    """Distinct :name parameters of sql in order of first appearance."""
    names: list[str] = []

    def _record(match: re.Match[str]) -> str:
        if match.group(1) not in names:
            names.append(match.group(1))
        return match.group()

    substitute_params(sql, _record)
    return names


def params_from_dto(value: Any) -> dict[str, Any]:
    """Shallow-encode a typed value into a parameter dict.

    Detection order:
    1. Mapping -> copied as-is
    2. Pydantic BaseModel -> model fields
    3. dataclass instance -> dataclass fields
    4. namedtuple -> _asdict()
    5. Plain object -> public instance attributes

    Nested values are passed through unchanged.

    Raises:
        TypeError: If value has no named fields to encode.
    """
    if isinstance(value, Mapping):
        return dict(value)

    if isinstance(value, BaseModel):
        return {name: getattr(value, name) for name in type(value).model_fields}

    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}

    if isinstance(value, tuple) and hasattr(value, "_asdict"):
        return dict(value._asdict())

    try:
        attributes = vars(value)
    except TypeError:
        raise TypeError(f"Cannot build parameters from {type(value).__name__}") from None
    return {name: item for name, item in attributes.items() if not name.startswith("_")}
