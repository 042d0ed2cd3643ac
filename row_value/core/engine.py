"""Typed reads over executed DB-API cursors.

Statement execution and connection lifecycle belong to the caller; these
helpers only fetch rows from a cursor that has already been executed and
decode each one into the requested type.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any, TypeVar, overload

from row_value.core.exceptions import MultipleRowsError, NoRowsError
from row_value.mapping.model import ValueMapper
from row_value.mapping.record import RowRecord
from row_value.mapping.registry import DecoderRegistry

T = TypeVar("T")


def read_records(cursor: Any) -> Iterator[RowRecord]:
    """Yield each remaining row of cursor as a RowRecord.

    Handles both tuple-like rows and dict-like rows from different drivers.
    A cursor without a result set yields nothing.
    """
    if cursor.description is None:
        return
    while (row := cursor.fetchone()) is not None:
        yield RowRecord.from_cursor(cursor, row)


@overload
def iterate(cursor: Any, target: type[T], *, registry: DecoderRegistry | None = None) -> Iterator[T]: ...


@overload
def iterate(cursor: Any, target: Any, *, registry: DecoderRegistry | None = None) -> Iterator[Any]: ...


def iterate(cursor: Any, target: Any, *, registry: DecoderRegistry | None = None) -> Iterator[Any]:
    """Lazily decode each row of cursor into target."""
    mapper: ValueMapper[Any] = ValueMapper(target, registry)
    for record in read_records(cursor):
        yield mapper.map_one(record)


@overload
def query(cursor: Any, target: type[T], *, registry: DecoderRegistry | None = None) -> list[T]: ...


@overload
def query(cursor: Any, target: Any, *, registry: DecoderRegistry | None = None) -> list[Any]: ...


def query(cursor: Any, target: Any, *, registry: DecoderRegistry | None = None) -> list[Any]:
    """Decode all rows of cursor into a list of target values."""
    return list(iterate(cursor, target, registry=registry))


def query_first(cursor: Any, target: Any, *, registry: DecoderRegistry | None = None) -> Any:
    """Decode the first row of cursor, or return None if there are no rows."""
    return next(iterate(cursor, target, registry=registry), None)


def query_single_or_none(
    cursor: Any, target: Any, *, registry: DecoderRegistry | None = None
) -> Any:
    """Decode the only row of cursor.

    Returns None if zero rows match.
    Raises MultipleRowsError if more than one row matches.
    """
    mapper: ValueMapper[Any] = ValueMapper(target, registry)
    records = read_records(cursor)
    first = next(records, None)
    if first is None:
        return None
    if next(records, None) is not None:
        raise MultipleRowsError(mapper.target_name)
    return mapper.map_one(first)


def query_single(cursor: Any, target: Any, *, registry: DecoderRegistry | None = None) -> Any:
    """Decode exactly one row of cursor.

    Raises NoRowsError if zero rows match and MultipleRowsError if more
    than one row matches.
    """
    mapper: ValueMapper[Any] = ValueMapper(target, registry)
    records = read_records(cursor)
    first = next(records, None)
    if first is None:
        raise NoRowsError(mapper.target_name)
    if next(records, None) is not None:
        raise MultipleRowsError(mapper.target_name)
    return mapper.map_one(first)
