"""Mapper protocol.

All mappers implement this interface. The query helpers call map_one for
each row they read; map_many maps an already-materialized sequence.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, TypeVar

from row_value.mapping.record import DataRecord

T_co = TypeVar("T_co", covariant=True)


class Mapper(Protocol[T_co]):
    """Base mapper protocol."""

    def map_one(self, record: DataRecord) -> T_co:
        """Map a single row record to a target value."""
        ...

    def map_many(self, records: Iterable[DataRecord]) -> list[T_co]:
        """Map multiple row records to a list of target values."""
        ...
