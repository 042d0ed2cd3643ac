"""Row-to-value mapper.

Supports every target the decoder registry can classify: scalars, enums,
binary values, dictionaries, tuples, dataclasses, Pydantic models and
plain classes.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Generic, TypeVar

from row_value.mapping.classify import type_name
from row_value.mapping.decoder import ValueDecoder
from row_value.mapping.record import DataRecord
from row_value.mapping.registry import DecoderRegistry, default_registry

T = TypeVar("T")


class ValueMapper(Generic[T]):
    """Maps whole rows to values of one target type.

    The decoder is resolved eagerly so an unmappable target fails when the
    mapper is created rather than on the first row.

    Args:
        target: The type (or annotation) to decode each row into.
        registry: Decoder registry to use. Defaults to the process-wide one.
    """

    def __init__(self, target: type[T] | Any, registry: DecoderRegistry | None = None) -> None:
        self._target = target
        self._decoder: ValueDecoder[T] = (registry or default_registry).get_decoder(target)

    @property
    def target_name(self) -> str:
        return type_name(self._target)

    @property
    def field_count(self) -> int | None:
        return self._decoder.field_count

    def map_one(self, record: DataRecord) -> T:
        """Decode all fields of record into one target value."""
        return self._decoder.decode(record, 0, record.field_count)

    def map_many(self, records: Iterable[DataRecord]) -> list[T]:
        """Map all records via map_one."""
        return [self.map_one(record) for record in records]
