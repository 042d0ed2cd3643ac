"""Per-type value decoders.

A ValueDecoder materializes one value of its target type from a window of
row fields. Composite decoders hold child decoders for their members or
tuple items; all of them are immutable once built.
"""

from __future__ import annotations

import datetime
import decimal
import io
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, get_origin

from row_value.core.enums import DbValueStrategy
from row_value.core.exceptions import (
    AmbiguousTupleWidthError,
    CastFailureError,
    FieldCountMismatchError,
    MappingConfigurationError,
    UnexpectedNullError,
    UnknownFieldError,
)
from row_value.mapping.classify import TypeDescriptor, type_name
from row_value.mapping.dynamic import DynamicRow
from row_value.mapping.names import normalize_field_name
from row_value.mapping.record import DataRecord, StreamingRecord

T = TypeVar("T")

_SENTINEL_FIELD = "NULL"


def _int_to_bool(value: int) -> bool:
    if value not in (0, 1):
        raise ValueError(f"{value} is not a boolean flag")
    return bool(value)


# Lossless conversions for values drivers commonly return in another shape,
# keyed by (source type, target type).
_CONVERSIONS: dict[tuple[type, type], Callable[[Any], Any]] = {
    (int, float): float,
    (int, decimal.Decimal): decimal.Decimal,
    (float, decimal.Decimal): lambda v: decimal.Decimal(str(v)),
    (str, decimal.Decimal): decimal.Decimal,
    (int, bool): _int_to_bool,
    (str, uuid.UUID): uuid.UUID,
    (bytes, uuid.UUID): lambda v: uuid.UUID(bytes=v),
    (str, datetime.datetime): datetime.datetime.fromisoformat,
    (str, datetime.date): datetime.date.fromisoformat,
    (str, datetime.time): datetime.time.fromisoformat,
    (datetime.datetime, datetime.date): datetime.datetime.date,
}


def cast_value(value: Any, target: type) -> Any:
    """Cast a non-null driver value to target.

    Raises:
        TypeError: If the value cannot be represented as target.
        ValueError: If a conversion rejects the value.
    """
    source = type(value)
    if source is target:
        return value
    convert = _CONVERSIONS.get((source, target))
    if convert is not None:
        return convert(value)
    if isinstance(value, target) and not isinstance(value, bool):
        return value
    raise TypeError(f"{source.__name__} is not {target.__name__}")


@dataclass(frozen=True)
class MemberBinding:
    """A property or constructor parameter fed by one row field."""

    name: str
    decoder: ValueDecoder[Any]
    positional: bool = False
    has_default: bool = False
    default: Any = None


class ValueDecoder(Generic[T]):
    """Decodes values of one target type from row field windows.

    Args:
        descriptor: The resolved target type.
        field_count: Fixed number of fields consumed, or None if variable.
        members: Normalized name to binding, for DTO and record strategies.
        items: Tuple item decoders in slot order, for the tuple strategy.
    """

    def __init__(
        self,
        descriptor: TypeDescriptor,
        field_count: int | None,
        *,
        members: dict[str, MemberBinding] | None = None,
        items: list[ValueDecoder[Any]] | None = None,
    ) -> None:
        self._descriptor = descriptor
        self._field_count = field_count
        self._members = members or {}
        self._items = items or []
        self._read: Callable[[DataRecord, int, int], Any] = {
            DbValueStrategy.CAST_VALUE: self._read_scalar,
            DbValueStrategy.ENUM: self._read_scalar,
            DbValueStrategy.BYTE_ARRAY: self._read_bytes,
            DbValueStrategy.STREAM: self._read_stream,
            DbValueStrategy.DYNAMIC: self._read_dynamic,
            DbValueStrategy.DICTIONARY: self._read_dictionary,
            DbValueStrategy.TUPLE: self._read_tuple,
            DbValueStrategy.POSITIONAL_RECORD: self._read_record,
            DbValueStrategy.DTO_PROPERTIES: self._read_dto,
        }[descriptor.strategy]

    @property
    def descriptor(self) -> TypeDescriptor:
        return self._descriptor

    @property
    def strategy(self) -> DbValueStrategy:
        return self._descriptor.strategy

    @property
    def field_count(self) -> int | None:
        """Fixed number of fields consumed, or None for variable width."""
        return self._field_count

    def decode(self, record: DataRecord, index: int, count: int) -> T:
        """Decode one value from fields [index, index + count) of record.

        Raises:
            FieldCountMismatchError: If count disagrees with a fixed field count.
        """
        if self._field_count is not None and self._field_count != count:
            raise FieldCountMismatchError(self._descriptor.name, self._field_count, count)
        return self._read(record, index, count)  # type: ignore[no-any-return]

    def __repr__(self) -> str:
        return (
            f"ValueDecoder({self._descriptor.name}, strategy={self.strategy.value}, "
            f"field_count={self._field_count})"
        )

    # --- single field ---

    def _read_scalar(self, record: DataRecord, index: int, count: int) -> Any:
        descriptor = self._descriptor
        if record.is_null(index):
            if not descriptor.nullable:
                raise UnexpectedNullError(descriptor.name, record.get_name(index), index)
            return None

        value = record.get_value(index)
        try:
            if descriptor.strategy is DbValueStrategy.ENUM:
                return descriptor.core_type(value)
            return cast_value(value, descriptor.core_type)
        except (TypeError, ValueError, ArithmeticError) as e:
            raise CastFailureError(
                type_name(type(value)), descriptor.name, record.get_name(index), index
            ) from e

    def _read_payload(self, record: DataRecord, index: int) -> bytearray:
        try:
            length = record.get_bytes(index, None)
            buffer = bytearray(length)
            record.get_bytes(index, buffer)
        except TypeError as e:
            raise CastFailureError(
                type_name(type(record.get_value(index))),
                self._descriptor.name,
                record.get_name(index),
                index,
            ) from e
        return buffer

    def _read_bytes(self, record: DataRecord, index: int, count: int) -> Any:
        if record.is_null(index):
            return None
        buffer = self._read_payload(record, index)
        if self._descriptor.core_type is bytearray:
            return buffer
        return bytes(buffer)

    def _read_stream(self, record: DataRecord, index: int, count: int) -> Any:
        if record.is_null(index):
            return None
        if isinstance(record, StreamingRecord):
            return record.open_stream(index)
        return io.BufferedReader(io.BytesIO(self._read_payload(record, index)))

    # --- open field sets ---

    def _read_dynamic(self, record: DataRecord, index: int, count: int) -> Any:
        if count == 1:
            return record.get_value(index)
        return self._collect(record, index, count, DynamicRow())

    def _read_dictionary(self, record: DataRecord, index: int, count: int) -> Any:
        return self._collect(record, index, count, {})

    @staticmethod
    def _collect(record: DataRecord, index: int, count: int, target: dict[str, Any]) -> Any:
        not_null = False
        for i in range(index, index + count):
            if record.is_null(i):
                target[record.get_name(i)] = None
            else:
                target[record.get_name(i)] = record.get_value(i)
                not_null = True
        return target if not_null else None

    # --- composites ---

    def _member(self, record: DataRecord, i: int) -> MemberBinding:
        name = record.get_name(i)
        member = self._members.get(normalize_field_name(name))
        if member is None:
            raise UnknownFieldError(name, self._descriptor.name)
        return member

    def _read_dto(self, record: DataRecord, index: int, count: int) -> Any:
        cls = self._descriptor.core_type
        try:
            dto = cls()
        except TypeError as e:
            raise MappingConfigurationError(
                self._descriptor.name, f"no constructor without arguments: {e}"
            ) from e

        not_null = False
        for i in range(index, index + count):
            member = self._member(record, i)
            if not record.is_null(i):
                setattr(dto, member.name, member.decoder.decode(record, i, 1))
                not_null = True
        return dto if not_null else None

    def _read_record(self, record: DataRecord, index: int, count: int) -> Any:
        # Parameters without a default start as None; defaulted ones are
        # left to the constructor unless a field supplies them.
        positional: dict[str, Any] = {}
        keyword: dict[str, Any] = {}
        for member in self._members.values():
            if member.positional:
                positional[member.name] = member.default if member.has_default else None
            elif not member.has_default:
                keyword[member.name] = None

        not_null = False
        for i in range(index, index + count):
            member = self._member(record, i)
            if not record.is_null(i):
                value = member.decoder.decode(record, i, 1)
                if member.positional:
                    positional[member.name] = value
                else:
                    keyword[member.name] = value
                not_null = True

        if not not_null:
            return None
        try:
            return self._descriptor.core_type(*positional.values(), **keyword)
        except (TypeError, ValueError) as e:
            # pydantic's ValidationError is a ValueError
            raise CastFailureError("row fields", self._descriptor.name) from e

    def _read_tuple(self, record: DataRecord, index: int, count: int) -> Any:
        items = self._items
        end = index + count
        position = index
        values: list[Any] = []
        for item_index, item in enumerate(items):
            sentinel: int | None = None
            width = item.field_count
            if width is None:
                later = items[item_index + 1 :]
                known_width = sum(i.field_count for i in later if i.field_count is not None)
                minimum_width = sum(1 if i.field_count is None else i.field_count for i in later)
                if all(i.field_count is not None for i in later):
                    width = end - position - known_width
                else:
                    sentinel = self._find_sentinel(record, position + 1, end)
                    if sentinel is not None:
                        width = sentinel - position
                    elif end - (position + 1) == minimum_width:
                        width = 1
                    else:
                        raise AmbiguousTupleWidthError(item_index, self._descriptor.name)

            if width < 0 or position + width > end:
                raise FieldCountMismatchError(self._descriptor.name, self._minimum_width(), count)
            values.append(item.decode(record, position, width))
            position = sentinel + 1 if sentinel is not None else position + width

        if position != end:
            raise FieldCountMismatchError(self._descriptor.name, position - index, count)

        core_type = self._descriptor.core_type
        if get_origin(core_type) is tuple:
            return tuple(values)
        return core_type(*values)

    def _minimum_width(self) -> int:
        # Variable-width items need at least one field each
        return sum(1 if i.field_count is None else i.field_count for i in self._items)

    @staticmethod
    def _find_sentinel(record: DataRecord, start: int, end: int) -> int | None:
        for i in range(start, end):
            if record.get_name(i).upper() == _SENTINEL_FIELD:
                return i
        return None
