"""Decoder registry - builds and caches one ValueDecoder per target type.

The registry is read-mostly: a decoder is built on the first request for a
type and shared for the lifetime of the registry. Child decoders are resolved
before their parent is finalized, so a type's decoder is only published once
its whole type graph is mapped.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, TypeVar, overload

from row_value.core.enums import DbValueStrategy
from row_value.core.exceptions import MappingConfigurationError
from row_value.mapping.classify import (
    TypeDescriptor,
    describe,
    get_constructor_parameters,
    get_properties,
    tuple_item_types,
    type_name,
)
from row_value.mapping.decoder import MemberBinding, ValueDecoder
from row_value.mapping.names import normalize_field_name
from row_value.mapping.record import DataRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Strategies that always read exactly one field.
_SINGLE_FIELD = frozenset(
    {
        DbValueStrategy.CAST_VALUE,
        DbValueStrategy.ENUM,
        DbValueStrategy.BYTE_ARRAY,
        DbValueStrategy.STREAM,
    }
)


class DecoderRegistry:
    """Thread-safe, memoized factory of value decoders.

    Concurrent first requests for the same type may each build a decoder;
    only the first one stored is kept and returned from then on.
    """

    def __init__(self) -> None:
        self._decoders: dict[Any, ValueDecoder[Any]] = {}
        self._lock = threading.Lock()
        self._local = threading.local()

    @overload
    def get_decoder(self, target: type[T]) -> ValueDecoder[T]: ...

    @overload
    def get_decoder(self, target: Any) -> ValueDecoder[Any]: ...

    def get_decoder(self, target: Any) -> ValueDecoder[Any]:
        """Return the decoder for target, building it on first use.

        Raises:
            MappingConfigurationError: If target (or a type it contains)
                cannot be mapped, including cyclic type graphs.
        """
        try:
            decoder = self._decoders.get(target)
        except TypeError as e:
            raise MappingConfigurationError(type_name(target), "annotation is not hashable") from e
        if decoder is not None:
            return decoder

        building: set[Any] = self._building()
        if target in building:
            raise MappingConfigurationError(type_name(target), "cyclic type graphs are not supported")

        building.add(target)
        try:
            decoder = self._build(describe(target))
        finally:
            building.discard(target)

        with self._lock:
            decoder = self._decoders.setdefault(target, decoder)
        return decoder

    def get_field_count(self, target: Any) -> int | None:
        """Fixed number of fields target consumes, or None if variable."""
        return self.get_decoder(target).field_count

    @overload
    def decode_value(
        self, target: type[T], record: DataRecord, index: int = 0, count: int | None = None
    ) -> T: ...

    @overload
    def decode_value(
        self, target: Any, record: DataRecord, index: int = 0, count: int | None = None
    ) -> Any: ...

    def decode_value(
        self, target: Any, record: DataRecord, index: int = 0, count: int | None = None
    ) -> Any:
        """Decode target from fields [index, index + count) of record.

        A missing count reads through the last field of the record.
        """
        if count is None:
            count = record.field_count - index
        return self.get_decoder(target).decode(record, index, count)

    def __contains__(self, target: Any) -> bool:
        return target in self._decoders

    def __len__(self) -> int:
        return len(self._decoders)

    def _building(self) -> set[Any]:
        building: set[Any] | None = getattr(self._local, "building", None)
        if building is None:
            building = self._local.building = set()
        return building

    def _build(self, descriptor: TypeDescriptor) -> ValueDecoder[Any]:
        strategy = descriptor.strategy
        if strategy in _SINGLE_FIELD:
            decoder: ValueDecoder[Any] = ValueDecoder(descriptor, 1)
        elif strategy is DbValueStrategy.TUPLE:
            items = [self.get_decoder(t) for t in tuple_item_types(descriptor.core_type)]
            field_count: int | None = 0
            for item in items:
                if item.field_count is None:
                    field_count = None
                    break
                field_count += item.field_count
            decoder = ValueDecoder(descriptor, field_count, items=items)
        elif strategy is DbValueStrategy.POSITIONAL_RECORD:
            decoder = ValueDecoder(descriptor, None, members=self._record_members(descriptor))
        elif strategy is DbValueStrategy.DTO_PROPERTIES:
            decoder = ValueDecoder(descriptor, None, members=self._dto_members(descriptor))
        else:
            decoder = ValueDecoder(descriptor, None)

        logger.debug(
            "Built decoder for %s: strategy=%s field_count=%s",
            descriptor.name,
            strategy.value,
            decoder.field_count,
        )
        return decoder

    def _dto_members(self, descriptor: TypeDescriptor) -> dict[str, MemberBinding]:
        members: dict[str, MemberBinding] = {}
        for name, annotation in get_properties(descriptor.core_type).items():
            binding = MemberBinding(name=name, decoder=self.get_decoder(annotation))
            _add_member(members, binding, descriptor)
        return members

    def _record_members(self, descriptor: TypeDescriptor) -> dict[str, MemberBinding]:
        members: dict[str, MemberBinding] = {}
        for parameter, annotation in get_constructor_parameters(descriptor.core_type) or []:
            has_default = parameter.default is not parameter.empty
            binding = MemberBinding(
                name=parameter.name,
                decoder=self.get_decoder(annotation),
                positional=parameter.kind is parameter.POSITIONAL_ONLY,
                has_default=has_default,
                default=parameter.default if has_default else None,
            )
            _add_member(members, binding, descriptor)
        return members


def _add_member(
    members: dict[str, MemberBinding], binding: MemberBinding, descriptor: TypeDescriptor
) -> None:
    key = normalize_field_name(binding.name)
    existing = members.get(key)
    if existing is not None:
        raise MappingConfigurationError(
            descriptor.name,
            f"members '{existing.name}' and '{binding.name}' collide as '{key}'",
        )
    members[key] = binding


default_registry = DecoderRegistry()


@overload
def get_decoder(target: type[T]) -> ValueDecoder[T]: ...


@overload
def get_decoder(target: Any) -> ValueDecoder[Any]: ...


def get_decoder(target: Any) -> ValueDecoder[Any]:
    """Decoder for target from the default registry."""
    return default_registry.get_decoder(target)


def get_field_count(target: Any) -> int | None:
    """Fixed field count of target from the default registry, or None."""
    return default_registry.get_field_count(target)


@overload
def decode_value(
    target: type[T], record: DataRecord, index: int = 0, count: int | None = None
) -> T: ...


@overload
def decode_value(
    target: Any, record: DataRecord, index: int = 0, count: int | None = None
) -> Any: ...


def decode_value(target: Any, record: DataRecord, index: int = 0, count: int | None = None) -> Any:
    """Decode target from record using the default registry."""
    return default_registry.decode_value(target, record, index, count)
