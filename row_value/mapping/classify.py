"""Target type classification.

Decides which decoding strategy applies to a requested type, using
structural detection (tuple shape, enum, constructor-versus-property shape)
rather than explicit markers.
"""

from __future__ import annotations

import collections.abc
import dataclasses
import datetime
import decimal
import enum
import inspect
import io
import types
import typing
import uuid
from typing import Any, ClassVar, Union, get_args, get_origin

from pydantic import BaseModel

from row_value.core.enums import DbValueStrategy
from row_value.core.exceptions import MappingConfigurationError
from row_value.mapping.names import normalize_field_name

_NONE_TYPE = type(None)

# Exact-match table, consulted before any structural detection.
_STRATEGIES: dict[Any, DbValueStrategy] = {
    str: DbValueStrategy.CAST_VALUE,
    int: DbValueStrategy.CAST_VALUE,
    float: DbValueStrategy.CAST_VALUE,
    bool: DbValueStrategy.CAST_VALUE,
    decimal.Decimal: DbValueStrategy.CAST_VALUE,
    uuid.UUID: DbValueStrategy.CAST_VALUE,
    datetime.datetime: DbValueStrategy.CAST_VALUE,
    datetime.date: DbValueStrategy.CAST_VALUE,
    datetime.time: DbValueStrategy.CAST_VALUE,
    datetime.timedelta: DbValueStrategy.CAST_VALUE,
    bytes: DbValueStrategy.BYTE_ARRAY,
    bytearray: DbValueStrategy.BYTE_ARRAY,
    Any: DbValueStrategy.DYNAMIC,
    object: DbValueStrategy.DYNAMIC,
    dict: DbValueStrategy.DICTIONARY,
    dict[str, Any]: DbValueStrategy.DICTIONARY,
    dict[str, object]: DbValueStrategy.DICTIONARY,
    typing.Dict[str, Any]: DbValueStrategy.DICTIONARY,  # noqa: UP006
    collections.abc.Mapping: DbValueStrategy.DICTIONARY,
    collections.abc.Mapping[str, Any]: DbValueStrategy.DICTIONARY,
    collections.abc.MutableMapping: DbValueStrategy.DICTIONARY,
    collections.abc.MutableMapping[str, Any]: DbValueStrategy.DICTIONARY,
    io.IOBase: DbValueStrategy.STREAM,
    io.BufferedIOBase: DbValueStrategy.STREAM,
    io.RawIOBase: DbValueStrategy.STREAM,
    typing.BinaryIO: DbValueStrategy.STREAM,
    typing.IO[bytes]: DbValueStrategy.STREAM,
}


@dataclasses.dataclass(frozen=True)
class TypeDescriptor:
    """A requested target type with its nullable wrapper resolved."""

    target: Any
    core_type: Any
    nullable: bool
    strategy: DbValueStrategy

    @property
    def name(self) -> str:
        return type_name(self.target)


def type_name(target: Any) -> str:
    """Full, diagnostic name of a type or annotation."""
    if isinstance(target, type) and not get_args(target):
        if target.__module__ == "builtins":
            return target.__qualname__
        return f"{target.__module__}.{target.__qualname__}"
    return repr(target).replace("typing.", "")


def describe(target: Any) -> TypeDescriptor:
    """Resolve nullability and strategy for a target annotation.

    Raises:
        MappingConfigurationError: If the annotation cannot be mapped.
    """
    if isinstance(target, str):
        raise MappingConfigurationError(target, "string annotations must be resolved first")

    core_type = target
    nullable = target is Any or target is object
    if get_origin(target) in (Union, types.UnionType):
        args = get_args(target)
        non_null = [arg for arg in args if arg is not _NONE_TYPE]
        if len(non_null) != 1 or len(non_null) == len(args):
            raise MappingConfigurationError(
                type_name(target), "only unions of a single type with None are supported"
            )
        core_type = non_null[0]
        nullable = True

    return TypeDescriptor(
        target=target,
        core_type=core_type,
        nullable=nullable,
        strategy=classify(core_type),
    )


def classify(core_type: Any) -> DbValueStrategy:
    """Pick the decoding strategy for a non-optional type."""
    strategy = _STRATEGIES.get(core_type)
    if strategy is not None:
        return strategy

    if is_tuple_type(core_type):
        return DbValueStrategy.TUPLE

    if not _is_class(core_type):
        raise MappingConfigurationError(type_name(core_type), "unsupported annotation")

    if issubclass(core_type, enum.Enum):
        return DbValueStrategy.ENUM

    if is_positional_record(core_type):
        return DbValueStrategy.POSITIONAL_RECORD

    return DbValueStrategy.DTO_PROPERTIES


def is_tuple_type(target: Any) -> bool:
    """True for fixed-arity tuple annotations and namedtuple classes."""
    if get_origin(target) is tuple:
        args = get_args(target)
        if args and args[-1] is Ellipsis:
            raise MappingConfigurationError(
                type_name(target), "variable-length tuples have no fixed arity"
            )
        return True
    if target is tuple:
        raise MappingConfigurationError("tuple", "tuple item types must be declared")
    return _is_class(target) and issubclass(target, tuple) and hasattr(target, "_fields")


def tuple_item_types(target: Any) -> list[Any]:
    """Item annotations of a tuple type, in slot order."""
    if get_origin(target) is tuple:
        args = get_args(target)
        # tuple[()] is the empty tuple
        return [] if args == ((),) else list(args)
    hints = _type_hints(target)
    return [hints.get(name, Any) for name in target._fields]


def get_properties(cls: type) -> dict[str, Any]:
    """Public settable properties of a class and their annotations.

    Pydantic models report model_fields; everything else reports its
    non-ClassVar, non-underscore annotations (dataclasses included).
    """
    if issubclass(cls, BaseModel):
        return {name: info.annotation for name, info in cls.model_fields.items()}

    properties: dict[str, Any] = {}
    for name, annotation in _type_hints(cls).items():
        if name.startswith("_") or get_origin(annotation) is ClassVar or annotation is ClassVar:
            continue
        properties[name] = annotation
    return properties


def get_constructor_parameters(cls: type) -> list[tuple[inspect.Parameter, Any]] | None:
    """Constructor parameters of a class with resolved annotations.

    Returns None when the signature is unavailable or takes *args/**kwargs,
    since such constructors have no fixed shape to match against.
    """
    try:
        signature = inspect.signature(cls)
    except (TypeError, ValueError):
        return None

    parameters = list(signature.parameters.values())
    if any(p.kind in (p.VAR_POSITIONAL, p.VAR_KEYWORD) for p in parameters):
        return None

    init_hints: dict[str, Any] | None = None
    resolved: list[tuple[inspect.Parameter, Any]] = []
    for parameter in parameters:
        annotation = parameter.annotation
        if isinstance(annotation, str):
            if init_hints is None:
                init_hints = _type_hints(cls.__init__)
            annotation = init_hints.get(parameter.name, annotation)
        resolved.append((parameter, annotation))
    return resolved


def is_positional_record(cls: type) -> bool:
    """True if the constructor mirrors the public properties one-to-one."""
    parameters = get_constructor_parameters(cls)
    if parameters is None:
        return False

    properties = {normalize_field_name(name): ann for name, ann in get_properties(cls).items()}
    if len(parameters) != len(properties):
        return False

    return all(
        normalize_field_name(parameter.name) in properties
        and properties[normalize_field_name(parameter.name)] == annotation
        for parameter, annotation in parameters
    )


def _is_class(target: Any) -> bool:
    # Parameterized generics report as classes on some Python versions
    return isinstance(target, type) and get_origin(target) is None


def _type_hints(obj: Any) -> dict[str, Any]:
    try:
        return typing.get_type_hints(obj)
    except (NameError, TypeError) as e:
        raise MappingConfigurationError(
            type_name(obj), f"cannot resolve type annotations: {e}"
        ) from e
