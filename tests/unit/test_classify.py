"""Unit tests for type classification and field-name normalization."""

from __future__ import annotations

import datetime
import decimal
import enum
import io
import typing
import uuid
from collections import namedtuple
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, NamedTuple, Optional

import pytest
from pydantic import BaseModel

from row_value.core.enums import DbValueStrategy
from row_value.core.exceptions import MappingConfigurationError
from row_value.mapping.classify import classify, describe, is_positional_record, type_name
from row_value.mapping.names import normalize_field_name


class Color(enum.Enum):
    RED = 1
    GREEN = 2


@dataclass
class PointRecord:
    x: int
    y: int


class PersonModel(BaseModel):
    id: int
    name: str


class WidgetDto:
    id: int | None = None
    name: str | None = None


class MismatchedTypes:
    id: int

    def __init__(self, id: str) -> None:
        self.id = int(id)


class WithVarArgs:
    id: int

    def __init__(self, *args: Any) -> None:
        self.id = args[0]


class Pair(NamedTuple):
    left: int
    right: str


LegacyPair = namedtuple("LegacyPair", "left right")


class TestNormalizeFieldName:
    def test_removes_underscores(self) -> None:
        assert normalize_field_name("user_id") == "userid"

    def test_case_insensitive(self) -> None:
        assert normalize_field_name("UserId") == normalize_field_name("USER_ID")

    def test_no_other_changes(self) -> None:
        assert normalize_field_name("first-name 2") == "first-name 2"


class TestClassify:
    @pytest.mark.parametrize(
        "target",
        [
            str,
            int,
            float,
            bool,
            decimal.Decimal,
            uuid.UUID,
            datetime.datetime,
            datetime.date,
            datetime.time,
            datetime.timedelta,
        ],
    )
    def test_cast_value_types(self, target: type) -> None:
        assert classify(target) is DbValueStrategy.CAST_VALUE

    def test_byte_array(self) -> None:
        assert classify(bytes) is DbValueStrategy.BYTE_ARRAY
        assert classify(bytearray) is DbValueStrategy.BYTE_ARRAY

    def test_dynamic(self) -> None:
        assert classify(Any) is DbValueStrategy.DYNAMIC
        assert classify(object) is DbValueStrategy.DYNAMIC

    @pytest.mark.parametrize("target", [dict, dict[str, Any], Mapping[str, Any], typing.Dict[str, Any]])  # noqa: UP006
    def test_dictionary(self, target: Any) -> None:
        assert classify(target) is DbValueStrategy.DICTIONARY

    @pytest.mark.parametrize("target", [io.IOBase, typing.BinaryIO, typing.IO[bytes]])
    def test_stream(self, target: Any) -> None:
        assert classify(target) is DbValueStrategy.STREAM

    def test_tuple(self) -> None:
        assert classify(tuple[int, str]) is DbValueStrategy.TUPLE
        assert classify(Pair) is DbValueStrategy.TUPLE
        assert classify(LegacyPair) is DbValueStrategy.TUPLE

    def test_enum(self) -> None:
        assert classify(Color) is DbValueStrategy.ENUM

    def test_dataclass_is_positional_record(self) -> None:
        assert classify(PointRecord) is DbValueStrategy.POSITIONAL_RECORD

    def test_pydantic_model_is_positional_record(self) -> None:
        assert classify(PersonModel) is DbValueStrategy.POSITIONAL_RECORD

    def test_plain_class_is_dto(self) -> None:
        assert classify(WidgetDto) is DbValueStrategy.DTO_PROPERTIES

    def test_constructor_type_mismatch_is_dto(self) -> None:
        assert not is_positional_record(MismatchedTypes)
        assert classify(MismatchedTypes) is DbValueStrategy.DTO_PROPERTIES

    def test_var_args_constructor_is_dto(self) -> None:
        assert classify(WithVarArgs) is DbValueStrategy.DTO_PROPERTIES

    def test_variable_length_tuple_rejected(self) -> None:
        with pytest.raises(MappingConfigurationError, match="fixed arity"):
            classify(tuple[int, ...])

    def test_unsupported_annotation_rejected(self) -> None:
        with pytest.raises(MappingConfigurationError):
            classify(list[int])


class TestDescribe:
    def test_optional_is_nullable(self) -> None:
        descriptor = describe(Optional[int])  # noqa: UP007
        assert descriptor.core_type is int
        assert descriptor.nullable is True
        assert descriptor.strategy is DbValueStrategy.CAST_VALUE

    def test_union_none_is_nullable(self) -> None:
        descriptor = describe(Color | None)
        assert descriptor.core_type is Color
        assert descriptor.nullable is True

    def test_plain_type_not_nullable(self) -> None:
        assert describe(int).nullable is False

    def test_any_is_nullable(self) -> None:
        assert describe(Any).nullable is True

    def test_multi_type_union_rejected(self) -> None:
        with pytest.raises(MappingConfigurationError, match="single type"):
            describe(int | str)

    def test_string_annotation_rejected(self) -> None:
        with pytest.raises(MappingConfigurationError):
            describe("int")


class TestTypeName:
    def test_builtin(self) -> None:
        assert type_name(int) == "int"

    def test_qualified_class(self) -> None:
        assert type_name(PointRecord) == f"{__name__}.PointRecord"

    def test_generic_alias(self) -> None:
        assert type_name(tuple[int, str]) == "tuple[int, str]"
