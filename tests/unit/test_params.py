"""Unit tests for parameter normalization and encoding."""

from __future__ import annotations

from collections import namedtuple
from dataclasses import dataclass

import pytest
from pydantic import BaseModel

from row_value.core.params import normalize_params, param_names, params_from_dto


class TestNormalizeParams:
    def test_named_passthrough(self) -> None:
        sql = "SELECT * FROM users WHERE id = :user_id"
        assert normalize_params(sql, "named") == sql

    def test_pyformat_conversion(self) -> None:
        sql = "SELECT * FROM users WHERE id = :user_id"
        expected = "SELECT * FROM users WHERE id = %(user_id)s"
        assert normalize_params(sql, "pyformat") == expected

    def test_typecast_exclusion(self) -> None:
        sql = "SELECT value::integer FROM t WHERE id = :id"
        expected = "SELECT value::integer FROM t WHERE id = %(id)s"
        assert normalize_params(sql, "pyformat") == expected

    def test_string_literal_exclusion(self) -> None:
        sql = "SELECT * FROM t WHERE col = ':not_a_param' AND id = :id"
        expected = "SELECT * FROM t WHERE col = ':not_a_param' AND id = %(id)s"
        assert normalize_params(sql, "pyformat") == expected

    def test_no_params(self) -> None:
        sql = "SELECT 1"
        assert normalize_params(sql, "pyformat") == sql


class TestParamNames:
    def test_order_of_first_appearance(self) -> None:
        assert param_names("(:b, :a, :b, lower(:c))") == ["b", "a", "c"]

    def test_ignores_literals_and_casts(self) -> None:
        assert param_names("(':x', :y::text)") == ["y"]


@dataclass
class WidgetDC:
    name: str
    size: int


class WidgetModel(BaseModel):
    name: str
    size: int


WidgetTuple = namedtuple("WidgetTuple", "name size")


class WidgetPlain:
    def __init__(self, name: str, size: int) -> None:
        self.name = name
        self.size = size
        self._cache = None


class TestParamsFromDto:
    @pytest.mark.parametrize(
        "value",
        [
            {"name": "gear", "size": 3},
            WidgetDC("gear", 3),
            WidgetModel(name="gear", size=3),
            WidgetTuple("gear", 3),
            WidgetPlain("gear", 3),
        ],
    )
    def test_shallow_encoding(self, value: object) -> None:
        assert params_from_dto(value) == {"name": "gear", "size": 3}

    def test_nested_values_passed_through(self) -> None:
        inner = WidgetDC("gear", 3)
        assert params_from_dto({"widget": inner})["widget"] is inner

    def test_unsupported_value(self) -> None:
        with pytest.raises(TypeError, match="int"):
            params_from_dto(5)
