"""Decoding strategy enumeration."""

from __future__ import annotations

from enum import Enum


class DbValueStrategy(Enum):
    """How a target type is read from one or more row fields."""

    CAST_VALUE = "cast_value"
    ENUM = "enum"
    BYTE_ARRAY = "byte_array"
    STREAM = "stream"
    DYNAMIC = "dynamic"
    DICTIONARY = "dictionary"
    TUPLE = "tuple"
    POSITIONAL_RECORD = "positional_record"
    DTO_PROPERTIES = "dto_properties"
