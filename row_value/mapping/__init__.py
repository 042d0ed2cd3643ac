"""Mapping layer - decode row fields into typed values."""

from __future__ import annotations

from row_value.mapping.classify import TypeDescriptor, classify, describe
from row_value.mapping.decoder import ValueDecoder
from row_value.mapping.dynamic import DynamicRow
from row_value.mapping.model import ValueMapper
from row_value.mapping.names import normalize_field_name
from row_value.mapping.protocol import Mapper
from row_value.mapping.record import DataRecord, RowRecord, StreamingRecord
from row_value.mapping.registry import (
    DecoderRegistry,
    decode_value,
    default_registry,
    get_decoder,
    get_field_count,
)

__all__ = [
    "ValueMapper",
    "Mapper",
    "ValueDecoder",
    "DecoderRegistry",
    "default_registry",
    "decode_value",
    "get_decoder",
    "get_field_count",
    "TypeDescriptor",
    "classify",
    "describe",
    "normalize_field_name",
    "DataRecord",
    "StreamingRecord",
    "RowRecord",
    "DynamicRow",
]
