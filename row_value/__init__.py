"""RowValue - decode database rows into typed Python values."""

from __future__ import annotations

from row_value.core.bulk import bulk_insert, bulk_insert_commands
from row_value.core.config import BulkInsertSettings
from row_value.core.engine import (
    iterate,
    query,
    query_first,
    query_single,
    query_single_or_none,
    read_records,
)
from row_value.core.enums import DbValueStrategy
from row_value.core.exceptions import (
    AmbiguousTupleWidthError,
    BulkInsertError,
    CastFailureError,
    ExecutionError,
    FieldCountMismatchError,
    MappingConfigurationError,
    MappingError,
    MultipleRowsError,
    NoRowsError,
    RowValueError,
    UnexpectedNullError,
    UnknownFieldError,
)
from row_value.core.params import normalize_params, params_from_dto
from row_value.mapping.decoder import ValueDecoder
from row_value.mapping.dynamic import DynamicRow
from row_value.mapping.model import ValueMapper
from row_value.mapping.record import DataRecord, RowRecord, StreamingRecord
from row_value.mapping.registry import (
    DecoderRegistry,
    decode_value,
    default_registry,
    get_decoder,
    get_field_count,
)

__all__ = [
    # Decoding
    "decode_value",
    "get_decoder",
    "get_field_count",
    "DecoderRegistry",
    "default_registry",
    "ValueDecoder",
    "DbValueStrategy",
    # Rows
    "DataRecord",
    "StreamingRecord",
    "RowRecord",
    "DynamicRow",
    # Mapping
    "ValueMapper",
    # Queries
    "read_records",
    "iterate",
    "query",
    "query_first",
    "query_single",
    "query_single_or_none",
    # Bulk insert and parameters
    "bulk_insert",
    "bulk_insert_commands",
    "BulkInsertSettings",
    "normalize_params",
    "params_from_dto",
    # Exceptions
    "RowValueError",
    "MappingError",
    "MappingConfigurationError",
    "FieldCountMismatchError",
    "UnexpectedNullError",
    "CastFailureError",
    "UnknownFieldError",
    "AmbiguousTupleWidthError",
    "ExecutionError",
    "MultipleRowsError",
    "NoRowsError",
    "BulkInsertError",
]
