"""RowValue exception hierarchy.

All exceptions are RowValue-specific. Conversion errors raised while casting
driver values are chained, never exposed bare to callers.
"""

from __future__ import annotations


class RowValueError(Exception):
    """Base exception for all RowValue errors."""


# --- Mapping ---


class MappingError(RowValueError):
    """Base for errors raised while decoding a row into a value."""


class MappingConfigurationError(MappingError):
    """Raised when a target type cannot be mapped at all."""

    def __init__(self, type_name: str, detail: str) -> None:
        self.type_name = type_name
        super().__init__(f"Cannot map type {type_name}: {detail}")


class FieldCountMismatchError(MappingError):
    """Raised when a fixed-width type is read from a window of another width."""

    def __init__(self, type_name: str, expected: int, actual: int) -> None:
        self.type_name = type_name
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Type must be read from {expected} fields but is being read "
            f"from {actual} fields: {type_name}"
        )


class UnexpectedNullError(MappingError):
    """Raised when a non-nullable scalar or enum receives a null field."""

    def __init__(self, type_name: str, field_name: str, index: int) -> None:
        self.type_name = type_name
        self.field_name = field_name
        self.index = index
        super().__init__(
            f"Failed to cast null to {type_name} (field '{field_name}' at index {index})"
        )


class CastFailureError(MappingError):
    """Raised when a field value is incompatible with the target type."""

    def __init__(
        self,
        source_type: str,
        type_name: str,
        field_name: str | None = None,
        index: int | None = None,
    ) -> None:
        self.source_type = source_type
        self.type_name = type_name
        self.field_name = field_name
        self.index = index
        location = f" (field '{field_name}' at index {index})" if field_name is not None else ""
        super().__init__(f"Failed to cast {source_type} to {type_name}{location}")


class UnknownFieldError(MappingError):
    """Raised when a field has no matching property or constructor parameter."""

    def __init__(self, field_name: str, type_name: str) -> None:
        self.field_name = field_name
        self.type_name = type_name
        super().__init__(f"Type does not have a property for '{field_name}': {type_name}")


class AmbiguousTupleWidthError(MappingError):
    """Raised when a variable-width tuple item cannot be sized."""

    def __init__(self, item_index: int, type_name: str) -> None:
        self.item_index = item_index
        self.type_name = type_name
        super().__init__(
            f"Tuple item {item_index} must be terminated by a field named 'NULL': {type_name}"
        )


# --- Execution ---


class ExecutionError(RowValueError):
    """Base for errors raised while reading or writing through a cursor."""


class MultipleRowsError(ExecutionError):
    """Raised when a single-row query encounters more than one row."""

    def __init__(self, type_name: str) -> None:
        self.type_name = type_name
        super().__init__(f"Query for {type_name} returned more than one row (expected 0 or 1)")


class NoRowsError(ExecutionError):
    """Raised when query_single encounters no rows."""

    def __init__(self, type_name: str) -> None:
        self.type_name = type_name
        super().__init__(f"Query for {type_name} returned no rows (expected exactly 1)")


class BulkInsertError(ExecutionError):
    """Raised when a bulk insert statement or its rows cannot be expanded."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"Bulk insert failed: {detail}")
