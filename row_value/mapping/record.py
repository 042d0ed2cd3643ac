"""Row source protocols and the DB-API row adapter.

Decoders read rows positionally through DataRecord. RowRecord adapts a
DB-API 2.0 cursor row (tuple rows, sqlite3.Row, or dict rows) to it.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import IO, Any, Protocol, runtime_checkable


@runtime_checkable
class DataRecord(Protocol):
    """Positional, name-aware access to the fields of one row."""

    @property
    def field_count(self) -> int:
        """Number of fields in the row."""
        ...

    def get_name(self, index: int) -> str:
        """Column name of the field at index."""
        ...

    def is_null(self, index: int) -> bool:
        """True if the field at index is SQL NULL."""
        ...

    def get_value(self, index: int) -> Any:
        """Raw driver value of the field at index (None for NULL)."""
        ...

    def get_bytes(self, index: int, buffer: bytearray | memoryview | None = None) -> int:
        """Binary payload access.

        With no buffer, returns the payload length. Otherwise copies up to
        len(buffer) bytes into it and returns the number of bytes copied.
        """
        ...


@runtime_checkable
class StreamingRecord(DataRecord, Protocol):
    """A row source that can hand out a live stream over a binary field."""

    def open_stream(self, index: int) -> IO[bytes]:
        """Open a readable binary stream over the field at index."""
        ...


class RowRecord:
    """DataRecord over an in-memory row.

    Args:
        names: Column names in select order (duplicates allowed).
        values: Field values in the same order.
    """

    __slots__ = ("_names", "_values")

    def __init__(self, names: Sequence[str], values: Sequence[Any]) -> None:
        if len(names) != len(values):
            raise ValueError(f"Row has {len(values)} values for {len(names)} column names")
        self._names = tuple(names)
        self._values = tuple(values)

    @classmethod
    def from_cursor(cls, cursor: Any, row: Any) -> RowRecord:
        """Build a record from a row fetched off cursor.

        Handles both tuple-like rows and dict-like rows from different drivers.
        """
        names = [desc[0] for desc in cursor.description]
        if isinstance(row, Mapping):
            return cls(names, [row[name] for name in names])
        return cls(names, list(row))

    @property
    def field_count(self) -> int:
        return len(self._values)

    def get_name(self, index: int) -> str:
        return self._names[index]

    def is_null(self, index: int) -> bool:
        return self._values[index] is None

    def get_value(self, index: int) -> Any:
        return self._values[index]

    def get_bytes(self, index: int, buffer: bytearray | memoryview | None = None) -> int:
        value = self._values[index]
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise TypeError(f"Field '{self._names[index]}' is not binary: {type(value).__name__}")
        payload = memoryview(value).cast("B")
        if buffer is None:
            return payload.nbytes
        copied = min(len(buffer), payload.nbytes)
        buffer[:copied] = payload[:copied]
        return copied

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        fields = ", ".join(f"{n}={v!r}" for n, v in zip(self._names, self._values))
        return f"RowRecord({fields})"
