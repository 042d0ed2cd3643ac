"""Shared test fixtures."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from typing import Any

import pytest

from row_value.mapping.record import RowRecord
from row_value.mapping.registry import DecoderRegistry


@pytest.fixture
def registry() -> DecoderRegistry:
    """A fresh, empty decoder registry."""
    return DecoderRegistry()


@pytest.fixture
def make_record():
    """Helper to build a RowRecord from (name, value) pairs.

    Usage:
        make_record(("id", 1), ("name", "Alice"))
    """

    def _make(*fields: tuple[str, Any]) -> RowRecord:
        return RowRecord([name for name, _ in fields], [value for _, value in fields])

    return _make


@pytest.fixture
def sqlite_conn() -> Iterator[sqlite3.Connection]:
    """SQLite in-memory connection with a users table."""
    conn = sqlite3.connect(":memory:")
    conn.execute(
        "CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT NOT NULL, "
        "email TEXT, active INTEGER NOT NULL DEFAULT 1, avatar BLOB)"
    )
    conn.execute("INSERT INTO users (name, email) VALUES ('Alice', 'alice@example.com')")
    conn.execute("INSERT INTO users (name, email, active) VALUES ('Bob', NULL, 0)")
    conn.commit()
    yield conn
    conn.close()
