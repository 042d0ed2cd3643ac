"""Unit tests for the cursor query helpers."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from typing import Any

import pytest

from row_value.core.engine import (
    iterate,
    query,
    query_first,
    query_single,
    query_single_or_none,
    read_records,
)
from row_value.core.exceptions import MultipleRowsError, NoRowsError, UnexpectedNullError
from row_value.mapping.dynamic import DynamicRow
from row_value.mapping.registry import DecoderRegistry


@dataclass
class User:
    id: int
    name: str
    email: str | None
    active: bool


USERS_SQL = "SELECT id, name, email, active FROM users ORDER BY id"


class TestReadRecords:
    def test_yields_records(self, sqlite_conn: sqlite3.Connection) -> None:
        records = list(read_records(sqlite_conn.execute("SELECT id, name FROM users ORDER BY id")))
        assert len(records) == 2
        assert records[1].get_name(1) == "name"
        assert records[1].get_value(1) == "Bob"

    def test_no_result_set(self, sqlite_conn: sqlite3.Connection) -> None:
        cursor = sqlite_conn.execute("UPDATE users SET active = 1")
        assert list(read_records(cursor)) == []

    def test_dict_rows(self, sqlite_conn: sqlite3.Connection) -> None:
        sqlite_conn.row_factory = sqlite3.Row
        [record] = read_records(sqlite_conn.execute("SELECT name FROM users WHERE id = 1"))
        assert record.get_value(0) == "Alice"


class TestQuery:
    def test_query_dataclass(self, sqlite_conn: sqlite3.Connection) -> None:
        users = query(sqlite_conn.execute(USERS_SQL), User)
        assert users == [
            User(1, "Alice", "alice@example.com", True),
            User(2, "Bob", None, False),
        ]

    def test_query_scalar(self, sqlite_conn: sqlite3.Connection) -> None:
        assert query(sqlite_conn.execute("SELECT name FROM users ORDER BY id"), str) == ["Alice", "Bob"]

    def test_query_tuple(self, sqlite_conn: sqlite3.Connection) -> None:
        rows = query(sqlite_conn.execute("SELECT id, email FROM users ORDER BY id"), tuple[int, str | None])
        assert rows == [(1, "alice@example.com"), (2, None)]

    def test_query_dynamic(self, sqlite_conn: sqlite3.Connection) -> None:
        [row, _] = query(sqlite_conn.execute("SELECT id, name FROM users ORDER BY id"), Any)
        assert isinstance(row, DynamicRow)
        assert row.name == "Alice"

    def test_query_dictionary(self, sqlite_conn: sqlite3.Connection) -> None:
        rows = query(sqlite_conn.execute("SELECT name, email FROM users ORDER BY id"), dict[str, Any])
        assert rows[1] == {"name": "Bob", "email": None}

    def test_query_empty(self, sqlite_conn: sqlite3.Connection) -> None:
        assert query(sqlite_conn.execute("SELECT id FROM users WHERE id < 0"), int) == []

    def test_null_into_non_nullable(self, sqlite_conn: sqlite3.Connection) -> None:
        with pytest.raises(UnexpectedNullError):
            query(sqlite_conn.execute("SELECT email FROM users ORDER BY id"), str)

    def test_uses_given_registry(self, sqlite_conn: sqlite3.Connection, registry: DecoderRegistry) -> None:
        query(sqlite_conn.execute(USERS_SQL), User, registry=registry)
        assert User in registry

    def test_iterate_is_lazy(self, sqlite_conn: sqlite3.Connection) -> None:
        cursor = sqlite_conn.execute(USERS_SQL)
        users = iterate(cursor, User)
        assert next(users).name == "Alice"
        assert cursor.fetchone() is not None
        assert list(users) == []


class TestQuerySingle:
    def test_query_first(self, sqlite_conn: sqlite3.Connection) -> None:
        assert query_first(sqlite_conn.execute(USERS_SQL), User).name == "Alice"

    def test_query_first_no_rows(self, sqlite_conn: sqlite3.Connection) -> None:
        assert query_first(sqlite_conn.execute("SELECT id FROM users WHERE id < 0"), int) is None

    def test_single(self, sqlite_conn: sqlite3.Connection) -> None:
        cursor = sqlite_conn.execute("SELECT COUNT(*) FROM users")
        assert query_single(cursor, int) == 2

    def test_single_no_rows(self, sqlite_conn: sqlite3.Connection) -> None:
        with pytest.raises(NoRowsError):
            query_single(sqlite_conn.execute("SELECT id FROM users WHERE id < 0"), int)

    def test_single_multiple_rows(self, sqlite_conn: sqlite3.Connection) -> None:
        with pytest.raises(MultipleRowsError, match="User"):
            query_single(sqlite_conn.execute(USERS_SQL), User)

    def test_single_or_none(self, sqlite_conn: sqlite3.Connection) -> None:
        cursor = sqlite_conn.execute(f"{USERS_SQL} LIMIT 1")
        assert query_single_or_none(cursor, User) == User(1, "Alice", "alice@example.com", True)

    def test_single_or_none_no_rows(self, sqlite_conn: sqlite3.Connection) -> None:
        assert query_single_or_none(sqlite_conn.execute("SELECT id FROM users WHERE id < 0"), int) is None

    def test_single_or_none_multiple_rows(self, sqlite_conn: sqlite3.Connection) -> None:
        with pytest.raises(MultipleRowsError):
            query_single_or_none(sqlite_conn.execute("SELECT id FROM users"), int)
