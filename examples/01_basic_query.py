"""
Example 01: Basic Typed Queries

This example demonstrates decoding rows from a sqlite3 cursor into scalars,
tuples and dictionaries.
"""

import sqlite3
from typing import Any

import row_value as rv


def main():
    conn = sqlite3.connect(":memory:")
    conn.execute("""
        CREATE TABLE users (
            id INTEGER PRIMARY KEY,
            name TEXT NOT NULL,
            email TEXT,
            active INTEGER DEFAULT 1
        )
    """)
    conn.execute("INSERT INTO users (name, email) VALUES ('Alice', 'alice@example.com')")
    conn.execute("INSERT INTO users (name, email) VALUES ('Bob', NULL)")
    conn.execute("INSERT INTO users (name, email, active) VALUES ('Charlie', 'charlie@example.com', 0)")
    conn.commit()

    print("=== Typed Queries ===\n")

    # Scalar
    count = rv.query_single(conn.execute("SELECT COUNT(*) FROM users"), int)
    print(f"1. Scalar: {count} users\n")

    # Tuples
    print("2. Tuples:")
    for user_id, name, active in rv.query(
        conn.execute("SELECT id, name, active FROM users ORDER BY id"), tuple[int, str, bool]
    ):
        print(f"   - {user_id}: {name} (active={active})")
    print()

    # Nullable scalar
    email = rv.query_single(conn.execute("SELECT email FROM users WHERE name = 'Bob'"), str | None)
    print(f"3. Nullable scalar: Bob's email is {email!r}\n")

    # Dictionaries
    print("4. Dictionaries:")
    for row in rv.query(conn.execute("SELECT * FROM users ORDER BY id"), dict[str, Any]):
        print(f"   {row}")
    print()

    # Bulk insert
    rows = [{"name": f"User {i}", "email": None} for i in range(5)]
    inserted = rv.bulk_insert(
        conn.cursor(),
        "INSERT INTO users (name, email) VALUES (:name, :email) ...",
        rows,
        settings=rv.BulkInsertSettings(max_rows_per_batch=2),
    )
    print(f"5. Bulk insert: {inserted} rows in batches of 2")

    conn.close()


if __name__ == "__main__":
    main()
