"""
Example 02: Model Mapping

This example demonstrates mapping query results to dataclasses, Pydantic models,
property DTOs and multi-object tuples split by a NULL column.
"""

import sqlite3
from dataclasses import dataclass

from pydantic import BaseModel

import row_value as rv


@dataclass
class UserDataclass:
    """User model using dataclass (decoded through its constructor)"""
    id: int
    name: str
    email: str | None
    active: bool


class UserPydantic(BaseModel):
    """User model using Pydantic (decoded through its constructor)"""
    id: int
    name: str
    email: str | None = None


class UserDto:
    """Mutable DTO (decoded by setting properties)"""
    user_id: int | None = None
    user_name: str | None = None


@dataclass
class Order:
    id: int
    amount: float


def main():
    conn = sqlite3.connect(":memory:")
    conn.executescript("""
        CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT NOT NULL, email TEXT, active INTEGER DEFAULT 1);
        CREATE TABLE orders (id INTEGER PRIMARY KEY, user_id INTEGER NOT NULL, amount REAL NOT NULL);
        INSERT INTO users (name, email) VALUES ('Alice', 'alice@example.com');
        INSERT INTO users (name, email) VALUES ('Bob', NULL);
        INSERT INTO orders (user_id, amount) VALUES (1, 9.5);
        INSERT INTO orders (user_id, amount) VALUES (1, 20);
    """)

    print("=== Model Mapping ===\n")

    print("1. Dataclass Mapping:")
    user = rv.query_first(conn.execute("SELECT * FROM users WHERE id = 1"), UserDataclass)
    print(f"   Type: {type(user).__name__}")
    print(f"   Data: {user}\n")

    print("2. Pydantic Model Mapping:")
    for u in rv.query(conn.execute("SELECT id, name, email FROM users"), UserPydantic):
        print(f"   - {u.name}: {u.email}")
    print()

    print("3. DTO Mapping (column names match properties ignoring case and underscores):")
    dto = rv.query_single(conn.execute("SELECT id AS UserId, name AS USER_NAME FROM users WHERE id = 2"), UserDto)
    print(f"   user_id={dto.user_id} user_name={dto.user_name}\n")

    print("4. Multi-object rows split by a NULL column:")
    rows = rv.query(
        conn.execute("""
            SELECT u.id AS user_id, u.name AS user_name, NULL, o.id, o.amount
            FROM users u JOIN orders o ON o.user_id = u.id
            ORDER BY o.id
        """),
        tuple[UserDto, Order],
    )
    for owner, order in rows:
        print(f"   - {owner.user_name}: order {order.id} for {order.amount}")

    conn.close()


if __name__ == "__main__":
    main()
