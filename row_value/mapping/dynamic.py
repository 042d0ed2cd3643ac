"""Open property bag returned for multi-field dynamic reads."""

from __future__ import annotations

from typing import Any


class DynamicRow(dict[str, Any]):
    """An ordered column-name to value map that also allows attribute access.

    Column names that are not valid identifiers remain reachable by key.
    Consumers should test for presence rather than rely on fixed members.
    """

    def __getattr__(self, name: str) -> Any:
        try:
            return self[name]
        except KeyError:
            raise AttributeError(name) from None

    def __setattr__(self, name: str, value: Any) -> None:
        self[name] = value

    def __delattr__(self, name: str) -> None:
        try:
            del self[name]
        except KeyError:
            raise AttributeError(name) from None

    def __repr__(self) -> str:
        return f"DynamicRow({dict.__repr__(self)})"
