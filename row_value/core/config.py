"""Configuration models.

BulkInsertSettings is a Pydantic model so limits are validated when built.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, PositiveInt


class BulkInsertSettings(BaseModel):
    """Batching limits for bulk inserts."""

    max_rows_per_batch: PositiveInt = 1000
    # SQLite's historical SQLITE_MAX_VARIABLE_NUMBER
    max_params_per_batch: PositiveInt = 999
    paramstyle: Literal["named", "pyformat"] = "named"
