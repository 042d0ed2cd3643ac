"""Batched bulk inserts.

A statement such as::

    INSERT INTO widgets (name, size) VALUES (:name, :size) ...

is expanded into one multi-row INSERT per batch, with the row tuple repeated
and its parameters suffixed by the row number within the batch
(``:name_0, :size_0``, ``:name_1, :size_1``, ...). Batches are bounded by row
count and by total parameter count.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator, Mapping
from itertools import islice
from typing import Any

from row_value.core.config import BulkInsertSettings
from row_value.core.exceptions import BulkInsertError
from row_value.core.params import normalize_params, param_names, params_from_dto, substitute_params

logger = logging.getLogger(__name__)

# The row tuple ends at the last ')' before the '...' marker
_VALUES_PATTERN = re.compile(r"\bVALUES\s*(\(.*?\))\s*\.\.\.", re.IGNORECASE | re.DOTALL)


def bulk_insert_commands(
    sql: str,
    rows: Iterable[Any],
    common_params: Mapping[str, Any] | None = None,
    settings: BulkInsertSettings | None = None,
) -> Iterator[tuple[str, dict[str, Any]]]:
    """Expand a bulk insert into batched (sql, params) commands.

    Args:
        sql: Statement with exactly one ``VALUES (...) ...`` clause.
        rows: Row parameters, as mappings or anything params_from_dto accepts.
        common_params: Parameters shared by every batch. Parameters of the row
            tuple that are named here are not suffixed.
        settings: Batch limits. Defaults to BulkInsertSettings().

    Raises:
        BulkInsertError: If the statement is malformed or a row lacks a
            parameter used by the row tuple.
    """
    settings = settings or BulkInsertSettings()
    common = dict(common_params or {})

    matches = list(_VALUES_PATTERN.finditer(sql))
    if len(matches) != 1:
        raise BulkInsertError(
            f"SQL must contain exactly one 'VALUES (...) ...' clause, found {len(matches)}"
        )
    match = matches[0]
    prefix, template, suffix = sql[: match.start(1)], match.group(1), sql[match.end() :]

    row_names = [name for name in param_names(template) if name not in common]
    available = settings.max_params_per_batch - len(common)
    if row_names and available < len(row_names):
        raise BulkInsertError(
            f"{len(common)} common and {len(row_names)} row parameters exceed "
            f"max_params_per_batch={settings.max_params_per_batch}"
        )
    batch_size = min(
        settings.max_rows_per_batch,
        available // len(row_names) if row_names else settings.max_rows_per_batch,
    )
    batch_size = max(batch_size, 1)

    row_iter = iter(rows)
    batch_number = 0
    while batch := list(islice(row_iter, batch_size)):
        tuples: list[str] = []
        params = dict(common)
        for n, row in enumerate(batch):
            values = _row_params(row)
            for name in row_names:
                try:
                    params[f"{name}_{n}"] = values[name]
                except KeyError:
                    raise BulkInsertError(
                        f"row {batch_number * batch_size + n} is missing parameter '{name}'"
                    ) from None
            tuples.append(
                substitute_params(template, lambda m, n=n: _suffix(m, n, row_names))
            )
        logger.debug("Bulk insert batch %d: %d rows", batch_number, len(batch))
        batch_number += 1
        yield prefix + ", ".join(tuples) + suffix, params


def bulk_insert(
    cursor: Any,
    sql: str,
    rows: Iterable[Any],
    common_params: Mapping[str, Any] | None = None,
    settings: BulkInsertSettings | None = None,
) -> int:
    """Execute a batched bulk insert on cursor. Returns affected row count."""
    settings = settings or BulkInsertSettings()
    total = 0
    batches = 0
    for batch_sql, params in bulk_insert_commands(sql, rows, common_params, settings):
        cursor.execute(normalize_params(batch_sql, settings.paramstyle), params)
        total += max(int(cursor.rowcount), 0)
        batches += 1
    logger.debug("Bulk insert executed %d batches, %d rows affected", batches, total)
    return total


def _row_params(row: Any) -> Mapping[str, Any]:
    if isinstance(row, Mapping):
        return row
    try:
        return params_from_dto(row)
    except TypeError as e:
        raise BulkInsertError(str(e)) from e


def _suffix(match: re.Match[str], n: int, row_names: list[str]) -> str:
    name = match.group(1)
    return f":{name}_{n}" if name in row_names else match.group()
