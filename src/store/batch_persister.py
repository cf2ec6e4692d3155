"""Ordered batch persistence of canonical payloads.

A failed batch never aborts later batches; its error is collected and
the run continues. The optional table reset runs first and is fatal.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from core.errors import CircoConfigError, TableResetError
from core.logging_config import get_logger
from core.types import ImportBatchResult
from store.table_store import TableStore

_LOGGER = get_logger(__name__)


def persist_records(
    store: TableStore,
    table: str,
    payloads: Sequence[Mapping[str, Any]],
    conflict_key: str,
    batch_size: int,
    replace: bool = False,
) -> ImportBatchResult:
    """Persist payloads in ordered fixed-size batches.

    Args:
        store: Table store collaborator.
        table: Target table name.
        payloads: Canonical payloads in final order.
        conflict_key: Field identifying a row for upserts.
        batch_size: Maximum records per batch.
        replace: Delete every existing row before inserting.

    Returns:
        Aggregated batch result.

    Raises:
        CircoConfigError: If ``batch_size`` is not positive.
        TableResetError: If the delete-all step fails.
    """
    if batch_size <= 0:
        raise CircoConfigError(f"Batch size must be positive, got {batch_size}.")
    if replace:
        _reset_table(store, table)
    succeeded = 0
    failed = 0
    errors: list[str] = []
    sizes: list[int] = []
    for batch_index, start in enumerate(range(0, len(payloads), batch_size)):
        batch = list(payloads[start : start + batch_size])
        sizes.append(len(batch))
        error = _write_batch(store, table, batch, conflict_key, batch_index)
        if error is None:
            succeeded += len(batch)
            continue
        failed += len(batch)
        errors.append(f"batch {batch_index}: {error}")
    return ImportBatchResult(
        attempted=len(payloads),
        succeeded=succeeded,
        failed=failed,
        per_batch_errors=tuple(errors),
        batch_sizes=tuple(sizes),
    )


def _reset_table(store: TableStore, table: str) -> None:
    """Delete every row of ``table`` or raise ``TableResetError``."""
    try:
        outcome = store.delete_all(table)
    except Exception as error:
        raise TableResetError(f"Failed to reset table {table}: {error}") from error
    if outcome.error:
        raise TableResetError(f"Failed to reset table {table}: {outcome.error}")
    _LOGGER.info("table_reset", table=table)


def _write_batch(
    store: TableStore,
    table: str,
    batch: list[Mapping[str, Any]],
    conflict_key: str,
    batch_index: int,
) -> str | None:
    """Write one batch and return its error message, if any.

    Any exception raised by the store is recorded as the batch error so
    later batches still run.
    """
    try:
        outcome = store.upsert_batch(table, batch, conflict_key)
    except Exception as error:
        message = f"{type(error).__name__}: {error}"
        _LOGGER.warning(
            "batch_write_failed",
            table=table,
            batch_index=batch_index,
            batch_size=len(batch),
            error=message,
            exc_info=True,
        )
        return message
    if outcome.error:
        _LOGGER.warning(
            "batch_write_failed",
            table=table,
            batch_index=batch_index,
            batch_size=len(batch),
            error=outcome.error,
        )
    return outcome.error
