"""Circo exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations

from typing import Sequence


class CircoError(Exception):
    """Base exception for all Circo failures."""


class CircoConfigError(CircoError):
    """Raised for invalid runtime configuration."""


class CircoIngestError(CircoError):
    """Raised for container reading and document import failures."""


class ContainerError(CircoIngestError):
    """Raised when an export container cannot be opened or read."""


class NoRecordsExtracted(CircoIngestError):
    """Raised when an import yields zero valid records.

    Attributes:
        count: Number of extracted records, always zero.
        skipped: Per-document skip descriptions collected during parsing.
    """

    def __init__(self, message: str, skipped: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.count = 0
        self.skipped = tuple(skipped)


class CircoStoreError(CircoError):
    """Raised for table store persistence failures."""


class TableResetError(CircoStoreError):
    """Raised when the delete-all step of a replace import fails."""


class BatchWriteError(CircoStoreError):
    """Raised by table stores for a rejected bulk write."""


class CircoArchiveError(CircoError):
    """Raised for invalid archive requests or unreadable snapshots."""


class SnapshotNotFound(CircoArchiveError):
    """Raised when no archive snapshot exists for a school year."""


class CircoDependencyError(CircoError):
    """Raised when an optional runtime dependency is missing."""
