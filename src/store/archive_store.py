"""School-year archive snapshot store.

Snapshots are read-only JSON documents, one file per school year,
under the configured archives directory.
"""

from __future__ import annotations

import json
from pathlib import Path

from core.config import CircoConfig
from core.constants import ARCHIVE_FILE_SUFFIX
from core.errors import CircoArchiveError, SnapshotNotFound
from core.logging_config import get_logger
from core.school_year import parse_school_year
from core.types import ArchiveQuery
from store.archive_resolver import ArchiveSnapshot, resolve_archive, snapshot_from_payload

_LOGGER = get_logger(__name__)


class ArchiveStore:
    """Reader for per-year archive snapshots."""

    def __init__(self, config: CircoConfig) -> None:
        """Initialize archive store from config.

        Args:
            config: Runtime configuration.
        """
        self._archives_dir = config.archives_dir

    def load(self, year: str) -> ArchiveSnapshot:
        """Load and classify the snapshot of one school year.

        Args:
            year: School-year key ``YYYY-YYYY``.

        Returns:
            Typed snapshot.

        Raises:
            CircoArchiveError: If the key is malformed or the file is invalid.
            SnapshotNotFound: If no snapshot exists for ``year``.
        """
        parse_school_year(year)
        snapshot_path = self._snapshot_path(year)
        if not snapshot_path.exists():
            raise SnapshotNotFound(
                f"Archive snapshot not found for school year {year} at {snapshot_path}."
            )
        try:
            payload = json.loads(snapshot_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as error:
            raise CircoArchiveError(
                f"Failed to read archive snapshot {snapshot_path}: {error}"
            ) from error
        return snapshot_from_payload(year, payload)

    def resolve(self, query: ArchiveQuery) -> object:
        """Load the snapshot of ``query.year`` and resolve the request."""
        snapshot = self.load(query.year)
        result = resolve_archive(snapshot, query)
        _LOGGER.info(
            "archive_resolved",
            year=query.year,
            section=query.section,
            kind=query.kind,
            schema=type(snapshot).__name__,
        )
        return result

    def list_years(self) -> list[str]:
        """Return available snapshot years, most recent first."""
        if not self._archives_dir.exists():
            return []
        years: list[str] = []
        for snapshot_path in self._archives_dir.glob(f"*{ARCHIVE_FILE_SUFFIX}"):
            try:
                parse_school_year(snapshot_path.stem)
            except CircoArchiveError:
                continue
            years.append(snapshot_path.stem)
        return sorted(years, reverse=True)

    def _snapshot_path(self, year: str) -> Path:
        return self._archives_dir / f"{year}{ARCHIVE_FILE_SUFFIX}"
