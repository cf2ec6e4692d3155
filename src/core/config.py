"""Runtime configuration model for Circo.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import ARCHIVES_DIR_NAME, DEFAULT_DATA_ROOT, TABLES_DIR_NAME
from core.errors import CircoConfigError


@dataclass(frozen=True)
class CircoConfig:
    """Validated runtime configuration.

    Attributes:
        data_root: Local root directory for table files and archives.
        batch_size: Optional batch size overriding per-family defaults.
        s3_region: Optional default AWS region for S3 container sources.
        s3_profile: Optional AWS profile for boto3 session initialization.
    """

    data_root: Path
    batch_size: int | None
    s3_region: str | None
    s3_profile: str | None

    @classmethod
    def from_env(cls) -> "CircoConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            CircoConfigError: If environment values are invalid.
        """
        data_root_value = os.getenv("CIRCO_DATA_ROOT", str(DEFAULT_DATA_ROOT))
        batch_size_value = os.getenv("CIRCO_BATCH_SIZE")
        return cls(
            data_root=Path(data_root_value).expanduser().resolve(),
            batch_size=_parse_batch_size(batch_size_value),
            s3_region=os.getenv("CIRCO_S3_REGION"),
            s3_profile=os.getenv("CIRCO_S3_PROFILE"),
        )

    @property
    def tables_dir(self) -> Path:
        """Directory holding one JSON file per table."""
        return self.data_root / TABLES_DIR_NAME

    @property
    def archives_dir(self) -> Path:
        """Directory holding one snapshot file per school year."""
        return self.data_root / ARCHIVES_DIR_NAME


def _parse_batch_size(raw_value: str | None) -> int | None:
    """Parse the batch size environment value.

    Args:
        raw_value: Raw string from environment, if set.

    Returns:
        Parsed positive integer or ``None`` when unset.

    Raises:
        CircoConfigError: If value is not a positive integer.
    """
    if raw_value is None or not raw_value.strip():
        return None
    try:
        batch_size = int(raw_value)
    except ValueError as error:
        raise CircoConfigError(
            "Invalid CIRCO_BATCH_SIZE value: "
            f"expected integer, got '{raw_value}'. "
            "Set CIRCO_BATCH_SIZE to a positive number."
        ) from error
    if batch_size <= 0:
        raise CircoConfigError(
            f"Invalid CIRCO_BATCH_SIZE value: {batch_size} is not positive. "
            "Set CIRCO_BATCH_SIZE to a positive number."
        )
    return batch_size
