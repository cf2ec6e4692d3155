"""Unit tests for core config parsing."""

from __future__ import annotations

import pytest

from core.config import CircoConfig
from core.errors import CircoConfigError


def test_from_env_reads_data_root(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should resolve data root from environment."""
    monkeypatch.setenv("CIRCO_DATA_ROOT", "./.tmp-circo")

    config = CircoConfig.from_env()

    assert config.data_root.name == ".tmp-circo"


def test_from_env_derives_table_and_archive_dirs(monkeypatch: pytest.MonkeyPatch) -> None:
    """Tables and archives should live under the data root."""
    monkeypatch.setenv("CIRCO_DATA_ROOT", "./.tmp-circo")

    config = CircoConfig.from_env()

    assert config.tables_dir.parent == config.data_root
    assert config.archives_dir == config.data_root / "archives"


def test_from_env_reads_batch_size(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should parse an explicit batch size override."""
    monkeypatch.setenv("CIRCO_BATCH_SIZE", "25")

    config = CircoConfig.from_env()

    assert config.batch_size == 25


def test_from_env_leaves_batch_size_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    """Unset batch size should defer to per-family defaults."""
    monkeypatch.delenv("CIRCO_BATCH_SIZE", raising=False)

    config = CircoConfig.from_env()

    assert config.batch_size is None


@pytest.mark.parametrize("raw_value", ["not-a-number", "0", "-3"])
def test_from_env_raises_for_invalid_batch_size(
    monkeypatch: pytest.MonkeyPatch,
    raw_value: str,
) -> None:
    """Config should fail for non-positive or non-numeric batch sizes."""
    monkeypatch.setenv("CIRCO_BATCH_SIZE", raw_value)

    with pytest.raises(CircoConfigError):
        CircoConfig.from_env()
