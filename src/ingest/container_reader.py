"""Export container readers for ingestion.

This module loads zip containers from local paths or S3 objects and
yields their markup documents lazily as typed extracted entries.
"""

from __future__ import annotations

import io
import zipfile
import zlib
from pathlib import Path
from typing import Any, Iterator

from core.config import CircoConfig
from core.constants import SUPPORTED_DOCUMENT_EXTENSIONS
from core.errors import CircoDependencyError, ContainerError
from core.s3_uri import parse_s3_uri
from core.types import ExtractedEntry, RawDocument

_ENTRY_READ_ERRORS = (
    zipfile.BadZipFile,
    zlib.error,
    EOFError,
    NotImplementedError,
    RuntimeError,
    OSError,
)


def read_container_bytes(source_uri: str, config: CircoConfig) -> bytes:
    """Load container bytes from a local file or S3.

    Args:
        source_uri: Local file path or ``s3://bucket/key`` URI.
        config: Runtime configuration for S3 session defaults.

    Returns:
        Raw container bytes.

    Raises:
        ContainerError: If the container cannot be read.
    """
    if source_uri.startswith("s3://"):
        return _read_s3_object(source_uri, config)
    return _read_local_file(Path(source_uri).expanduser())


def iter_documents(container_bytes: bytes) -> Iterator[ExtractedEntry]:
    """Open a zip container and return a lazy entry sequence.

    The container is opened eagerly so a corrupt archive fails before any
    entry is yielded. Entries are read one at a time; a failing entry is
    yielded with its error and iteration continues.

    Args:
        container_bytes: Raw zip bytes.

    Returns:
        Non-restartable iterator of extracted entries, in archive order.

    Raises:
        ContainerError: If the bytes are not a readable zip container.
    """
    try:
        archive = zipfile.ZipFile(io.BytesIO(container_bytes))
    except (zipfile.BadZipFile, zipfile.LargeZipFile, ValueError, OSError) as error:
        raise ContainerError(
            f"Failed to open export container: {error}. "
            "Provide a valid zip archive of HTML exports."
        ) from error
    return _iter_entries(archive)


def is_markup_name(name: str) -> bool:
    """Return whether an entry name has a markup document extension."""
    return name.lower().endswith(SUPPORTED_DOCUMENT_EXTENSIONS)


def _iter_entries(archive: zipfile.ZipFile) -> Iterator[ExtractedEntry]:
    """Yield markup entries of an opened archive."""
    with archive:
        for info in archive.infolist():
            if info.is_dir() or not is_markup_name(info.filename):
                continue
            yield _read_entry(archive, info)


def _read_entry(archive: zipfile.ZipFile, info: zipfile.ZipInfo) -> ExtractedEntry:
    """Read one archive entry into an extracted entry.

    Args:
        archive: Opened archive.
        info: Entry metadata.

    Returns:
        Entry holding either the document or the read error.
    """
    try:
        data = archive.read(info)
    except _ENTRY_READ_ERRORS as error:
        return ExtractedEntry(name=info.filename, error=f"{type(error).__name__}: {error}")
    return ExtractedEntry(
        name=info.filename,
        document=RawDocument(name=info.filename, data=data),
    )


def _read_local_file(source_path: Path) -> bytes:
    """Read container bytes from the local file system.

    Args:
        source_path: Container file path.

    Returns:
        Raw container bytes.

    Raises:
        ContainerError: If path is missing or unreadable.
    """
    if not source_path.is_file():
        raise ContainerError(
            f"Failed to read container at {source_path}: file does not exist. "
            "Provide an existing zip export."
        )
    try:
        return source_path.read_bytes()
    except OSError as error:
        raise ContainerError(
            f"Failed to read container at {source_path}: {error}. "
            "Check file permissions and retry the import."
        ) from error


def _read_s3_object(source_uri: str, config: CircoConfig) -> bytes:
    """Download container bytes from S3.

    Args:
        source_uri: S3 object URI.
        config: Runtime config for region/profile.

    Returns:
        Raw container bytes.

    Raises:
        ContainerError: If the object cannot be downloaded.
    """
    location = parse_s3_uri(source_uri)
    s3_client = _create_s3_client(config)
    try:
        response = s3_client.get_object(Bucket=location.bucket, Key=location.key)
        return response["Body"].read()
    except Exception as error:
        raise ContainerError(
            f"Failed to download container {source_uri}: {error}. "
            "Check the object key and AWS credentials."
        ) from error


def _create_s3_client(config: CircoConfig) -> Any:
    """Create a boto3 S3 client.

    Args:
        config: Runtime config containing optional profile/region.

    Returns:
        Boto3 S3 client.

    Raises:
        CircoDependencyError: If boto3 is missing.
    """
    try:
        import boto3
    except ImportError as error:
        raise CircoDependencyError(
            "S3 support requires boto3, but it is not installed. "
            "Install boto3 to import containers from s3:// sources."
        ) from error
    session_kwargs: dict[str, str] = {}
    if config.s3_profile:
        session_kwargs["profile_name"] = config.s3_profile
    if config.s3_region:
        session_kwargs["region_name"] = config.s3_region
    session = boto3.session.Session(**session_kwargs)
    return session.client("s3")
