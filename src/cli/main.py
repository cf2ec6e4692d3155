"""Circo CLI entry points.

This module exposes import, dedup and archive commands.
It maps argparse commands onto SDK calls and prints JSON results.
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from core.config import CircoConfig
from core.errors import CircoError, NoRecordsExtracted, SnapshotNotFound
from core.types import ArchiveQuery, ImportOptions, RecordFamily
from store.client_sdk import CircoClient

EXIT_FAILURE = 1
EXIT_NOT_FOUND = 4


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="circo", description="Circo school export CLI")
    parser.add_argument("--data-root", help="Override CIRCO_DATA_ROOT for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_import_command(subparsers)
    _add_import_document_command(subparsers)
    _add_dedupe_teachers_command(subparsers)
    _add_archives_command(subparsers)
    _add_archive_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Circo CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        client = _build_client(args.data_root)
        return _dispatch(client, args)
    except SnapshotNotFound as error:
        print(f"error: {error}", file=sys.stderr)
        return EXIT_NOT_FOUND
    except NoRecordsExtracted as error:
        print(f"error: {error}", file=sys.stderr)
        for description in error.skipped:
            print(f"  skipped: {description}", file=sys.stderr)
        return EXIT_FAILURE
    except CircoError as error:
        print(f"error: {error}", file=sys.stderr)
        return EXIT_FAILURE


def _dispatch(client: CircoClient, args: argparse.Namespace) -> int:
    if args.command == "import":
        return _run_import_command(client, args)
    if args.command == "import-document":
        return _run_import_document_command(client, args)
    if args.command == "dedupe-teachers":
        return _run_dedupe_teachers_command(client)
    if args.command == "archives":
        _print_json(client.list_archives())
        return 0
    if args.command == "archive":
        return _run_archive_command(client, args)
    raise CircoError(f"Unsupported command: {args.command}")


def _build_client(data_root: str | None) -> CircoClient:
    """Build SDK client with optional data-root override.

    Args:
        data_root: Optional override path.

    Returns:
        Configured SDK client.
    """
    config = CircoConfig.from_env()
    if data_root:
        config = replace(config, data_root=Path(data_root).expanduser().resolve())
    return CircoClient(config)


def _run_import_command(client: CircoClient, args: argparse.Namespace) -> int:
    """Handle import command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code, non-zero when nothing was persisted.
    """
    options = ImportOptions(
        family=RecordFamily(args.family),
        source_uri=args.source,
        replace=not args.keep_existing,
        batch_size=args.batch_size,
    )
    report = client.import_container(options)
    _print_json(report.to_payload())
    return 0 if report.success else EXIT_FAILURE


def _run_import_document_command(client: CircoClient, args: argparse.Namespace) -> int:
    """Handle import-document command."""
    try:
        report = client.import_document(RecordFamily(args.family), args.file)
    except OSError as error:
        print(f"error: cannot read {args.file}: {error}", file=sys.stderr)
        return EXIT_FAILURE
    _print_json(report.to_payload())
    return 0 if report.success else EXIT_FAILURE


def _run_dedupe_teachers_command(client: CircoClient) -> int:
    report = client.deduplicate_teachers()
    _print_json(report.to_payload())
    return 0 if report.success else EXIT_FAILURE


def _run_archive_command(client: CircoClient, args: argparse.Namespace) -> int:
    """Handle archive command."""
    query = ArchiveQuery(year=args.year, section=args.section, kind=args.kind)
    _print_json(client.resolve_archive(query))
    return 0


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _family_choices() -> list[str]:
    return [family.value for family in RecordFamily]


def _add_import_command(subparsers: Any) -> None:
    """Register import subcommand."""
    parser = subparsers.add_parser("import", help="Import a zip export container")
    parser.add_argument("family", choices=_family_choices(), help="Record family")
    parser.add_argument("source", help="Container zip path or s3://bucket/key")
    parser.add_argument(
        "--keep-existing",
        action="store_true",
        help="Upsert into the table instead of replacing its rows",
    )
    parser.add_argument("--batch-size", type=int, help="Records per write batch")


def _add_import_document_command(subparsers: Any) -> None:
    """Register import-document subcommand."""
    parser = subparsers.add_parser("import-document", help="Import one HTML export file")
    parser.add_argument("family", choices=_family_choices(), help="Record family")
    parser.add_argument("file", help="HTML document path")


def _add_dedupe_teachers_command(subparsers: Any) -> None:
    """Register dedupe-teachers subcommand."""
    subparsers.add_parser("dedupe-teachers", help="Remove duplicate teacher rows")


def _add_archives_command(subparsers: Any) -> None:
    """Register archives subcommand."""
    subparsers.add_parser("archives", help="List archived school years")


def _add_archive_command(subparsers: Any) -> None:
    """Register archive subcommand."""
    parser = subparsers.add_parser("archive", help="Read an archived school year")
    parser.add_argument("year", help="School year, e.g. 2024-2025")
    parser.add_argument("--section", help="Computed section name or 'all'")
    parser.add_argument("--kind", help="'brutes', 'calculees' or a legacy category type")
