"""
Export CLI Utility

Command-line interface for exporting a bar to a portable archive and for
checking finished archives.

Usage Examples:
    # Export bar 1 as YAML to the default backups directory
    bar-archive export --bar-id 1

    # Export bar 1 as JSON to an explicit path
    bar-archive export --bar-id 1 -f json -o ./exports/bar1.zip

    # Use a different data directory and uploads root
    bar-archive --home ./data export --bar-id 1 --uploads ./data/uploads

    # Validate an archive
    bar-archive validate ./exports/bar1.zip
"""

import argparse
import logging
import sys
from typing import List, Optional

from bar_archive.models.enums import ExportFormat
from bar_archive.services.database import init_database
from bar_archive.services.exceptions import ServiceError
from bar_archive.services.media_storage import MediaStorage
from bar_archive.services.recipe_export_service import export_bar, validate_archive
from bar_archive.utils.config import Config, get_config, set_config
from bar_archive.utils.constants import APP_NAME, APP_VERSION, DEFAULT_EXPORT_FORMAT


def export_command(args) -> int:
    """Export one bar to an archive."""
    get_config().ensure_directories()
    init_database()
    storage = MediaStorage(args.uploads) if args.uploads else None

    print(f"Exporting bar {args.bar_id} ({args.format})...")
    try:
        result = export_bar(
            args.bar_id,
            output_path=args.output,
            export_format=ExportFormat.from_string(args.format),
            storage=storage,
        )
    except ServiceError as e:
        print(f"ERROR: {e}")
        return 1

    print(result.get_summary())
    return 0


def validate_command(args) -> int:
    """Validate a finished archive."""
    print(f"Validating {args.archive}...")
    report = validate_archive(args.archive)

    print(f"Entries: {report['entry_count']}")
    if report["valid"]:
        print("Archive is valid")
        return 0

    for error in report["errors"]:
        print(f"  ERROR: {error}")
    return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bar-archive",
        description=f"{APP_NAME} v{APP_VERSION} - portable recipe archive export",
    )
    parser.add_argument(
        "--home",
        help="Data directory holding the database, uploads and backups",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    export_parser = subparsers.add_parser("export", help="Export a bar to a ZIP archive")
    export_parser.add_argument("--bar-id", type=int, required=True, help="Bar to export")
    export_parser.add_argument("-o", "--output", help="Archive path (default: backups dir)")
    export_parser.add_argument(
        "-f",
        "--format",
        default=DEFAULT_EXPORT_FORMAT,
        choices=["yaml", "json", "structured-text"],
        help="Format of entity files (default: yaml)",
    )
    export_parser.add_argument("--uploads", help="Uploads root that image paths are relative to")
    export_parser.set_defaults(func=export_command)

    validate_parser = subparsers.add_parser("validate", help="Validate an exported archive")
    validate_parser.add_argument("archive", help="Path to the ZIP archive")
    validate_parser.set_defaults(func=validate_command)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.home:
        set_config(Config(base_dir=args.home))

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
