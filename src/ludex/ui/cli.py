from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING
from uuid import UUID

from dotenv import load_dotenv

from ludex.app import create_library, run_bulk_import
from ludex.config import configure_logging
from ludex.domain.importing import ImportDefaults, ImportMode, ImportRequest

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from ludex.domain.importing import ImportJobResult

log = logging.getLogger(__name__)


def _add_import_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--library-id",
        type=str,
        required=True,
        help="Existing library id to import into",
    )
    parser.add_argument(
        "--no-enrich",
        action="store_true",
        help="Do not fetch missing details from BoardGameGeek",
    )
    parser.add_argument(
        "--location-room",
        type=str,
        help="Room applied to items that do not specify one",
    )
    parser.add_argument(
        "--location-shelf",
        type=str,
        help="Shelf applied to items that do not specify one",
    )
    parser.add_argument(
        "--coming-soon",
        action="store_true",
        default=None,
        help="Mark items as coming soon unless they say otherwise",
    )
    parser.add_argument(
        "--sleeved",
        action="store_true",
        default=None,
        help="Mark items as sleeved unless they say otherwise",
    )


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Import games into a ludex library")
    subparsers = parser.add_subparsers(dest="command", required=True)

    library = subparsers.add_parser("library", help="Library management commands")
    library_sub = library.add_subparsers(dest="library_command", required=True)
    library_create = library_sub.add_parser("create", help="Create a library")
    library_create.add_argument(
        "--name",
        type=str,
        required=True,
        help="Display name for the library",
    )
    library_create.add_argument(
        "--owner-id",
        type=str,
        help="Optional owner identifier to store on the library",
    )

    importer = subparsers.add_parser("import", help="Bulk import commands")
    import_sub = importer.add_subparsers(dest="import_command", required=True)

    csv_import = import_sub.add_parser("csv", help="Import a CSV export")
    csv_import.add_argument("path", type=Path, help="CSV file to import")
    _add_import_options(csv_import)

    links_import = import_sub.add_parser("links", help="Import BoardGameGeek links or ids")
    links_import.add_argument("references", nargs="+", help="BGG game URLs or numeric ids")
    _add_import_options(links_import)

    collection_import = import_sub.add_parser(
        "collection", help="Import the owned games of a BoardGameGeek user"
    )
    collection_import.add_argument("username", type=str, help="BoardGameGeek username")
    _add_import_options(collection_import)

    return parser.parse_args(list(argv))


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"Invalid UUID: {value}") from exc


def _read_csv(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8-sig")
    except OSError as exc:
        raise ValueError(f"Cannot read {path}: {exc.strerror}") from exc


def _build_request(args: argparse.Namespace) -> ImportRequest:
    defaults = ImportDefaults(
        location_room=args.location_room,
        location_shelf=args.location_shelf,
        is_coming_soon=args.coming_soon,
        sleeved=args.sleeved,
    )
    library_id = _parse_uuid(args.library_id)
    enhance = not args.no_enrich

    if args.import_command == "csv":
        return ImportRequest(
            mode=ImportMode.CSV,
            library_id=library_id,
            csv_data=_read_csv(args.path),
            enhance_with_bgg=enhance,
            defaults=defaults,
        )
    if args.import_command == "links":
        return ImportRequest(
            mode=ImportMode.BGG_LINKS,
            library_id=library_id,
            references=tuple(args.references),
            enhance_with_bgg=enhance,
            defaults=defaults,
        )
    return ImportRequest(
        mode=ImportMode.BGG_COLLECTION,
        library_id=library_id,
        bgg_username=args.username,
        enhance_with_bgg=enhance,
        defaults=defaults,
    )


def _report(result: ImportJobResult) -> None:
    if result.error is not None:
        log.error("Import failed: %s", result.error)
        return
    log.info("Imported %d game(s), %d failed", result.imported, result.failed)
    for item in result.items:
        log.info("  + %s (%s)", item.title, item.id)
    for error in result.errors:
        log.warning("  - %s", error)
    if result.failed > len(result.errors):
        log.warning("  ... and %d more", result.failed - len(result.errors))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    request: ImportRequest | None = None
    try:
        parsed_args = _parse_args(args_list)
        if parsed_args.command == "import":
            request = _build_request(parsed_args)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if request is not None:
            result = run_bulk_import(request)
            _report(result)
            if not result.success:
                sys.exit(1)
        elif parsed_args.command == "library" and parsed_args.library_command == "create":
            library = create_library(parsed_args.name, parsed_args.owner_id)
            log.info("Created library %s", library.id)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during import")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
