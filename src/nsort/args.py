"""
Argument parsing logic for nsort.
"""

import argparse
import dataclasses
from pathlib import Path
from typing import Any

from nsort.models import AppConfig, colorize, colors
from nsort.store import InvalidMappingError, validate_folder, validate_mapping


def get_default_value(field_name: str) -> Any:
    """Extract default value from AppConfig dataclass field."""
    f = AppConfig.__dataclass_fields__[field_name]
    if f.default_factory is not dataclasses.MISSING:
        return f.default_factory()
    return f.default


def get_default_info(default_val: Any) -> str:
    """Generate a string with default settings for help message."""
    return f"(default: '{colorize(str(default_val), colors.yellow)}')"


def parse_mapping(value: str) -> tuple[str, str]:
    """Parse an EXT:FOLDER argument into a canonical pair."""
    ext, sep, folder = value.partition(":")
    if not sep:
        raise argparse.ArgumentTypeError(f"expected EXT:FOLDER, got '{value}'")
    if ":" in folder:
        raise argparse.ArgumentTypeError(f"expected a single ':' in EXT:FOLDER, got '{value}'")
    try:
        return validate_mapping(ext, folder)
    except InvalidMappingError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def get_config() -> AppConfig:
    """Parse command line arguments and return the AppConfig object."""

    parser = argparse.ArgumentParser(
        prog="nsort",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="Sort the files of a directory into subfolders chosen by file extension.",
        epilog=f"Example: {colorize('nsort', colors.green)} -map go:Source",
    )

    parser.add_argument(
        "-t",
        "--target",
        dest="target",
        type=str,
        default=".",
        metavar="DIR",
        help=f"Directory to sort {get_default_info('.')}",
    )

    action = parser.add_mutually_exclusive_group()
    action.add_argument(
        "-map",
        dest="add_mapping",
        type=parse_mapping,
        metavar="EXT:FOLDER",
        help="Add a mapping from an extension to a folder",
    )
    action.add_argument(
        "-del",
        dest="delete_mapping",
        type=parse_mapping,
        metavar="EXT:FOLDER",
        help="Delete a mapping",
    )
    action.add_argument(
        "-upd",
        dest="update_mapping",
        type=parse_mapping,
        metavar="EXT:FOLDER",
        help="Replace a mapping (delete, then add)",
    )
    action.add_argument(
        "-by-kind",
        dest="by_kind",
        action="store_true",
        help="Sort into folders named after the raw extension, ignoring mappings",
    )
    action.add_argument(
        "-l",
        "--list",
        dest="list_mappings",
        action="store_true",
        help="List all mappings and exit",
    )

    def_fallback = get_default_value("fallback_folder")
    parser.add_argument(
        "-F",
        "--fallback-folder",
        dest="fallback_folder",
        type=str,
        default=def_fallback,
        metavar="FOLDER",
        help=f"Folder for files with unmapped extensions {get_default_info(def_fallback)}",
    )
    parser.add_argument(
        "-n",
        "--dry-run",
        dest="dry_run",
        action="store_true",
        help="Show what would be done without making changes",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        dest="quiet",
        action="store_true",
        help="Quiet mode (suppress non-error messages)",
    )
    parser.add_argument(
        "--store",
        dest="store_path",
        type=str,
        default=None,
        metavar="PATH",
        help=f"Mappings file {get_default_info(get_default_value('store_path'))}",
    )
    parser.add_argument(
        "-v", "--version", dest="show_version", action="store_true", help="Print version and exit"
    )
    parser.add_argument(
        "-V",
        "--verbose",
        dest="verbose",
        action="store_true",
        help="Print every file as it is moved",
    )

    args = parser.parse_args()

    if args.quiet and args.verbose:
        parser.error("cannot use both quiet mode and verbose mode")

    try:
        fallback = validate_folder(args.fallback_folder)
    except InvalidMappingError as e:
        parser.error(f"invalid fallback folder: {e}")

    store_path = (
        Path(args.store_path).expanduser()
        if args.store_path
        else get_default_value("store_path")
    )

    return AppConfig(
        fallback_folder=fallback,
        store_path=store_path,
        add_mapping=args.add_mapping,
        delete_mapping=args.delete_mapping,
        update_mapping=args.update_mapping,
        list_mappings=args.list_mappings,
        by_kind=args.by_kind,
        dry_run=args.dry_run,
        quiet=args.quiet,
        show_version=args.show_version,
        verbose=args.verbose,
        target_dir=Path(args.target).expanduser().absolute(),
    )
