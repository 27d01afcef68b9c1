#!/usr/bin/env python3
"""
Sort the files of a directory into subfolders chosen by file extension.
"""

import sys
from pathlib import Path

from nsort.args import get_config
from nsort.models import AppConfig, colorize, colors
from nsort.print import (
    print_builtin_note,
    print_footer,
    print_header,
    print_mappings,
    print_move,
    print_version,
    printe,
)
from nsort.sorter import SortError, sort_by_kind, sort_by_mapping
from nsort.store import DEFAULT_MAPPINGS, MappingError, MappingStore, StoreError


def is_home_directory(directory: Path) -> bool:
    """Check whether directory is the current user's home directory."""
    try:
        home = Path.home().resolve()
    except (KeyError, RuntimeError) as e:
        printe(f"Could not determine home directory: {e}", 1)
    return directory.resolve() == home


def check_conditions(cfg: AppConfig) -> None:
    """Check if all conditions are met to run the script."""
    if cfg.show_version:
        print_version(cfg)
        sys.exit(0)

    if cfg.list_mappings:
        return

    # Refuse to touch the home directory itself
    if is_home_directory(cfg.target_dir):
        printe("nsort must not be used directly on the home directory", 1)

    if cfg.is_admin:
        return

    if not cfg.target_dir.is_dir():
        printe(
            f"The specified directory '{colorize(str(cfg.target_dir), colors.cyan)}' does not exist or is not a directory.",
            1,
        )


def run_admin(store: MappingStore, cfg: AppConfig) -> None:
    """Apply the requested mapping change and report the outcome."""
    ext, folder = cfg.add_mapping or cfg.delete_mapping or cfg.update_mapping
    builtin = DEFAULT_MAPPINGS.get(ext)
    if builtin is not None and not cfg.quiet:
        print_builtin_note(ext, builtin, cfg)

    try:
        if cfg.add_mapping:
            previous = store.add_mapping(ext, folder)
            if previous is not None and cfg.verbose:
                print(f"Replaced [ {ext} ] → [ {previous} ]")
            message = "Successfully added mapping"
        elif cfg.delete_mapping:
            if not store.delete_mapping(ext, folder):
                if not cfg.quiet:
                    print(f"No mapping [ {ext} ] → [ {folder} ] found")
                return
            message = "Deleted mapping"
        else:
            store.delete_mapping(ext, folder)
            store.add_mapping(ext, folder)
            message = "Successfully updated mapping"
    except MappingError as e:
        printe(str(e), 1)

    if not cfg.quiet:
        print(f"{colorize(message, colors.green)}: [ {ext} ] → [ {folder} ]")


def run_sort(store: MappingStore, cfg: AppConfig) -> None:
    """Sort the target directory and print a summary."""
    print_header(cfg)

    def on_move(name: str, folder: str) -> None:
        print_move(name, folder, cfg)

    if cfg.by_kind:
        report = sort_by_kind(cfg.target_dir, dry_run=cfg.dry_run, on_move=on_move)
    else:
        report = sort_by_mapping(
            cfg.target_dir,
            store,
            fallback_folder=cfg.fallback_folder,
            dry_run=cfg.dry_run,
            on_move=on_move,
        )

    print_footer(report, cfg)


def main() -> None:
    """Main function to run nsort."""
    # Get configuration (from args module)
    cfg = get_config()
    # Condition checks
    check_conditions(cfg)

    try:
        store = MappingStore.open(cfg.store_path)
        if cfg.list_mappings:
            print_mappings(store.records(), cfg)
        elif cfg.is_admin:
            run_admin(store, cfg)
        else:
            run_sort(store, cfg)
    except (StoreError, SortError) as e:
        printe(str(e), 1)


if __name__ == "__main__":
    main()
