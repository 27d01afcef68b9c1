"""
Sorting logic for nsort.

Files directly inside the target directory are moved into subfolders named
after their extension's mapping (or after the extension itself in by-kind
mode). Subdirectories are never entered.
"""

import os
import sys
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from nsort.models import colorize, colors, get_extension
from nsort.store import MappingStore, NsortError


class SortError(NsortError):
    """The target directory could not be listed or a destination created."""


@dataclass
class SortReport:
    """Outcome of one sort run."""

    target: Path
    processed: list[tuple[str, str]] = field(default_factory=list)
    skipped: list[tuple[str, str]] = field(default_factory=list)
    created_dirs: list[str] = field(default_factory=list)
    ignored: int = 0


def get_file_list(directory: Path) -> list[Path]:
    """
    List entries directly inside directory, sorted by name.

    Raises:
        SortError: If the directory cannot be read
    """
    try:
        names = os.listdir(directory)
    except OSError as e:
        raise SortError(f"Could not read directory '{directory}': {e}") from e
    return sorted((directory / name for name in names), key=lambda x: x.name.lower())


def skip_file_with_error(report: SortReport, name: str, error: str) -> None:
    """Record a file that could not be moved and report it on stderr."""
    report.skipped.append((name, error))
    print(
        f"could not move file {colorize(name, colors.cyan)}: {colorize(error, colors.red)}",
        file=sys.stderr,
    )


def ensure_directory(path: Path, report: SortReport) -> None:
    """
    Create a destination folder if it is missing.

    Raises:
        SortError: If the folder cannot be created
    """
    if path.is_dir():
        return
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise SortError(f"Could not create directory '{path}': {e}") from e
    report.created_dirs.append(path.name)


def move_file(path: Path, dest_dir: Path, report: SortReport, dry_run: bool = False) -> bool:
    """Move one file into dest_dir. Failures are recorded, not raised."""
    target = dest_dir / path.name
    if target.exists():
        skip_file_with_error(report, path.name, "Target file already exists.")
        return False
    if dry_run:
        return True
    try:
        path.rename(target)
    except PermissionError:
        skip_file_with_error(report, path.name, "Permission denied: cannot move file.")
        return False
    except FileNotFoundError:
        skip_file_with_error(report, path.name, "Source file no longer exists.")
        return False
    except OSError as e:
        skip_file_with_error(report, path.name, f"File system error: {e}")
        return False
    return True


def sort_files(
    target: Path,
    classify: Callable[[str], str],
    dry_run: bool = False,
    on_move: Callable[[str, str], None] | None = None,
) -> SortReport:
    """
    Move every regular file with an extension into target/<classify(ext)>.

    Args:
        target: Directory to sort (not recursed into)
        classify: Maps an extension to a destination folder name
        dry_run: Report planned moves without touching the file system
        on_move: Called with (file name, folder) after each successful move

    Raises:
        SortError: If target cannot be read or a destination folder created
    """
    report = SortReport(target=target)

    for path in get_file_list(target):
        if not path.is_file():
            report.ignored += 1
            continue
        ext = get_extension(path.name)
        if not ext:
            report.ignored += 1
            continue

        folder = classify(ext)
        dest_dir = target / folder
        if not dry_run:
            ensure_directory(dest_dir, report)
        elif not dest_dir.is_dir() and folder not in report.created_dirs:
            report.created_dirs.append(folder)

        if move_file(path, dest_dir, report, dry_run=dry_run):
            report.processed.append((path.name, folder))
            if on_move is not None:
                on_move(path.name, folder)

    return report


def sort_by_mapping(
    target: Path,
    store: MappingStore,
    fallback_folder: str = "Other",
    dry_run: bool = False,
    on_move: Callable[[str, str], None] | None = None,
) -> SortReport:
    """Sort target using the store; unmapped extensions go to fallback_folder."""

    def classify(ext: str) -> str:
        return store.get_mapping(ext) or fallback_folder

    return sort_files(target, classify, dry_run=dry_run, on_move=on_move)


def sort_by_kind(
    target: Path,
    dry_run: bool = False,
    on_move: Callable[[str, str], None] | None = None,
) -> SortReport:
    """Sort target into folders named after the raw extension."""
    return sort_files(target, lambda ext: ext, dry_run=dry_run, on_move=on_move)
