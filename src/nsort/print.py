"""
Output logic for nsort.
"""

import sys
import time

from nsort.models import AppConfig, MappingRecord, Origin, colorize, colors
from nsort.sorter import SortReport


def get_status(value: bool) -> str:
    """Get colored ON/OFF status."""
    return colorize("ON", colors.green) if value else colorize("OFF", colors.red)


def get_elapsed_time(start_time: float) -> tuple[str, str]:
    """Get elapsed time since script start."""
    elapsed_time = (time.time() - start_time) * 1000
    time_factor = "ms" if elapsed_time < 1000 else "s"
    elapsed_time = elapsed_time / 1000 if elapsed_time >= 1000 else elapsed_time
    return f"{elapsed_time:.2f}", time_factor


def printe(message: str, exit_code: int = 1) -> None:
    """Print error message and exit with given exit code."""
    msg = message if exit_code == 0 else f"{colorize('Error', colors.red)}: {message}"
    print(msg)
    sys.exit(exit_code)


def print_version(cfg: AppConfig) -> None:
    """Print name, version and author."""
    author = f" by {colorize(cfg.script_author, colors.cyan)}" if cfg.script_author else ""
    print(
        f"{colorize(cfg.script_name, colors.green)} "
        f"version {colorize(cfg.script_version, colors.cyan)}{author}"
    )


def print_header(cfg: AppConfig) -> None:
    """Print the header information based on current configuration."""
    if cfg.quiet:
        return
    print(
        f"{colorize('File Sorter', colors.green)} ({colorize(cfg.script_name, colors.green)}) v{cfg.script_version}"
    )
    print(f"{colorize('Settings:', colors.yellow)}")
    print(f"{cfg.indent}Target: {colorize(str(cfg.target_dir), colors.cyan)}")
    mode = "by kind (raw extension)" if cfg.by_kind else "by mapping"
    print(f"{cfg.indent}Mode: {colorize(mode, colors.cyan)}")
    if not cfg.by_kind:
        print(f"{cfg.indent}Fallback folder: {colorize(cfg.fallback_folder, colors.cyan)}")
    if cfg.verbose or cfg.dry_run:
        print(f"{cfg.indent}Dry run: {get_status(cfg.dry_run)}")
    if cfg.verbose:
        print(f"{cfg.indent}Mappings file: {colorize(str(cfg.store_path), colors.cyan)}")


def print_move(name: str, folder: str, cfg: AppConfig) -> None:
    """Print a single planned or performed move."""
    if not cfg.verbose and not cfg.dry_run:
        return
    arrow = colorize("→", colors.yellow)
    print(f"{cfg.indent}{colorize(name, colors.cyan)} {arrow} {colorize(folder, colors.cyan)}/")


def print_builtin_note(ext: str, builtin: str, cfg: AppConfig) -> None:
    """Warn that a built-in mapping is restored on every load."""
    print(
        f"{colorize('Note', colors.yellow)}: [ {ext} ] is a built-in mapping to "
        f"[ {colorize(builtin, colors.cyan)} ] and is restored every time the mappings are loaded"
    )


def print_footer(report: SortReport, cfg: AppConfig) -> None:
    """Print the summary of a sort run."""
    if cfg.quiet:
        return
    time_elapsed, time_factor = get_elapsed_time(cfg.start_time)
    print(f"{colorize('Summary:', colors.yellow)}")
    if cfg.dry_run:
        print(f"{cfg.indent}Dry run (no changes made).")
        print(f"{cfg.indent}Files to move: {len(report.processed)}")
    else:
        print(f"{cfg.indent}Moved files: {len(report.processed)}")
    print(f"{cfg.indent}Skipped files: {len(report.skipped)}")
    if cfg.verbose:
        print(f"{cfg.indent}Ignored entries: {report.ignored}")
    print(f"{cfg.indent}Directories created: {len(report.created_dirs)}")
    if not report.processed and not report.skipped:
        print(f"{cfg.indent}No files were processed.")
    print(f"{cfg.indent}Completed in: {colorize(time_elapsed, colors.cyan)} {time_factor}.")


def print_mappings(records: list[MappingRecord], cfg: AppConfig) -> None:
    """Print all mappings grouped by folder."""
    folders: dict[str, list[MappingRecord]] = {}
    for record in records:
        folders.setdefault(record.folder, []).append(record)

    print(f"{colorize('Mappings:', colors.yellow)}")
    for folder in sorted(folders, key=str.lower):
        exts = ", ".join(
            colorize(r.ext, colors.cyan if r.origin is Origin.BUILTIN else colors.magenta)
            for r in folders[folder]
        )
        print(f"{cfg.indent}{colorize(folder, colors.green)}: {exts}")
    user_count = sum(1 for r in records if r.origin is Origin.USER)
    print(
        f"{cfg.indent}Total: {colorize(str(len(records)), colors.cyan)} "
        f"({colorize(str(user_count), colors.magenta)} user-defined)"
    )
