import enum
import time
import tomllib
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any


@lru_cache(maxsize=1)
def _get_pyproject_data() -> dict[str, Any]:
    """
    Load data from pyproject.toml located in the project root.
    Cached to prevent multiple file reads.
    Assumes structure: project_root/src/nsort/models.py
    """
    pyproject_path = Path(__file__).parents[2] / "pyproject.toml"
    if not pyproject_path.is_file():
        return {}
    try:
        with open(pyproject_path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        return {}


def _get_script_version() -> str:
    """Get version from the [project] section."""
    data = _get_pyproject_data()
    return str(data.get("project", {}).get("version", "0.0.0"))


def _get_script_name() -> str:
    """Get project name from [project]."""
    data = _get_pyproject_data()
    return str(data.get("project", {}).get("name", "nsort"))


def _get_script_author() -> str:
    """Get first author name from [project.authors]."""
    data = _get_pyproject_data()
    authors = data.get("project", {}).get("authors", [])
    if isinstance(authors, list) and len(authors) > 0:
        return str(authors[0].get("name", ""))
    return ""


def default_store_path() -> Path:
    """Per-user location of the mappings file."""
    return Path.home() / ".config" / "nsort" / "mappings.json"


@dataclass
class Colors:
    """Terminal color codes."""

    reset: str = "\033[0m"
    red: str = "\033[31m"
    green: str = "\033[32m"
    yellow: str = "\033[33m"
    cyan: str = "\033[36m"
    magenta: str = "\033[35m"


# global Colors instance
colors = Colors()


def colorize(text: str, color: str) -> str:
    """Wrap text in color codes."""
    return f"{color}{text}{colors.reset}"


def get_extension(name: str) -> str:
    """
    Extract the extension of a file name, case preserved.

    Returns an empty string for names without a dot-suffix, for dotfiles
    such as ``.bashrc`` and for names ending in a bare dot.
    """
    stem, dot, ext = name.rpartition(".")
    if not dot or not stem:
        return ""
    return ext


def normalize_extension(ext: str) -> str:
    """Canonical store key: no leading dots, lowercase."""
    return ext.strip().lstrip(".").lower()


class Origin(enum.Enum):
    """Where a mapping record comes from."""

    BUILTIN = "builtin"
    USER = "user"


@dataclass(frozen=True)
class MappingRecord:
    """One extension to folder association."""

    ext: str
    folder: str
    origin: Origin = Origin.USER


@dataclass(frozen=True)
class AppConfig:
    """Application configuration with default values."""

    # Settings
    fallback_folder: str = "Other"
    store_path: Path = field(default_factory=default_store_path)
    indent: str = "    "

    # Actions (at most one is set)
    add_mapping: tuple[str, str] | None = None
    delete_mapping: tuple[str, str] | None = None
    update_mapping: tuple[str, str] | None = None
    list_mappings: bool = False
    by_kind: bool = False

    # Flags
    dry_run: bool = False
    quiet: bool = False
    show_version: bool = False
    verbose: bool = False

    # Runtime metadata
    script_name: str = field(default_factory=_get_script_name)
    script_version: str = field(default_factory=_get_script_version)
    script_author: str = field(default_factory=_get_script_author)

    # Runtime state
    start_time: float = field(default_factory=time.time)
    target_dir: Path = field(default_factory=Path.cwd)

    @property
    def is_admin(self) -> bool:
        """True when the run manages mappings instead of sorting."""
        return (
            self.add_mapping is not None
            or self.delete_mapping is not None
            or self.update_mapping is not None
        )
