"""
Persistent extension to folder mappings for nsort.

The store is a single JSON object on disk. It is re-read before every
operation and the built-in defaults are merged over it each time, so a
default mapping can be deleted only until the next load.
"""

import json
import os
import tempfile
from pathlib import Path

from nsort.models import MappingRecord, Origin, normalize_extension

DEFAULT_MAPPINGS: dict[str, str] = {
    # Music
    "mp3": "Music",
    "aac": "Music",
    "flac": "Music",
    "ogg": "Music",
    "wma": "Music",
    "m4a": "Music",
    "aiff": "Music",
    "wav": "Music",
    "amr": "Music",
    # Videos
    "flv": "Videos",
    "ogv": "Videos",
    "avi": "Videos",
    "mp4": "Videos",
    "mpg": "Videos",
    "mpeg": "Videos",
    "3gp": "Videos",
    "mkv": "Videos",
    "ts": "Videos",
    "webm": "Videos",
    "vob": "Videos",
    "wmv": "Videos",
    # Pictures
    "png": "Pictures",
    "jpeg": "Pictures",
    "gif": "Pictures",
    "jpg": "Pictures",
    "bmp": "Pictures",
    "svg": "Pictures",
    "webp": "Pictures",
    "psd": "Pictures",
    "tiff": "Pictures",
    # Archives
    "rar": "Archives",
    "zip": "Archives",
    "7z": "Archives",
    "gz": "Archives",
    "bz2": "Archives",
    "tar": "Archives",
    "dmg": "Archives",
    "tgz": "Archives",
    "xz": "Archives",
    "iso": "Archives",
    "cpio": "Archives",
    # Documents
    "txt": "Documents",
    "pdf": "Documents",
    "doc": "Documents",
    "docx": "Documents",
    "odf": "Documents",
    "xls": "Documents",
    "xlsv": "Documents",
    "xlsx": "Documents",
    "ppt": "Documents",
    "pptx": "Documents",
    "ppsx": "Documents",
    "odp": "Documents",
    "odt": "Documents",
    "ods": "Documents",
    "md": "Documents",
    "json": "Documents",
    "csv": "Documents",
    # Books
    "mobi": "Books",
    "epub": "Books",
    "chm": "Books",
    # Packages and programs
    "deb": "DEBPackages",
    "exe": "Programs",
    "msi": "Programs",
    "rpm": "RPMPackages",
}


class NsortError(Exception):
    """Base error for nsort."""


class StoreError(NsortError):
    """The mappings file could not be read, parsed or written."""


class MappingError(NsortError):
    """A mapping administration request was rejected."""


class AlreadyMappedError(MappingError):
    """The exact extension/folder pair is already in the store."""

    def __init__(self, ext: str, folder: str):
        self.ext = ext
        self.folder = folder
        super().__init__(f"[ {ext} ] already mapped to [ {folder} ]")


class InvalidMappingError(MappingError, ValueError):
    """Extension or folder name cannot be used as a mapping."""


def validate_folder(folder: str) -> str:
    """
    Check that folder is a single directory name.

    Raises:
        InvalidMappingError: If folder is empty, '.', '..' or contains a separator
    """
    folder = folder.strip()
    if not folder or folder in (".", ".."):
        raise InvalidMappingError(f"Invalid folder name: '{folder}'")
    if "/" in folder or "\\" in folder:
        raise InvalidMappingError(f"Folder name must not contain path separators: '{folder}'")
    return folder


def validate_mapping(ext: str, folder: str) -> tuple[str, str]:
    """
    Canonicalize and check an extension/folder pair.

    Returns:
        Tuple of (canonical extension, folder)

    Raises:
        InvalidMappingError: If either part is unusable
    """
    key = normalize_extension(ext)
    if not key:
        raise InvalidMappingError(f"Invalid extension: '{ext}'")
    if "/" in key or "\\" in key:
        raise InvalidMappingError(f"Extension must not contain path separators: '{ext}'")
    return key, validate_folder(folder)


class MappingStore:
    """Extension to folder mappings backed by a JSON file."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self.mappings: dict[str, str] = {}

    @classmethod
    def open(cls, path: Path) -> "MappingStore":
        """
        Open the store at path, creating it if needed.

        Defaults are merged in and the result is written back immediately.

        Raises:
            StoreError: If the file cannot be created, read or written
        """
        store = cls(path)
        try:
            store.path.parent.mkdir(parents=True, exist_ok=True)
            if not store.path.exists():
                store.path.write_text("{}\n", encoding="utf-8")
        except OSError as e:
            raise StoreError(f"Could not create store '{store.path}': {e}") from e
        store.load_records()
        store.write_records()
        return store

    def load_records(self) -> None:
        """Read the file and merge the defaults over it."""
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise StoreError(f"Could not read store '{self.path}': {e}") from e

        records: dict[str, str] = {}
        if text.strip():
            try:
                data = json.loads(text)
            except json.JSONDecodeError as e:
                raise StoreError(f"Could not read store '{self.path}': {e}") from e
            if not isinstance(data, dict):
                raise StoreError(f"Could not read store '{self.path}': not a JSON object")
            for ext, folder in data.items():
                if not isinstance(folder, str):
                    raise StoreError(
                        f"Could not read store '{self.path}': folder for '{ext}' is not a string"
                    )
                try:
                    validate_folder(folder)
                except InvalidMappingError as e:
                    raise StoreError(f"Could not read store '{self.path}': {e}") from e
                records[ext] = folder

        records.update(DEFAULT_MAPPINGS)
        self.mappings = records

    def write_records(self) -> None:
        """
        Replace the file with the current mappings.

        The data goes to a temporary file next to the store first, so an
        interrupted write leaves the previous contents in place.
        """
        data = json.dumps(self.mappings, indent=2, sort_keys=True) + "\n"
        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_name = f.name
                f.write(data)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            raise StoreError(f"Could not write to store '{self.path}': {e}") from e

    def is_mapped(self, ext: str, folder: str) -> tuple[bool, str]:
        """Check whether the exact pair exists."""
        self.load_records()
        if self.mappings.get(ext) == folder:
            return True, folder
        return False, ""

    def add_mapping(self, ext: str, folder: str) -> str | None:
        """
        Map ext to folder and persist.

        Only an identical pair counts as a duplicate; an extension mapped to
        another folder is overwritten.

        Returns:
            The folder ext was mapped to before, or None

        Raises:
            AlreadyMappedError: If ext is already mapped to folder
        """
        ext, folder = validate_mapping(ext, folder)
        mapped, existing = self.is_mapped(ext, folder)
        if mapped:
            raise AlreadyMappedError(ext, existing)

        previous = self.mappings.get(ext)
        self.mappings[ext] = folder
        self.write_records()
        return previous

    def delete_mapping(self, ext: str, folder: str) -> bool:
        """
        Remove the exact pair and persist.

        Returns:
            True if a record was removed, False if there was no exact match
        """
        ext, folder = validate_mapping(ext, folder)
        self.load_records()
        removed = False
        if self.mappings.get(ext) == folder:
            del self.mappings[ext]
            removed = True
        self.write_records()
        return removed

    def get_mapping(self, ext: str) -> str | None:
        """Folder for ext exactly as given, or None when unmapped."""
        self.load_records()
        return self.mappings.get(ext)

    def records(self) -> list[MappingRecord]:
        """All mappings sorted by extension, tagged with their origin."""
        self.load_records()
        return [
            MappingRecord(
                ext, folder, Origin.BUILTIN if ext in DEFAULT_MAPPINGS else Origin.USER
            )
            for ext, folder in sorted(self.mappings.items())
        ]
