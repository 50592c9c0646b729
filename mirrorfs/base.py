"""Backing store interface, entry metadata and plain-tree helpers.

Defines the interface every backing store adapter (MemoryStore,
DirectoryStore) implements, plus the rules that classify plain tree
values as files or directories.
"""

from __future__ import annotations

import posixpath
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal, Protocol, runtime_checkable

FileContent = str | bytes


@dataclass
class EntryStat:
    """Kind and size of a single store entry.

    Attributes:
        is_file: True if the entry is a regular file.
        is_dir: True if the entry is a directory.
        size: Content size in bytes (0 for directories).
    """

    is_file: bool
    is_dir: bool
    size: int = 0


@runtime_checkable
class BackingStore(Protocol):
    """Primitives the mirror replays its mutations onto.

    Paths are absolute, '/'-separated and normalized. Every failure is
    raised as ``StoreError``.
    """

    def mkdir(self, path: str, exist_ok: bool = False) -> None:
        """Create a directory whose parent already exists."""
        ...

    def write_file(self, path: str, content: FileContent) -> None:
        """Create or overwrite a file. ``str`` content is stored as UTF-8."""
        ...

    def read_file(self, path: str) -> bytes:
        """Read a whole file."""
        ...

    def remove(self, path: str, recursive: bool = False, force: bool = False) -> None:
        """Remove a file or directory."""
        ...

    def listdir(self, path: str) -> list[str]:
        """List the names of a directory's children."""
        ...

    def stat(self, path: str) -> EntryStat:
        """Classify the entry at path."""
        ...

    def exists(self, path: str) -> bool:
        """Check if an entry exists at path."""
        ...


def normalize_path(path: str) -> str:
    """Normalize a store path to absolute form.

    Relative paths are taken relative to the root.

    Examples:
        >>> normalize_path("a//b/./c/")
        '/a/b/c'
        >>> normalize_path("")
        '/'
    """
    if not path.startswith("/"):
        path = "/" + path
    path = posixpath.normpath(path)
    # normpath keeps a leading "//" as-is (POSIX)
    if path.startswith("//"):
        path = "/" + path.lstrip("/")
    return path


def join_path(parent: str, name: str) -> str:
    """Join a child name onto a normalized parent path."""
    if parent == "/":
        return "/" + name
    return parent + "/" + name


def check_name(name: Any) -> str:
    """Validate a plain tree key.

    Raises:
        TypeError: If name is not a string.
        ValueError: If name is empty, '.', '..' or contains a separator.
    """
    if not isinstance(name, str):
        raise TypeError(f"Entry names must be str, got {type(name).__name__}")
    if not name or name in (".", "..") or "/" in name:
        raise ValueError(f"Invalid entry name: {name!r}")
    return name


def is_file_value(value: Any) -> bool:
    """Check if a plain tree value is a file (text or bytes-like)."""
    return isinstance(value, (str, bytes, bytearray, memoryview))


def is_dir_value(value: Any) -> bool:
    """Check if a plain tree value is a directory (any mapping)."""
    return isinstance(value, Mapping)


def classify(value: Any) -> Literal["file", "dir"]:
    """Classify a plain tree value.

    Raises:
        TypeError: If value is neither file content nor a mapping.
    """
    if is_file_value(value):
        return "file"
    if is_dir_value(value):
        return "dir"
    raise TypeError(
        f"Expected str, bytes or a mapping, got {type(value).__name__}"
    )
