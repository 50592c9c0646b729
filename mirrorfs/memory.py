"""In-memory backing store."""

from __future__ import annotations

import errno as _errno

from .base import EntryStat, FileContent, normalize_path
from .errors import StoreError


class MemoryStore:
    """Simple in-memory backing store.

    Stores files as ``bytes`` in a plain dict and tracks directories
    in a set. Unlike a key-value store, directories are explicit: a
    file can only be written under an existing directory, the same way
    a POSIX filesystem behaves.

    This is the default store behind ``make_mirror()``.
    """

    def __init__(self) -> None:
        self.files: dict[str, bytes] = {}
        self.dirs: set[str] = {"/"}

    def mkdir(self, path: str, exist_ok: bool = False) -> None:
        path = normalize_path(path)
        if path in self.files:
            raise StoreError(_errno.EEXIST, "File exists", path)
        if path in self.dirs:
            if exist_ok:
                return
            raise StoreError(_errno.EEXIST, "Directory exists", path)
        self._check_parent(path)
        self.dirs.add(path)

    def write_file(self, path: str, content: FileContent) -> None:
        path = normalize_path(path)
        if path in self.dirs:
            raise StoreError(_errno.EISDIR, "Is a directory", path)
        self._check_parent(path)
        if isinstance(content, str):
            content = content.encode("utf-8")
        self.files[path] = bytes(content)

    def read_file(self, path: str) -> bytes:
        path = normalize_path(path)
        if path in self.dirs:
            raise StoreError(_errno.EISDIR, "Is a directory", path)
        if path not in self.files:
            raise StoreError(_errno.ENOENT, "No such file", path)
        return self.files[path]

    def remove(self, path: str, recursive: bool = False, force: bool = False) -> None:
        path = normalize_path(path)
        if path == "/":
            raise StoreError(_errno.EBUSY, "Cannot remove root directory", path)
        if path in self.files:
            del self.files[path]
            return
        if path not in self.dirs:
            if force:
                return
            raise StoreError(_errno.ENOENT, "No such file or directory", path)

        prefix = path + "/"
        nested_files = [f for f in self.files if f.startswith(prefix)]
        nested_dirs = [d for d in self.dirs if d.startswith(prefix)]
        if (nested_files or nested_dirs) and not recursive:
            raise StoreError(_errno.ENOTEMPTY, "Directory not empty", path)
        for f in nested_files:
            del self.files[f]
        for d in nested_dirs:
            self.dirs.discard(d)
        self.dirs.discard(path)

    def listdir(self, path: str) -> list[str]:
        """List immediate children of a directory."""
        path = normalize_path(path)
        if path in self.files:
            raise StoreError(_errno.ENOTDIR, "Not a directory", path)
        if path not in self.dirs:
            raise StoreError(_errno.ENOENT, "No such directory", path)
        prefix = path.rstrip("/") + "/"
        entries: set[str] = set()
        for f in self.files:
            if f.startswith(prefix):
                entries.add(f[len(prefix):].split("/")[0])
        for d in self.dirs:
            if d.startswith(prefix) and d != path:
                rest = d[len(prefix):]
                if rest:
                    entries.add(rest.split("/")[0])
        return sorted(entries)

    def stat(self, path: str) -> EntryStat:
        path = normalize_path(path)
        if path in self.files:
            return EntryStat(is_file=True, is_dir=False, size=len(self.files[path]))
        if path in self.dirs:
            return EntryStat(is_file=False, is_dir=True)
        raise StoreError(_errno.ENOENT, "No such file or directory", path)

    def exists(self, path: str) -> bool:
        path = normalize_path(path)
        return path in self.files or path in self.dirs

    def _check_parent(self, path: str) -> None:
        parent = path.rsplit("/", 1)[0] or "/"
        if parent in self.files:
            raise StoreError(_errno.ENOTDIR, "Not a directory", parent)
        if parent not in self.dirs:
            raise StoreError(_errno.ENOENT, "No such directory", parent)
