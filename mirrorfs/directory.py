"""Backing store over a real directory with path restriction.

Maps virtual absolute store paths onto a root directory on disk,
chroot-like: ``/a/b.txt`` lands at ``<root>/a/b.txt``.
"""

from __future__ import annotations

import errno
import shutil
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from .base import EntryStat, FileContent, normalize_path
from .errors import StoreError


@contextmanager
def _store_errors(path: str) -> Iterator[None]:
    """Re-raise OS errors as StoreError carrying the virtual path."""
    try:
        yield
    except StoreError:
        raise
    except OSError as e:
        raise StoreError(e.errno or errno.EIO, e.strerror or str(e), path) from e


class DirectoryStore:
    """Backing store restricted to a root directory.

    Security features:
    - Rejects paths that resolve outside the root directory
    - Validates resolved paths, so symlinks cannot escape the root
    """

    def __init__(self, root: str):
        """Initialize the store.

        Args:
            root: Absolute path to the root directory (created if missing).

        Raises:
            ValueError: If root is not an absolute path or is not a directory.
        """
        root_path = Path(root)
        if not root_path.is_absolute():
            raise ValueError(f"Root must be absolute path: {root}")

        self.root = root_path.resolve()
        if not self.root.exists():
            self.root.mkdir(parents=True, exist_ok=True)
        if not self.root.is_dir():
            raise ValueError(f"Root must be a directory: {root}")

    def _validate_path(self, path: str) -> Path:
        """Resolve a virtual path to a real path inside the root.

        Raises:
            StoreError: If the path escapes the root directory.
        """
        virtual = normalize_path(path)
        resolved = (self.root / virtual.lstrip("/")).resolve()
        try:
            resolved.relative_to(self.root)
        except ValueError:
            raise StoreError(
                errno.EACCES, "Path escapes store root", virtual
            ) from None
        return resolved

    def mkdir(self, path: str, exist_ok: bool = False) -> None:
        real = self._validate_path(path)
        with _store_errors(path):
            if real.is_file():
                raise StoreError(errno.EEXIST, "File exists", normalize_path(path))
            real.mkdir(exist_ok=exist_ok)

    def write_file(self, path: str, content: FileContent) -> None:
        real = self._validate_path(path)
        if isinstance(content, str):
            content = content.encode("utf-8")
        with _store_errors(path):
            real.write_bytes(bytes(content))

    def read_file(self, path: str) -> bytes:
        real = self._validate_path(path)
        with _store_errors(path):
            return real.read_bytes()

    def remove(self, path: str, recursive: bool = False, force: bool = False) -> None:
        real = self._validate_path(path)
        if real == self.root:
            raise StoreError(errno.EBUSY, "Cannot remove root directory", "/")
        with _store_errors(path):
            if not real.exists():
                if force:
                    return
                raise FileNotFoundError(errno.ENOENT, "No such file or directory")
            if real.is_dir():
                if recursive:
                    shutil.rmtree(real)
                else:
                    real.rmdir()
            else:
                real.unlink()

    def listdir(self, path: str) -> list[str]:
        real = self._validate_path(path)
        with _store_errors(path):
            return sorted(p.name for p in real.iterdir())

    def stat(self, path: str) -> EntryStat:
        real = self._validate_path(path)
        with _store_errors(path):
            st = real.stat()
        is_dir = real.is_dir()
        return EntryStat(
            is_file=real.is_file(),
            is_dir=is_dir,
            size=0 if is_dir else st.st_size,
        )

    def exists(self, path: str) -> bool:
        try:
            real = self._validate_path(path)
        except StoreError:
            return False
        return real.exists()
