"""Live mirror of a plain tree that replays every mutation onto a store.

``make_mirror()`` returns the root ``MirrorDir``: a mutable mapping whose
file values are ``str``/``bytes`` and whose directory values are further
``MirrorDir`` wrappers. Assigning or deleting keys updates the backing
store first and the in-memory tree second, so the two never drift.

Example:
    >>> root = make_mirror({"file.txt": "Hello", "folder1": {"file.txt": "Hello2"}})
    >>> root.folder1["file.txt"]
    'Hello2'
    >>> root.folder1 = {"b.txt": "X"}
    >>> store_of(root).read_file("/folder1/b.txt")
    b'X'
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterator, Mapping, MutableMapping
from typing import Any

from .base import BackingStore, FileContent, check_name, classify, is_dir_value, join_path
from .config import StoreConfig, create_store
from .errors import DetachedError
from .memory import MemoryStore
from .tree import export_tree, import_tree, to_plain

logger = logging.getLogger(__name__)


class Mirror:
    """Shared state behind every wrapper of one mirrored tree.

    Owns the backing store, the private plain tree and the per-path
    wrapper cache. Wrappers are created lazily, the first time a
    directory is read, and evicted when that directory is deleted or
    replaced.
    """

    def __init__(self, store: BackingStore, tree: dict[str, Any]):
        self.store = store
        self._tree = tree
        self._wrappers: dict[str, MirrorDir] = {}

    @property
    def root(self) -> MirrorDir:
        return self.wrapper("/", self._tree)

    def wrapper(self, path: str, node: dict[str, Any]) -> MirrorDir:
        """Return the cached wrapper for path, creating it on first access."""
        wrapper = self._wrappers.get(path)
        if wrapper is None:
            wrapper = MirrorDir(self, path, node)
            self._wrappers[path] = wrapper
            logger.debug("Created wrapper for %s", path)
        return wrapper

    def evict(self, path: str) -> None:
        """Detach and forget the wrappers at path and below."""
        prefix = path + "/"
        for cached in list(self._wrappers):
            if cached == path or cached.startswith(prefix):
                self._wrappers.pop(cached)._detached = True
                logger.debug("Evicted wrapper for %s", cached)

    def cached_paths(self) -> list[str]:
        """Paths that currently have a live wrapper."""
        return sorted(self._wrappers)

    def export(self, decode_text: bool = True) -> dict[str, Any]:
        """Snapshot the backing store as a plain tree."""
        return export_tree(self.store, "/", decode_text)


class MirrorDir(MutableMapping):
    """Mutable mapping over one directory of a mirrored tree.

    Reads are served from the in-memory tree with no store round-trip.
    Writes and deletes are replayed onto the backing store before the
    in-memory tree is updated.

    Keys can also be used as attributes (``root.folder1``) when they are
    valid identifiers, do not start with an underscore and do not clash
    with a mapping method.

    Once the directory behind a wrapper is deleted or replaced, the
    wrapper is detached and every operation on it raises
    ``DetachedError``, except equality: a detached wrapper only compares
    equal to itself. Read the key again from the parent to get a live
    wrapper.
    """

    def __init__(self, mirror: Mirror, path: str, node: dict[str, Any]):
        self._mirror = mirror
        self._path = path
        self._node = node
        self._detached = False

    @property
    def mirror(self) -> Mirror:
        return self._mirror

    @property
    def path(self) -> str:
        return self._path

    @property
    def detached(self) -> bool:
        return self._detached

    def _check_attached(self) -> None:
        if self._detached:
            raise DetachedError(self._path)

    # -------------------------------------------------------------------------
    # Mapping protocol
    # -------------------------------------------------------------------------

    def __getitem__(self, key: str) -> FileContent | MirrorDir:
        self._check_attached()
        value = self._node[key]
        if is_dir_value(value):
            return self._mirror.wrapper(join_path(self._path, key), value)
        return value

    def __setitem__(self, key: str, value: Any) -> None:
        self._check_attached()
        check_name(key)
        # Snapshot first: the caller's object is never aliased, and a wrapper
        # assigned over its own ancestor is read before it gets detached.
        self._commit(key, to_plain(value))

    def __delitem__(self, key: str) -> None:
        self._check_attached()
        if key not in self._node:
            return
        path = join_path(self._path, key)
        self._mirror.store.remove(path, recursive=True, force=True)
        self._mirror.evict(path)
        del self._node[key]
        logger.debug("Deleted %s", path)

    def __iter__(self) -> Iterator[str]:
        self._check_attached()
        return iter(self._node)

    def __len__(self) -> int:
        self._check_attached()
        return len(self._node)

    def __contains__(self, key: object) -> bool:
        self._check_attached()
        return key in self._node

    def __eq__(self, other: object) -> bool:
        if self._detached:
            return NotImplemented
        if isinstance(other, MirrorDir):
            if other.detached:
                return NotImplemented
            other = other.to_dict()
        if not isinstance(other, Mapping):
            return NotImplemented
        return self.to_dict() == other

    def __repr__(self) -> str:
        state = "detached" if self._detached else sorted(self._node)
        return f"<MirrorDir {self._path!r} {state}>"

    def _commit(self, key: str, value: Any) -> None:
        """Replay one assignment of an already snapshotted value."""
        store = self._mirror.store
        path = join_path(self._path, key)
        kind = classify(value)

        # Only a file over a known file is a plain overwrite; anything else
        # clears the path, including entries only the store knows about.
        existing = self._node.get(key)
        if not (kind == "file" and existing is not None and not is_dir_value(existing)):
            store.remove(path, recursive=True, force=True)
            self._mirror.evict(path)

        if kind == "file":
            store.write_file(path, value)
            self._node[key] = value
            logger.debug("Wrote file %s", path)
            return

        store.mkdir(path)
        node: dict[str, Any] = {}
        self._node[key] = node
        logger.debug("Created directory %s", path)
        child = self._mirror.wrapper(path, node)
        for name, sub_value in value.items():
            child._commit(name, sub_value)

    # -------------------------------------------------------------------------
    # Attribute access
    # -------------------------------------------------------------------------

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self[name]
        except KeyError:
            raise AttributeError(
                f"{self._path!r} has no entry {name!r}"
            ) from None

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            object.__setattr__(self, name, value)
        elif hasattr(type(self), name):
            raise AttributeError(f"Cannot assign {name!r}; use item assignment")
        else:
            self[name] = value

    def __delattr__(self, name: str) -> None:
        if name.startswith("_"):
            object.__delattr__(self, name)
        elif hasattr(type(self), name):
            raise AttributeError(f"Cannot delete {name!r}; use item deletion")
        else:
            del self[name]

    # -------------------------------------------------------------------------
    # Snapshots
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Return a deep copy of this directory as a plain tree."""
        self._check_attached()
        return copy.deepcopy(self._node)


def make_mirror(
    tree: Mapping[str, Any] | None = None,
    store: BackingStore | None = None,
    config: StoreConfig | None = None,
    clear: bool = False,
) -> MirrorDir:
    """Create a mirrored tree and return its root wrapper.

    The tree is deep-copied, so later changes to the caller's object are
    not seen, then imported into the store. The store must start out
    empty so that it holds exactly the tree; pass ``clear=True`` to wipe
    whatever its root already contains.

    Args:
        tree: Directory-shaped plain tree. Defaults to an empty tree.
        store: Backing store to replay onto. Takes precedence over config.
        config: Store configuration used when no store is given. Defaults
            to an in-memory store.
        clear: If True, remove every entry under the store root first.

    Returns:
        The root MirrorDir (path "/").

    Raises:
        TypeError: If tree is not a mapping or holds unsupported values.
        ValueError: If tree holds an invalid entry name, or the store is
            not empty and clear is False.
        StoreError: If importing into the store fails.
    """
    tree = to_plain(tree if tree is not None else {})
    if classify(tree) != "dir":
        raise TypeError(f"Expected a mapping, got {type(tree).__name__}")

    if store is None:
        store = create_store(config) if config is not None else MemoryStore()

    leftovers = store.listdir("/")
    if leftovers and not clear:
        raise ValueError(
            f"Backing store is not empty: {leftovers}; pass clear=True to wipe it"
        )
    for name in leftovers:
        store.remove(join_path("/", name), recursive=True, force=True)
        logger.debug("Cleared /%s from backing store", name)

    import_tree(store, tree)
    return Mirror(store, tree).root


def store_of(wrapper: MirrorDir) -> BackingStore:
    """Return the backing store behind a wrapper (diagnostics and tests)."""
    return wrapper.mirror.store
