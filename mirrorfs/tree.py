"""Import plain trees into a backing store and export them back out.

A plain tree is a nested mapping: ``str``/``bytes`` values are files,
mapping values are directories.

Example:
    >>> store = MemoryStore()
    >>> import_tree(store, {"docs": {"readme.txt": "hi"}})
    >>> export_tree(store)
    {'docs': {'readme.txt': 'hi'}}
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .base import BackingStore, check_name, classify, join_path, normalize_path

logger = logging.getLogger(__name__)


def to_plain(value: Any) -> Any:
    """Deep-copy a plain tree value into fresh dicts and immutable content.

    Any mapping (including a mirror wrapper) becomes a ``dict``; bytes-like
    content becomes ``bytes``. Names and value types are validated, so a
    bad tree is rejected before anything touches a store.

    Raises:
        TypeError: If a value is neither file content nor a mapping.
        ValueError: If a directory contains an invalid entry name.
    """
    if classify(value) == "file":
        return value if isinstance(value, str) else bytes(value)
    return {check_name(name): to_plain(child) for name, child in value.items()}


def import_tree(store: BackingStore, tree: Mapping[str, Any], path: str = "/") -> None:
    """Materialize a plain tree in the store, depth-first.

    Every directory (the one at ``path`` included) gets a ``mkdir`` before
    its children are written; every file gets a single ``write_file``.
    The whole tree is validated before the first store call, so a bad
    value or name leaves the store untouched.

    Args:
        store: Store to write into.
        tree: Directory-shaped plain tree.
        path: Store path the tree's root maps to.

    Raises:
        TypeError: If tree (or any nested value) has an unsupported type.
        ValueError: If tree holds an invalid entry name.
        StoreError: If a store primitive fails.
    """
    path = normalize_path(path)
    plain = to_plain(tree)
    if classify(plain) != "dir":
        raise TypeError(f"Expected a mapping at {path}, got {type(tree).__name__}")
    _import_dir(store, plain, path)


def _import_dir(store: BackingStore, tree: dict[str, Any], path: str) -> None:
    store.mkdir(path, exist_ok=True)
    logger.debug("Imported directory %s", path)
    for name, value in tree.items():
        child = join_path(path, name)
        if classify(value) == "file":
            store.write_file(child, value)
            logger.debug("Imported file %s", child)
        else:
            _import_dir(store, value, child)


def export_tree(
    store: BackingStore, path: str = "/", decode_text: bool = True
) -> dict[str, Any]:
    """Snapshot a store directory as a plain tree.

    File content that is valid UTF-8 comes back as ``str``; anything else
    is kept as the raw ``bytes``. Entries that are neither files nor
    directories are skipped.

    Args:
        store: Store to read from.
        path: Directory to export.
        decode_text: If False, every file is returned as ``bytes``.

    Returns:
        A fresh nested dict sharing nothing with the store.

    Raises:
        StoreError: If a store primitive fails.
    """
    path = normalize_path(path)
    tree: dict[str, Any] = {}
    for name in store.listdir(path):
        child = join_path(path, name)
        info = store.stat(child)
        if info.is_file:
            content = bytes(store.read_file(child))
            if decode_text:
                try:
                    tree[name] = content.decode("utf-8")
                    continue
                except UnicodeDecodeError:
                    logger.debug("Kept %s as bytes (not valid UTF-8)", child)
            tree[name] = content
        elif info.is_dir:
            tree[name] = export_tree(store, child, decode_text)
    return tree
