"""mirrorfs: Plain nested trees mirrored live onto a backing filesystem store."""

from .base import BackingStore, EntryStat
from .config import (
    DirectoryStoreConfig,
    MemoryStoreConfig,
    StoreConfig,
    connect_store,
    create_store,
)
from .directory import DirectoryStore
from .errors import DetachedError, Exit, StoreError
from .memory import MemoryStore
from .mirror import Mirror, MirrorDir, make_mirror, store_of
from .tree import export_tree, import_tree

__all__ = [
    "BackingStore",
    "connect_store",
    "create_store",
    "DetachedError",
    "DirectoryStore",
    "DirectoryStoreConfig",
    "EntryStat",
    "Exit",
    "export_tree",
    "import_tree",
    "make_mirror",
    "MemoryStore",
    "MemoryStoreConfig",
    "Mirror",
    "MirrorDir",
    "StoreConfig",
    "StoreError",
    "store_of",
]
