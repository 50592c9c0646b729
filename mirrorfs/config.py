"""Store selection for make_mirror().

A config names the kind of backing store and its settings; create_store()
turns it into a live store.
"""

from dataclasses import dataclass, fields
from typing import Literal

from .base import BackingStore
from .directory import DirectoryStore
from .memory import MemoryStore


@dataclass
class MemoryStoreConfig:
    """Mirror into a fresh in-memory store."""

    type: Literal["memory"] = "memory"


@dataclass
class DirectoryStoreConfig:
    """Mirror into a real directory.

    Attributes:
        root: Absolute path of the directory that maps to the store's "/".
    """

    type: Literal["directory"] = "directory"
    root: str = ""


StoreConfig = MemoryStoreConfig | DirectoryStoreConfig

_CONFIGS: dict[str, type] = {
    "memory": MemoryStoreConfig,
    "directory": DirectoryStoreConfig,
}


def connect_store(type: str = "memory", **kwargs) -> StoreConfig:
    """Build a store config, checking settings against the store type.

    Examples:
        >>> connect_store()
        MemoryStoreConfig(type='memory')
        >>> connect_store(type="directory", root="/tmp/guest")
        DirectoryStoreConfig(type='directory', root='/tmp/guest')
    """
    config_cls = _CONFIGS.get(type)
    if config_cls is None:
        raise ValueError(
            f"Unsupported store type: {type!r} (known: {sorted(_CONFIGS)})"
        )

    allowed = {f.name for f in fields(config_cls)} - {"type"}
    unknown = sorted(set(kwargs) - allowed)
    if unknown:
        raise ValueError(f"Unexpected arguments for {type} store: {unknown}")

    config = config_cls(**kwargs)
    if isinstance(config, DirectoryStoreConfig) and not config.root:
        raise ValueError("Directory store requires 'root' parameter")
    return config


def create_store(config: StoreConfig) -> BackingStore:
    """Instantiate the backing store described by config."""
    if isinstance(config, MemoryStoreConfig):
        return MemoryStore()
    if isinstance(config, DirectoryStoreConfig):
        return DirectoryStore(config.root)
    raise ValueError(f"Unsupported store config: {config!r}")
