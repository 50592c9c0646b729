"""Tests for store configuration and the Exit signal."""

import pytest

from mirrorfs import (
    DirectoryStore,
    DirectoryStoreConfig,
    Exit,
    MemoryStore,
    MemoryStoreConfig,
    connect_store,
    create_store,
)


class TestConnectStore:
    """Test connect_store."""

    def test_default_memory(self):
        """Test the default config is an in-memory store."""
        assert connect_store() == MemoryStoreConfig()

    def test_directory(self):
        """Test configuring a directory store."""
        config = connect_store(type="directory", root="/tmp/guest")
        assert config == DirectoryStoreConfig(root="/tmp/guest")
        assert config.type == "directory"

    def test_directory_requires_root(self):
        """Test the directory store needs a root."""
        with pytest.raises(ValueError, match="requires 'root'"):
            connect_store(type="directory")

    def test_unexpected_arguments(self):
        """Test unknown kwargs are rejected for each type."""
        with pytest.raises(ValueError, match="Unexpected arguments"):
            connect_store(type="memory", root="/tmp")
        with pytest.raises(ValueError, match="Unexpected arguments"):
            connect_store(type="directory", root="/tmp", tracking=True)

    def test_unsupported_type(self):
        """Test unknown store types are rejected."""
        with pytest.raises(ValueError, match="Unsupported store type"):
            connect_store(type="s3")


class TestCreateStore:
    """Test create_store."""

    def test_memory(self):
        """Test building a memory store."""
        assert isinstance(create_store(MemoryStoreConfig()), MemoryStore)

    def test_directory(self, tmp_path):
        """Test building a directory store."""
        store = create_store(DirectoryStoreConfig(root=str(tmp_path)))
        assert isinstance(store, DirectoryStore)
        assert store.root == tmp_path.resolve()

    def test_unknown_config(self):
        """Test arbitrary objects are rejected."""
        with pytest.raises(ValueError):
            create_store(object())


class TestExit:
    """Test the process exit signal."""

    def test_carries_code(self):
        """Test Exit keeps the code and a readable message."""
        with pytest.raises(Exit) as exc_info:
            raise Exit(3)
        assert exc_info.value.code == 3
        assert str(exc_info.value) == "Process exited with code 3"
