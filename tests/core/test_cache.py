"""Tests for key-value stores backing the context-cache record."""

import json

from av_boq.core.cache import JsonFileStore, MemoryStore


def test_memory_store_get_empty():
    """Test getting from empty store."""
    assert MemoryStore().get("key") is None


def test_memory_store_set_get_remove():
    """Test memory store set, get and remove."""
    store = MemoryStore()
    store.set("key", "value")
    assert store.get("key") == "value"
    store.remove("key")
    assert store.get("key") is None


def test_memory_store_remove_missing_is_noop():
    """Test removing a missing key."""
    MemoryStore().remove("missing")


def test_json_store_persists_across_instances(tmp_path):
    """Test that values survive a new store instance (process restart)."""
    path = tmp_path / "state" / "cache.json"
    JsonFileStore(path).set("name", "cachedContents/abc")

    reopened = JsonFileStore(path)
    assert reopened.get("name") == "cachedContents/abc"
    assert json.loads(path.read_text()) == {"name": "cachedContents/abc"}


def test_json_store_overwrite_and_remove(tmp_path):
    """Test overwrite and remove on the JSON store."""
    store = JsonFileStore(tmp_path / "cache.json")
    store.set("key", "value1")
    store.set("key", "value2")
    store.set("other", "x")
    assert store.get("key") == "value2"

    store.remove("key")
    assert store.get("key") is None
    assert store.get("other") == "x"


def test_json_store_corrupt_file_reads_as_empty(tmp_path):
    """Test that a corrupt file reads as empty."""
    path = tmp_path / "cache.json"
    path.write_text("{not json")
    store = JsonFileStore(path)
    assert store.get("key") is None

    store.set("key", "value")
    assert store.get("key") == "value"


def test_json_store_missing_file(tmp_path):
    """Test reading from a missing file."""
    assert JsonFileStore(tmp_path / "nope.json").get("key") is None
