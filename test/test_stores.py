"""
Tests for the in-memory key/value store
"""

from core.stores import MemoryStore


def test_get_set_has(clock):
    store = MemoryStore(clock=clock)

    assert store.get("missing") is None
    assert not store.has("missing")

    store.set("key", "value")

    assert store.get("key") == "value"
    assert store.has("key")


def test_ttl_expiry(clock):
    """Entries older than the TTL read as absent and are dropped"""
    store = MemoryStore(ttl_seconds=10, clock=clock)
    store.set("key", "value")

    clock.advance(10)
    assert store.get("key") == "value"

    clock.advance(1)
    assert store.get("key") is None
    assert len(store) == 0


def test_lru_eviction(clock):
    """The least recently used entry goes first once the store is full"""
    store = MemoryStore(max_entries=2, clock=clock)
    store.set("a", 1)
    store.set("b", 2)
    store.get("a")

    store.set("c", 3)

    assert store.has("a")
    assert not store.has("b")
    assert store.has("c")
    assert len(store) == 2


def test_delete_and_clear(clock):
    store = MemoryStore(clock=clock)
    store.set("a", 1)
    store.set("b", 2)

    store.delete("a")
    store.delete("never-set")
    assert not store.has("a")

    store.clear()
    assert len(store) == 0


def test_expired_entries_are_swept_on_write(clock):
    """Keys that are never read again do not outlive their TTL"""
    store = MemoryStore(ttl_seconds=10, clock=clock)
    for i in range(100):
        store.set(f"client-{i}", i)

    clock.advance(11)
    store.set("fresh", "value")

    assert len(store) == 1
    assert store.get("fresh") == "value"


def test_sweep_keeps_live_entries(clock):
    store = MemoryStore(ttl_seconds=10, clock=clock)
    store.set("old", 1)
    clock.advance(6)
    store.set("young", 2)

    clock.advance(5)
    store.set("new", 3)

    assert len(store) == 2
    assert not store.has("old")
    assert store.get("young") == 2
