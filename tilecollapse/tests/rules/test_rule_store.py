"""Tests for the RuleStore."""

import pytest

from tilecollapse.core import Direction, TileConnection, TileSet
from tilecollapse.rules import RuleStore, RuleStoreError, UnknownTileError, make_bidirectional_rule

N, S, E, W = Direction.NORTH, Direction.SOUTH, Direction.EAST, Direction.WEST


@pytest.fixture
def store() -> RuleStore:
    """A store with three rule-free tiles."""
    store = RuleStore()
    for _ in range(3):
        store.add_tile()
    return store


class TestTiles:
    """Test adding and removing tiles."""

    def test_add_tile_uses_next_index(self):
        store = RuleStore()
        assert store.add_tile().index == 0
        assert store.add_tile().index == 1
        assert len(store) == 2

    def test_snapshot_is_immutable(self, store):
        snapshot = store.tile_set()
        store.add_connection(0, N, TileConnection(1, N))
        assert snapshot[0].north == ()
        assert store.tile_set() != snapshot

    def test_unchanged_store_gives_equal_snapshots(self, store):
        assert store.tile_set() == store.tile_set()

    def test_empty_store(self):
        assert RuleStore().tile_set() == TileSet()

    def test_remove_tile_reindexes_and_drops_references(self, store):
        store.add_connection(0, E, TileConnection(1, E))
        store.add_connection(0, E, TileConnection(2, E))
        store.add_connection(2, W, TileConnection(0, W))

        store.remove_tile(1)

        tile_set = store.tile_set()
        assert len(tile_set) == 2
        assert [t.index for t in tile_set] == [0, 1]
        assert tile_set[0].east == (TileConnection(1, E),)  # old tile 2
        assert tile_set[1].west == (TileConnection(0, W),)
        tile_set.validate_references()

    def test_remove_unknown_tile(self, store):
        with pytest.raises(UnknownTileError) as exc_info:
            store.remove_tile(7)
        assert exc_info.value.tile_index == 7


class TestConnections:
    """Test editing adjacency rules."""

    def test_add_connection(self, store):
        assert store.add_connection(0, S, TileConnection(2, S)) is True
        assert store.get_tile(0).south == (TileConnection(2, S),)

    def test_duplicate_connection_is_ignored(self, store):
        store.add_connection(0, S, TileConnection(2, S))
        assert store.add_connection(0, S, (2, S)) is False
        assert len(store.get_tile(0).south) == 1

    def test_remove_connection(self, store):
        store.add_connection(1, W, TileConnection(0, W))
        assert store.remove_connection(1, W, TileConnection(0, W)) is True
        assert store.remove_connection(1, W, TileConnection(0, W)) is False
        assert store.get_tile(1).west == ()

    def test_unknown_tile_raises(self, store):
        with pytest.raises(UnknownTileError):
            store.add_connection(3, N, TileConnection(0, N))
        with pytest.raises(RuleStoreError):
            store.get_tile(-1)

    def test_store_allows_dangling_references(self, store):
        """Validation happens when the solver builds, not while editing."""
        store.add_connection(0, N, TileConnection(10, N))
        assert store.get_tile(0).north == (TileConnection(10, N),)

    def test_bidirectional_rule(self, store):
        make_bidirectional_rule(store, 0, 1, S)
        assert store.get_tile(0).south == (TileConnection(1, S),)
        assert store.get_tile(1).north == (TileConnection(0, N),)


class TestRunFlag:
    """Test the run flag."""

    def test_defaults_to_stopped(self):
        assert RuleStore().running is False

    def test_set_running(self, store):
        store.set_running(True)
        assert store.running
        store.set_running(False)
        assert not store.running
