"""Shared test fixtures for tilecollapse."""

import random
import tempfile
from pathlib import Path

import pytest

from tilecollapse.core import Direction, Tile, TileConnection, TileSet


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow (skipped by default, run with --run-slow)")


def pytest_addoption(parser):
    """Add --run-slow option to pytest."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="Run slow tests (skipped by default)",
    )


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is passed."""
    if config.getoption("--run-slow"):
        return

    skip_slow = pytest.mark.skip(reason="Slow test (use --run-slow to run)")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


class ScriptedRandom(random.Random):
    """A Random whose randrange() replays scripted values first."""

    script: list[int]

    def randrange(self, *args, **kwargs):
        if self.script:
            return self.script.pop(0)
        return super().randrange(*args, **kwargs)


@pytest.fixture
def scripted_rng():
    """Factory for a Random that returns the given randrange() values first."""
    def make(*values: int) -> ScriptedRandom:
        rng = ScriptedRandom(0)
        rng.script = list(values)
        return rng
    return make


@pytest.fixture
def temp_data_dir() -> Path:
    """Create a temporary data directory for tests."""
    with tempfile.TemporaryDirectory(prefix="tilecollapse_test_") as tmpdir:
        yield Path(tmpdir)


# =============================================================================
# Tile Sets
# =============================================================================


@pytest.fixture
def single_tile_set() -> TileSet:
    """One tile with no rules at all."""
    return TileSet((Tile(index=0),))


@pytest.fixture
def chain_tile_set() -> TileSet:
    """Tile 1 may sit south of tile 0; nothing else is declared."""
    return TileSet((
        Tile(index=0, south=(TileConnection(1, Direction.SOUTH),)),
        Tile(index=1, north=(TileConnection(0, Direction.NORTH),)),
    ))


@pytest.fixture
def self_tile_set() -> TileSet:
    """One tile that may neighbor itself on every side."""
    return TileSet((
        Tile(
            index=0,
            north=(TileConnection(0, Direction.NORTH),),
            south=(TileConnection(0, Direction.SOUTH),),
            east=(TileConnection(0, Direction.EAST),),
            west=(TileConnection(0, Direction.WEST),),
        ),
    ))


@pytest.fixture
def pair_tile_set() -> TileSet:
    """Two tiles that may neighbor each other and themselves on every side."""
    tiles = []
    for index in range(2):
        tiles.append(Tile(
            index=index,
            **{
                d.value: tuple(TileConnection(other, d) for other in range(2))
                for d in Direction
            },
        ))
    return TileSet(tuple(tiles))
