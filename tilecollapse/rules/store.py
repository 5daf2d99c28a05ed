"""Rule store for tilecollapse.

The RuleStore is the programmatic side of rule authoring: it owns the
mutable list of tiles and their adjacency rules, plus the "run" flag that
gates solving. The solver never sees the store itself, only immutable
TileSet snapshots taken from it.
"""

from __future__ import annotations

import logging
import threading

from tilecollapse.core import Direction, Tile, TileConnection, TileSet

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Exceptions
# -----------------------------------------------------------------------------


class RuleStoreError(Exception):
    """Base exception for RuleStore errors."""

    pass


class UnknownTileError(RuleStoreError):
    """Tile index not present in the store."""

    def __init__(self, message: str, tile_index: int | None = None):
        super().__init__(message)
        self.tile_index = tile_index


# -----------------------------------------------------------------------------
# RuleStore
# -----------------------------------------------------------------------------


class RuleStore:
    """Mutable tile rules and run flag, safe to edit from another thread.

    Tile indices are always dense: tile i sits at position i. Removing a
    tile shifts the later tiles down and rewrites every rule that pointed
    at them.
    """

    def __init__(self, tiles: list[Tile] | None = None, running: bool = False):
        self._lock = threading.Lock()
        self._tiles: list[Tile] = list(tiles) if tiles else []
        self._running = running

    # -------------------------------------------------------------------------
    # Run flag
    # -------------------------------------------------------------------------

    @property
    def running(self) -> bool:
        """Whether the solver should be stepping."""
        return self._running

    def set_running(self, running: bool) -> None:
        if running != self._running:
            logger.info(f"Run flag {'set' if running else 'cleared'}")
        self._running = running

    # -------------------------------------------------------------------------
    # Tiles
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._tiles)

    def tile_set(self) -> TileSet:
        """Immutable snapshot of the current rules."""
        with self._lock:
            return TileSet.of(self._tiles)

    def get_tile(self, index: int) -> Tile:
        with self._lock:
            self._check_index(index)
            return self._tiles[index]

    def add_tile(self) -> Tile:
        """Append a tile with no rules. Its index is its position."""
        with self._lock:
            tile = Tile(index=len(self._tiles))
            self._tiles.append(tile)
        logger.debug(f"Added tile {tile.index}")
        return tile

    def remove_tile(self, index: int) -> None:
        """Remove a tile and every rule that references it.

        Later tiles are re-indexed so indices stay dense.
        """
        with self._lock:
            self._check_index(index)
            del self._tiles[index]
            self._tiles = [_drop_and_shift(tile, index) for tile in self._tiles]
        logger.debug(f"Removed tile {index}")

    def add_connection(
        self,
        tile_index: int,
        side: Direction,
        connection: TileConnection,
    ) -> bool:
        """Allow ``connection`` on one side of a tile.

        Returns False if the entry was already present.

        Raises:
            UnknownTileError: If ``tile_index`` is not in the store.
        """
        connection = TileConnection(*connection)
        with self._lock:
            self._check_index(tile_index)
            tile = self._tiles[tile_index]
            updated = tile.with_connection(side, connection)
            if updated is tile:
                return False
            self._tiles[tile_index] = updated
        logger.debug(f"Tile {tile_index} {side}: added {connection.tile_index} ({connection.direction})")
        return True

    def remove_connection(
        self,
        tile_index: int,
        side: Direction,
        connection: TileConnection,
    ) -> bool:
        """Remove a rule entry. Returns False if it was not present."""
        connection = TileConnection(*connection)
        with self._lock:
            self._check_index(tile_index)
            tile = self._tiles[tile_index]
            if connection not in tile.connections(side):
                return False
            self._tiles[tile_index] = tile.without_connection(side, connection)
        logger.debug(f"Tile {tile_index} {side}: removed {connection.tile_index} ({connection.direction})")
        return True

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._tiles):
            raise UnknownTileError(
                f"No tile {index} (store has {len(self._tiles)} tiles)",
                tile_index=index,
            )


def _drop_and_shift(tile: Tile, removed: int) -> Tile:
    """Rewrite a tile's rules after tile ``removed`` left the set."""
    updates: dict[str, tuple[TileConnection, ...]] = {}
    for direction in Direction:
        updates[direction.value] = tuple(
            TileConnection(c.tile_index - 1 if c.tile_index > removed else c.tile_index, c.direction)
            for c in tile.connections(direction)
            if c.tile_index != removed
        )
    index = tile.index - 1 if tile.index > removed else tile.index
    return tile.model_copy(update={"index": index, **updates})


def make_bidirectional_rule(
    store: RuleStore,
    tile_a: int,
    tile_b: int,
    direction: Direction,
) -> None:
    """
    Let ``tile_b`` sit in ``direction`` of ``tile_a``, and the reverse.

    e.g. direction=SOUTH adds (b, SOUTH) to a's south list and (a, NORTH)
    to b's north list.
    """
    store.add_connection(tile_a, direction, TileConnection(tile_b, direction))
    store.add_connection(tile_b, direction.opposite, TileConnection(tile_a, direction.opposite))
