"""Tile and TileSet models for tilecollapse.

A Tile carries four ordered adjacency lists, one per direction. Tiles and
tile sets are immutable (frozen Pydantic models) and compare structurally,
which is what the solver relies on to notice that the rules changed.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from pydantic import BaseModel, ConfigDict, Field, RootModel

from .types import Direction, TileConnection


class InvalidTileSetError(ValueError):
    """A tile set references tiles it does not contain."""

    def __init__(self, message: str, tile_index: int | None = None):
        super().__init__(message)
        self.tile_index = tile_index


class Tile(BaseModel):
    """A tile with per-direction adjacency rules.

    ``north`` lists the tiles that may sit to the north of this tile, and so
    on for the other sides. Equality and hashing cover the index and all
    four lists, so two tiles with the same index but different rules are
    different tiles.
    """

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0)
    north: tuple[TileConnection, ...] = ()
    south: tuple[TileConnection, ...] = ()
    east: tuple[TileConnection, ...] = ()
    west: tuple[TileConnection, ...] = ()

    def connections(self, direction: Direction) -> tuple[TileConnection, ...]:
        """Get the adjacency list for one side."""
        return getattr(self, direction.value)

    def total_connections(self) -> int:
        """Count adjacency entries across all four sides."""
        return sum(len(self.connections(d)) for d in Direction)

    def with_connection(self, direction: Direction, connection: TileConnection) -> Tile:
        """Return a new tile with ``connection`` appended to one side.

        Adding an entry that is already present returns the tile unchanged.
        """
        connection = TileConnection(*connection)
        current = self.connections(direction)
        if connection in current:
            return self
        return self.model_copy(update={direction.value: current + (connection,)})

    def without_connection(self, direction: Direction, connection: TileConnection) -> Tile:
        """Return a new tile with ``connection`` removed from one side."""
        connection = TileConnection(*connection)
        remaining = tuple(c for c in self.connections(direction) if c != connection)
        return self.model_copy(update={direction.value: remaining})


class TileSet(RootModel[tuple[Tile, ...]]):
    """An ordered, index-addressable collection of tiles."""

    model_config = ConfigDict(frozen=True)

    root: tuple[Tile, ...] = ()

    @classmethod
    def of(cls, tiles: Iterable[Tile]) -> TileSet:
        """Build a tile set from any iterable of tiles."""
        if isinstance(tiles, TileSet):
            return tiles
        return cls(tuple(tiles))

    def __len__(self) -> int:
        return len(self.root)

    def __iter__(self) -> Iterator[Tile]:  # type: ignore[override]
        return iter(self.root)

    def __getitem__(self, index: int) -> Tile:
        return self.root[index]

    def validate_references(self) -> None:
        """Reject tile sets whose rules point outside the set.

        Raises:
            InvalidTileSetError: If a tile's index differs from its position,
                or any adjacency entry references an index >= len(self).
        """
        size = len(self.root)
        for position, tile in enumerate(self.root):
            if tile.index != position:
                raise InvalidTileSetError(
                    f"Tile at position {position} has index {tile.index}",
                    tile_index=tile.index,
                )
            for direction in Direction:
                for connection in tile.connections(direction):
                    if not 0 <= connection.tile_index < size:
                        raise InvalidTileSetError(
                            f"Tile {tile.index} {direction} rule references "
                            f"tile {connection.tile_index}, but the set has {size} tiles",
                            tile_index=connection.tile_index,
                        )
