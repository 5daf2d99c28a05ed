"""Foundational types for tilecollapse.

This module defines the core types used throughout the system:
- Direction: Cardinal directions with offsets and opposites
- Position: Grid coordinates (row, col)
- TileConnection: A (tile index, direction) adjacency entry
"""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple


class Direction(Enum):
    """Cardinal directions for adjacency rules.

    The member order (NORTH, SOUTH, EAST, WEST) is also the bucket order
    used by the random fallback sampler.
    """

    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"

    @property
    def offset(self) -> tuple[int, int]:
        """Get the (d_row, d_col) offset for this direction.

        Row 0 is the north edge of the grid, so NORTH decreases the row.
        """
        return _DIRECTION_OFFSETS[self]

    @property
    def opposite(self) -> Direction:
        """Get the opposite direction."""
        return _DIRECTION_OPPOSITES[self]

    @classmethod
    def from_index(cls, index: int) -> Direction:
        """Map 0..3 to NORTH, SOUTH, EAST, WEST. Anything else is NORTH."""
        return _DIRECTION_ORDER[index] if 0 <= index < len(_DIRECTION_ORDER) else cls.NORTH

    def __str__(self) -> str:
        return self.value.capitalize()


# Lookup tables for Direction properties
_DIRECTION_OFFSETS: dict[Direction, tuple[int, int]] = {
    Direction.NORTH: (-1, 0),
    Direction.SOUTH: (1, 0),
    Direction.EAST: (0, 1),
    Direction.WEST: (0, -1),
}

_DIRECTION_OPPOSITES: dict[Direction, Direction] = {
    Direction.NORTH: Direction.SOUTH,
    Direction.SOUTH: Direction.NORTH,
    Direction.EAST: Direction.WEST,
    Direction.WEST: Direction.EAST,
}

_DIRECTION_ORDER: tuple[Direction, ...] = (
    Direction.NORTH,
    Direction.SOUTH,
    Direction.EAST,
    Direction.WEST,
)


class Position(NamedTuple):
    """A cell address in the grid.

    Coordinates are matrix-style:
    - row increases to the south (down)
    - col increases to the east (right)
    - (0, 0) is the northwest corner
    """

    row: int
    col: int

    def __add__(self, other: object) -> Position:
        """Add a direction offset to this position."""
        if isinstance(other, Direction):
            d_row, d_col = other.offset
            return Position(self.row + d_row, self.col + d_col)
        return NotImplemented

    def neighbors(self) -> dict[Direction, Position]:
        """Get all adjacent positions keyed by direction (may be out of bounds)."""
        return {d: self + d for d in Direction}

    def in_bounds(self, size: int) -> bool:
        """Check if position is within a size x size grid."""
        return 0 <= self.row < size and 0 <= self.col < size


class TileConnection(NamedTuple):
    """An adjacency entry: tile ``tile_index`` is a valid neighbor in ``direction``."""

    tile_index: int
    direction: Direction
