"""Core domain models for tilecollapse.

Pure models with no I/O. Tiles and tile sets are immutable (frozen Pydantic
models) and use transformation methods for updates.

Usage:
    from tilecollapse.core import Direction, Position, Tile, TileSet
"""

# Types
from .types import Direction, Position, TileConnection

# Tiles
from .tiles import Tile, TileSet, InvalidTileSetError

__all__ = [
    "Direction",
    "Position",
    "TileConnection",
    "Tile",
    "TileSet",
    "InvalidTileSetError",
]
