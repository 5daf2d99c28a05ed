"""
Grid representation for Wave Function Collapse.

The Grid pairs two size x size arrays that always move in lockstep:
- the constraint grid: one CandidateSet per cell (the "wave function")
- the resolution grid: the committed Tile per cell, or None

Cells are addressed by Position(row, col), row 0 being the north edge.
"""

from typing import Iterator

from tilecollapse.core import Direction, Position, Tile, TileConnection, TileSet

from .candidates import CandidateSet

DEFAULT_GRID_SIZE = 10

# Order in which neighbors are visited. Candidate gathering depends on it:
# ties in the choice heuristic go to the earliest neighbor's contributions.
NEIGHBOR_ORDER: tuple[Direction, ...] = (
    Direction.NORTH,
    Direction.SOUTH,
    Direction.WEST,
    Direction.EAST,
)


def unique_connections(tile_set: TileSet, direction: Direction) -> list[TileConnection]:
    """
    Union of every tile's adjacency list on one side.

    Duplicates are dropped, first-seen order is kept.
    """
    seen: list[TileConnection] = []
    for tile in tile_set:
        for connection in tile.connections(direction):
            if connection not in seen:
                seen.append(connection)
    return seen


class Grid:
    """
    The constraint grid and resolution grid of a solve.

    Created empty: every CandidateSet is the all-empty default and every
    cell is unresolved. build() replaces both grids from a tile set.
    """

    def __init__(self, size: int = DEFAULT_GRID_SIZE):
        if size < 1:
            raise ValueError(f"Grid size must be positive, got {size}")
        self.size = size
        self.tile_set = TileSet()
        self.cells: list[list[CandidateSet]] = [
            [CandidateSet() for _ in range(size)] for _ in range(size)
        ]
        self.tiles: list[list[Tile | None]] = [
            [None for _ in range(size)] for _ in range(size)
        ]
        self._resolved_count = 0

    def build(self, tile_set: TileSet):
        """
        Rebuild the constraint grid from a tile set and clear all resolutions.

        Every cell gets a fresh copy of the per-direction union of the tile
        set's rules, except on sides that face outside the grid, which stay
        empty. That omission is the only edge handling there is.

        Raises:
            InvalidTileSetError: If the tile set references missing tiles.
                The grid is left untouched in that case.
        """
        tile_set.validate_references()

        unions = {d: unique_connections(tile_set, d) for d in Direction}
        last = self.size - 1

        for row in range(self.size):
            for col in range(self.size):
                candidates = CandidateSet()
                if row != 0:
                    candidates.north = list(unions[Direction.NORTH])
                if row != last:
                    candidates.south = list(unions[Direction.SOUTH])
                if col != 0:
                    candidates.west = list(unions[Direction.WEST])
                if col != last:
                    candidates.east = list(unions[Direction.EAST])
                self.cells[row][col] = candidates
                self.tiles[row][col] = None

        self.tile_set = tile_set
        self._resolved_count = 0

    def candidates(self, pos: Position) -> CandidateSet:
        return self.cells[pos.row][pos.col]

    def tile_at(self, pos: Position) -> Tile | None:
        """The committed tile at a position, or None if unresolved."""
        return self.tiles[pos.row][pos.col]

    def is_resolved(self, pos: Position) -> bool:
        return self.tiles[pos.row][pos.col] is not None

    def resolve(self, pos: Position, tile: Tile):
        """
        Commit a tile into the resolution grid.

        Commits are final. Resolving an already-resolved cell is a bug in
        the caller, not a state the grid can represent.
        """
        if self.tiles[pos.row][pos.col] is not None:
            raise ValueError(f"Cell {pos} is already resolved")
        self.tiles[pos.row][pos.col] = tile
        self._resolved_count += 1

    def neighbors(self, pos: Position) -> Iterator[tuple[Position, Direction]]:
        """
        Yield all in-bounds neighbors of a position with their directions.

        Direction is FROM the input position TO the neighbor.
        e.g., (neighbor_pos, Direction.NORTH) means the neighbor is north of pos.
        """
        for direction in NEIGHBOR_ORDER:
            neighbor = pos + direction
            if neighbor.in_bounds(self.size):
                yield neighbor, direction

    def all_positions(self) -> Iterator[Position]:
        """Iterate over every position in row-major order."""
        for row in range(self.size):
            for col in range(self.size):
                yield Position(row, col)

    @property
    def resolved_count(self) -> int:
        """Number of cells holding a committed tile."""
        return self._resolved_count

    @property
    def total_cells(self) -> int:
        return self.size * self.size

    def is_complete(self) -> bool:
        """Check if every cell has been resolved."""
        return self._resolved_count == self.total_cells

    def entropy_map(self) -> list[list[int | None]]:
        """Per-cell entropy, None for resolved cells."""
        return [
            [
                None if self.tiles[row][col] is not None else self.cells[row][col].entropy
                for col in range(self.size)
            ]
            for row in range(self.size)
        ]

    def resolution_indices(self) -> list[list[int | None]]:
        """Per-cell committed tile index, None for unresolved cells."""
        return [
            [tile.index if tile is not None else None for tile in row]
            for row in self.tiles
        ]

    def render_entropy(self) -> str:
        """Text dump of the entropy map, "__" marking resolved cells."""
        lines = []
        for row in self.entropy_map():
            lines.append(" ".join("__" if value is None else str(value) for value in row))
        return "\n".join(lines)
