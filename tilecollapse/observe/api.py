"""Observer API for tilecollapse.

Query-only interface for viewing solver state. Renderers read the
resolution grid (tile indices) and, if they want to show uncertainty, the
entropy map. Reads take the runner's lock so they never interleave with a
step.
"""

from __future__ import annotations

from contextlib import nullcontext
from dataclasses import dataclass
from typing import TYPE_CHECKING, ContextManager

from tilecollapse.core import Direction, Position, TileConnection

if TYPE_CHECKING:
    from threading import Lock

    from tilecollapse.engine import SolverRunner
    from tilecollapse.generation.wfc import WFCSolver, SolverState


@dataclass(frozen=True)
class CellView:
    """Read-only view of one cell."""

    position: Position
    tile_index: int | None
    entropy: int
    candidates: dict[Direction, tuple[TileConnection, ...]]

    @property
    def resolved(self) -> bool:
        return self.tile_index is not None


@dataclass(frozen=True)
class GridSnapshot:
    """Consistent copy of everything a renderer needs, taken in one read."""

    resolution: list[list[int | None]]
    entropy: list[list[int | None]]
    state: "SolverState"
    resolved: int
    total: int


class GridObserver:
    """Query-only interface for observing a solve.

    No mutation methods - just queries.
    """

    def __init__(self, solver: "WFCSolver", lock: "Lock | None" = None):
        """Initialize GridObserver.

        Args:
            solver: The solver whose grid is observed
            lock: Lock the stepping side holds while mutating, if any
        """
        self._solver = solver
        self._lock = lock

    @classmethod
    def for_runner(cls, runner: "SolverRunner") -> GridObserver:
        """Observe a runner's solver under the runner's lock."""
        return cls(runner.solver, runner.lock)

    def _read(self) -> ContextManager:
        return self._lock if self._lock is not None else nullcontext()

    # -------------------------------------------------------------------------
    # Grid Queries
    # -------------------------------------------------------------------------

    @property
    def size(self) -> int:
        return self._solver.grid.size

    @property
    def state(self) -> "SolverState":
        return self._solver.state

    def resolution(self) -> list[list[int | None]]:
        """Committed tile index per cell, None where unresolved."""
        with self._read():
            return self._solver.grid.resolution_indices()

    def entropy(self) -> list[list[int | None]]:
        """Entropy per cell, None where resolved."""
        with self._read():
            return self._solver.grid.entropy_map()

    def progress(self) -> tuple[int, int]:
        """Get (resolved cells, total cells)."""
        with self._read():
            grid = self._solver.grid
            return grid.resolved_count, grid.total_cells

    def cell(self, pos: Position) -> CellView:
        """Get a view of one cell.

        Raises:
            IndexError: If the position is outside the grid.
        """
        with self._read():
            grid = self._solver.grid
            if not pos.in_bounds(grid.size):
                raise IndexError(f"Position {pos} outside {grid.size}x{grid.size} grid")
            candidates = grid.candidates(pos)
            tile = grid.tile_at(pos)
            return CellView(
                position=pos,
                tile_index=tile.index if tile is not None else None,
                entropy=candidates.entropy,
                candidates={d: tuple(candidates.facet(d)) for d in Direction},
            )

    def snapshot(self) -> GridSnapshot:
        """Get resolution, entropy and progress from a single consistent read."""
        with self._read():
            grid = self._solver.grid
            return GridSnapshot(
                resolution=grid.resolution_indices(),
                entropy=grid.entropy_map(),
                state=self._solver.state,
                resolved=grid.resolved_count,
                total=grid.total_cells,
            )
