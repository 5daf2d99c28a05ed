"""
Wave Function Collapse solver.

This is the heart of tilecollapse - the algorithm that picks a cell,
collapses it to a tile and narrows the cells around it.

The algorithm, once per step:
1. Rebuild the grid if the tile set changed
2. Find the unresolved cell with lowest entropy
3. Choose a tile from resolved-neighbor evidence (or at random from the
   cell's own evidence when there is none)
4. Commit the tile and overwrite the facing facet of each neighbor

There is no backtracking and no contradiction detection. Propagation is
one hop: only the four neighbors of a committed cell are narrowed, and a
cell whose evidence has become inconsistent still gets a best-effort tile.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Iterable

from tilecollapse.core import Position, Tile, TileConnection, TileSet
from tilecollapse.logging_config import log_rebuild, log_step

from .candidates import tile_confidence
from .grid import Grid

if TYPE_CHECKING:
    from tilecollapse.config import SolverSettings

logger = logging.getLogger(__name__)


class SolverState(Enum):
    """The current state of the WFC solver."""
    BUILDING = auto()   # No tile set has been built into the grid yet
    READY = auto()      # Grid freshly built, nothing resolved
    STEPPING = auto()   # At least one cell resolved, more to go
    COMPLETE = auto()   # Every cell resolved
    STALLED = auto()    # Selection reported no cell while unresolved cells remain


class SelectionPolicy(Enum):
    """How lowest-entropy selection treats a resolved baseline cell."""

    # The random baseline cell counts even when already resolved. If no
    # unresolved cell beats it strictly, selection reports "done", which can
    # stall the solve while equal-entropy cells remain.
    BASELINE = "baseline"
    # Only unresolved cells can be the baseline, so selection reports "done"
    # exactly when the grid is complete.
    EXHAUSTIVE = "exhaustive"


@dataclass(frozen=True)
class Placement:
    """One committed (position, tile) assignment."""

    position: Position
    tile: Tile
    confidence: float | None  # None when chosen by the random fallback
    step: int


class WFCSolver:
    """
    The WFC algorithm implementation.

    Usage:
        solver = WFCSolver(rng=random.Random(42))
        while True:
            placement = solver.step(tile_set)
            if placement is None:
                break

    Or for bulk solving:
        placements = solver.solve(tile_set)

    The tile set is passed on every step because it is owned by the rule
    authoring side and may change between steps. A change (by structural
    equality) rebuilds the grid and discards every resolved cell.
    """

    def __init__(
        self,
        grid: Grid | None = None,
        rng: random.Random | None = None,
        selection_policy: SelectionPolicy = SelectionPolicy.BASELINE,
    ):
        """
        Initialize the solver.

        Args:
            grid: The Grid to solve into (a fresh 10x10 grid by default)
            rng: Random source for cell selection and the fallback sampler.
                 Pass a seeded random.Random for reproducible runs.
            selection_policy: See SelectionPolicy
        """
        self.grid = grid if grid is not None else Grid()
        self.rng = rng if rng is not None else random.Random()
        self.selection_policy = selection_policy
        self.step_count = 0

        # Last committed placement (for visualization/debugging)
        self.last_placement: Placement | None = None

        self._tile_set: TileSet | None = None
        self._state = SolverState.BUILDING

    @classmethod
    def from_settings(cls, settings: "SolverSettings") -> WFCSolver:
        """Create a solver sized and seeded from settings."""
        return cls(
            grid=Grid(settings.grid_size),
            rng=random.Random(settings.seed),
            selection_policy=settings.selection_policy,
        )

    @property
    def state(self) -> SolverState:
        return self._state

    @property
    def tile_set(self) -> TileSet | None:
        """The tile set the grid was last built from."""
        return self._tile_set

    def sync(self, tile_set: TileSet) -> bool:
        """
        Rebuild the grid if the tile set differs from the last one used.

        Returns True if a rebuild happened.

        Raises:
            InvalidTileSetError: If the new tile set references missing
                tiles. The previous grid and tile set are kept.
        """
        if self._tile_set is not None and tile_set == self._tile_set:
            return False

        self.grid.build(tile_set)
        self._tile_set = tile_set
        self.step_count = 0
        self.last_placement = None
        self._state = SolverState.READY
        log_rebuild(logger, len(tile_set), self.grid.size)
        return True

    def reset(self):
        """Rebuild the grid from the current tile set, discarding all commits."""
        if self._tile_set is None:
            return
        tile_set = self._tile_set
        self._tile_set = None
        self.sync(tile_set)

    def step(self, tile_set: TileSet | Iterable[Tile]) -> Placement | None:
        """
        Perform one step: resolve at most one cell.

        Returns the placement made, or None if nothing was placed (empty
        tile set, grid complete, or selection stalled).
        """
        tile_set = TileSet.of(tile_set)
        self.sync(tile_set)

        # Nothing to place
        if len(tile_set) == 0:
            return None

        position = self.select_cell()
        if position is None:
            self._finish()
            return None

        tile, confidence = self.choose_tile(position)
        self.commit(position, tile)

        self.step_count += 1
        placement = Placement(position, tile, confidence, self.step_count)
        self.last_placement = placement
        self._state = SolverState.COMPLETE if self.grid.is_complete() else SolverState.STEPPING

        log_step(logger, self.step_count, position, tile.index, confidence)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Entropy after step %d:\n%s", self.step_count, self.grid.render_entropy())

        return placement

    def _finish(self):
        """Record why selection came back empty, logging only on transition."""
        if self.grid.is_complete():
            new_state = SolverState.COMPLETE
        else:
            new_state = SolverState.STALLED

        if new_state != self._state:
            if new_state == SolverState.STALLED:
                logger.warning(
                    f"Selection stalled with {self.grid.total_cells - self.grid.resolved_count} "
                    f"unresolved cells (policy={self.selection_policy.value})"
                )
            else:
                logger.info(f"Grid complete after {self.step_count} steps")
        self._state = new_state

    def select_cell(self) -> Position | None:
        """
        Find the cell to resolve next.

        A random cell is drawn as the baseline, then every unresolved cell is
        scanned in row-major order and replaces the baseline only when its
        entropy is strictly lower. Ties therefore keep the earlier cell, and
        the baseline itself when it is a global minimum.

        Returns None when there is no cell to resolve. Under the BASELINE
        policy that happens whenever the baseline was already resolved and
        nothing beat it, even if unresolved cells of equal entropy remain.
        """
        size = self.grid.size
        seed = Position(self.rng.randrange(size), self.rng.randrange(size))

        if self.selection_policy is SelectionPolicy.BASELINE:
            best: Position | None = seed
            best_entropy = self.grid.candidates(seed).entropy
        else:
            best = None if self.grid.is_resolved(seed) else seed
            best_entropy = self.grid.candidates(seed).entropy

        for position in self.grid.all_positions():
            if self.grid.is_resolved(position):
                continue
            entropy = self.grid.candidates(position).entropy
            if best is None or entropy < best_entropy:
                best = position
                best_entropy = entropy

        if best == seed and self.grid.is_resolved(seed):
            return None
        return best

    def gather_candidates(self, position: Position) -> list[Tile]:
        """
        Collect the tiles that resolved neighbors allow at a position.

        A resolved neighbor contributes its adjacency list for the side that
        faces this position: a north neighbor contributes its south list.
        Neighbors are visited north, south, west, east. Duplicates are kept.
        """
        tile_set = self._require_tile_set()
        tiles: list[Tile] = []

        for neighbor, direction in self.grid.neighbors(position):
            neighbor_tile = self.grid.tile_at(neighbor)
            if neighbor_tile is None:
                continue
            for connection in neighbor_tile.connections(direction.opposite):
                tiles.append(tile_set[connection.tile_index])

        return tiles

    def choose_tile(self, position: Position) -> tuple[Tile, float | None]:
        """
        Choose the most plausible tile for a position.

        With resolved neighbors, every gathered candidate is scored with
        tile_confidence() and the first one with the highest score wins.
        Without them, the cell's own evidence is sampled at random (tile 0
        for an all-empty cell) and the confidence is None.
        """
        tile_set = self._require_tile_set()
        candidates = self.grid.candidates(position)
        possible_tiles = self.gather_candidates(position)

        if not possible_tiles:
            return candidates.random_tile(tile_set, self.rng), None

        most_confident = possible_tiles[0]
        highest_confidence = tile_confidence(most_confident, candidates)
        for tile in possible_tiles[1:]:
            confidence = tile_confidence(tile, candidates)
            if confidence > highest_confidence:
                highest_confidence = confidence
                most_confident = tile

        return most_confident, highest_confidence

    def commit(self, position: Position, tile: Tile):
        """
        Resolve a cell and narrow its neighbors.

        Each neighbor's facet that faces the committed cell is overwritten
        (not intersected) with a single entry naming the tile and the
        direction from the neighbor to the committed cell.
        """
        self.grid.resolve(position, tile)

        for neighbor, direction in self.grid.neighbors(position):
            facing = direction.opposite
            self.grid.candidates(neighbor).set_facet(
                facing, [TileConnection(tile.index, facing)]
            )

    def solve(
        self,
        tile_set: TileSet | Iterable[Tile],
        max_steps: int | None = None,
    ) -> list[Placement]:
        """
        Step until nothing more is placed.

        Returns the placements made by this call, in order.
        """
        tile_set = TileSet.of(tile_set)
        placements: list[Placement] = []

        while max_steps is None or len(placements) < max_steps:
            placement = self.step(tile_set)
            if placement is None:
                break
            placements.append(placement)

        return placements

    def _require_tile_set(self) -> TileSet:
        if self._tile_set is None:
            raise RuntimeError("Solver has no tile set; call sync() or step() first")
        return self._tile_set
