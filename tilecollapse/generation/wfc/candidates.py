"""
Per-cell candidate sets for Wave Function Collapse.

A CandidateSet holds, for one unresolved cell, four lists of adjacency
evidence: the tile connections that remain placeable here, as seen through
each side of the cell. It is the "superposition" of a cell.

Entropy is simply the number of entries across all four lists. Duplicates
are counted, so tiles referenced from several sides weigh more.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field

from tilecollapse.core import Direction, Tile, TileConnection, TileSet


@dataclass
class CandidateSet:
    """
    Remaining adjacency evidence for a single cell.

    An all-empty CandidateSet is the default value. Cells start that way
    before the first build, and a tile set whose tiles have no rules at all
    builds nothing but empty sets.
    """
    north: list[TileConnection] = field(default_factory=list)
    south: list[TileConnection] = field(default_factory=list)
    east: list[TileConnection] = field(default_factory=list)
    west: list[TileConnection] = field(default_factory=list)

    @property
    def entropy(self) -> int:
        """
        How uncertain this cell is.

        Lower = more constrained = should be collapsed first.
        """
        return len(self.north) + len(self.south) + len(self.east) + len(self.west)

    def is_empty(self) -> bool:
        """True when every facet is empty (the default value)."""
        return self.entropy == 0

    def facet(self, direction: Direction) -> list[TileConnection]:
        """The evidence list for one side of the cell."""
        return getattr(self, direction.value)

    def set_facet(self, direction: Direction, connections: list[TileConnection]):
        """Replace the evidence list for one side of the cell."""
        setattr(self, direction.value, connections)

    def copy(self) -> CandidateSet:
        return CandidateSet(
            north=list(self.north),
            south=list(self.south),
            east=list(self.east),
            west=list(self.west),
        )

    def random_tile(self, tile_set: TileSet, rng: random.Random) -> Tile:
        """
        Pick a tile from this cell's own evidence.

        Two-stage sampler: pick one of the four direction buckets uniformly,
        re-rolling while the bucket is empty, then pick uniformly inside the
        bucket. Buckets of different sizes are equally likely, so entries in
        small buckets are over-represented compared to a flat draw.

        The all-empty set always yields tile 0.
        """
        if self.is_empty():
            return tile_set[0]

        buckets = list(Direction)
        while True:
            bucket = self.facet(buckets[rng.randrange(len(buckets))])
            if not bucket:
                continue
            connection = bucket[rng.randrange(len(bucket))]
            return tile_set[connection.tile_index]


def connections_overlap(first, second) -> bool:
    """True if the two connection lists share at least one entry."""
    return any(connection in second for connection in first)


def tile_confidence(tile: Tile, candidates: CandidateSet) -> float:
    """
    Score how well a tile's own rules agree with a cell's evidence.

    Adds 0.25 for every side where the tile's adjacency list shares an
    entry with the cell's facet on that side. Result is in {0, 0.25, ..., 1.0}.
    """
    confidence = 0.0
    for direction in Direction:
        if connections_overlap(tile.connections(direction), candidates.facet(direction)):
            confidence += 0.25
    return confidence
