"""Wave Function Collapse algorithm for tile synthesis."""

from .candidates import CandidateSet, tile_confidence
from .grid import Grid, DEFAULT_GRID_SIZE
from .solver import WFCSolver, SolverState, SelectionPolicy, Placement

__all__ = [
    "CandidateSet",
    "tile_confidence",
    "Grid",
    "DEFAULT_GRID_SIZE",
    "WFCSolver",
    "SolverState",
    "SelectionPolicy",
    "Placement",
]
