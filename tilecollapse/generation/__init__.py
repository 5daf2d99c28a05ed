"""Tile generation for tilecollapse."""

from .wfc import WFCSolver, Grid, SolverState, SelectionPolicy, Placement

__all__ = [
    "WFCSolver",
    "Grid",
    "SolverState",
    "SelectionPolicy",
    "Placement",
]
