"""Runtime driving for tilecollapse."""

from .runner import SolverRunner

__all__ = ["SolverRunner"]
