"""Read-only observation of a running solve."""

from .api import GridObserver, GridSnapshot, CellView

__all__ = ["GridObserver", "GridSnapshot", "CellView"]
