"""SolverRunner - paced stepping for interactive hosts.

Drives a WFCSolver one step at a time at a fixed cadence (one step per
100 ms by default) so a renderer can show the grid filling in. Steps only
happen while the run flag is set. Every grid mutation happens under a lock
that readers (see observe.api.GridObserver) share, so a reader never sees
a half-applied commit.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, TYPE_CHECKING

from tilecollapse.core import TileSet
from tilecollapse.logging_config import log_runner

if TYPE_CHECKING:
    from tilecollapse.config import SolverSettings
    from tilecollapse.generation.wfc import WFCSolver, Placement
    from tilecollapse.rules import RuleStore

logger = logging.getLogger(__name__)

DEFAULT_STEP_INTERVAL = 0.1


class SolverRunner:
    """Paces solver steps and serializes them against readers.

    Usage:
        runner = SolverRunner.for_store(solver, store)
        runner.tick()   # From a host's frame loop: at most one step

    Or on a background thread:
        runner.start()
        ...
        runner.stop()
    """

    def __init__(
        self,
        solver: "WFCSolver",
        tiles: Callable[[], TileSet],
        run_flag: Callable[[], bool],
        step_interval: float = DEFAULT_STEP_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize SolverRunner.

        Args:
            solver: The solver to drive
            tiles: Returns the current tile set; read once per step
            run_flag: Returns whether stepping is enabled
            step_interval: Minimum seconds between two steps (0 = every tick)
            clock: Monotonic time source, in seconds
        """
        if step_interval < 0:
            raise ValueError(f"step_interval must be >= 0, got {step_interval}")
        self._solver = solver
        self._tiles = tiles
        self._run_flag = run_flag
        self.step_interval = step_interval
        self._clock = clock
        self._lock = threading.Lock()
        self._last_step_at: float | None = None

        # Background thread state
        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()

        # Callbacks for renderer updates (called after each placement)
        self._step_callbacks: list[Callable[["Placement"], None]] = []

    @classmethod
    def for_store(
        cls,
        solver: "WFCSolver",
        store: "RuleStore",
        settings: "SolverSettings | None" = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> SolverRunner:
        """Create a runner reading tiles and the run flag from a RuleStore."""
        interval = settings.step_interval if settings is not None else DEFAULT_STEP_INTERVAL
        return cls(
            solver,
            tiles=store.tile_set,
            run_flag=lambda: store.running,
            step_interval=interval,
            clock=clock,
        )

    @property
    def solver(self) -> "WFCSolver":
        return self._solver

    @property
    def lock(self) -> threading.Lock:
        """Lock held while the solver mutates the grid."""
        return self._lock

    @property
    def is_running(self) -> bool:
        """Check if the background thread is running."""
        return self._thread is not None and self._thread.is_alive()

    def on_step(self, callback: Callable[["Placement"], None]) -> None:
        """Register a placement callback.

        Callbacks are called after each placement, outside the lock, from
        whichever thread ran the step.
        """
        self._step_callbacks.append(callback)

    def tick(self, now: float | None = None) -> "Placement | None":
        """Run at most one solver step.

        Does nothing while the run flag is clear or before step_interval has
        elapsed since the previous step.

        Args:
            now: Current time in clock units (defaults to the runner's clock)

        Returns:
            The placement made, or None.
        """
        if not self._run_flag():
            return None

        now = self._clock() if now is None else now
        if self._last_step_at is not None and now - self._last_step_at < self.step_interval:
            return None

        tile_set = self._tiles()
        with self._lock:
            try:
                placement = self._solver.step(tile_set)
            except Exception as e:
                logger.error(f"Step error: {e}")
                raise
        self._last_step_at = now

        if placement is not None:
            self._notify_callbacks(placement)
        return placement

    def run_until_idle(self, max_steps: int | None = None) -> list["Placement"]:
        """Step with no pacing until a step places nothing.

        Still honors the run flag. Returns the placements made.
        """
        placements: list["Placement"] = []
        while max_steps is None or len(placements) < max_steps:
            if not self._run_flag():
                break
            tile_set = self._tiles()
            with self._lock:
                placement = self._solver.step(tile_set)
            if placement is None:
                break
            placements.append(placement)
            self._notify_callbacks(placement)
        return placements

    # -------------------------------------------------------------------------
    # Thread Implementation
    # -------------------------------------------------------------------------

    def start(self) -> None:
        """Start ticking on a daemon background thread."""
        if self.is_running:
            logger.warning("SolverRunner already running")
            return

        self._stop_event.clear()
        self._thread = threading.Thread(target=self._thread_main, daemon=True)
        self._thread.start()
        log_runner(logger, "started", f"interval={self.step_interval}s")

    def stop(self, timeout: float = 5.0) -> None:
        """Stop the background thread and wait for it to finish."""
        if self._thread is None:
            return

        self._stop_event.set()
        if self._thread.is_alive():
            self._thread.join(timeout=timeout)
        self._thread = None
        log_runner(logger, "stopped")

    def _thread_main(self) -> None:
        """Tick until stopped. A step error ends the thread."""
        poll = self.step_interval if self.step_interval > 0 else 0.001
        try:
            while not self._stop_event.is_set():
                self.tick()
                self._stop_event.wait(poll)
        except Exception as e:
            logger.error(f"Runner thread error: {e}")

    def _notify_callbacks(self, placement: "Placement") -> None:
        for callback in self._step_callbacks:
            try:
                callback(placement)
            except Exception as e:
                logger.error(f"Step callback error: {e}")
