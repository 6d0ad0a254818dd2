"""Interactive runs advanced step by step by API clients."""

import logging
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from mazelab.config import get_settings
from mazelab.core.maze_model import Maze
from mazelab.core.simulation import SimulationDriver, StepFrame
from mazelab.strategies.base import Strategy

logger = logging.getLogger(__name__)


@dataclass
class LiveRun:
    """A run held in memory between advance calls."""

    run_id: str
    driver: SimulationDriver
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self, include_frames: bool = False) -> dict:
        """Convert to dictionary."""
        result = self.driver.trace.to_dict(include_frames=include_frames)
        result["run_id"] = self.run_id
        result["created_at"] = self.created_at.isoformat()
        result["max_steps"] = self.driver.maze.max_steps
        return result


class RunService:
    """Keeps live runs by ID, evicting the oldest beyond a fixed capacity."""

    def __init__(self, max_runs: int = 200, flag_exit_from_start: bool = True):
        self.max_runs = max_runs
        self.flag_exit_from_start = flag_exit_from_start
        self._runs: OrderedDict[str, LiveRun] = OrderedDict()

    def create_run(
        self,
        maze: Maze,
        strategy: Strategy,
        record_frames: bool = True,
        run_id: Optional[str] = None,
    ) -> LiveRun:
        """
        Start a new run at the maze's start pose.

        Args:
            maze: Maze to explore.
            strategy: Strategy that drives the run.
            record_frames: Keep every step frame on the trace.
            run_id: Optional custom run ID. If not provided, generates one.

        Returns:
            The new LiveRun.
        """
        if run_id is None:
            run_id = f"run_{uuid.uuid4().hex[:12]}"

        driver = SimulationDriver(
            maze,
            strategy,
            record_frames=record_frames,
            flag_exit_from_start=self.flag_exit_from_start,
        )
        run = LiveRun(run_id=run_id, driver=driver)
        self._runs[run_id] = run

        while len(self._runs) > self.max_runs:
            evicted, _ = self._runs.popitem(last=False)
            logger.info(f"Evicted run {evicted}")

        logger.info(f"Created run {run_id}: {strategy.name} on {maze.name}")
        return run

    def get_run(self, run_id: str) -> Optional[LiveRun]:
        """Get a run by ID."""
        return self._runs.get(run_id)

    def advance(self, run_id: str, steps: int = 1) -> list[StepFrame]:
        """
        Advance a run.

        Raises:
            ValueError: If the run is not found.
        """
        run = self._runs.get(run_id)
        if run is None:
            raise ValueError(f"Run not found: {run_id}")
        return run.driver.advance(steps)

    def delete_run(self, run_id: str) -> bool:
        """End and remove a run."""
        if run_id in self._runs:
            del self._runs[run_id]
            return True
        return False


# Singleton instance
_run_service: Optional[RunService] = None


def get_run_service() -> RunService:
    """Get the run service singleton."""
    global _run_service
    if _run_service is None:
        settings = get_settings()
        _run_service = RunService(
            max_runs=settings.max_stored_runs,
            flag_exit_from_start=settings.flag_exit_from_start,
        )
    return _run_service
