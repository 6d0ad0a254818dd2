"""Comparison harness: every strategy against every maze, ranked by score."""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence

from mazelab.config import get_settings
from mazelab.core.errors import UnknownStrategyError
from mazelab.core.maze_model import Maze
from mazelab.core.simulation import RunStatus, RunTrace, SimulationDriver
from mazelab.strategies.base import Strategy
from mazelab.strategies.registry import get_strategy, strategy_names
from mazelab.strategies.wall_follower import RandomMouse

from .maze_service import get_maze_catalog

logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    """Outcome of one (strategy, maze) run."""

    strategy: str
    maze: str
    status: RunStatus
    steps: int
    dead_ends_found: int
    total_dead_ends: int
    score: float
    error: Optional[str] = None

    @classmethod
    def from_trace(cls, trace: RunTrace, maze: Maze) -> "RunSummary":
        return cls(
            strategy=trace.strategy,
            maze=maze.name,
            status=trace.status,
            steps=trace.steps,
            dead_ends_found=len(trace.dead_ends_visited),
            total_dead_ends=maze.total_dead_ends,
            score=trace.score,
            error=trace.error,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "strategy": self.strategy,
            "maze": self.maze,
            "status": self.status.value,
            "steps": self.steps,
            "dead_ends_found": self.dead_ends_found,
            "total_dead_ends": self.total_dead_ends,
            "score": round(self.score, 4),
            "error": self.error,
        }


@dataclass
class RankingEntry:
    """Aggregate result of one strategy across all mazes."""

    strategy: str
    total_score: float = 0.0
    total_steps: int = 0
    exits: int = 0
    maze_scores: dict[str, float] = field(default_factory=dict)
    rank: int = 0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "rank": self.rank,
            "strategy": self.strategy,
            "total_score": round(self.total_score, 4),
            "total_steps": self.total_steps,
            "exits": self.exits,
            "maze_scores": {name: round(score, 4) for name, score in self.maze_scores.items()},
        }


@dataclass
class ComparisonReport:
    """Results and rankings of one harness invocation."""

    results: list[RunSummary]
    rankings: list[RankingEntry]
    started_at: datetime
    finished_at: datetime

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "results": [r.to_dict() for r in self.results],
            "rankings": [r.to_dict() for r in self.rankings],
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat(),
        }


def rank_results(results: Sequence[RunSummary]) -> list[RankingEntry]:
    """
    Aggregate run summaries per strategy and rank them.

    Ordering is total score (descending), then total steps (ascending),
    then strategy name.
    """
    entries: dict[str, RankingEntry] = {}
    for result in results:
        entry = entries.setdefault(result.strategy, RankingEntry(strategy=result.strategy))
        entry.total_score += result.score
        entry.total_steps += result.steps
        entry.maze_scores[result.maze] = result.score
        if result.status == RunStatus.EXITED:
            entry.exits += 1

    ranking = sorted(
        entries.values(),
        key=lambda e: (-e.total_score, e.total_steps, e.strategy),
    )
    for i, entry in enumerate(ranking):
        entry.rank = i + 1
    return ranking


class ComparisonService:
    """Runs strategies against mazes and keeps the latest ranking."""

    def __init__(
        self,
        factories: Optional[dict[str, Callable[[], Strategy]]] = None,
        iteration_factor: int = 2,
        max_concurrent: int = 4,
        flag_exit_from_start: bool = True,
        seed: Optional[int] = None,
    ):
        """
        Args:
            factories: Optional name -> strategy factory map replacing the
                global registry.
            iteration_factor: Safety cap on strategy invocations, as a
                multiple of each maze's step budget.
            max_concurrent: Runs executed at once by ``run_async``.
            flag_exit_from_start: Passed to every driver.
            seed: Seed handed to randomized strategies from the registry.
        """
        self.factories = factories
        self.iteration_factor = iteration_factor
        self.max_concurrent = max_concurrent
        self.flag_exit_from_start = flag_exit_from_start
        self.seed = seed
        self.latest: Optional[ComparisonReport] = None
        self._subscribers: list[asyncio.Queue] = []

    def strategy_names(self) -> list[str]:
        """Strategies run when none are requested explicitly."""
        if self.factories is not None:
            return list(self.factories)
        return strategy_names(include_interactive=False)

    def _make_strategy(self, name: str) -> Strategy:
        if self.factories is not None:
            if name not in self.factories:
                raise UnknownStrategyError(name)
            return self.factories[name]()
        strategy = get_strategy(name)
        if isinstance(strategy, RandomMouse) and self.seed is not None:
            strategy.seed = self.seed
        return strategy

    def _resolve(
        self,
        names: Optional[Sequence[str]],
        mazes: Optional[Sequence[Maze]],
    ) -> tuple[list[str], list[Maze]]:
        names = list(names) if names else self.strategy_names()
        known = set(self.factories) if self.factories is not None else set(strategy_names())
        for name in names:
            if name not in known:
                raise UnknownStrategyError(name)
        mazes = list(mazes) if mazes else get_maze_catalog().all()
        return names, mazes

    def run_single(self, name: str, maze: Maze) -> RunSummary:
        """
        Run one strategy on one maze with a fresh pose and state.

        Never raises for strategy problems: construction errors and step
        faults come back as ILLEGAL_STATE summaries.
        """
        try:
            strategy = self._make_strategy(name)
        except UnknownStrategyError:
            raise
        except Exception as e:
            logger.error(f"Could not create strategy {name}: {type(e).__name__}: {e}")
            return RunSummary(
                strategy=name,
                maze=maze.name,
                status=RunStatus.ILLEGAL_STATE,
                steps=0,
                dead_ends_found=0,
                total_dead_ends=maze.total_dead_ends,
                score=0.0,
                error=f"{type(e).__name__}: {e}",
            )

        driver = SimulationDriver(
            maze,
            strategy,
            record_frames=False,
            flag_exit_from_start=self.flag_exit_from_start,
        )
        trace = driver.run(max_iterations=self.iteration_factor * maze.max_steps)
        summary = RunSummary.from_trace(trace, maze)
        summary.strategy = name
        return summary

    def _report(self, results: list[RunSummary], started_at: datetime) -> ComparisonReport:
        report = ComparisonReport(
            results=results,
            rankings=rank_results(results),
            started_at=started_at,
            finished_at=datetime.now(timezone.utc),
        )
        self.latest = report
        logger.info(
            f"Comparison finished: {len(results)} run(s), "
            f"leader {report.rankings[0].strategy if report.rankings else 'none'}"
        )
        return report

    def run(
        self,
        strategy_names: Optional[Sequence[str]] = None,
        mazes: Optional[Sequence[Maze]] = None,
    ) -> ComparisonReport:
        """
        Run every requested strategy against every requested maze in turn.

        Args:
            strategy_names: Strategies to compare (default: all non-interactive).
            mazes: Mazes to use (default: the whole catalog).

        Returns:
            ComparisonReport with per-run results and rankings.

        Raises:
            UnknownStrategyError: If a requested strategy does not exist.
        """
        names, mazes = self._resolve(strategy_names, mazes)
        started_at = datetime.now(timezone.utc)
        results = [self.run_single(name, maze) for name in names for maze in mazes]
        return self._report(results, started_at)

    async def run_async(
        self,
        strategy_names: Optional[Sequence[str]] = None,
        mazes: Optional[Sequence[Maze]] = None,
    ) -> ComparisonReport:
        """Same as ``run`` but runs pairs in worker threads, broadcasting each result."""
        names, mazes = self._resolve(strategy_names, mazes)
        started_at = datetime.now(timezone.utc)
        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def run_pair(name: str, maze: Maze) -> RunSummary:
            async with semaphore:
                summary = await asyncio.to_thread(self.run_single, name, maze)
            await self._broadcast({"type": "run_completed", "data": summary.to_dict()})
            return summary

        results = await asyncio.gather(
            *(run_pair(name, maze) for name in names for maze in mazes)
        )
        report = self._report(list(results), started_at)
        await self._broadcast(
            {
                "type": "comparison_completed",
                "data": {"rankings": [r.to_dict() for r in report.rankings]},
            }
        )
        return report

    def subscribe(self) -> asyncio.Queue:
        """Subscribe to comparison updates."""
        queue: asyncio.Queue = asyncio.Queue()
        self._subscribers.append(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        """Unsubscribe from comparison updates."""
        if queue in self._subscribers:
            self._subscribers.remove(queue)

    async def _broadcast(self, message: dict) -> None:
        """Broadcast a message to all subscribers."""
        for queue in self._subscribers:
            try:
                queue.put_nowait(message)
            except asyncio.QueueFull:
                logger.warning("Dropping comparison update for a slow subscriber")


# Singleton instance
_comparison_service: Optional[ComparisonService] = None


def get_comparison_service() -> ComparisonService:
    """Get the comparison service singleton."""
    global _comparison_service
    if _comparison_service is None:
        settings = get_settings()
        _comparison_service = ComparisonService(
            iteration_factor=settings.comparison_iteration_factor,
            max_concurrent=settings.max_concurrent_runs,
            flag_exit_from_start=settings.flag_exit_from_start,
            seed=settings.random_seed,
        )
    return _comparison_service
