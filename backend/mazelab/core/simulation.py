"""
Simulation Driver for Maze Lab.

Turns repeated strategy invocations into a scored run:
- Enforces atomic turn-and-advance moves
- Tracks visited cells and dead ends turned back from
- Detects exit, step limit, strategy stop and strategy faults
- Keeps the score current after every step

A run is always RUNNING until it reaches exactly one terminal status.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

from .errors import IllegalMoveRequest, StrategyRuntimeFault, SuspiciousExitFromStart
from .maze_model import Facing, Maze
from .moves import Move, rotate
from .scoring import score_for_maze
from .sensors import OUT_OF_BOUNDS, Pose, forward_position, is_exit_pose

if TYPE_CHECKING:
    from mazelab.strategies.base import Strategy

logger = logging.getLogger(__name__)


class RunStatus(str, Enum):
    """Lifecycle of a run."""
    RUNNING = "RUNNING"
    EXITED = "EXITED"
    STEP_LIMIT_REACHED = "STEP_LIMIT_REACHED"
    STOPPED_BY_STRATEGY = "STOPPED_BY_STRATEGY"
    ILLEGAL_STATE = "ILLEGAL_STATE"

    @property
    def is_terminal(self) -> bool:
        return self != RunStatus.RUNNING


@dataclass
class StepFrame:
    """Plain per-step data for renderers: pose before the move and what happened."""
    step: int
    pos: int
    facing: Facing
    move: Move
    explanation: str
    sensor_readings: dict[str, bool]
    next_pos: int
    next_facing: Facing
    metrics: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "step": self.step,
            "pos": self.pos,
            "facing": Facing(self.facing).letter,
            "move": self.move.value,
            "explanation": self.explanation,
            "sensor_readings": self.sensor_readings,
            "next_pos": self.next_pos,
            "next_facing": Facing(self.next_facing).letter,
            "metrics": self.metrics,
        }


@dataclass
class RunTrace:
    """Driver-owned record of a run."""
    strategy: str
    maze: str
    pose: Pose
    steps: int = 0
    iterations: int = 0
    visited: set[int] = field(default_factory=set)
    dead_ends_visited: set[int] = field(default_factory=set)
    status: RunStatus = RunStatus.RUNNING
    score: float = 0.0
    error: Optional[str] = None
    diagnostics: list[str] = field(default_factory=list)
    frames: list[StepFrame] = field(default_factory=list)

    @property
    def terminated(self) -> bool:
        return self.status.is_terminal

    @property
    def cause(self) -> Optional[RunStatus]:
        return self.status if self.terminated else None

    def to_dict(self, include_frames: bool = False) -> dict:
        """Convert to dictionary."""
        result = {
            "strategy": self.strategy,
            "maze": self.maze,
            "status": self.status.value,
            "steps": self.steps,
            "score": round(self.score, 4),
            "pose": self.pose.to_dict(),
            "visited": sorted(self.visited),
            "dead_ends_visited": sorted(self.dead_ends_visited),
            "error": self.error,
            "diagnostics": list(self.diagnostics),
        }
        if include_frames:
            result["frames"] = [frame.to_dict() for frame in self.frames]
        return result


class SimulationDriver:
    """
    Drives one strategy through one maze.

    Each driver owns its own Pose and strategy state; the Maze is only
    read, so many drivers can share it.
    """

    def __init__(
        self,
        maze: Maze,
        strategy: "Strategy",
        record_frames: bool = True,
        flag_exit_from_start: bool = True,
    ):
        self.maze = maze
        self.strategy = strategy
        self.record_frames = record_frames
        self.flag_exit_from_start = flag_exit_from_start
        self.pose = Pose(maze.start_pos, maze.start_facing)
        self.state = strategy.new_state()
        self.trace = RunTrace(strategy=strategy.name, maze=maze.name, pose=self.pose)
        self.trace.visited.add(maze.start_pos)

    @property
    def finished(self) -> bool:
        return self.trace.terminated

    def _update_score(self) -> None:
        self.trace.score = score_for_maze(
            self.maze, self.trace.steps, len(self.trace.dead_ends_visited)
        ).score

    def _finish(self, status: RunStatus, error: Optional[str] = None) -> None:
        self.trace.status = status
        self.trace.error = error
        self._update_score()
        logger.info(
            f"Run {self.strategy.name} on {self.maze.name} finished: {status.value} "
            f"after {self.trace.steps} steps, score {self.trace.score:.2f}"
        )

    def step(self) -> Optional[StepFrame]:
        """
        Advance the run by one strategy invocation.

        Returns:
            The frame for this invocation, or None if the run was already
            over, hit the step limit, or the strategy faulted.
        """
        if self.finished:
            return None

        trace = self.trace
        maze = self.maze

        if trace.steps >= maze.max_steps:
            self._finish(RunStatus.STEP_LIMIT_REACHED)
            return None

        trace.iterations += 1
        pos = self.pose.position
        facing = Facing(self.pose.facing)

        try:
            result = self.strategy.step(maze, pos, facing, self.state)
        except Exception as e:
            fault = StrategyRuntimeFault(self.strategy.name, e)
            logger.error(f"{fault} at cell {pos} on step {trace.steps + 1}")
            self._finish(RunStatus.ILLEGAL_STATE, error=str(fault))
            return None

        try:
            move = Move.coerce(getattr(result, "move", None))
        except IllegalMoveRequest as e:
            e.strategy = self.strategy.name
            logger.error(f"{e} at cell {pos} on step {trace.steps + 1}")
            self._finish(RunStatus.ILLEGAL_STATE, error=f"Unrecognized move {e.token!r}")
            return None

        try:
            self.state = result.state
            details = {
                "explanation": str(result.explanation),
                "sensor_readings": result.sensor_readings.to_dict(),
                "metrics": dict(result.metrics),
            }
        except Exception as e:
            fault = StrategyRuntimeFault(self.strategy.name, e)
            logger.error(f"{fault} while reading the step result at cell {pos}")
            self._finish(RunStatus.ILLEGAL_STATE, error=str(fault))
            return None

        exited = False

        if move == Move.STOP:
            frame = self._frame(details, move, pos, facing)
            self._finish(RunStatus.STOPPED_BY_STRATEGY)
            return frame

        trace.steps += 1
        if move != Move.WAIT:
            new_facing = rotate(facing, move)
            self.pose.facing = new_facing
            wall_ahead = maze.has_wall(pos, new_facing)
            target = forward_position(maze, pos, new_facing)

            if not wall_ahead and target != OUT_OF_BOUNDS:
                self.pose.position = target
                # The exit cell must also be open on its egress side
                exited = is_exit_pose(maze, target, new_facing) and not maze.has_wall(
                    target, new_facing
                )
            elif not wall_ahead:
                exited = is_exit_pose(maze, pos, new_facing)

            if move == Move.UTURN and maze.is_dead_end(pos):
                trace.dead_ends_visited.add(pos)

        trace.visited.add(self.pose.position)
        self._update_score()
        frame = self._frame(details, move, pos, facing)

        logger.debug(
            f"{self.strategy.name} step {trace.steps}: {move.value} "
            f"{pos}->{self.pose.position} ({details['explanation']})"
        )

        if exited:
            if self.flag_exit_from_start and pos == maze.start_pos:
                warning = SuspiciousExitFromStart(maze.name, pos, trace.steps)
                trace.diagnostics.append(f"{type(warning).__name__}: {warning}")
                logger.warning(str(warning))
            self._finish(RunStatus.EXITED)

        return frame

    def _frame(self, details: dict, move: Move, pos: int, facing: Facing) -> StepFrame:
        frame = StepFrame(
            step=self.trace.steps,
            pos=pos,
            facing=facing,
            move=move,
            explanation=details["explanation"],
            sensor_readings=details["sensor_readings"],
            next_pos=self.pose.position,
            next_facing=Facing(self.pose.facing),
            metrics=details["metrics"],
        )
        if self.record_frames:
            self.trace.frames.append(frame)
        return frame

    def advance(self, n: int = 1) -> list[StepFrame]:
        """Run up to ``n`` strategy invocations, stopping early at termination."""
        frames = []
        for _ in range(n):
            if self.finished:
                break
            frame = self.step()
            if frame is not None:
                frames.append(frame)
        return frames

    def run(self, max_iterations: Optional[int] = None) -> RunTrace:
        """
        Run to termination.

        Args:
            max_iterations: Optional cap on strategy invocations. Reaching
                it ends the run as STEP_LIMIT_REACHED with a diagnostic.

        Returns:
            The finished RunTrace.
        """
        while not self.finished:
            if max_iterations is not None and self.trace.iterations >= max_iterations:
                self.trace.diagnostics.append(
                    f"Iteration cap of {max_iterations} reached before termination"
                )
                self._finish(RunStatus.STEP_LIMIT_REACHED)
                break
            self.step()
        return self.trace


def simulate(maze: Maze, strategy: "Strategy", **kwargs: Any) -> RunTrace:
    """Run a strategy on a maze to completion and return its trace."""
    max_iterations = kwargs.pop("max_iterations", None)
    return SimulationDriver(maze, strategy, **kwargs).run(max_iterations=max_iterations)
