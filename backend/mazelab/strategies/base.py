"""
Step contract shared by every exploration strategy.

A strategy object holds only configuration. Everything it needs to resume
between steps lives in a per-run state dataclass created by ``new_state``,
so the same strategy instance can drive any number of independent runs.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

from mazelab.core.maze_model import Facing, Maze
from mazelab.core.moves import Move, rotate
from mazelab.core.sensors import (
    OUT_OF_BOUNDS,
    SensorReading,
    forward_position,
    relative_walls,
)

# Relative moves in the order left, forward, right
SIDE_MOVES = (Move.LEFT, Move.FORWARD, Move.RIGHT)


@dataclass
class StrategyState:
    """Per-run memory common to all strategies."""
    bootstrapped: bool = False


@dataclass
class StepResult:
    """Outcome of one strategy invocation."""
    move: Move
    state: StrategyState
    explanation: str
    sensor_readings: SensorReading
    metrics: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "move": Move(self.move).value,
            "explanation": self.explanation,
            "sensor_readings": self.sensor_readings.to_dict(),
            "metrics": self.metrics,
        }


class Strategy(ABC):
    """Base class for a resumable maze-exploration strategy."""

    name: str = "strategy"
    label: str = "Strategy"
    description: str = ""
    interactive: bool = False

    def new_state(self) -> StrategyState:
        """Fresh state for a new run."""
        return StrategyState()

    def begin(self, maze: Maze, pos: int, facing: Facing, state: StrategyState) -> None:
        """Hook run once, on the bootstrap step."""
        state.bootstrapped = True

    def step(
        self,
        maze: Maze,
        pos: int,
        facing: Facing,
        state: StrategyState,
    ) -> StepResult:
        """
        Decide the move for the current pose.

        The first invocation of a fresh run always returns FORWARD.

        Args:
            maze: Maze being explored; never modified.
            pos: Current cell index.
            facing: Current facing.
            state: This run's state, as returned by ``new_state``.

        Returns:
            StepResult carrying the move and the (updated) state.
        """
        facing = Facing(facing)
        sensors = relative_walls(maze, pos, facing)

        if not state.bootstrapped:
            self.begin(maze, pos, facing, state)
            return StepResult(
                move=Move.FORWARD,
                state=state,
                explanation=f"{self.label}: initial forward move into the maze",
                sensor_readings=sensors,
                metrics=self.metrics(maze, state),
            )

        move, explanation = self.decide(maze, pos, facing, sensors, state)
        return StepResult(
            move=move,
            state=state,
            explanation=f"{self.label}: {explanation}",
            sensor_readings=sensors,
            metrics=self.metrics(maze, state),
        )

    @abstractmethod
    def decide(
        self,
        maze: Maze,
        pos: int,
        facing: Facing,
        sensors: SensorReading,
        state: StrategyState,
    ) -> tuple[Move, str]:
        """Pick the move for a bootstrapped run, with an explanation."""

    def metrics(self, maze: Maze, state: StrategyState) -> dict[str, Any]:
        """Strategy-specific numbers reported alongside each step."""
        return {}

    def describe(self) -> dict:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "label": self.label,
            "description": self.description,
            "interactive": self.interactive,
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


def target_of(maze: Maze, pos: int, facing: Facing, move: Move) -> Optional[int]:
    """Cell a LEFT/FORWARD/RIGHT/UTURN move would enter, or None at the edge."""
    target = forward_position(maze, pos, rotate(facing, move))
    return None if target == OUT_OF_BOUNDS else target


def first_open(sensors: SensorReading, priority: tuple[Move, ...]) -> Optional[Move]:
    """First move in ``priority`` whose side is open."""
    for move in priority:
        if sensors.is_open(move):
            return move
    return None
