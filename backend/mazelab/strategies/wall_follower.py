"""
Reflexive strategies: wall following and the random mouse.

Wall following keeps one hand on the wall:

1. Try to turn toward the preferred side
2. If that side is walled, go straight
3. If straight is walled, turn toward the other side
4. If everything is walled, turn back

This reaches the exit of any simply-connected maze but may wander.
"""

import random
from dataclasses import dataclass, field
from typing import Optional

from mazelab.core.maze_model import Facing, Maze
from mazelab.core.moves import Move
from mazelab.core.sensors import SensorReading

from .base import SIDE_MOVES, Strategy, StrategyState, first_open

PRIORITIES = {
    "left": (Move.LEFT, Move.FORWARD, Move.RIGHT),
    "right": (Move.RIGHT, Move.FORWARD, Move.LEFT),
    "forward": (Move.FORWARD, Move.RIGHT, Move.LEFT),
}


class WallFollower(Strategy):
    """Wall follower parameterized by the preferred side."""

    def __init__(self, side: str = "left", name: Optional[str] = None):
        if side not in PRIORITIES:
            raise ValueError(
                f"Invalid side '{side}'. Must be one of: {', '.join(sorted(PRIORITIES))}"
            )
        self.side = side
        self.priority = PRIORITIES[side]
        self.name = name or f"{side}-hand"
        if side == "forward":
            self.label = "Forward Priority"
            self.description = "Go straight whenever possible, then right, then left"
        else:
            self.label = f"{side.capitalize()}-Hand Rule"
            self.description = f"Keep the {side} hand on the wall"

    def decide(
        self,
        maze: Maze,
        pos: int,
        facing: Facing,
        sensors: SensorReading,
        state: StrategyState,
    ) -> tuple[Move, str]:
        move = first_open(sensors, self.priority)
        if move is None:
            return Move.UTURN, "boxed in on three sides, turning back"
        return move, f"{move.value.lower()} is the first open side in priority order"


@dataclass
class RandomMouseState(StrategyState):
    seed: Optional[int] = None
    rng: random.Random = field(default_factory=random.Random)


class RandomMouse(Strategy):
    """Uniform random choice among open sides."""

    name = "random-mouse"
    label = "Random Mouse"
    description = "Pick uniformly among open sides, turn back when boxed in"

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed

    def new_state(self) -> RandomMouseState:
        return RandomMouseState(seed=self.seed, rng=random.Random(self.seed))

    def decide(
        self,
        maze: Maze,
        pos: int,
        facing: Facing,
        sensors: SensorReading,
        state: RandomMouseState,
    ) -> tuple[Move, str]:
        options = [move for move in SIDE_MOVES if sensors.is_open(move)]
        if not options:
            return Move.UTURN, "no open side, turning back"
        move = state.rng.choice(options)
        return move, f"picked {move.value.lower()} from {len(options)} open side(s)"
