"""Pledge algorithm: walk straight, follow walls around obstacles, count turns."""

from dataclasses import dataclass
from typing import Any

from mazelab.core.maze_model import Facing, Maze
from mazelab.core.moves import Move
from mazelab.core.sensors import SensorReading

from .base import Strategy, StrategyState, first_open

STRAIGHT = "straight"
WALL_FOLLOW = "wall-follow"

TURN_ANGLES = {
    Move.LEFT: -90,
    Move.FORWARD: 0,
    Move.RIGHT: 90,
    Move.UTURN: 180,
}


def normalize_angle(angle: int) -> int:
    """Fold an angle into (-180, 180]."""
    angle %= 360
    if angle > 180:
        angle -= 360
    return angle


@dataclass
class PledgeState(StrategyState):
    angle: int = 0
    mode: str = STRAIGHT


class PledgeStrategy(Strategy):
    name = "pledge"
    label = "Pledge"
    description = (
        "Go straight while the turn count is zero, follow the left wall around "
        "obstacles until the accumulated angle returns to zero"
    )

    def _turn(self, state: PledgeState, move: Move) -> None:
        state.angle = normalize_angle(state.angle + TURN_ANGLES[move])
        if state.mode == WALL_FOLLOW and state.angle == 0:
            state.mode = STRAIGHT

    def decide(
        self,
        maze: Maze,
        pos: int,
        facing: Facing,
        sensors: SensorReading,
        state: PledgeState,
    ) -> tuple[Move, str]:
        if state.mode == STRAIGHT:
            if not sensors.front:
                return Move.FORWARD, "angle is zero and the way ahead is open"
            state.mode = WALL_FOLLOW
            self._turn(state, Move.RIGHT)
            return Move.RIGHT, f"obstacle ahead, following wall (angle {state.angle})"

        move = first_open(sensors, (Move.LEFT, Move.FORWARD, Move.RIGHT)) or Move.UTURN
        self._turn(state, move)
        if state.mode == STRAIGHT:
            return move, "angle back to zero, resuming straight walk"
        return move, f"wall following (angle {state.angle})"

    def metrics(self, maze: Maze, state: PledgeState) -> dict[str, Any]:
        return {"angle": state.angle, "mode": state.mode}

    def new_state(self) -> PledgeState:
        return PledgeState()
