"""
Trémaux passage marking.

Every cell carries a mark count that grows each time the bot stands on
it. Cells marked twice are closed: the bot never walks into them while
any less-marked side is available. A bot with no acceptable side marks
its own cell once more and turns back.
"""

from dataclasses import dataclass, field
from typing import Any

from mazelab.core.maze_model import Facing, Maze
from mazelab.core.moves import Move
from mazelab.core.sensors import SensorReading

from .base import SIDE_MOVES, Strategy, StrategyState, target_of

CLOSED_MARK = 2


@dataclass
class TremauxState(StrategyState):
    marks: dict[int, int] = field(default_factory=dict)


class TremauxStrategy(Strategy):
    name = "tremaux"
    label = "Trémaux"
    description = "Mark passages, prefer unmarked ones, never re-enter a doubly marked cell"

    def new_state(self) -> TremauxState:
        return TremauxState()

    def begin(self, maze: Maze, pos: int, facing: Facing, state: TremauxState) -> None:
        super().begin(maze, pos, facing, state)
        state.marks[pos] = state.marks.get(pos, 0) + 1

    def decide(
        self,
        maze: Maze,
        pos: int,
        facing: Facing,
        sensors: SensorReading,
        state: TremauxState,
    ) -> tuple[Move, str]:
        state.marks[pos] = state.marks.get(pos, 0) + 1

        candidates: list[tuple[int, Move]] = []
        for move in SIDE_MOVES:
            if not sensors.is_open(move):
                continue
            target = target_of(maze, pos, facing, move)
            if target is None:
                continue
            mark = state.marks.get(target, 0)
            if mark < CLOSED_MARK:
                candidates.append((mark, move))

        if candidates:
            # min() keeps left/forward/right order among equal marks
            mark, move = min(candidates, key=lambda item: item[0])
            kind = "unmarked" if mark == 0 else "once-marked"
            return move, f"taking {kind} passage to the {move.value.lower()}"

        state.marks[pos] += 1
        return Move.UTURN, f"no usable passage, cell {pos} marked {state.marks[pos]}, turning back"

    def metrics(self, maze: Maze, state: TremauxState) -> dict[str, Any]:
        return {
            "marked_cells": len(state.marks),
            "closed_cells": sum(1 for mark in state.marks.values() if mark >= CLOSED_MARK),
        }
