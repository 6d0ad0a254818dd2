"""Strategies that read the whole maze before moving."""

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Optional

from mazelab.core.maze_model import Facing, Maze
from mazelab.core.moves import Move, turn_toward
from mazelab.core.sensors import SensorReading, bearing

from .base import Strategy, StrategyState

UNREACHABLE = float("inf")


def distances_to_exit(maze: Maze) -> dict[int, int]:
    """
    Single-source BFS outward from the exit.

    Walks edges backwards (from a cell to the cells that can move into
    it), so every distance is the length of a walkable path to the exit.

    Returns:
        Map of cell index to step distance; unreachable cells are absent.
    """
    distances = {maze.exit_pos: 0}
    queue = deque([maze.exit_pos])
    while queue:
        current = queue.popleft()
        for source in maze.predecessors(current):
            if source not in distances:
                distances[source] = distances[current] + 1
                queue.append(source)
    return distances


def fill_dead_ends(maze: Maze, keep: set[int]) -> set[int]:
    """
    Iteratively fill cells that lead nowhere.

    A cell is filled when at most one of its open neighbors is still
    unfilled. Filling repeats until nothing changes. Cells in ``keep`` are
    never filled.
    """
    filled: set[int] = set()
    changed = True
    while changed:
        changed = False
        for pos in range(maze.cell_count):
            if pos in filled or pos in keep:
                continue
            remaining = [n for n in maze.neighbors(pos) if n not in filled]
            if len(remaining) == 1:
                filled.add(pos)
                changed = True
    return filled


def _face_exit(maze: Maze, facing: Facing) -> tuple[Move, str]:
    if facing == maze.exit_facing:
        return Move.FORWARD, "at the exit, stepping out"
    return turn_toward(facing, maze.exit_facing), "at the exit, turning to face out"


@dataclass
class FloodFillState(StrategyState):
    distances: Optional[dict[int, int]] = None


class FloodFill(Strategy):
    name = "flood-fill"
    label = "Flood Fill"
    description = "Precompute distances from the exit and always step downhill"

    def new_state(self) -> FloodFillState:
        return FloodFillState()

    def decide(
        self,
        maze: Maze,
        pos: int,
        facing: Facing,
        sensors: SensorReading,
        state: FloodFillState,
    ) -> tuple[Move, str]:
        if state.distances is None:
            state.distances = distances_to_exit(maze)

        if pos == maze.exit_pos:
            return _face_exit(maze, facing)

        # Ties go to the cell straight ahead, then left, right and back
        order = (facing, facing.left, facing.right, facing.back)
        options = []
        for rank, direction in enumerate(order):
            target = maze.adjacent(pos, direction)
            if target is None or maze.has_wall(pos, direction):
                continue
            options.append((state.distances.get(target, UNREACHABLE), rank, target))

        if not options:
            return Move.UTURN, "walled in on every side"

        distance, _, target = min(options)
        if distance == UNREACHABLE:
            return Move.STOP, "no open neighbor can reach the exit"
        move = turn_toward(facing, bearing(maze, pos, target))
        return move, f"moving to cell {target}, {distance} step(s) from the exit"

    def metrics(self, maze: Maze, state: FloodFillState) -> dict[str, Any]:
        return {"reachable_cells": len(state.distances or {})}


@dataclass
class DeadEndFillingState(StrategyState):
    filled: Optional[set[int]] = None
    visited: set[int] = field(default_factory=set)


class DeadEndFilling(Strategy):
    name = "dead-end-filling"
    label = "Dead-End Filling"
    description = "Fill every dead-end branch up front, then walk only unfilled cells"

    def new_state(self) -> DeadEndFillingState:
        return DeadEndFillingState()

    def decide(
        self,
        maze: Maze,
        pos: int,
        facing: Facing,
        sensors: SensorReading,
        state: DeadEndFillingState,
    ) -> tuple[Move, str]:
        if state.filled is None:
            state.filled = fill_dead_ends(maze, keep={pos, maze.exit_pos})
        state.visited.add(pos)

        if pos == maze.exit_pos:
            return _face_exit(maze, facing)

        open_cells = set(maze.neighbors(pos)) - state.filled
        order = (facing, facing.left, facing.right, facing.back)
        candidates = []
        for direction in order:
            target = maze.adjacent(pos, direction)
            if target in open_cells:
                candidates.append(target)

        fresh = [cell for cell in candidates if cell not in state.visited]
        if fresh:
            target = fresh[0]
            reason = f"advancing to unfilled cell {target}"
        elif candidates:
            target = candidates[0]
            reason = f"revisiting unfilled cell {target}"
        else:
            return Move.UTURN, "surrounded by filled cells, turning back"

        return turn_toward(facing, bearing(maze, pos, target)), reason

    def metrics(self, maze: Maze, state: DeadEndFillingState) -> dict[str, Any]:
        return {"filled": len(state.filled or ()), "visited": len(state.visited)}
