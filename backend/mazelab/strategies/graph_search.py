"""
Graph-search strategies rewritten as per-step state machines.

The bot walks the search physically: it only ever moves between adjacent
cells, so a search that wants to expand a distant frontier cell routes
there along its own search tree. Only passages open from both sides are
searched, which keeps every route walkable in reverse.

- Breadth-first: FIFO frontier of (pos, path, level), expanded when the
  bot arrives at each node. Once the exit is discovered the path is
  rebuilt from the parent map and replayed.
- Depth-first: LIFO path stack with a branch-point map, descending while
  unvisited cells exist and backtracking to the nearest branch point.
- Recursive backtracker: pose stack; backtracking recomputes the bearing
  toward the previous pose instead of replaying a path.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Optional

from mazelab.core.maze_model import Facing, Maze
from mazelab.core.moves import Move, turn_toward
from mazelab.core.sensors import SensorReading, bearing

from .base import Strategy, StrategyState, first_open, target_of

EXPLORING = "exploring"
FOLLOWING = "following"
EXHAUSTED = "exhausted"

DISCIPLINES = ("breadth", "depth")


def tree_route(parents: dict[int, Optional[int]], start: int, goal: int) -> list[int]:
    """
    Cells to walk through to get from ``start`` to ``goal`` in a search tree.

    Args:
        parents: Parent map of the tree (root maps to None).
        start: Cell the bot stands on.
        goal: Destination cell.

    Returns:
        Cells after ``start`` up to and including ``goal``; empty when
        already there.
    """
    goal_chain = []
    node: Optional[int] = goal
    while node is not None:
        goal_chain.append(node)
        node = parents[node]
    depth = {cell: index for index, cell in enumerate(goal_chain)}

    climb = []
    node = start
    while node not in depth:
        node = parents[node]
        climb.append(node)
    return climb + list(reversed(goal_chain[: depth[node]]))


def relative_links(maze: Maze, pos: int, facing: Facing) -> list[int]:
    """Two-way links ordered forward, left, right, back."""
    links = maze.links(pos)
    ordered = []
    for direction in (facing, facing.left, facing.right, facing.back):
        target = maze.adjacent(pos, direction)
        if target is not None and target in links:
            ordered.append(target)
    return ordered


def move_to(maze: Maze, pos: int, facing: Facing, target: int) -> Move:
    return turn_toward(facing, bearing(maze, pos, target))


@dataclass
class FrontierNode:
    pos: int
    path: tuple[int, ...]
    level: int

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"pos": self.pos, "path": list(self.path), "level": self.level}


@dataclass
class GraphSearchState(StrategyState):
    root: Optional[int] = None
    visited: set[int] = field(default_factory=set)
    parents: dict[int, Optional[int]] = field(default_factory=dict)
    phase: str = EXPLORING
    route: list[int] = field(default_factory=list)
    solution: list[int] = field(default_factory=list)


@dataclass
class BreadthFirstState(GraphSearchState):
    frontier: deque[FrontierNode] = field(default_factory=deque)
    target: Optional[FrontierNode] = None
    expanded: list[tuple[int, int]] = field(default_factory=list)


@dataclass
class DepthFirstState(GraphSearchState):
    stack: list[int] = field(default_factory=list)
    branches: dict[int, list[int]] = field(default_factory=dict)


class GraphSearch(Strategy):
    """Graph search parameterized by frontier discipline."""

    def __init__(self, discipline: str = "breadth", name: Optional[str] = None):
        if discipline not in DISCIPLINES:
            raise ValueError(
                f"Invalid discipline '{discipline}'. Must be one of: {', '.join(DISCIPLINES)}"
            )
        self.discipline = discipline
        self.name = name or f"{discipline}-first-search"
        if discipline == "breadth":
            self.label = "Breadth-First Search"
            self.description = "Expand the maze level by level, then replay the shortest path"
        else:
            self.label = "Depth-First Search"
            self.description = "Descend into unvisited passages, backtrack to the last branch point"

    def new_state(self) -> GraphSearchState:
        if self.discipline == "breadth":
            return BreadthFirstState()
        return DepthFirstState()

    def decide(
        self,
        maze: Maze,
        pos: int,
        facing: Facing,
        sensors: SensorReading,
        state: GraphSearchState,
    ) -> tuple[Move, str]:
        if state.root is None:
            state.root = pos
            state.visited.add(pos)
            state.parents[pos] = None
            if isinstance(state, BreadthFirstState):
                state.frontier.append(FrontierNode(pos, (pos,), 0))

        if state.phase == EXPLORING:
            if isinstance(state, BreadthFirstState):
                result = self._explore_breadth(maze, pos, facing, state)
            else:
                result = self._explore_depth(maze, pos, facing, state)
            if result is not None:
                return result

        if state.phase == FOLLOWING:
            return self._follow(maze, pos, facing, state)

        return Move.STOP, "search exhausted without reaching the exit"

    def _explore_breadth(
        self,
        maze: Maze,
        pos: int,
        facing: Facing,
        state: BreadthFirstState,
    ) -> Optional[tuple[Move, str]]:
        while state.target is None or state.target.pos == pos:
            if state.target is not None:
                self._expand(maze, state, state.target)
                state.target = None
                if state.phase != EXPLORING:
                    return None
            if not state.frontier:
                state.phase = EXHAUSTED
                return None
            state.target = state.frontier.popleft()

        next_hop = tree_route(state.parents, pos, state.target.pos)[0]
        move = move_to(maze, pos, facing, next_hop)
        return move, f"heading to frontier cell {state.target.pos} (level {state.target.level})"

    def _expand(self, maze: Maze, state: BreadthFirstState, node: FrontierNode) -> None:
        state.expanded.append((node.pos, node.level))
        found = node.pos == maze.exit_pos

        for neighbor in maze.links(node.pos):
            if neighbor in state.visited:
                continue
            state.visited.add(neighbor)
            state.parents[neighbor] = node.pos
            state.frontier.append(FrontierNode(neighbor, node.path + (neighbor,), node.level + 1))
            if neighbor == maze.exit_pos:
                found = True

        if found:
            self._start_following(maze, node.pos, state)

    def _explore_depth(
        self,
        maze: Maze,
        pos: int,
        facing: Facing,
        state: DepthFirstState,
    ) -> Optional[tuple[Move, str]]:
        unvisited = [cell for cell in relative_links(maze, pos, facing) if cell not in state.visited]
        if unvisited:
            nxt = unvisited[0]
            if len(unvisited) > 1:
                state.branches[pos] = unvisited[1:]
            else:
                state.branches.pop(pos, None)
            state.stack.append(pos)
            state.visited.add(nxt)
            state.parents[nxt] = pos
            return move_to(maze, pos, facing, nxt), f"descending into unvisited cell {nxt}"

        state.branches.pop(pos, None)
        if self._has_open_branch(state):
            previous = state.stack.pop()
            return move_to(maze, pos, facing, previous), f"backtracking to cell {previous}"

        if maze.exit_pos in state.visited:
            self._start_following(maze, pos, state)
        else:
            state.phase = EXHAUSTED
        return None

    def _has_open_branch(self, state: DepthFirstState) -> bool:
        for cell in reversed(state.stack):
            remaining = [c for c in state.branches.get(cell, []) if c not in state.visited]
            if remaining:
                state.branches[cell] = remaining
                return True
            state.branches.pop(cell, None)
        return False

    def _start_following(self, maze: Maze, pos: int, state: GraphSearchState) -> None:
        state.solution = tree_route(state.parents, state.root, maze.exit_pos)
        state.solution.insert(0, state.root)
        state.route = tree_route(state.parents, pos, maze.exit_pos)
        state.phase = FOLLOWING

    def _follow(
        self,
        maze: Maze,
        pos: int,
        facing: Facing,
        state: GraphSearchState,
    ) -> tuple[Move, str]:
        while state.route and state.route[0] == pos:
            state.route.pop(0)

        if state.route:
            if state.route[0] not in maze.links(pos):
                if pos not in state.parents:
                    return Move.STOP, f"lost the search tree at cell {pos}"
                state.route = tree_route(state.parents, pos, maze.exit_pos)
                if not state.route:
                    return self._face_exit(maze, facing)
            return move_to(maze, pos, facing, state.route[0]), f"following path to the exit ({len(state.route)} left)"

        if pos == maze.exit_pos:
            return self._face_exit(maze, facing)

        if pos not in state.parents:
            return Move.STOP, f"lost the search tree at cell {pos}"
        state.route = tree_route(state.parents, pos, maze.exit_pos)
        return move_to(maze, pos, facing, state.route[0]), "rejoining path to the exit"

    def _face_exit(self, maze: Maze, facing: Facing) -> tuple[Move, str]:
        if facing == maze.exit_facing:
            return Move.FORWARD, "at the exit, stepping out"
        return turn_toward(facing, maze.exit_facing), "at the exit, turning to face out"

    def metrics(self, maze: Maze, state: GraphSearchState) -> dict[str, Any]:
        result = {
            "phase": state.phase,
            "visited": len(state.visited),
            "path_length": len(state.solution),
        }
        if isinstance(state, BreadthFirstState):
            result["frontier"] = len(state.frontier)
        else:
            result["stack_depth"] = len(state.stack)
            result["branch_points"] = len(state.branches)
        return result


@dataclass
class BacktrackerState(StrategyState):
    visited: set[int] = field(default_factory=set)
    stack: list[tuple[int, Facing]] = field(default_factory=list)


class RecursiveBacktracker(Strategy):
    name = "recursive-backtrack"
    label = "Recursive Backtracking"
    description = (
        "Descend into unvisited passages; when stuck, turn toward the previous pose on the stack"
    )

    def new_state(self) -> BacktrackerState:
        return BacktrackerState()

    def begin(self, maze: Maze, pos: int, facing: Facing, state: BacktrackerState) -> None:
        super().begin(maze, pos, facing, state)
        state.visited.add(pos)

    def decide(
        self,
        maze: Maze,
        pos: int,
        facing: Facing,
        sensors: SensorReading,
        state: BacktrackerState,
    ) -> tuple[Move, str]:
        state.visited.add(pos)

        for move in (Move.FORWARD, Move.LEFT, Move.RIGHT):
            if not sensors.is_open(move):
                continue
            target = target_of(maze, pos, facing, move)
            if target is None or target in state.visited:
                continue
            if pos not in maze.neighbors(target):
                continue
            state.stack.append((pos, facing))
            return move, f"exploring unvisited cell {target}"

        if state.stack:
            previous, _ = state.stack.pop()
            move = turn_toward(facing, bearing(maze, pos, previous))
            return move, f"dead end, returning to cell {previous}"

        move = first_open(sensors, (Move.LEFT, Move.FORWARD, Move.RIGHT)) or Move.UTURN
        return move, "everything reachable visited, following the left wall"

    def metrics(self, maze: Maze, state: BacktrackerState) -> dict[str, Any]:
        return {"visited": len(state.visited), "stack_depth": len(state.stack)}
