"""Pose and bot-relative sensing."""

from dataclasses import dataclass

from .maze_model import Facing, Maze
from .moves import Move

# Returned by forward_position when the move would leave the grid
OUT_OF_BOUNDS = -1


@dataclass
class Pose:
    """Position and facing of the bot."""
    position: int
    facing: Facing

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"position": self.position, "facing": Facing(self.facing).letter}


@dataclass(frozen=True)
class SensorReading:
    """Walls to the bot's left, front and right (True = wall)."""
    left: bool
    front: bool
    right: bool

    def is_open(self, move: Move) -> bool:
        """Whether the side a LEFT/FORWARD/RIGHT move turns toward is open."""
        if move == Move.LEFT:
            return not self.left
        if move == Move.FORWARD:
            return not self.front
        if move == Move.RIGHT:
            return not self.right
        raise ValueError(f"No sensor covers move {move.value}")

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"left": self.left, "front": self.front, "right": self.right}


def relative_walls(maze: Maze, pos: int, facing: Facing) -> SensorReading:
    """Rotate the absolute walls of ``pos`` into the bot's frame."""
    facing = Facing(facing)
    absolute = maze.wall_tuple(pos)
    return SensorReading(
        left=absolute[facing.left],
        front=absolute[facing],
        right=absolute[facing.right],
    )


def forward_position(maze: Maze, pos: int, facing: Facing) -> int:
    """Cell in front of the bot, or OUT_OF_BOUNDS across the boundary."""
    target = maze.adjacent(pos, facing)
    return OUT_OF_BOUNDS if target is None else target


def is_exit_pose(maze: Maze, pos: int, facing: Facing) -> bool:
    """At the exit cell, facing the egress direction, with the grid edge ahead."""
    return (
        pos == maze.exit_pos
        and Facing(facing) == maze.exit_facing
        and forward_position(maze, pos, facing) == OUT_OF_BOUNDS
    )


def bearing(maze: Maze, from_pos: int, to_pos: int) -> Facing:
    """Facing that leads from one cell to an adjacent one.

    Raises:
        ValueError: If the cells are not adjacent.
    """
    for facing in Facing:
        if maze.adjacent(from_pos, facing) == to_pos:
            return facing
    raise ValueError(f"Cells {from_pos} and {to_pos} are not adjacent")
