"""
Scripted strategies: a queue of manual commands, or a recorded trace.

Commands:
    F = forward
    L = turn left (and advance)
    R = turn right (and advance)
    U = U-turn (and advance)

The mandatory initial FORWARD stands in for a leading ``F``; any other
leading command runs on the following step.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

from mazelab.core.errors import IllegalMoveRequest
from mazelab.core.maze_model import Facing, Maze
from mazelab.core.moves import MOVE_CODES, Move
from mazelab.core.sensors import SensorReading

from .base import Strategy, StrategyState

logger = logging.getLogger(__name__)

COMMAND_MOVES = {
    "F": Move.FORWARD,
    "L": Move.LEFT,
    "R": Move.RIGHT,
    "U": Move.UTURN,
}


def tokenize_commands(raw: str) -> list[str]:
    """
    Split a raw comma/space delimited command string.

    Tokens are case-insensitive; anything other than F, L, R or U is
    dropped.

    Args:
        raw: Command text such as ``"f, F l,x R"``.

    Returns:
        Upper-case command letters in order.
    """
    tokens = [token.upper() for token in re.split(r"[,\s]+", raw or "") if token]
    dropped = [token for token in tokens if token not in COMMAND_MOVES]
    if dropped:
        logger.info(f"Dropping unrecognized command token(s): {', '.join(dropped)}")
    return [token for token in tokens if token in COMMAND_MOVES]


def validate_commands(commands: Iterable[str]) -> list[str]:
    """Normalize pre-tokenized commands, dropping unknown tokens."""
    valid = []
    for command in commands:
        token = str(command).strip().upper()
        if token in COMMAND_MOVES:
            valid.append(token)
        else:
            logger.info(f"Dropping unrecognized command token: {command!r}")
    return valid


@dataclass
class BlockedCommand:
    """A command skipped because its direction was walled."""
    index: int
    command: str
    position: int
    facing: Facing

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "index": self.index,
            "command": self.command,
            "position": self.position,
            "facing": Facing(self.facing).letter,
        }


@dataclass
class ScriptedState(StrategyState):
    commands: list[str] = field(default_factory=list)
    cursor: int = 0
    blocked: list[BlockedCommand] = field(default_factory=list)


class ScriptedStrategy(Strategy):
    """Executes a fixed command queue; walled commands become WAIT."""

    name = "manual-input"
    label = "Manual Input"
    description = "Execute a queue of F/L/R/U commands, waiting on blocked ones"
    interactive = True

    def __init__(self, commands: Sequence[str] | str = ()):
        if isinstance(commands, str):
            self.commands = tokenize_commands(commands)
        else:
            self.commands = validate_commands(commands)

    def new_state(self) -> ScriptedState:
        return ScriptedState(commands=list(self.commands))

    def begin(self, maze: Maze, pos: int, facing: Facing, state: ScriptedState) -> None:
        super().begin(maze, pos, facing, state)
        if state.commands and state.commands[0] == "F":
            state.cursor = 1

    def decide(
        self,
        maze: Maze,
        pos: int,
        facing: Facing,
        sensors: SensorReading,
        state: ScriptedState,
    ) -> tuple[Move, str]:
        if state.cursor >= len(state.commands):
            return Move.STOP, f"command queue finished ({len(state.blocked)} blocked)"

        index = state.cursor
        command = state.commands[index]
        state.cursor += 1
        move = COMMAND_MOVES[command]

        if move != Move.UTURN and not sensors.is_open(move):
            state.blocked.append(BlockedCommand(index, command, pos, facing))
            logger.info(f"Command {index} ({command}) blocked by a wall at cell {pos}")
            return Move.WAIT, f"command {index + 1} ({command}) blocked by a wall, skipping"

        return move, f"command {index + 1}/{len(state.commands)} ({command})"

    def metrics(self, maze: Maze, state: ScriptedState) -> dict[str, Any]:
        return {
            "cursor": state.cursor,
            "remaining": max(len(state.commands) - state.cursor, 0),
            "blocked": [entry.to_dict() for entry in state.blocked],
        }


@dataclass
class ReplayFrame:
    """One recorded step: pose before the move, and the move taken."""
    pos: int
    facing: Facing
    move: Move

    @classmethod
    def from_dict(cls, data: dict) -> "ReplayFrame":
        return cls(
            pos=int(data["pos"]),
            facing=Facing.parse(data["facing"]),
            move=Move.coerce(data["move"]),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"pos": self.pos, "facing": Facing(self.facing).letter, "move": self.move.value}


@dataclass
class ReplayState(StrategyState):
    frames: list[ReplayFrame] = field(default_factory=list)
    cursor: int = 0
    divergences: int = 0


class ReplayStrategy(Strategy):
    """Replays a recorded {pos, facing, move} stream."""

    name = "log-playback"
    label = "Log Playback"
    description = "Replay moves recorded from an external trace"
    interactive = True

    def __init__(self, frames: Iterable[ReplayFrame | dict] = ()):
        self.frames = [
            frame if isinstance(frame, ReplayFrame) else ReplayFrame.from_dict(frame)
            for frame in frames
        ]

    def new_state(self) -> ReplayState:
        return ReplayState(frames=list(self.frames))

    def begin(self, maze: Maze, pos: int, facing: Facing, state: ReplayState) -> None:
        super().begin(maze, pos, facing, state)
        if state.frames and state.frames[0].move == Move.FORWARD:
            self._check(state, state.frames[0], pos, facing)
            state.cursor = 1

    def _check(self, state: ReplayState, frame: ReplayFrame, pos: int, facing: Facing) -> None:
        if frame.pos != pos or frame.facing != facing:
            state.divergences += 1
            logger.warning(
                f"Replay diverged: recorded {frame.pos}/{Facing(frame.facing).letter}, "
                f"actual {pos}/{Facing(facing).letter}"
            )

    def decide(
        self,
        maze: Maze,
        pos: int,
        facing: Facing,
        sensors: SensorReading,
        state: ReplayState,
    ) -> tuple[Move, str]:
        if state.cursor >= len(state.frames):
            return Move.STOP, "recording finished"

        frame = state.frames[state.cursor]
        state.cursor += 1
        self._check(state, frame, pos, facing)
        return frame.move, f"recorded step {state.cursor}/{len(state.frames)}"

    def metrics(self, maze: Maze, state: ReplayState) -> dict[str, Any]:
        return {"cursor": state.cursor, "divergences": state.divergences}


def parse_frame_fields(pos: tuple[int, int], facing: str, move_code: str, maze: Maze) -> ReplayFrame:
    """
    Build a replay frame from already-parsed trace fields.

    Args:
        pos: (x, y) coordinates of the recorded pose.
        facing: N, E, S or W.
        move_code: 3-bit move field.
        maze: Maze the trace was recorded on.

    Raises:
        ValueError: If the coordinates fall outside the maze.
        IllegalMoveRequest: If the move code is unknown.
    """
    cell = maze.position_of(*pos)
    if cell is None:
        raise ValueError(f"Recorded position {pos} is outside the maze")
    if move_code not in MOVE_CODES:
        raise IllegalMoveRequest(move_code)
    return ReplayFrame(cell, Facing.parse(facing), MOVE_CODES[move_code])
