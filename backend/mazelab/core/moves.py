"""Move vocabulary emitted by strategies."""

from enum import Enum

from .errors import IllegalMoveRequest
from .maze_model import Facing


class Move(str, Enum):
    """Moves a strategy may request for one step.

    LEFT, RIGHT and UTURN rotate and then attempt to advance within the
    same step. WAIT consumes a step in place and STOP ends the run.
    """
    FORWARD = "FORWARD"
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    UTURN = "UTURN"
    WAIT = "WAIT"
    STOP = "STOP"

    @property
    def quarter_turns(self) -> int:
        """Clockwise quarter turns applied before advancing."""
        turns = {
            Move.FORWARD: 0,
            Move.RIGHT: 1,
            Move.UTURN: 2,
            Move.LEFT: 3,
        }
        return turns.get(self, 0)

    @property
    def advances(self) -> bool:
        return self not in (Move.WAIT, Move.STOP)

    @classmethod
    def coerce(cls, value: object) -> "Move":
        """Convert a move token to a Move.

        Raises:
            IllegalMoveRequest: If the token is not part of the vocabulary.
        """
        if isinstance(value, Move):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        raise IllegalMoveRequest(value)


# 3-bit move field used by recorded hardware traces
MOVE_CODES = {
    "000": Move.STOP,
    "001": Move.FORWARD,
    "010": Move.LEFT,
    "011": Move.RIGHT,
    "100": Move.UTURN,
}


def rotate(facing: Facing, move: Move) -> Facing:
    """Facing after applying a move's rotation."""
    return Facing((int(facing) + move.quarter_turns) % 4)


def turn_toward(facing: Facing, target: Facing) -> Move:
    """The move whose rotation turns ``facing`` into ``target``."""
    diff = (int(target) - int(facing)) % 4
    return (Move.FORWARD, Move.RIGHT, Move.UTURN, Move.LEFT)[diff]
