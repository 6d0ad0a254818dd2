"""Error kinds raised by the maze engine."""

from typing import Optional


class MazeConfigError(ValueError):
    """Exception raised when maze data, size or positions are invalid."""

    pass


class MazeParseError(Exception):
    """Exception raised when a maze text file cannot be parsed."""

    pass


class StrategyRuntimeFault(RuntimeError):
    """A strategy's step function raised while deciding a move."""

    def __init__(self, strategy: str, cause: BaseException):
        self.strategy = strategy
        self.cause = cause
        super().__init__(f"Strategy '{strategy}' failed: {type(cause).__name__}: {cause}")


class IllegalMoveRequest(ValueError):
    """A strategy emitted a move token outside the move vocabulary."""

    def __init__(self, token: object, strategy: Optional[str] = None):
        self.token = token
        self.strategy = strategy
        origin = f" from strategy '{strategy}'" if strategy else ""
        super().__init__(f"Unrecognized move {token!r}{origin}")


class UnknownStrategyError(KeyError):
    """No strategy is registered under the requested name."""

    def __str__(self) -> str:
        return f"Unknown strategy: {self.args[0]}"


class SuspiciousExitFromStart(Warning):
    """Diagnostic: a run exited on a step that began on the start cell.

    Recorded on the run trace and logged; it never fails the run.
    """

    def __init__(self, maze: str, position: int, step: int):
        self.maze = maze
        self.position = position
        self.step = step
        super().__init__(
            f"Exit taken from start cell {position} of maze '{maze}' on step {step}"
        )


class StrategyOptionError(ValueError):
    """A strategy factory rejected the options it was given."""

    def __init__(self, strategy: str):
        self.strategy = strategy
        super().__init__(f"Strategy '{strategy}' does not accept these options")
