# Core module
from .builtin_mazes import BUILTIN_MAZES, given_maze, surprise_maze
from .errors import (
    IllegalMoveRequest,
    MazeConfigError,
    MazeParseError,
    StrategyRuntimeFault,
    SuspiciousExitFromStart,
    UnknownStrategyError,
)
from .maze_model import Cell, Facing, Maze
from .maze_parser import (
    load_all_mazes,
    load_maze_file,
    parse_maze_text,
    validate_maze_text,
)
from .moves import Move
from .scoring import ScoreBreakdown, calculate_score, score_breakdown
from .sensors import OUT_OF_BOUNDS, Pose, SensorReading, forward_position, relative_walls
from .simulation import RunStatus, RunTrace, SimulationDriver, StepFrame, simulate

__all__ = [
    "BUILTIN_MAZES",
    "given_maze",
    "surprise_maze",
    "IllegalMoveRequest",
    "MazeConfigError",
    "MazeParseError",
    "StrategyRuntimeFault",
    "SuspiciousExitFromStart",
    "UnknownStrategyError",
    "Cell",
    "Facing",
    "Maze",
    "load_all_mazes",
    "load_maze_file",
    "parse_maze_text",
    "validate_maze_text",
    "Move",
    "ScoreBreakdown",
    "calculate_score",
    "score_breakdown",
    "OUT_OF_BOUNDS",
    "Pose",
    "SensorReading",
    "forward_position",
    "relative_walls",
    "RunStatus",
    "RunTrace",
    "SimulationDriver",
    "StepFrame",
    "simulate",
]
