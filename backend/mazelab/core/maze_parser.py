"""
Maze Parser for Maze Lab.

Loads and validates maze files from the filesystem.

Maze Format:
    Header lines of ``key: value`` pairs, followed by ``size`` rows of
    ``size`` wall masks. Each mask is four binary digits in N,E,S,W order
    (1 = wall). Lines starting with ``#`` are comments.

    name: Serpentine
    size: 3
    start: 0 E
    exit: 8 E
    min_steps: 8
    max_steps: 40
    max_score: 10

    1011 1010 1100
    ...
"""

import logging
from pathlib import Path
from typing import Optional

from .errors import MazeConfigError, MazeParseError
from .maze_model import Facing, Maze

logger = logging.getLogger(__name__)

REQUIRED_KEYS = {"size", "start", "exit", "min_steps", "max_steps", "max_score"}
KNOWN_KEYS = REQUIRED_KEYS | {"name"}


def _parse_int(key: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise MazeParseError(f"Header '{key}' must be an integer, got '{value}'") from e


def _parse_number(key: str, value: str) -> float:
    try:
        number = float(value)
    except ValueError as e:
        raise MazeParseError(f"Header '{key}' must be a number, got '{value}'") from e
    return int(number) if number.is_integer() else number


def _parse_placement(key: str, value: str) -> tuple[int, Facing]:
    parts = value.split()
    if len(parts) != 2:
        raise MazeParseError(f"Header '{key}' must be '<position> <facing>', got '{value}'")
    return _parse_int(key, parts[0]), Facing.parse(parts[1])


def _parse_mask(token: str, row: int) -> int:
    if len(token) != 4 or any(ch not in "01" for ch in token):
        raise MazeParseError(
            f"Invalid wall mask '{token}' in row {row}. "
            f"Masks are four binary digits in N,E,S,W order"
        )
    return int(token, 2)


def parse_maze_text(maze_text: str, name: str = "Unnamed") -> Maze:
    """
    Parse maze text into a Maze.

    Args:
        maze_text: Header lines followed by wall mask rows.
        name: Name of the maze, used unless the text has a ``name`` header.

    Returns:
        Validated Maze.

    Raises:
        MazeParseError: If the text cannot be parsed.
        MazeConfigError: If the parsed data does not describe a valid maze.
    """
    if not maze_text or not maze_text.strip():
        raise MazeParseError("Maze text is empty")

    headers: dict[str, str] = {}
    rows: list[list[int]] = []

    for line_no, raw_line in enumerate(maze_text.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        if ":" in line:
            if rows:
                raise MazeParseError(f"Header on line {line_no} appears after wall rows")
            key, _, value = line.partition(":")
            key = key.strip().lower()
            if key not in KNOWN_KEYS:
                raise MazeParseError(f"Unknown header '{key}' on line {line_no}")
            if key in headers:
                raise MazeParseError(f"Duplicate header '{key}' on line {line_no}")
            headers[key] = value.strip()
            continue

        rows.append([_parse_mask(token, len(rows)) for token in line.split()])

    missing = REQUIRED_KEYS - headers.keys()
    if missing:
        raise MazeParseError(f"Missing headers: {', '.join(sorted(missing))}")

    size = _parse_int("size", headers["size"])
    if len(rows) != size:
        raise MazeConfigError(f"Expected {size} wall rows, found {len(rows)}")
    for index, row in enumerate(rows):
        if len(row) != size:
            raise MazeConfigError(f"Row {index} has {len(row)} cells, expected {size}")

    start_pos, start_facing = _parse_placement("start", headers["start"])
    exit_pos, exit_facing = _parse_placement("exit", headers["exit"])

    return Maze(
        size=size,
        walls=[mask for row in rows for mask in row],
        start_pos=start_pos,
        start_facing=start_facing,
        exit_pos=exit_pos,
        exit_facing=exit_facing,
        min_steps=_parse_int("min_steps", headers["min_steps"]),
        max_steps=_parse_int("max_steps", headers["max_steps"]),
        max_score=_parse_number("max_score", headers["max_score"]),
        name=headers.get("name", name),
    )


def load_maze_file(file_path: Path | str, name: Optional[str] = None) -> Maze:
    """
    Load and parse a maze file from the filesystem.

    Args:
        file_path: Path to the maze file.
        name: Optional name override. If not provided, uses the filename stem.

    Returns:
        Validated Maze.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        MazeParseError: If the maze cannot be parsed.
        MazeConfigError: If the maze is invalid.
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"Maze file not found: {file_path}")

    if not file_path.is_file():
        raise MazeParseError(f"Path is not a file: {file_path}")

    try:
        maze_text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise MazeParseError(f"Failed to read maze file: {e}") from e

    maze = parse_maze_text(maze_text, name=file_path.stem)
    if name is not None:
        maze.name = name
    return maze


def load_all_mazes(mazes_dir: Path | str) -> list[Maze]:
    """
    Load all maze files from a directory.

    Invalid files are logged and skipped.

    Args:
        mazes_dir: Path to the directory containing maze files.

    Returns:
        List of mazes sorted by filename.

    Raises:
        FileNotFoundError: If the directory doesn't exist.
    """
    mazes_dir = Path(mazes_dir)

    if not mazes_dir.exists():
        raise FileNotFoundError(f"Mazes directory not found: {mazes_dir}")

    if not mazes_dir.is_dir():
        raise MazeParseError(f"Path is not a directory: {mazes_dir}")

    mazes = []
    for maze_file in sorted(mazes_dir.glob("*.txt")):
        try:
            mazes.append(load_maze_file(maze_file))
        except (MazeParseError, MazeConfigError) as e:
            logger.warning(f"Failed to load {maze_file}: {e}")

    return mazes


def validate_maze_text(maze_text: str) -> tuple[bool, Optional[str]]:
    """
    Validate maze text without raising exceptions.

    Returns:
        Tuple of (is_valid, error_message).
        error_message is None if valid.
    """
    try:
        parse_maze_text(maze_text)
        return True, None
    except (MazeParseError, MazeConfigError) as e:
        return False, str(e)
