"""
Maze Model for Maze Lab.

A maze is a square grid of cells stored row-major. Each cell carries a
4-bit wall mask in N,E,S,W bit order (1 = wall):

    N = 0b1000
    E = 0b0100
    S = 0b0010
    W = 0b0001

Dead ends are derived from the masks (three or more walls), never
supplied by the caller.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Optional, Sequence

from .errors import MazeConfigError


class Facing(IntEnum):
    """Cardinal directions, encoded 0-3."""
    NORTH = 0
    EAST = 1
    SOUTH = 2
    WEST = 3

    @property
    def left(self) -> "Facing":
        return Facing((self + 3) % 4)

    @property
    def right(self) -> "Facing":
        return Facing((self + 1) % 4)

    @property
    def back(self) -> "Facing":
        return Facing((self + 2) % 4)

    @property
    def letter(self) -> str:
        return self.name[0]

    @property
    def delta(self) -> tuple[int, int]:
        """Get (dx, dy) for this facing; y grows southwards."""
        deltas = {
            Facing.NORTH: (0, -1),
            Facing.EAST: (1, 0),
            Facing.SOUTH: (0, 1),
            Facing.WEST: (-1, 0),
        }
        return deltas[self]

    @property
    def wall_bit(self) -> int:
        return 8 >> int(self)

    @classmethod
    def parse(cls, value: Any) -> "Facing":
        """Convert 0-3, N/E/S/W or a direction name to a Facing."""
        if isinstance(value, Facing):
            return value
        if isinstance(value, bool):
            raise MazeConfigError(f"Invalid facing: {value!r}")
        if isinstance(value, int):
            if 0 <= value <= 3:
                return cls(value)
            raise MazeConfigError(f"Facing out of range 0-3: {value}")
        if isinstance(value, str):
            text = value.strip().upper()
            if text.isdigit():
                return cls.parse(int(text))
            for facing in cls:
                if text in (facing.letter, facing.name):
                    return facing
        raise MazeConfigError(f"Invalid facing: {value!r}")


@dataclass(frozen=True)
class Cell:
    """A single immutable maze cell."""
    position: int
    walls: int

    def has_wall(self, facing: Facing) -> bool:
        return bool(self.walls & Facing(facing).wall_bit)

    @property
    def wall_count(self) -> int:
        return bin(self.walls).count("1")

    @property
    def is_dead_end(self) -> bool:
        return self.wall_count >= 3

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "position": self.position,
            "walls": {f.letter: self.has_wall(f) for f in Facing},
            "wall_count": self.wall_count,
            "is_dead_end": self.is_dead_end,
        }


class Maze:
    """
    Static grid of cells with start/exit placement and scoring parameters.

    Wall masks never change once the maze is built, so a single instance
    can be shared by any number of concurrent runs.
    """

    def __init__(
        self,
        size: int,
        walls: Sequence[int],
        start_pos: int,
        start_facing: Any,
        exit_pos: int,
        exit_facing: Any,
        min_steps: int,
        max_steps: int,
        max_score: float,
        name: str = "Unnamed",
    ):
        """
        Build and validate a maze.

        Args:
            size: Width and height of the square grid.
            walls: Row-major wall masks, one per cell, length size*size.
            start_pos: Starting cell index.
            start_facing: Initial facing (0-3 or N/E/S/W).
            exit_pos: Exit cell index.
            exit_facing: Direction of egress from the exit cell.
            min_steps: Par step count used for the efficiency ratio.
            max_steps: Step budget for a run.
            max_score: Score awarded for a perfect run.
            name: Display name.

        Raises:
            MazeConfigError: If any of the data is malformed.
        """
        if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
            raise MazeConfigError(f"Maze size must be a positive integer, got {size!r}")

        masks = list(walls)
        if len(masks) != size * size:
            raise MazeConfigError(
                f"Maze data has {len(masks)} cells, expected {size * size} for size {size}"
            )
        for index, mask in enumerate(masks):
            if isinstance(mask, bool) or not isinstance(mask, int) or not 0 <= mask <= 15:
                raise MazeConfigError(f"Invalid wall mask {mask!r} at cell {index}")

        for label, pos in (("start", start_pos), ("exit", exit_pos)):
            if isinstance(pos, bool) or not isinstance(pos, int) or not 0 <= pos < size * size:
                raise MazeConfigError(
                    f"{label.capitalize()} position {pos!r} is out of range [0, {size * size})"
                )

        if max_steps <= 0:
            raise MazeConfigError(f"max_steps must be positive, got {max_steps}")
        if min_steps < 0:
            raise MazeConfigError(f"min_steps must not be negative, got {min_steps}")
        if max_score < 0:
            raise MazeConfigError(f"max_score must not be negative, got {max_score}")

        self.name = name
        self.size = size
        self.cells: tuple[Cell, ...] = tuple(Cell(i, m) for i, m in enumerate(masks))
        self.start_pos = start_pos
        self.start_facing = Facing.parse(start_facing)
        self.exit_pos = exit_pos
        self.exit_facing = Facing.parse(exit_facing)
        self.min_steps = min_steps
        self.max_steps = max_steps
        self.max_score = max_score
        self.dead_ends: frozenset[int] = frozenset(
            cell.position for cell in self.cells if cell.is_dead_end
        )

    @classmethod
    def from_definition(cls, definition: dict, name: Optional[str] = None) -> "Maze":
        """Build a maze from the plain external definition.

        Accepts both snake_case and camelCase keys (``start_pos`` or
        ``startPos``).
        """

        def pick(key: str, camel: str) -> Any:
            if key in definition:
                return definition[key]
            if camel in definition:
                return definition[camel]
            raise MazeConfigError(f"Maze definition is missing '{key}'")

        return cls(
            size=pick("size", "size"),
            walls=pick("walls", "walls"),
            start_pos=pick("start_pos", "startPos"),
            start_facing=pick("start_facing", "startFacing"),
            exit_pos=pick("exit_pos", "exitPos"),
            exit_facing=pick("exit_facing", "exitFacing"),
            min_steps=pick("min_steps", "minSteps"),
            max_steps=pick("max_steps", "maxSteps"),
            max_score=pick("max_score", "maxScore"),
            name=name or definition.get("name", "Unnamed"),
        )

    @property
    def cell_count(self) -> int:
        return self.size * self.size

    @property
    def total_dead_ends(self) -> int:
        return len(self.dead_ends)

    def in_bounds(self, pos: int) -> bool:
        return 0 <= pos < self.cell_count

    def coordinates(self, pos: int) -> tuple[int, int]:
        """Get (x, y) for a cell index."""
        return pos % self.size, pos // self.size

    def position_of(self, x: int, y: int) -> Optional[int]:
        """Get the cell index at (x, y), or None outside the grid."""
        if 0 <= x < self.size and 0 <= y < self.size:
            return y * self.size + x
        return None

    def cell(self, pos: int) -> Cell:
        return self.cells[pos]

    def walls_at(self, pos: int) -> dict[Facing, bool]:
        """Absolute wall booleans for a cell, keyed by facing."""
        cell = self.cells[pos]
        return {facing: cell.has_wall(facing) for facing in Facing}

    def wall_tuple(self, pos: int) -> tuple[bool, bool, bool, bool]:
        """Absolute walls as an (N, E, S, W) tuple."""
        cell = self.cells[pos]
        return tuple(cell.has_wall(facing) for facing in Facing)

    def has_wall(self, pos: int, facing: Facing) -> bool:
        return self.cells[pos].has_wall(facing)

    def adjacent(self, pos: int, facing: Facing) -> Optional[int]:
        """Cell next to ``pos`` in ``facing``, or None across the boundary.

        Bounds are checked on coordinates alone, independent of wall data.
        """
        x, y = self.coordinates(pos)
        dx, dy = Facing(facing).delta
        return self.position_of(x + dx, y + dy)

    def neighbors(self, pos: int) -> list[int]:
        """Adjacent, in-bounds, unwalled cells in N, E, S, W order."""
        result = []
        for facing in Facing:
            if self.has_wall(pos, facing):
                continue
            target = self.adjacent(pos, facing)
            if target is not None:
                result.append(target)
        return result

    def links(self, pos: int) -> list[int]:
        """Neighbors that can be walked back from as well.

        Differs from ``neighbors`` only where the two cells disagree about
        the wall between them.
        """
        return [n for n in self.neighbors(pos) if pos in self.neighbors(n)]

    def predecessors(self, pos: int) -> list[int]:
        """Adjacent cells whose own walls let them move into ``pos``."""
        result = []
        for facing in Facing:
            source = self.adjacent(pos, facing)
            if source is not None and not self.has_wall(source, facing.back):
                result.append(source)
        return result

    def is_dead_end(self, pos: int) -> bool:
        return self.cells[pos].is_dead_end

    def to_dict(self, include_cells: bool = False) -> dict:
        """Convert to dictionary."""
        result = {
            "name": self.name,
            "size": self.size,
            "start_pos": self.start_pos,
            "start_facing": self.start_facing.letter,
            "exit_pos": self.exit_pos,
            "exit_facing": self.exit_facing.letter,
            "min_steps": self.min_steps,
            "max_steps": self.max_steps,
            "max_score": self.max_score,
            "dead_ends": sorted(self.dead_ends),
            "total_dead_ends": self.total_dead_ends,
        }
        if include_cells:
            result["walls"] = [cell.walls for cell in self.cells]
        return result

    def visualize(self, marks: Optional[dict[int, str]] = None) -> str:
        """
        Draw the maze as ASCII art.

        Args:
            marks: Optional map of cell index to a single character drawn
                inside that cell (defaults mark start ``S`` and exit ``E``).

        Returns:
            Multi-line string, one text row per wall row and cell row.
        """
        marks = dict(marks or {})
        marks.setdefault(self.start_pos, "S")
        marks.setdefault(self.exit_pos, "E")

        lines = []
        for y in range(self.size):
            top = "+"
            middle = ""
            for x in range(self.size):
                pos = y * self.size + x
                cell = self.cells[pos]
                top += ("---" if cell.has_wall(Facing.NORTH) else "   ") + "+"
                middle += "|" if cell.has_wall(Facing.WEST) else " "
                middle += f" {marks.get(pos, ' ')} "
            last = self.cells[y * self.size + self.size - 1]
            middle += "|" if last.has_wall(Facing.EAST) else " "
            lines.append(top)
            lines.append(middle)
        bottom = "+"
        for x in range(self.size):
            cell = self.cells[(self.size - 1) * self.size + x]
            bottom += ("---" if cell.has_wall(Facing.SOUTH) else "   ") + "+"
        lines.append(bottom)
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"Maze(name={self.name!r}, size={self.size})"
