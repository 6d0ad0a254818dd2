"""Catalog of available mazes: built-ins plus files from the mazes directory."""

import logging
from pathlib import Path
from typing import Optional

from mazelab.config import get_settings
from mazelab.core.builtin_mazes import BUILTIN_MAZES
from mazelab.core.maze_model import Maze
from mazelab.core.maze_parser import load_all_mazes

logger = logging.getLogger(__name__)


class MazeCatalog:
    """Name-keyed, read-only set of mazes."""

    def __init__(self, mazes_dir: Optional[Path] = None):
        self._mazes: dict[str, Maze] = {}
        for name, factory in BUILTIN_MAZES.items():
            self._mazes[name] = factory()

        if mazes_dir is not None:
            self.load_directory(mazes_dir)

    def load_directory(self, mazes_dir: Path) -> int:
        """Add every valid maze file in a directory; returns how many were added."""
        try:
            mazes = load_all_mazes(mazes_dir)
        except FileNotFoundError:
            logger.info(f"No mazes directory at {mazes_dir}, using built-in mazes only")
            return 0

        for maze in mazes:
            if maze.name in self._mazes:
                logger.warning(f"Maze '{maze.name}' from {mazes_dir} shadows an existing maze")
            self._mazes[maze.name] = maze
        logger.info(f"Loaded {len(mazes)} maze(s) from {mazes_dir}")
        return len(mazes)

    def get(self, name: str) -> Optional[Maze]:
        return self._mazes.get(name)

    def add(self, maze: Maze) -> None:
        self._mazes[maze.name] = maze

    def names(self) -> list[str]:
        return list(self._mazes)

    def all(self) -> list[Maze]:
        return list(self._mazes.values())


# Singleton instance
_maze_catalog: Optional[MazeCatalog] = None


def get_maze_catalog() -> MazeCatalog:
    """Get the maze catalog singleton."""
    global _maze_catalog
    if _maze_catalog is None:
        _maze_catalog = MazeCatalog(get_settings().mazes_dir)
    return _maze_catalog
