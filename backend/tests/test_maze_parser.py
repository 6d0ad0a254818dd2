"""Tests for the maze text format and file loading."""

import tempfile
from pathlib import Path

import pytest

from mazelab.core.errors import MazeConfigError, MazeParseError
from mazelab.core.maze_model import Facing, Maze
from mazelab.core.maze_parser import (
    load_all_mazes,
    load_maze_file,
    parse_maze_text,
    validate_maze_text,
)


# 3x3 corridor along the top row, exit to the east of cell 2
SIMPLE_MAZE = """# simple corridor
size: 3
start: 0 E
exit: 2 E
min_steps: 2
max_steps: 20
max_score: 10

1011 1010 1010
1111 1111 1111
1111 1111 1111
"""


class TestMazeParser:
    """Tests for maze parser functionality."""

    def test_parse_simple_maze(self):
        """Test parsing a simple valid maze."""
        result = parse_maze_text(SIMPLE_MAZE, name="Simple")

        assert isinstance(result, Maze)
        assert result.name == "Simple"
        assert result.size == 3
        assert result.start_pos == 0
        assert result.start_facing == Facing.EAST
        assert result.exit_pos == 2
        assert result.exit_facing == Facing.EAST
        assert result.min_steps == 2
        assert result.max_steps == 20
        assert result.max_score == 10
        assert result.cells[0].walls == 0b1011

    def test_name_header_wins(self):
        """Test that a name header overrides the name argument."""
        result = parse_maze_text("name: Fancy\n" + SIMPLE_MAZE, name="Plain")
        assert result.name == "Fancy"

    def test_fractional_max_score(self):
        text = SIMPLE_MAZE.replace("max_score: 10", "max_score: 7.5")
        assert parse_maze_text(text).max_score == 7.5

    def test_parse_empty_maze_raises_error(self):
        """Test that empty maze raises MazeParseError."""
        with pytest.raises(MazeParseError, match="Maze text is empty"):
            parse_maze_text("")

    def test_parse_whitespace_only_raises_error(self):
        """Test that whitespace-only maze raises MazeParseError."""
        with pytest.raises(MazeParseError, match="Maze text is empty"):
            parse_maze_text("   \n   \n   ")

    def test_missing_header_raises_error(self):
        text = SIMPLE_MAZE.replace("min_steps: 2\n", "")
        with pytest.raises(MazeParseError, match="Missing headers: min_steps"):
            parse_maze_text(text)

    def test_unknown_header_raises_error(self):
        with pytest.raises(MazeParseError, match="Unknown header 'colour'"):
            parse_maze_text("colour: blue\n" + SIMPLE_MAZE)

    def test_bad_mask_raises_error(self):
        text = SIMPLE_MAZE.replace("1011 1010 1010", "1011 1020 1010")
        with pytest.raises(MazeParseError, match="Invalid wall mask '1020'"):
            parse_maze_text(text)

    def test_bad_placement_raises_error(self):
        text = SIMPLE_MAZE.replace("start: 0 E", "start: 0")
        with pytest.raises(MazeParseError, match="<position> <facing>"):
            parse_maze_text(text)

    def test_row_count_mismatch_raises_config_error(self):
        text = SIMPLE_MAZE.replace("1111 1111 1111\n", "", 1)
        with pytest.raises(MazeConfigError, match="Expected 3 wall rows, found 2"):
            parse_maze_text(text)

    def test_out_of_range_start_raises_config_error(self):
        text = SIMPLE_MAZE.replace("start: 0 E", "start: 9 E")
        with pytest.raises(MazeConfigError, match="out of range"):
            parse_maze_text(text)


class TestLoadMazeFile:
    """Tests for loading maze files from filesystem."""

    def test_load_maze_file(self):
        """Test loading a maze from a file."""
        with tempfile.NamedTemporaryFile(mode="w", suffix=".txt", delete=False) as f:
            f.write(SIMPLE_MAZE)
            f.flush()

            result = load_maze_file(f.name, name="Test")

            assert result.name == "Test"
            assert result.size == 3

        Path(f.name).unlink()

    def test_load_maze_file_infers_name_from_filename(self):
        """Test that name is inferred from filename."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "winding_path.txt"
            path.write_text(SIMPLE_MAZE)

            result = load_maze_file(path)
            assert result.name == "winding_path"

    def test_load_maze_file_not_found(self):
        """Test that FileNotFoundError is raised for missing file."""
        with pytest.raises(FileNotFoundError):
            load_maze_file("/nonexistent/path/maze.txt")


class TestLoadAllMazes:
    """Tests for loading all mazes from a directory."""

    def test_load_all_mazes(self):
        """Test loading all mazes from a directory."""
        with tempfile.TemporaryDirectory() as tmpdir:
            (Path(tmpdir) / "maze1.txt").write_text(SIMPLE_MAZE)
            (Path(tmpdir) / "maze2.txt").write_text(SIMPLE_MAZE)

            result = load_all_mazes(tmpdir)

            assert [m.name for m in result] == ["maze1", "maze2"]

    def test_invalid_files_are_skipped(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            (Path(tmpdir) / "good.txt").write_text(SIMPLE_MAZE)
            (Path(tmpdir) / "bad.txt").write_text("size: 3\n")

            result = load_all_mazes(tmpdir)

            assert [m.name for m in result] == ["good"]

    def test_load_all_mazes_empty_directory(self):
        """Test loading from empty directory."""
        with tempfile.TemporaryDirectory() as tmpdir:
            assert load_all_mazes(tmpdir) == []

    def test_load_all_mazes_nonexistent_directory(self):
        """Test loading from nonexistent directory."""
        with pytest.raises(FileNotFoundError):
            load_all_mazes("/nonexistent/path")

    def test_shipped_mazes_are_valid(self):
        mazes_dir = Path(__file__).parent.parent / "mazes"
        for maze_file in mazes_dir.glob("*.txt"):
            is_valid, error = validate_maze_text(maze_file.read_text())
            assert is_valid is True, f"Maze {maze_file.name} failed: {error}"


class TestValidateMazeText:
    """Tests for maze validation helper."""

    def test_validate_valid_maze(self):
        is_valid, error = validate_maze_text(SIMPLE_MAZE)
        assert is_valid is True
        assert error is None

    def test_validate_invalid_maze(self):
        is_valid, error = validate_maze_text(SIMPLE_MAZE.replace("size: 3", "size: 4"))
        assert is_valid is False
        assert "Expected 4 wall rows" in error
