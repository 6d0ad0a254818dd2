"""Pytest configuration and fixtures."""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from mazelab.core.maze_model import Maze
from mazelab.main import app
from mazelab.services import comparison_service, run_service


def corridor_maze(**overrides) -> Maze:
    """3x3 maze: an east-running corridor along the top row, everything else sealed."""
    params = dict(
        size=3,
        walls=[0b1011, 0b1010, 0b1010] + [0b1111] * 6,
        start_pos=0,
        start_facing="E",
        exit_pos=2,
        exit_facing="E",
        min_steps=2,
        max_steps=20,
        max_score=10,
        name="corridor",
    )
    params.update(overrides)
    return Maze(**params)


def hook_maze(**overrides) -> Maze:
    """3x3 maze: bottom row corridor 6 -> 7 -> 8 turning north into dead end 5."""
    params = dict(
        size=3,
        walls=[0b1111] * 5 + [0b1101, 0b1011, 0b1010, 0b0110],
        start_pos=6,
        start_facing="E",
        exit_pos=2,
        exit_facing="N",
        min_steps=4,
        max_steps=20,
        max_score=7,
        name="hook",
    )
    params.update(overrides)
    return Maze(**params)


def open_maze(**overrides) -> Maze:
    """3x3 maze with only the outer walls, exit on the east side of cell 8."""
    params = dict(
        size=3,
        walls=[
            0b1001, 0b1000, 0b1100,
            0b0001, 0b0000, 0b0100,
            0b0011, 0b0010, 0b0010,
        ],
        start_pos=0,
        start_facing="E",
        exit_pos=8,
        exit_facing="E",
        min_steps=4,
        max_steps=100,
        max_score=10,
        name="open",
    )
    params.update(overrides)
    return Maze(**params)


@pytest.fixture
def corridor() -> Maze:
    return corridor_maze()


@pytest.fixture
def hook() -> Maze:
    return hook_maze()


@pytest.fixture
def open_grid() -> Maze:
    return open_maze()


@pytest.fixture(autouse=True)
def reset_services():
    """Drop the run and comparison singletons between tests."""
    run_service._run_service = None
    comparison_service._comparison_service = None
    yield
    run_service._run_service = None
    comparison_service._comparison_service = None


@pytest_asyncio.fixture(scope="function")
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac


@pytest.fixture
def sample_maze_definition() -> dict:
    """Inline maze definition for run requests."""
    return {
        "name": "inline-corridor",
        "size": 3,
        "walls": [11, 10, 10, 15, 15, 15, 15, 15, 15],
        "start_pos": 0,
        "start_facing": "E",
        "exit_pos": 2,
        "exit_facing": "E",
        "min_steps": 2,
        "max_steps": 20,
        "max_score": 10,
    }
