"""Maze routes for listing and retrieving mazes."""

from fastapi import APIRouter, HTTPException, Query, status

from mazelab.core.maze_model import Maze
from mazelab.schemas.maze import MazeDetail, MazeListItem, MazeListResponse
from mazelab.services.maze_service import get_maze_catalog

router = APIRouter(prefix="/maze", tags=["Mazes"])


def _list_item(maze: Maze) -> MazeListItem:
    data = maze.to_dict()
    return MazeListItem(
        name=data["name"],
        size=data["size"],
        start_pos=data["start_pos"],
        start_facing=data["start_facing"],
        exit_pos=data["exit_pos"],
        exit_facing=data["exit_facing"],
        min_steps=data["min_steps"],
        max_steps=data["max_steps"],
        max_score=data["max_score"],
        total_dead_ends=data["total_dead_ends"],
    )


@router.get(
    "",
    response_model=MazeListResponse,
)
async def list_mazes() -> MazeListResponse:
    """List all available mazes.

    Wall data is not included - use GET /v1/maze/{name} for full details.
    """
    maze_items = [_list_item(maze) for maze in get_maze_catalog().all()]
    return MazeListResponse(mazes=maze_items, total=len(maze_items))


@router.get(
    "/{name}",
    response_model=MazeDetail,
)
async def get_maze(
    name: str,
    ascii: bool = Query(False, description="Include an ASCII drawing of the maze"),
) -> MazeDetail:
    """Get detailed information about a specific maze, including wall masks."""
    maze = get_maze_catalog().get(name)

    if not maze:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Maze not found: {name}",
        )

    item = _list_item(maze)
    return MazeDetail(
        **item.model_dump(),
        walls=[cell.walls for cell in maze.cells],
        dead_ends=sorted(maze.dead_ends),
        ascii=maze.visualize() if ascii else None,
    )
