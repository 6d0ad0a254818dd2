"""Run routes for starting and stepping interactive simulations."""

import logging

from fastapi import APIRouter, HTTPException, Query, status

from mazelab.config import get_settings
from mazelab.core.errors import IllegalMoveRequest, MazeConfigError, UnknownStrategyError
from mazelab.core.maze_model import Maze
from mazelab.schemas.run import (
    AdvanceRequest,
    AdvanceResponse,
    RunCreateRequest,
    RunResponse,
    StepFrameResponse,
)
from mazelab.services.maze_service import get_maze_catalog
from mazelab.services.run_service import LiveRun, get_run_service
from mazelab.strategies.registry import get_strategy

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/runs", tags=["Runs"])


def _run_response(run: LiveRun, include_frames: bool = False) -> RunResponse:
    return RunResponse(**run.to_dict(include_frames=include_frames))


def _resolve_maze(request: RunCreateRequest) -> Maze:
    if request.maze_definition is not None:
        definition = request.maze_definition
        try:
            return Maze.from_definition(definition.model_dump(), name=definition.name)
        except MazeConfigError as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=str(e),
            ) from e

    maze = get_maze_catalog().get(request.maze)
    if maze is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Maze not found: {request.maze}",
        )
    return maze


@router.post(
    "",
    response_model=RunResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_run(request: RunCreateRequest) -> RunResponse:
    """Start a run of a strategy on a maze.

    The run starts at the maze's start pose with zero steps taken. Use
    POST /v1/runs/{run_id}/advance to step it.
    """
    maze = _resolve_maze(request)

    options = {
        "seed": request.seed,
        "commands": request.commands,
        "frames": [frame.model_dump() for frame in request.frames] if request.frames else None,
    }
    try:
        strategy = get_strategy(request.strategy, **options)
    except UnknownStrategyError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        ) from e
    except TypeError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Strategy '{request.strategy}' does not accept these options",
        ) from e
    except (IllegalMoveRequest, MazeConfigError, ValueError) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    run = get_run_service().create_run(maze, strategy, record_frames=request.record_frames)
    return _run_response(run)


@router.get(
    "/{run_id}",
    response_model=RunResponse,
)
async def get_run(
    run_id: str,
    frames: bool = Query(False, description="Include every recorded step frame"),
) -> RunResponse:
    """Get the current state of a run."""
    run = get_run_service().get_run(run_id)
    if run is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Run not found: {run_id}",
        )
    return _run_response(run, include_frames=frames)


@router.post(
    "/{run_id}/advance",
    response_model=AdvanceResponse,
)
async def advance_run(run_id: str, request: AdvanceRequest) -> AdvanceResponse:
    """Advance a run by up to ``steps`` strategy invocations.

    Stops early when the run terminates. Advancing a finished run returns
    no frames.
    """
    settings = get_settings()
    if request.steps > settings.max_advance_steps:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"At most {settings.max_advance_steps} steps per request",
        )

    service = get_run_service()
    run = service.get_run(run_id)
    if run is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Run not found: {run_id}",
        )

    frames = service.advance(run_id, request.steps)
    return AdvanceResponse(
        run=_run_response(run),
        frames=[StepFrameResponse(**frame.to_dict()) for frame in frames],
    )


@router.delete(
    "/{run_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_run(run_id: str) -> None:
    """Discard a run."""
    if not get_run_service().delete_run(run_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Run not found: {run_id}",
        )
