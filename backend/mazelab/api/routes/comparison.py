"""Comparison routes for ranking strategies and WebSocket updates."""

from fastapi import APIRouter, HTTPException, Request, WebSocket, WebSocketDisconnect, status
from slowapi import Limiter
from slowapi.util import get_remote_address

from mazelab.config import get_settings
from mazelab.core.errors import UnknownStrategyError
from mazelab.schemas.comparison import ComparisonRequest, ComparisonResponse
from mazelab.services.comparison_service import ComparisonReport, get_comparison_service
from mazelab.services.maze_service import get_maze_catalog

settings = get_settings()
limiter = Limiter(key_func=get_remote_address)

router = APIRouter(prefix="/comparison", tags=["Comparison"])


def _response(report: ComparisonReport) -> ComparisonResponse:
    return ComparisonResponse(**report.to_dict())


@router.post(
    "",
    response_model=ComparisonResponse,
)
@limiter.limit(f"{settings.rate_limit_comparisons}/minute")
async def run_comparison(
    request: Request,
    comparison: ComparisonRequest,
) -> ComparisonResponse:
    """Run strategies against mazes and rank them by total score.

    Every (strategy, maze) pair runs fresh. A strategy that faults is
    recorded as ILLEGAL_STATE and the comparison carries on.
    """
    mazes = None
    if comparison.mazes:
        catalog = get_maze_catalog()
        mazes = []
        for name in comparison.mazes:
            maze = catalog.get(name)
            if maze is None:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail=f"Maze not found: {name}",
                )
            mazes.append(maze)

    service = get_comparison_service()
    try:
        report = await service.run_async(strategy_names=comparison.strategies, mazes=mazes)
    except UnknownStrategyError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        ) from e

    return _response(report)


@router.get(
    "/latest",
    response_model=ComparisonResponse,
)
async def get_latest_comparison() -> ComparisonResponse:
    """Get the most recent comparison report."""
    report = get_comparison_service().latest
    if report is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No comparison has been run yet",
        )
    return _response(report)


@router.websocket("/ws")
async def comparison_websocket(websocket: WebSocket):
    """WebSocket endpoint for live comparison progress.

    Messages are JSON with format:
    {
        "type": "run_completed",
        "data": {"strategy": "...", "maze": "...", "status": "EXITED", ...}
    }
    and, once all runs finish:
    {
        "type": "comparison_completed",
        "data": {"rankings": [...]}
    }
    """
    await websocket.accept()

    service = get_comparison_service()
    queue = service.subscribe()

    try:
        while True:
            message = await queue.get()
            await websocket.send_json(message)
    except WebSocketDisconnect:
        pass
    finally:
        service.unsubscribe(queue)
