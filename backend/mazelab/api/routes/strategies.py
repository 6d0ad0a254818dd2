"""Strategy routes for listing registered strategies."""

from fastapi import APIRouter, Query

from mazelab.schemas.run import StrategyInfo, StrategyListResponse
from mazelab.strategies.registry import list_strategies

router = APIRouter(prefix="/strategies", tags=["Strategies"])


@router.get(
    "",
    response_model=StrategyListResponse,
)
async def get_strategies(
    include_interactive: bool = Query(True, description="Include manual-input and log-playback"),
) -> StrategyListResponse:
    """List every strategy that can be used for runs and comparisons."""
    strategies = [StrategyInfo(**info) for info in list_strategies(include_interactive)]
    return StrategyListResponse(strategies=strategies, total=len(strategies))
