"""Name-keyed registry of strategy factories."""

from typing import Any, Callable

from mazelab.core.errors import UnknownStrategyError

from .base import Strategy
from .composite import AdaptiveStrategy, PhasedStrategy
from .full_knowledge import DeadEndFilling, FloodFill
from .graph_search import GraphSearch, RecursiveBacktracker
from .pledge import PledgeStrategy
from .scripted import ReplayStrategy, ScriptedStrategy
from .tremaux import TremauxStrategy
from .wall_follower import RandomMouse, WallFollower


def hybrid_explorer() -> Strategy:
    return PhasedStrategy(
        phases=[
            (WallFollower("right"), 50),
            (WallFollower("left"), 80),
            (TremauxStrategy(), None),
        ],
        name="hybrid-explorer",
        label="Hybrid Explorer",
        description="Right-hand for 50 steps, left-hand for 80 more, then Trémaux",
    )


def adaptive_hunter(stall_limit: int = 40) -> Strategy:
    return AdaptiveStrategy(
        rotation=[WallFollower("right"), WallFollower("forward"), WallFollower("left")],
        finisher=FloodFill(),
        stall_limit=stall_limit,
        name="adaptive-hunter",
        label="Adaptive Hunter",
    )


STRATEGY_FACTORIES: dict[str, Callable[..., Strategy]] = {
    "left-hand": lambda: WallFollower("left"),
    "right-hand": lambda: WallFollower("right"),
    "random-mouse": lambda seed=None: RandomMouse(seed=seed),
    "pledge": PledgeStrategy,
    "tremaux": TremauxStrategy,
    "breadth-first-search": lambda: GraphSearch("breadth"),
    "depth-first-search": lambda: GraphSearch("depth"),
    "recursive-backtrack": RecursiveBacktracker,
    "flood-fill": FloodFill,
    "dead-end-filling": DeadEndFilling,
    "hybrid-explorer": hybrid_explorer,
    "adaptive-hunter": adaptive_hunter,
    "manual-input": lambda commands=(): ScriptedStrategy(commands),
    "log-playback": lambda frames=(): ReplayStrategy(frames),
}


def strategy_names(include_interactive: bool = True) -> list[str]:
    """Registered names, optionally without the interactive strategies."""
    if include_interactive:
        return list(STRATEGY_FACTORIES)
    return [name for name in STRATEGY_FACTORIES if not get_strategy(name).interactive]


def get_strategy(name: str, **options: Any) -> Strategy:
    """
    Create a strategy by registered name.

    Args:
        name: Registry key, e.g. ``"left-hand"``.
        **options: Factory options (``seed`` for random-mouse,
            ``commands`` for manual-input, ``frames`` for log-playback,
            ``stall_limit`` for adaptive-hunter). Options set to None are
            ignored.

    Raises:
        UnknownStrategyError: If no strategy has that name.
        TypeError: If the strategy does not accept an option.
    """
    factory = STRATEGY_FACTORIES.get(name)
    if factory is None:
        raise UnknownStrategyError(name)
    options = {key: value for key, value in options.items() if value is not None}
    return factory(**options)


def list_strategies(include_interactive: bool = True) -> list[dict]:
    """Describe every registered strategy."""
    return [get_strategy(name).describe() for name in strategy_names(include_interactive)]

