# Strategies module
from .base import StepResult, Strategy, StrategyState
from .composite import AdaptiveStrategy, PhasedStrategy
from .full_knowledge import DeadEndFilling, FloodFill
from .graph_search import GraphSearch, RecursiveBacktracker
from .pledge import PledgeStrategy
from .registry import get_strategy, list_strategies, strategy_names
from .scripted import ReplayFrame, ReplayStrategy, ScriptedStrategy, tokenize_commands
from .tremaux import TremauxStrategy
from .wall_follower import RandomMouse, WallFollower

__all__ = [
    "StepResult",
    "Strategy",
    "StrategyState",
    "AdaptiveStrategy",
    "PhasedStrategy",
    "DeadEndFilling",
    "FloodFill",
    "GraphSearch",
    "RecursiveBacktracker",
    "PledgeStrategy",
    "get_strategy",
    "list_strategies",
    "strategy_names",
    "ReplayFrame",
    "ReplayStrategy",
    "ScriptedStrategy",
    "tokenize_commands",
    "TremauxStrategy",
    "RandomMouse",
    "WallFollower",
]
