"""
Composite strategies that delegate each step to another strategy.

Delegates are started with the composite's own pose, so their bootstrap
hook runs without emitting a second initial FORWARD.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from mazelab.core.maze_model import Facing, Maze
from mazelab.core.moves import Move
from mazelab.core.sensors import SensorReading

from .base import Strategy, StrategyState


def start_delegate(strategy: Strategy, maze: Maze, pos: int, facing: Facing) -> StrategyState:
    """Fresh, already bootstrapped state for a delegate strategy."""
    state = strategy.new_state()
    strategy.begin(maze, pos, facing, state)
    return state


@dataclass
class PhasedState(StrategyState):
    phase_index: int = 0
    phase_steps: int = 0
    delegate_state: Optional[StrategyState] = None


class PhasedStrategy(Strategy):
    """
    Run a fixed sequence of strategies, each for a step budget.

    Args:
        phases: (strategy, step budget) pairs; a budget of None means the
            phase never ends. The last phase always runs indefinitely.
    """

    def __init__(
        self,
        phases: Sequence[tuple[Strategy, Optional[int]]],
        name: str = "phased",
        label: str = "Phased Explorer",
        description: str = "",
    ):
        if not phases:
            raise ValueError("A phased strategy needs at least one phase")
        self.phases = list(phases)
        self.name = name
        self.label = label
        self.description = description or " then ".join(
            f"{strategy.label} ({budget} steps)" if budget else strategy.label
            for strategy, budget in self.phases
        )

    def new_state(self) -> PhasedState:
        return PhasedState()

    def decide(
        self,
        maze: Maze,
        pos: int,
        facing: Facing,
        sensors: SensorReading,
        state: PhasedState,
    ) -> tuple[Move, str]:
        strategy, budget = self.phases[state.phase_index]
        is_last = state.phase_index == len(self.phases) - 1
        if budget is not None and not is_last and state.phase_steps >= budget:
            state.phase_index += 1
            state.phase_steps = 0
            state.delegate_state = None
            strategy, budget = self.phases[state.phase_index]

        if state.delegate_state is None:
            state.delegate_state = start_delegate(strategy, maze, pos, facing)

        state.phase_steps += 1
        result = strategy.step(maze, pos, facing, state.delegate_state)
        return result.move, f"phase {state.phase_index + 1}, {result.explanation}"

    def metrics(self, maze: Maze, state: PhasedState) -> dict[str, Any]:
        strategy, _ = self.phases[state.phase_index]
        return {
            "phase": state.phase_index + 1,
            "phase_steps": state.phase_steps,
            "delegate": strategy.name,
        }


@dataclass
class AdaptiveState(StrategyState):
    pointer: int = 0
    steps_since_discovery: int = 0
    found: set[int] = field(default_factory=set)
    exit_mode: bool = False
    delegate_state: Optional[StrategyState] = None


class AdaptiveStrategy(Strategy):
    """
    Rotate through strategies whenever exploration stalls.

    A new dead end (a dead-end cell the bot stands on for the first time)
    resets the stall counter. After more than ``stall_limit`` steps without
    one, the next strategy in the rotation takes over. Once every dead end
    of the maze has been seen, ``finisher`` drives the bot to the exit.
    """

    def __init__(
        self,
        rotation: Sequence[Strategy],
        finisher: Optional[Strategy] = None,
        stall_limit: int = 40,
        name: str = "adaptive",
        label: str = "Adaptive Explorer",
        description: str = "",
    ):
        if not rotation:
            raise ValueError("An adaptive strategy needs at least one strategy to rotate through")
        self.rotation = list(rotation)
        self.finisher = finisher
        self.stall_limit = stall_limit
        self.name = name
        self.label = label
        self.description = description or (
            f"Rotate through {', '.join(s.label for s in self.rotation)} "
            f"after {stall_limit} steps without a new dead end"
        )

    def new_state(self) -> AdaptiveState:
        return AdaptiveState()

    def _active(self, state: AdaptiveState) -> Strategy:
        if state.exit_mode and self.finisher is not None:
            return self.finisher
        return self.rotation[state.pointer]

    def decide(
        self,
        maze: Maze,
        pos: int,
        facing: Facing,
        sensors: SensorReading,
        state: AdaptiveState,
    ) -> tuple[Move, str]:
        note = ""
        if maze.is_dead_end(pos) and pos not in state.found:
            state.found.add(pos)
            state.steps_since_discovery = 0
            note = f"found dead end {pos}; "
        else:
            state.steps_since_discovery += 1

        if (
            not state.exit_mode
            and self.finisher is not None
            and maze.total_dead_ends > 0
            and maze.dead_ends <= state.found
        ):
            state.exit_mode = True
            state.delegate_state = None
            note += "all dead ends found, heading for the exit; "
        elif not state.exit_mode and state.steps_since_discovery > self.stall_limit:
            state.pointer = (state.pointer + 1) % len(self.rotation)
            state.steps_since_discovery = 0
            state.delegate_state = None
            note += f"stalled, switching to {self.rotation[state.pointer].label}; "

        strategy = self._active(state)
        if state.delegate_state is None:
            state.delegate_state = start_delegate(strategy, maze, pos, facing)

        result = strategy.step(maze, pos, facing, state.delegate_state)
        return result.move, f"{note}{result.explanation}"

    def metrics(self, maze: Maze, state: AdaptiveState) -> dict[str, Any]:
        return {
            "delegate": self._active(state).name,
            "steps_since_discovery": state.steps_since_discovery,
            "dead_ends_found": len(state.found),
        }
