"""Run scoring: coverage of dead ends scaled by step efficiency."""

from dataclasses import dataclass

from .maze_model import Maze


@dataclass
class ScoreBreakdown:
    """Components of a run's score."""
    exploration_ratio: float
    efficiency_ratio: float
    score: float

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "exploration_ratio": round(self.exploration_ratio, 4),
            "efficiency_ratio": round(self.efficiency_ratio, 4),
            "score": round(self.score, 4),
        }


def score_breakdown(
    max_score: float,
    min_steps: int,
    steps_taken: int,
    dead_ends_found: int,
    total_dead_ends: int,
) -> ScoreBreakdown:
    """
    Compute a run score.

    score = max_score * (found / total) * min(min_steps / steps, 1)

    Args:
        max_score: Score of a perfect run.
        min_steps: Par step count.
        steps_taken: Steps the run consumed.
        dead_ends_found: Distinct dead ends turned back from.
        total_dead_ends: Dead ends in the maze; a maze without any counts
            as fully explored.

    Returns:
        ScoreBreakdown, zero when no steps were taken and never above
        ``max_score``.
    """
    if total_dead_ends > 0:
        exploration = min(dead_ends_found / total_dead_ends, 1.0)
    else:
        exploration = 1.0

    if steps_taken <= 0:
        return ScoreBreakdown(exploration, 0.0, 0.0)

    efficiency = min(min_steps / steps_taken, 1.0)
    score = min(max_score * exploration * efficiency, max_score)
    return ScoreBreakdown(exploration, efficiency, score)


def calculate_score(
    max_score: float,
    min_steps: int,
    steps_taken: int,
    dead_ends_found: int,
    total_dead_ends: int,
) -> float:
    """Score as a single number; see ``score_breakdown``."""
    return score_breakdown(
        max_score, min_steps, steps_taken, dead_ends_found, total_dead_ends
    ).score


def score_for_maze(maze: Maze, steps_taken: int, dead_ends_found: int) -> ScoreBreakdown:
    return score_breakdown(
        maze.max_score,
        maze.min_steps,
        steps_taken,
        dead_ends_found,
        maze.total_dead_ends,
    )
