"""Comparison schemas for request/response validation."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ComparisonRequest(BaseModel):
    """Schema for starting a comparison."""

    strategies: Optional[list[str]] = Field(
        None, description="Strategies to compare (default: every non-interactive strategy)"
    )
    mazes: Optional[list[str]] = Field(None, description="Catalog mazes (default: all)")


class RunSummaryResponse(BaseModel):
    strategy: str
    maze: str
    status: str
    steps: int
    dead_ends_found: int
    total_dead_ends: int
    score: float
    error: Optional[str] = None


class RankingEntryResponse(BaseModel):
    rank: int
    strategy: str
    total_score: float
    total_steps: int
    exits: int
    maze_scores: dict[str, float]


class ComparisonResponse(BaseModel):
    """Schema for a comparison report."""

    results: list[RunSummaryResponse]
    rankings: list[RankingEntryResponse]
    started_at: datetime
    finished_at: datetime
