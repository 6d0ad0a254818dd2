"""Run and strategy schemas for request/response validation."""

from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator

from .maze import MazeDefinition


class StrategyInfo(BaseModel):
    """Schema for a registered strategy."""

    name: str
    label: str
    description: str
    interactive: bool = False


class StrategyListResponse(BaseModel):
    """Schema for strategy list response."""

    strategies: list[StrategyInfo]
    total: int


class ReplayFrameSchema(BaseModel):
    """One recorded step for log playback."""

    pos: int = Field(..., ge=0)
    facing: str = Field(..., pattern="^(?i:[NESW]|[0-3])$")
    move: str = Field(..., pattern="^(?i:FORWARD|LEFT|RIGHT|UTURN|WAIT|STOP)$")


class RunCreateRequest(BaseModel):
    """Schema for starting a run."""

    strategy: str = Field(..., min_length=1, max_length=64)
    maze: Optional[str] = Field(None, description="Name of a catalog maze")
    maze_definition: Optional[MazeDefinition] = Field(
        None, description="Inline maze, used instead of a catalog maze"
    )
    commands: Optional[list[str] | str] = Field(
        None, description="F/L/R/U commands for manual-input, list or comma/space string"
    )
    frames: Optional[list[ReplayFrameSchema]] = Field(None, description="Frames for log-playback")
    seed: Optional[int] = None
    record_frames: bool = True

    @model_validator(mode="after")
    def check_maze_source(self) -> "RunCreateRequest":
        """Exactly one of maze / maze_definition."""
        if (self.maze is None) == (self.maze_definition is None):
            raise ValueError("Provide exactly one of 'maze' or 'maze_definition'")
        return self


class AdvanceRequest(BaseModel):
    """Schema for advancing a run."""

    steps: int = Field(1, ge=1)


class StepFrameResponse(BaseModel):
    """Per-step data for renderers."""

    step: int
    pos: int
    facing: str
    move: str
    explanation: str
    sensor_readings: dict[str, bool]
    next_pos: int
    next_facing: str
    metrics: dict[str, Any] = {}


class PoseResponse(BaseModel):
    position: int
    facing: str


class RunResponse(BaseModel):
    """Schema for run state."""

    run_id: str
    strategy: str
    maze: str
    status: str
    steps: int
    max_steps: int
    score: float
    pose: PoseResponse
    visited: list[int]
    dead_ends_visited: list[int]
    error: Optional[str] = None
    diagnostics: list[str] = []
    created_at: str
    frames: Optional[list[StepFrameResponse]] = None


class AdvanceResponse(BaseModel):
    """Schema for the result of an advance call."""

    run: RunResponse
    frames: list[StepFrameResponse]
