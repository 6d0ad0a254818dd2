"""Maze schemas for request/response validation."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

FACING_PATTERN = "^(?i:[NESW]|NORTH|EAST|SOUTH|WEST|[0-3])$"


class MazeListItem(BaseModel):
    """Schema for maze list item (without wall data)."""

    name: str
    size: int = Field(..., gt=0)
    start_pos: int
    start_facing: str
    exit_pos: int
    exit_facing: str
    min_steps: int
    max_steps: int
    max_score: float
    total_dead_ends: int


class MazeDetail(MazeListItem):
    """Schema for detailed maze response with wall data."""

    walls: list[int]
    dead_ends: list[int]
    ascii: Optional[str] = None


class MazeListResponse(BaseModel):
    """Schema for maze list response."""

    mazes: list[MazeListItem]
    total: int


class MazeDefinition(BaseModel):
    """Inline maze supplied by a client."""

    name: str = Field("custom", min_length=1, max_length=100)
    size: int = Field(..., gt=0, le=64)
    walls: list[int] = Field(..., min_length=1)
    start_pos: int = Field(..., ge=0)
    start_facing: str = Field(..., pattern=FACING_PATTERN)
    exit_pos: int = Field(..., ge=0)
    exit_facing: str = Field(..., pattern=FACING_PATTERN)
    min_steps: int = Field(..., ge=0)
    max_steps: int = Field(..., gt=0)
    max_score: float = Field(..., ge=0)

    @field_validator("walls")
    @classmethod
    def validate_masks(cls, v: list[int]) -> list[int]:
        """Every mask is a 4-bit value."""
        for mask in v:
            if not 0 <= mask <= 15:
                raise ValueError(f"Wall mask {mask} is outside 0-15")
        return v
