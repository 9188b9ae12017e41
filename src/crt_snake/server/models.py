"""Pydantic models for API request/response schemas."""

from __future__ import annotations

import enum

from pydantic import BaseModel, Field


class DirectionName(str, enum.Enum):
    """Direction names accepted from clients."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


class CreateSessionRequest(BaseModel):
    """Request body for POST /sessions."""

    grid_size: int = Field(default=32, ge=8, le=128)
    start_coil: int = Field(default=4, ge=0)
    tick_rate_ms: int = Field(default=100, ge=20, le=2000)
    growth_ratio: float = Field(default=1.1, gt=1.0, le=4.0)
    time_to_full_noise: float = Field(default=2.0, gt=0.0)
    seed: int | None = None


class DirectionRequest(BaseModel):
    """Request body for POST /sessions/{session_id}/direction."""

    direction: DirectionName


class DirectionResponse(BaseModel):
    """Whether a direction made it into the input queue."""

    queued: bool
    queue_length: int


class SessionSummary(BaseModel):
    """Compact session info for list endpoints."""

    session_id: str
    state: str
    score: int
    grid_size: int
    tick_rate_ms: int


class ErrorResponse(BaseModel):
    """Standard error envelope."""

    detail: str
