"""Pydantic models for API request/response schemas."""

from __future__ import annotations

import enum

from pydantic import BaseModel, Field


class HostStatus(str, enum.Enum):
    """Whether a session's frame loop is running."""

    IDLE = "idle"
    ACTIVE = "active"


class CreateSessionRequest(BaseModel):
    """Request body for POST /sessions."""

    grid_width: int = Field(default=40, ge=2, le=200)
    grid_height: int = Field(default=30, ge=2, le=200)
    step_ms: float = Field(default=100.0, gt=0, le=5000)
    frame_rate: int = Field(default=60, ge=1, le=240)
    seed: int | None = None
    autostart: bool = True


class DirectionRequest(BaseModel):
    """Request body for POST /sessions/{session_id}/direction."""

    direction: str = Field(min_length=1, max_length=8)


class SessionSummary(BaseModel):
    """Compact session info for list endpoints."""

    session_id: str
    status: HostStatus
    game_status: str
    tick: int
    grid_width: int
    grid_height: int
    step_ms: float


class DirectionResponse(BaseModel):
    session_id: str
    direction: str
    accepted: bool
