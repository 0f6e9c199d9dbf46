"""Usage logging data models."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class UsageLog(BaseModel):
    """Single usage log entry for one CLI operation."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    session_id: str = "anonymous"
    timestamp: datetime = Field(default_factory=datetime.now)
    mode: str  # "analysis" | "mind_map" | "quiz" | "playground" | "interview" | "think" | "scan" | "voice"
    run_id: int | None = None
    skills_count: int | None = None
    match_score: float | None = None
    roadmap_hours: float | None = None
    elapsed_seconds: float = 0.0
    total_input_tokens: int = 0
    total_output_tokens: int = 0
    estimated_cost_usd: float = 0.0
    success: bool = True
    error_kind: str | None = None  # ErrorKind value when success is False
    error_message: str | None = None
