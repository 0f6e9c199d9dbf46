"""Pydantic models for the learning roadmap."""

from __future__ import annotations

from pydantic import BaseModel, Field


class RoadmapPhase(BaseModel):
    phase_name: str = ""
    estimated_hours: float = Field(default=0, ge=0)
    description: str = ""
    topics: list[str] = []
    weekly_project: str = ""
    start_date: str | None = None
    end_date: str | None = None

    model_config = {"frozen": True}


class Roadmap(BaseModel):
    project_name: str = ""
    phases: list[RoadmapPhase] = Field(default_factory=list, alias="roadmap")

    model_config = {"frozen": True, "populate_by_name": True}

    @property
    def total_hours(self) -> float:
        return sum(phase.estimated_hours for phase in self.phases)
