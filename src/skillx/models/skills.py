"""Pydantic models for skill extraction and gap analysis output."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, field_validator


class SkillStatus(str, Enum):
    FOUND = "found"
    MISSING = "missing"
    PARTIAL = "partial"


class SkillAnalysisItem(BaseModel):
    skill: str
    status: SkillStatus
    evidence: str = ""
    reasoning: str = ""  # max ~15 words

    model_config = {"frozen": True}

    @field_validator("status", mode="before")
    @classmethod
    def _lowercase_status(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value


class GapAnalysis(BaseModel):
    # one entry with an unknown status invalidates the whole payload
    analysis: list[SkillAnalysisItem] = []
    match_score: float = 0  # 0-100, as reported by the model

    model_config = {"frozen": True}

    def count(self, status: SkillStatus) -> int:
        return sum(1 for item in self.analysis if item.status is status)
