"""Data models for the skillx pipeline."""

from skillx.models.chat import ChatMessage, TranscriptEntry
from skillx.models.practice import (
    ArchitectureBlueprint,
    CalibrationQuiz,
    CodeChallenge,
    CrisisScenario,
    QuizOption,
    QuizQuestion,
)
from skillx.models.roadmap import Roadmap, RoadmapPhase
from skillx.models.skills import GapAnalysis, SkillAnalysisItem, SkillStatus

__all__ = [
    "ArchitectureBlueprint",
    "CalibrationQuiz",
    "ChatMessage",
    "CodeChallenge",
    "CrisisScenario",
    "GapAnalysis",
    "QuizOption",
    "QuizQuestion",
    "Roadmap",
    "RoadmapPhase",
    "SkillAnalysisItem",
    "SkillStatus",
    "TranscriptEntry",
]
