"""Pydantic models for calibration quizzes and playground exercises."""

from __future__ import annotations

from pydantic import BaseModel


class QuizOption(BaseModel):
    id: str
    text: str


class QuizQuestion(BaseModel):
    id: int
    question: str
    options: list[QuizOption] = []
    correct: str  # id of the correct option
    explanation: str = ""


class CalibrationQuiz(BaseModel):
    skill: str = ""
    questions: list[QuizQuestion] = []


class ArchitectureBlueprint(BaseModel):
    overview: str = ""
    mermaid_code: str = ""
    api_endpoints: list[str] = []
    tech_stack_decisions: list[str] = []


class CodeChallenge(BaseModel):
    title: str
    description: str
    boilerplate: str = ""


class CrisisScenario(BaseModel):
    title: str
    description: str
    task: str
