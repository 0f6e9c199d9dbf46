"""Confidence calibration - compares self-rated skill with a quick quiz score."""

from __future__ import annotations

import math
from enum import Enum

from skillx.clients.llm_client import DEFAULT_MODEL, LLMClient
from skillx.models.practice import CalibrationQuiz
from skillx.utils.json_parser import parse_model

SYSTEM_PROMPT = """\
You write short practical multiple-choice quizzes.

Respond ONLY with JSON in this shape:
{
  "skill": "skill name",
  "questions": [
    {
      "id": 1,
      "question": "question text",
      "options": [{"id": "a", "text": "option"}, {"id": "b", "text": "option"}],
      "correct": "a",
      "explanation": "why the correct option is right"
    }
  ]
}"""

# Gap between self rating and measured score (0-10) tolerated as calibrated
CALIBRATION_TOLERANCE = 2


class Verdict(str, Enum):
    OVERCONFIDENT = "OVERCONFIDENT"
    UNDERCONFIDENT = "UNDERCONFIDENT"
    WELL_CALIBRATED = "WELL CALIBRATED"


def score_quiz(quiz: CalibrationQuiz, answers: dict[int, str]) -> int:
    """Scale correct answers to 0-10, rounding half up.

    ``answers`` maps question index (0-based, in quiz order) to option id.
    """
    if not quiz.questions:
        return 0
    correct = sum(1 for i, q in enumerate(quiz.questions) if answers.get(i) == q.correct)
    return math.floor(correct / len(quiz.questions) * 10 + 0.5)


def calibration_verdict(self_rating: int, actual: int) -> Verdict:
    if not 1 <= self_rating <= 10:
        raise ValueError(f"self_rating must be between 1 and 10, got {self_rating}")
    diff = self_rating - actual
    if diff > CALIBRATION_TOLERANCE:
        return Verdict.OVERCONFIDENT
    if diff < -CALIBRATION_TOLERANCE:
        return Verdict.UNDERCONFIDENT
    return Verdict.WELL_CALIBRATED


class CalibrationCoach:
    def __init__(self, llm: LLMClient, model: str = DEFAULT_MODEL):
        self.llm = llm
        self.model = model

    async def generate_quiz(self, skill: str, question_count: int = 3) -> CalibrationQuiz:
        data = await self.llm.generate_json(
            prompt=f"Create a {question_count}-question quiz for {skill}.",
            system=SYSTEM_PROMPT,
            model=self.model,
            temperature=0.5,
        )
        quiz = parse_model(CalibrationQuiz, data)
        if not quiz.skill:
            quiz = quiz.model_copy(update={"skill": skill})
        return quiz
