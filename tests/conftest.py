"""Shared test fixtures."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from skillx.clients.gateway import Gateway, RetryPolicy
from skillx.clients.llm_client import LLMClient, LLMResponse


@pytest.fixture
def sample_jd_text() -> str:
    return "Need a Go engineer with Docker experience"


@pytest.fixture
def sample_resume_text() -> str:
    return "5 years Go, built Docker pipelines"


@pytest.fixture
def sample_gap_json() -> dict:
    return {
        "analysis": [
            {
                "skill": "go",
                "status": "found",
                "evidence": "5 years Go",
                "reasoning": "Long production experience",
            },
            {
                "skill": "docker",
                "status": "found",
                "evidence": "built Docker pipelines",
                "reasoning": "Hands-on container builds",
            },
        ],
        "match_score": 90,
    }


@pytest.fixture
def sample_roadmap_json() -> dict:
    return {
        "project_name": "X",
        "roadmap": [
            {
                "phase_name": "Advanced Go",
                "estimated_hours": 10,
                "description": "Concurrency patterns and profiling",
                "topics": ["goroutines", "pprof"],
                "weekly_project": "Rate limited worker pool",
            }
        ],
    }


@pytest.fixture
def sample_quiz_json() -> dict:
    return {
        "skill": "python",
        "questions": [
            {
                "id": i + 1,
                "question": f"Question {i + 1}?",
                "options": [{"id": "a", "text": "yes"}, {"id": "b", "text": "no"}],
                "correct": "a",
                "explanation": "Because.",
            }
            for i in range(3)
        ],
    }


@pytest.fixture
def mock_llm_client() -> LLMClient:
    """Mock LLMClient that returns configurable responses."""
    client = AsyncMock(spec=LLMClient)
    client.generate = AsyncMock(
        return_value=LLMResponse(text="mock response", input_tokens=100, output_tokens=50)
    )
    client.generate_json = AsyncMock(return_value={})
    client.converse = AsyncMock(return_value="mock reply")
    client.think = AsyncMock(return_value="mock answer")
    client.analyze_image = AsyncMock(return_value="mock review")
    return client


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def fast_gateway(sleeps) -> Gateway:
    """Gateway that records backoff delays instead of sleeping."""

    async def _sleep(delay: float) -> None:
        sleeps.append(delay)

    return Gateway(RetryPolicy(max_retries=3, initial_delay=2.0, timeout=None), sleep=_sleep)
