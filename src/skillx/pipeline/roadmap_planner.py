"""Roadmap Planner - turns a skill list into a phased learning plan."""

from __future__ import annotations

import logging

from skillx.clients.llm_client import DEFAULT_MODEL, LLMClient
from skillx.models.roadmap import Roadmap
from skillx.utils.json_parser import DecodeError, parse_model

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """\
You design tactical learning roadmaps focused on high-impact results.

Respond ONLY with JSON in this shape:
{
  "project_name": "a capstone project that ties the phases together",
  "roadmap": [
    {
      "phase_name": "name",
      "estimated_hours": 10,
      "description": "what this phase achieves",
      "topics": ["topic 1", "topic 2"],
      "weekly_project": "a concrete deliverable"
    }
  ]
}

Rules:
- Phases are ordered from foundational to advanced
- estimated_hours is a non-negative number sized to the daily study budget"""


class RoadmapPlanner:
    def __init__(self, llm: LLMClient, model: str = DEFAULT_MODEL, *, strict: bool = False):
        self.llm = llm
        self.model = model
        self.strict = strict

    async def plan(self, skills: list[str], hours_per_day: int) -> Roadmap:
        prompt = (
            f"Create a tactical learning roadmap for these skills: {', '.join(skills)}. "
            f"Daily study: {hours_per_day}h."
        )
        try:
            data = await self.llm.generate_json(
                prompt=prompt,
                system=SYSTEM_PROMPT,
                model=self.model,
            )
            return parse_model(Roadmap, data)
        except DecodeError:
            if self.strict:
                raise
            logger.warning("Roadmap generation returned malformed output; using empty roadmap", exc_info=True)
            return Roadmap()
