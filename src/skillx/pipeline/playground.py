"""Practice playground - architecture dojo, code challenges and crisis drills."""

from __future__ import annotations

import logging
import re

from skillx.clients.llm_client import DEFAULT_MODEL, LLMClient
from skillx.models.practice import ArchitectureBlueprint, CodeChallenge, CrisisScenario
from skillx.utils.json_parser import parse_model

logger = logging.getLogger(__name__)

_MERMAID_FENCE = re.compile(r"```mermaid|```")

ARCHITECTURE_PROMPT = """\
You are a principal engineer designing a portfolio project.

Respond ONLY with JSON in this shape:
{
  "overview": "two or three sentences",
  "mermaid_code": "graph TD diagram source without code fences",
  "api_endpoints": ["METHOD /path - purpose"],
  "tech_stack_decisions": ["decision and trade-off"]
}"""

CHALLENGE_PROMPT = """\
You write focused coding challenges.

Respond ONLY with JSON: {"title": "...", "description": "...", "boilerplate": "starter code"}"""

SCENARIO_PROMPT = """\
You simulate production incidents for engineers to resolve.

Respond ONLY with JSON: {"title": "...", "description": "what is broken", "task": "what the engineer must do"}"""


def strip_mermaid_fences(code: str) -> str:
    return _MERMAID_FENCE.sub("", code).strip()


class Playground:
    def __init__(self, llm: LLMClient, model: str = DEFAULT_MODEL):
        self.llm = llm
        self.model = model

    async def design_architecture(self, project_name: str, skills: list[str]) -> ArchitectureBlueprint:
        data = await self.llm.generate_json(
            prompt=f'Architect "{project_name}" using: {", ".join(skills)}.',
            system=ARCHITECTURE_PROMPT,
            model=self.model,
            temperature=0.4,
        )
        blueprint = parse_model(ArchitectureBlueprint, data)
        if blueprint.mermaid_code:
            blueprint = blueprint.model_copy(
                update={"mermaid_code": strip_mermaid_fences(blueprint.mermaid_code)}
            )
        return blueprint

    async def generate_challenge(self, skills: list[str]) -> CodeChallenge:
        data = await self.llm.generate_json(
            prompt=f"Create a coding challenge for: {', '.join(skills)}.",
            system=CHALLENGE_PROMPT,
            model=self.model,
            temperature=0.7,
        )
        return parse_model(CodeChallenge, data)

    async def generate_scenario(self, skills: list[str]) -> CrisisScenario:
        data = await self.llm.generate_json(
            prompt=f"Create a crisis scenario for: {', '.join(skills)}.",
            system=SCENARIO_PROMPT,
            model=self.model,
            temperature=0.7,
        )
        return parse_model(CrisisScenario, data)

    async def review_scenario(self, scenario: CrisisScenario, response: str) -> str:
        """Give feedback on the user's plan for resolving a crisis scenario."""
        if not response.strip():
            raise ValueError("A response is required for feedback")
        logger.info("Reviewing response to scenario %r", scenario.title)
        result = await self.llm.generate(
            prompt=(
                f"Crisis: {scenario.title}\n{scenario.description}\nTask: {scenario.task}\n\n"
                f"Give feedback on this fix:\n{response}"
            ),
            model=self.model,
            temperature=0.3,
            max_tokens=2048,
        )
        return result.text
