"""Skill Extractor - pulls the core technical skills out of a job description."""

from __future__ import annotations

import logging

from skillx.clients.llm_client import DEFAULT_MODEL, LLMClient
from skillx.utils.json_parser import DecodeError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """\
You extract technical skills from job descriptions.

Respond ONLY with a flat JSON array of lowercase strings, for example:
["python", "docker", "postgresql"]

Rules:
- Core technical skills only (languages, frameworks, platforms, tools, practices)
- No soft skills, no seniority levels, no years of experience
- Do not infer skills that the job description does not mention"""


def _as_skill_list(data: dict | list) -> list[str]:
    # Tolerate {"skills": [...]} wrappers around the requested array
    if isinstance(data, dict) and isinstance(data.get("skills"), list):
        data = data["skills"]
    if not isinstance(data, list) or not all(isinstance(s, str) for s in data):
        raise DecodeError(f"Expected a JSON array of strings, got {str(data)[:200]}")
    return data


class SkillExtractor:
    def __init__(self, llm: LLMClient, model: str = DEFAULT_MODEL, *, strict: bool = False):
        self.llm = llm
        self.model = model
        self.strict = strict

    async def extract(self, job_description: str) -> list[str]:
        """Return the lowercased skills named in a job description."""
        prompt = f"""Extract ONLY the core technical skills from this job description.

JD:
{job_description}"""

        try:
            data = await self.llm.generate_json(
                prompt=prompt,
                system=SYSTEM_PROMPT,
                model=self.model,
            )
            skills = _as_skill_list(data)
        except DecodeError:
            if self.strict:
                raise
            logger.warning("Skill extraction returned malformed output; using no skills", exc_info=True)
            return []
        return [s.lower() for s in skills]
