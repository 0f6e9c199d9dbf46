"""Gap Analyst - compares a resume against the extracted skills."""

from __future__ import annotations

import logging

from skillx.clients.llm_client import DEFAULT_MODEL, LLMClient
from skillx.models.skills import GapAnalysis
from skillx.utils.json_parser import DecodeError, parse_model

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """\
You audit resumes against a list of required skills.

Respond ONLY with JSON in this shape:
{
  "analysis": [
    {
      "skill": "skill name as given",
      "status": "found | missing | partial",
      "evidence": "short quote from the resume, empty if missing",
      "reasoning": "concise, max 15 words"
    }
  ],
  "match_score": 0-100
}

Rules:
- One analysis entry per required skill
- "partial" means adjacent or shallow experience
- match_score reflects how well the resume covers the required skills"""


class GapAnalyst:
    def __init__(
        self,
        llm: LLMClient,
        model: str = DEFAULT_MODEL,
        *,
        strict: bool = False,
        resume_char_limit: int = 8000,
    ):
        self.llm = llm
        self.model = model
        self.strict = strict
        self.resume_char_limit = resume_char_limit

    async def analyze(self, resume: str, job_description: str, skills: list[str]) -> GapAnalysis:
        """Score each skill as found/missing/partial and return the match score."""
        prompt = f"""Compare the resume against these skills: {", ".join(skills)}.

JOB DESCRIPTION:
{job_description}

RESUME:
{resume[: self.resume_char_limit]}"""

        try:
            data = await self.llm.generate_json(
                prompt=prompt,
                system=SYSTEM_PROMPT,
                model=self.model,
            )
            return parse_model(GapAnalysis, data)
        except DecodeError:
            if self.strict:
                raise
            logger.warning("Gap analysis returned malformed output; using empty analysis", exc_info=True)
            return GapAnalysis()
