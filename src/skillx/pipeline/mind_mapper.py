"""Mind Mapper - renders a skill list as a hierarchical Markdown mind map."""

from __future__ import annotations

from skillx.clients.llm_client import DEFAULT_MODEL, LLMClient

ROOT_HEADING = "# skillX Profile"


def fallback_mind_map(skills: list[str]) -> str:
    return f"{ROOT_HEADING}\n## Core Tech\n- " + "\n- ".join(skills)


class MindMapper:
    def __init__(self, llm: LLMClient, model: str = DEFAULT_MODEL):
        self.llm = llm
        self.model = model

    async def generate(self, skills: list[str]) -> str:
        """Return Markdown suitable for a markmap-style renderer."""
        if not skills:
            raise ValueError("A mind map needs at least one skill")

        prompt = f"""Generate a hierarchical Markdown Mind Map for: {", ".join(skills)}.
Structure it for skillX career intelligence. Group by broad domains.
Use # for root "skillX Profile", ## for domains, - for skills, and -- for specific sub-topics or libraries.
Max 4 levels deep. Return ONLY markdown."""

        response = await self.llm.generate(prompt=prompt, model=self.model, temperature=0.3)
        return response.text.strip() or fallback_mind_map(skills)
