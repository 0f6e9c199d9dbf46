"""Deep reasoning chat backed by extended thinking."""

from __future__ import annotations

from skillx.clients.llm_client import LLMClient
from skillx.models.chat import ChatMessage

SUGGESTED_QUESTIONS = (
    "Evaluate the impact of AI on cloud architecture",
    "Should I specialize in Rust or Go?",
    "Review my career strategy for a CTO role",
)


class ThinkingChat:
    def __init__(
        self,
        llm: LLMClient,
        model: str = "claude-sonnet-4-5-20250929",
        budget_tokens: int = 16000,
    ):
        self.llm = llm
        self.model = model
        self.budget_tokens = budget_tokens
        self.messages: list[ChatMessage] = []

    async def ask(self, message: str) -> str:
        if not message.strip():
            raise ValueError("A question is required")
        self.messages.append(ChatMessage(role="user", content=message))
        answer = await self.llm.think(message, model=self.model, budget_tokens=self.budget_tokens)
        self.messages.append(ChatMessage(role="assistant", content=answer))
        return answer
