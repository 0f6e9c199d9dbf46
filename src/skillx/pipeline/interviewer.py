"""Interview simulator - a technical interviewer that adapts its difficulty."""

from __future__ import annotations

import logging

from skillx.clients.gemini_client import GeminiClient
from skillx.clients.llm_client import DEFAULT_MODEL, LLMClient
from skillx.models.chat import ChatMessage

logger = logging.getLogger(__name__)

GREETING = (
    "Hello! I am your technical interviewer today. To get started, could you introduce "
    "yourself and tell me about a complex project you recently worked on?"
)
RESET_GREETING = "Interview reset. Tell me about your background."
FALLBACK_REPLY = "Tell me more about that."

DIFFICULTIES = ("Easy", "Medium", "Hard")
LONG_ANSWER_CHARS = 300
SHORT_ANSWER_CHARS = 50


def append_transcript(draft: str, text: str) -> str:
    if not text:
        return draft
    return f"{draft} {text}" if draft else text


class InterviewSimulator:
    def __init__(
        self,
        llm: LLMClient,
        model: str = DEFAULT_MODEL,
        *,
        transcriber: GeminiClient | None = None,
        difficulty: str = "Medium",
    ):
        self.llm = llm
        self.model = model
        self.transcriber = transcriber
        self.difficulty = difficulty
        self.messages: list[ChatMessage] = [ChatMessage(role="assistant", content=GREETING)]

    @property
    def difficulty(self) -> str:
        return self._difficulty

    @difficulty.setter
    def difficulty(self, value: str) -> None:
        if value not in DIFFICULTIES:
            raise ValueError(f"difficulty must be one of {DIFFICULTIES}, got {value!r}")
        self._difficulty = value

    async def respond(self, answer: str) -> str:
        """Record the candidate's answer and return the interviewer's next question."""
        if not answer.strip():
            raise ValueError("An answer is required")
        self.messages.append(ChatMessage(role="user", content=answer))

        system = (
            f"You are a technical interviewer for skillX. Difficulty: {self.difficulty}. "
            "Ask the next probing question. Be brief."
        )
        reply = await self.llm.converse(
            [m.model_dump() for m in self.messages],
            system=system,
            model=self.model,
        )
        reply = reply.strip() or FALLBACK_REPLY
        self.messages.append(ChatMessage(role="assistant", content=reply))

        if len(answer) > LONG_ANSWER_CHARS:
            self.difficulty = "Hard"
        elif len(answer) < SHORT_ANSWER_CHARS:
            self.difficulty = "Easy"
        logger.debug("Interview difficulty now %s", self.difficulty)
        return reply

    def reset(self) -> None:
        self.messages = [ChatMessage(role="assistant", content=RESET_GREETING)]

    async def dictate(self, audio_bytes: bytes, mime_type: str = "audio/wav", draft: str = "") -> str:
        """Transcribe a spoken answer and append it to the draft text."""
        if self.transcriber is None:
            raise RuntimeError("Dictation needs a GeminiClient transcriber")
        text = await self.transcriber.transcribe(audio_bytes, mime_type=mime_type)
        return append_transcript(draft, text)
