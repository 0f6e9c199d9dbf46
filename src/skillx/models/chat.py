"""Conversation models shared by the interview, reasoning and voice features."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

Role = Literal["user", "assistant"]


class ChatMessage(BaseModel):
    role: Role
    content: str

    model_config = {"frozen": True}


class TranscriptEntry(BaseModel):
    role: Role
    text: str

    model_config = {"frozen": True}
