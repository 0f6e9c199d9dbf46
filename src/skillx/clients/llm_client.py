"""Claude API wrapper; every request goes through the retrying Gateway."""

from __future__ import annotations

import base64
import json
import logging
from dataclasses import dataclass

import anthropic

from skillx.clients.gateway import Gateway
from skillx.utils.json_parser import extract_json

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-haiku-4-5-20251001"


@dataclass
class LLMResponse:
    """Response from the LLM including usage metadata."""

    text: str
    input_tokens: int
    output_tokens: int


class LLMClient:
    """Async Claude API client."""

    def __init__(
        self,
        api_key: str | None = None,
        gateway: Gateway | None = None,
    ):
        # Retries are decided by the gateway alone
        kwargs: dict = {"max_retries": 0}
        if api_key is not None:
            kwargs["api_key"] = api_key
        self.client = anthropic.AsyncAnthropic(**kwargs)
        self.gateway = gateway or Gateway()
        self._token_log: list[tuple[str, int, int]] = []  # (model, input_tokens, output_tokens)

    async def _call_api(self, label: str, **kwargs) -> anthropic.types.Message:
        """Send one messages.create request through the gateway."""
        message = await self.gateway.call(
            lambda: self.client.messages.create(**kwargs),
            label=label,
        )
        input_tokens = message.usage.input_tokens
        output_tokens = message.usage.output_tokens
        logger.debug("LLM response: %d input, %d output tokens", input_tokens, output_tokens)
        self._token_log.append((kwargs["model"], input_tokens, output_tokens))
        return message

    async def generate(
        self,
        prompt: str,
        system: str = "",
        model: str = DEFAULT_MODEL,
        temperature: float = 0.0,
        max_tokens: int = 8192,
    ) -> LLMResponse:
        """Send a prompt to Claude and return the text response with usage."""
        logger.debug("LLM call: model=%s", model)
        kwargs: dict = {
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            kwargs["system"] = system
        try:
            message = await self._call_api("generate", **kwargs)
        except Exception:
            logger.error("LLM call failed", exc_info=True)
            raise
        return LLMResponse(
            text=_joined_text(message),
            input_tokens=message.usage.input_tokens,
            output_tokens=message.usage.output_tokens,
        )

    async def generate_json(
        self,
        prompt: str,
        system: str = "",
        model: str = DEFAULT_MODEL,
        temperature: float = 0.0,
        max_tokens: int = 8192,
    ) -> dict | list:
        """Send a prompt and parse JSON from response.

        Raises DecodeError when the response holds no usable JSON.
        """
        response = await self.generate(
            prompt=prompt,
            system=system,
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        return extract_json(response.text)

    async def converse(
        self,
        history: list[dict],
        system: str,
        model: str = DEFAULT_MODEL,
        max_tokens: int = 1024,
    ) -> str:
        """Send a whole conversation as one JSON transcript and return the reply."""
        response = await self.generate(
            prompt=json.dumps(history, ensure_ascii=False),
            system=system,
            model=model,
            temperature=0.7,
            max_tokens=max_tokens,
        )
        return response.text

    async def think(
        self,
        prompt: str,
        model: str = "claude-sonnet-4-5-20250929",
        budget_tokens: int = 16000,
    ) -> str:
        """Answer with extended thinking enabled; only the final text is returned."""
        message = await self._call_api(
            "think",
            model=model,
            max_tokens=budget_tokens + 4096,
            thinking={"type": "enabled", "budget_tokens": budget_tokens},
            messages=[{"role": "user", "content": prompt}],
        )
        return _joined_text(message)

    async def analyze_image(
        self,
        image_bytes: bytes,
        image_media_type: str,
        prompt: str,
        model: str = DEFAULT_MODEL,
    ) -> str:
        """Run a vision prompt over one image.

        Args:
            image_bytes: Raw image bytes (PNG, JPEG, etc.)
            image_media_type: MIME type (e.g. "image/png", "image/jpeg")
            prompt: Instruction for the model.
            model: Claude model to use.

        Returns:
            The model's text answer.
        """
        b64_data = base64.b64encode(image_bytes).decode("utf-8")
        message = await self._call_api(
            "analyze_image",
            model=model,
            max_tokens=4096,
            messages=[{
                "role": "user",
                "content": [
                    {
                        "type": "image",
                        "source": {
                            "type": "base64",
                            "media_type": image_media_type,
                            "data": b64_data,
                        },
                    },
                    {"type": "text", "text": prompt},
                ],
            }],
        )
        return _joined_text(message)

    def get_token_summary(self) -> dict:
        """Return accumulated token usage and reset the log."""
        summary = {
            "input": sum(t[1] for t in self._token_log),
            "output": sum(t[2] for t in self._token_log),
            "calls": list(self._token_log),
        }
        self._token_log.clear()
        return summary


def _joined_text(message) -> str:
    # Thinking responses interleave thinking blocks with text blocks
    return "".join(
        block.text
        for block in message.content
        if getattr(block, "type", None) not in ("thinking", "redacted_thinking")
    )
