"""Tests for LLMClient (Claude API wrapper)."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock, patch

import anthropic
import httpx
import pytest

from skillx.clients.gateway import Gateway, RetryPolicy
from skillx.clients.llm_client import LLMClient, LLMResponse
from skillx.utils.json_parser import DecodeError


def _make_api_message(text: str, input_tokens: int = 100, output_tokens: int = 50) -> MagicMock:
    """Build a mock anthropic Message-like object."""
    message = MagicMock()
    message.usage.input_tokens = input_tokens
    message.usage.output_tokens = output_tokens
    message.content = [MagicMock(type="text", text=text)]
    return message


def _client_with(create: AsyncMock, gateway: Gateway | None = None) -> LLMClient:
    with patch("skillx.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
        mock_client = MagicMock()
        mock_client.messages.create = create
        mock_cls.return_value = mock_client
        return LLMClient(gateway=gateway)


class TestLLMClientInit:
    def test_init_default_disables_sdk_retries(self):
        with patch("skillx.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            LLMClient()
            mock_cls.assert_called_once_with(max_retries=0)

    def test_init_with_api_key_passes_key(self):
        with patch("skillx.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            LLMClient(api_key="test-key")
            mock_cls.assert_called_once_with(api_key="test-key", max_retries=0)


class TestLLMClientGenerate:
    async def test_generate_returns_llm_response(self):
        create = AsyncMock(return_value=_make_api_message("hello world"))
        llm = _client_with(create)
        result = await llm.generate("say hello", system="be brief")

        assert isinstance(result, LLMResponse)
        assert result.text == "hello world"
        assert result.input_tokens == 100
        kwargs = create.call_args.kwargs
        assert kwargs["system"] == "be brief"
        assert kwargs["messages"] == [{"role": "user", "content": "say hello"}]

    async def test_generate_omits_empty_system(self):
        create = AsyncMock(return_value=_make_api_message("x"))
        llm = _client_with(create)
        await llm.generate("prompt")
        assert "system" not in create.call_args.kwargs

    async def test_rate_limit_is_retried_through_gateway(self):
        class Throttled(Exception):
            status_code = 429

        delays = []

        async def _sleep(delay):
            delays.append(delay)

        create = AsyncMock(side_effect=[Throttled("slow down"), _make_api_message("ok")])
        llm = _client_with(create, Gateway(RetryPolicy(timeout=None), sleep=_sleep))
        result = await llm.generate("prompt")

        assert result.text == "ok"
        assert create.await_count == 2
        assert delays == [2.0]

    async def test_hard_failure_propagates(self):
        create = AsyncMock(side_effect=RuntimeError("connection reset"))
        llm = _client_with(create)
        with pytest.raises(RuntimeError):
            await llm.generate("prompt")
        assert create.await_count == 1


class TestLLMClientJson:
    async def test_generate_json_parses_fenced_output(self):
        create = AsyncMock(return_value=_make_api_message('```json\n["go", "docker"]\n```'))
        llm = _client_with(create)
        assert await llm.generate_json("skills") == ["go", "docker"]

    async def test_generate_json_raises_decode_error(self):
        create = AsyncMock(return_value=_make_api_message("I cannot help with that"))
        llm = _client_with(create)
        with pytest.raises(DecodeError):
            await llm.generate_json("skills")


class TestLLMClientConverse:
    async def test_history_sent_as_json(self):
        create = AsyncMock(return_value=_make_api_message("Next question?"))
        llm = _client_with(create)
        history = [{"role": "assistant", "content": "Hi"}, {"role": "user", "content": "Hello"}]
        reply = await llm.converse(history, system="interviewer")

        assert reply == "Next question?"
        kwargs = create.call_args.kwargs
        assert json.loads(kwargs["messages"][0]["content"]) == history
        assert kwargs["temperature"] == 0.7


class TestLLMClientThink:
    async def test_thinking_blocks_are_skipped(self):
        message = _make_api_message("final answer")
        message.content = [MagicMock(type="thinking", text="scratch"), MagicMock(type="text", text="final answer")]
        create = AsyncMock(return_value=message)
        llm = _client_with(create)

        answer = await llm.think("hard question", budget_tokens=2000)

        assert answer == "final answer"
        kwargs = create.call_args.kwargs
        assert kwargs["thinking"] == {"type": "enabled", "budget_tokens": 2000}
        assert kwargs["max_tokens"] > 2000


class TestLLMClientVision:
    async def test_analyze_image_sends_base64_block(self):
        create = AsyncMock(return_value=_make_api_message("looks good"))
        llm = _client_with(create)
        result = await llm.analyze_image(b"\x89PNG", "image/png", "review")

        assert result == "looks good"
        content = create.call_args.kwargs["messages"][0]["content"]
        assert content[0]["source"]["media_type"] == "image/png"
        assert content[0]["source"]["data"] == "iVBORw=="
        assert content[1] == {"type": "text", "text": "review"}


class TestTokenSummary:
    async def test_summary_accumulates_and_resets(self):
        create = AsyncMock(side_effect=[
            _make_api_message("a", input_tokens=10, output_tokens=5),
            _make_api_message("b", input_tokens=20, output_tokens=7),
        ])
        llm = _client_with(create)
        await llm.generate("one", model="m1")
        await llm.generate("two", model="m2")

        summary = llm.get_token_summary()
        assert summary["input"] == 30
        assert summary["output"] == 12
        assert summary["calls"] == [("m1", 10, 5), ("m2", 20, 7)]
        assert llm.get_token_summary()["calls"] == []


# --- SDK-level tests: real AsyncAnthropic over an in-process transport ---


def _message_body(text: str) -> dict:
    return {
        "id": "msg_01",
        "type": "message",
        "role": "assistant",
        "model": "claude-haiku-4-5-20251001",
        "content": [{"type": "text", "text": text}],
        "stop_reason": "end_turn",
        "stop_sequence": None,
        "usage": {"input_tokens": 12, "output_tokens": 3},
    }


def _error_body(kind: str) -> dict:
    return {"type": "error", "error": {"type": kind, "message": kind}}


def _http_client(responses: list[httpx.Response], requests: list[httpx.Request], sleeps: list[float]) -> LLMClient:
    """LLMClient whose SDK sends requests to a local handler instead of the network."""

    def _handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return responses[min(len(requests), len(responses)) - 1]

    async def _sleep(delay: float) -> None:
        sleeps.append(delay)

    llm = LLMClient(api_key="test-key", gateway=Gateway(RetryPolicy(timeout=None), sleep=_sleep))
    llm.client = llm.client.with_options(
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(_handler)),
    )
    return llm


class TestLLMClientSdk:
    def test_sdk_retries_are_disabled(self):
        assert LLMClient(api_key="test-key").client.max_retries == 0

    async def test_generate_matches_real_create_signature(self):
        requests, sleeps = [], []
        llm = _http_client([httpx.Response(200, json=_message_body("hello"))], requests, sleeps)

        result = await llm.generate("say hello", system="be brief", temperature=0.3)

        assert result.text == "hello"
        assert result.input_tokens == 12
        body = json.loads(requests[0].content)
        assert body["temperature"] == 0.3
        assert body["system"] == "be brief"

    async def test_server_error_is_sent_once(self):
        requests, sleeps = [], []
        llm = _http_client([httpx.Response(500, json=_error_body("api_error"))], requests, sleeps)

        with pytest.raises(anthropic.InternalServerError):
            await llm.generate("prompt")

        assert len(requests) == 1
        assert sleeps == []

    async def test_persistent_rate_limit_follows_gateway_policy(self):
        requests, sleeps = [], []
        llm = _http_client([httpx.Response(429, json=_error_body("rate_limit_error"))], requests, sleeps)

        with pytest.raises(anthropic.RateLimitError):
            await llm.generate("prompt")

        assert len(requests) == 4
        assert sleeps == [2.0, 4.0, 8.0]

    async def test_rate_limit_then_success(self):
        requests, sleeps = [], []
        llm = _http_client(
            [
                httpx.Response(429, json=_error_body("rate_limit_error")),
                httpx.Response(200, json=_message_body("ok")),
            ],
            requests,
            sleeps,
        )

        assert (await llm.generate("prompt")).text == "ok"
        assert len(requests) == 2
        assert sleeps == [2.0]
