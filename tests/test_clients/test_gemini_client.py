"""Tests for GeminiClient (audio transcription and live sessions)."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

from skillx.clients.gemini_client import COACH_INSTRUCTION, GeminiClient


def _client() -> tuple[GeminiClient, MagicMock]:
    with patch("skillx.clients.gemini_client.genai.Client") as mock_cls:
        mock_client = MagicMock()
        mock_cls.return_value = mock_client
        return GeminiClient(api_key="g-key"), mock_client


class TestTranscribe:
    async def test_returns_stripped_text(self):
        client, mock_client = _client()
        mock_client.aio.models.generate_content = AsyncMock(
            return_value=SimpleNamespace(text="  I built a queue in Go.  ")
        )

        text = await client.transcribe(b"RIFF", mime_type="audio/webm", model="flash")

        assert text == "I built a queue in Go."
        kwargs = mock_client.aio.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "flash"
        assert kwargs["contents"][1] == "Transcribe audio."

    async def test_no_text_returns_empty_string(self):
        client, mock_client = _client()
        mock_client.aio.models.generate_content = AsyncMock(return_value=SimpleNamespace(text=None))
        assert await client.transcribe(b"RIFF") == ""


class TestConnectLive:
    def test_connect_live_configures_audio_and_transcription(self):
        client, mock_client = _client()
        client.connect_live("live-model", voice_name="Puck")

        kwargs = mock_client.aio.live.connect.call_args.kwargs
        assert kwargs["model"] == "live-model"
        config = kwargs["config"]
        assert config.speech_config.voice_config.prebuilt_voice_config.voice_name == "Puck"
        assert config.input_audio_transcription is not None
        assert config.output_audio_transcription is not None
        assert "Career Coach" in COACH_INSTRUCTION
