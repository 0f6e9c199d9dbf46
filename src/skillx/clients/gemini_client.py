"""Gemini API wrapper for audio: transcription and live voice sessions."""

from __future__ import annotations

import logging

from google import genai
from google.genai import types

from skillx.clients.gateway import Gateway

logger = logging.getLogger(__name__)

COACH_INSTRUCTION = (
    "You are an elite Career Coach. Help the user with advice, interviews, and skills. "
    "Use their transcriptions to provide highly personalized feedback. "
    "Keep it brief and professional."
)


class GeminiClient:
    """Async google-genai client used where Claude has no audio support."""

    def __init__(self, api_key: str | None = None, gateway: Gateway | None = None):
        kwargs: dict = {}
        if api_key is not None:
            kwargs["api_key"] = api_key
        self.client = genai.Client(**kwargs)
        self.gateway = gateway or Gateway()

    async def transcribe(
        self,
        audio_bytes: bytes,
        mime_type: str = "audio/wav",
        model: str = "gemini-3-flash-preview",
    ) -> str:
        """Transcribe a recorded clip; returns an empty string if nothing was heard."""
        logger.debug("Transcribing %d bytes of %s", len(audio_bytes), mime_type)
        response = await self.gateway.call(
            lambda: self.client.aio.models.generate_content(
                model=model,
                contents=[
                    types.Part.from_bytes(data=audio_bytes, mime_type=mime_type),
                    "Transcribe audio.",
                ],
            ),
            label="transcribe",
        )
        return (response.text or "").strip()

    def connect_live(
        self,
        model: str = "gemini-2.5-flash-native-audio-preview-12-2025",
        *,
        voice_name: str = "Zephyr",
        system_instruction: str = COACH_INSTRUCTION,
    ):
        """Open a native-audio live session (async context manager).

        Both directions are transcribed so the caller can keep a text history.
        """
        config = types.LiveConnectConfig(
            response_modalities=[types.Modality.AUDIO],
            speech_config=types.SpeechConfig(
                voice_config=types.VoiceConfig(
                    prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=voice_name),
                ),
            ),
            system_instruction=system_instruction,
            input_audio_transcription=types.AudioTranscriptionConfig(),
            output_audio_transcription=types.AudioTranscriptionConfig(),
        )
        return self.client.aio.live.connect(model=model, config=config)
