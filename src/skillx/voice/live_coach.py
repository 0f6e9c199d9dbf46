"""Live voice coach session.

Server messages from the live API are handled one at a time by
``LiveCoachSession.handle_message``. Transcription fragments accumulate in a
per-turn buffer that is flushed to an immutable history when the server
reports the turn complete. Model audio is scheduled back to back for
playback and dropped as a whole when the user interrupts.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass

from google.genai import types

from skillx.clients.gemini_client import GeminiClient
from skillx.config import VoiceConfig
from skillx.models.chat import TranscriptEntry
from skillx.voice.audio import decode_audio_payload, pcm_duration

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduledChunk:
    pcm: bytes
    start: float
    duration: float

    @property
    def end(self) -> float:
        return self.start + self.duration


class PlaybackScheduler:
    """Queues audio chunks so each starts when the previous one ends."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self.next_start = 0.0
        self._chunks: list[ScheduledChunk] = []

    def schedule(self, pcm: bytes, duration: float) -> ScheduledChunk:
        start = max(self.next_start, self._clock())
        chunk = ScheduledChunk(pcm=pcm, start=start, duration=duration)
        self.next_start = start + duration
        self._chunks.append(chunk)
        return chunk

    @property
    def active(self) -> list[ScheduledChunk]:
        """Chunks still playing or waiting to play."""
        now = self._clock()
        self._chunks = [c for c in self._chunks if c.end > now]
        return list(self._chunks)

    def interrupt(self) -> list[ScheduledChunk]:
        stopped = self.active
        self._chunks.clear()
        self.next_start = 0.0
        return stopped


class TranscriptBuffer:
    """Accumulates the current turn's transcription in both directions."""

    def __init__(self):
        self.current_input = ""
        self.current_output = ""
        self.history: tuple[TranscriptEntry, ...] = ()

    def append_input(self, text: str) -> None:
        self.current_input += text

    def append_output(self, text: str) -> None:
        self.current_output += text

    def complete_turn(self) -> tuple[TranscriptEntry, ...]:
        """Move the finished turn into history; blank sides are skipped."""
        entries = []
        if self.current_input.strip():
            entries.append(TranscriptEntry(role="user", text=self.current_input))
        if self.current_output.strip():
            entries.append(TranscriptEntry(role="assistant", text=self.current_output))
        self.history = self.history + tuple(entries)
        self.reset()
        return tuple(entries)

    def reset(self) -> None:
        self.current_input = ""
        self.current_output = ""


class LiveCoachSession:
    def __init__(
        self,
        client: GeminiClient,
        config: VoiceConfig | None = None,
        *,
        on_audio: Callable[[ScheduledChunk], None] | None = None,
        on_interrupt: Callable[[list[ScheduledChunk]], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.client = client
        self.config = config or VoiceConfig()
        self.on_audio = on_audio
        self.on_interrupt = on_interrupt
        self.transcript = TranscriptBuffer()
        self.playback = PlaybackScheduler(clock)
        self.active = False

    def handle_message(self, message) -> None:
        content = getattr(message, "server_content", None)
        if content is None:
            return

        if content.output_transcription and content.output_transcription.text:
            self.transcript.append_output(content.output_transcription.text)
        elif content.input_transcription and content.input_transcription.text:
            self.transcript.append_input(content.input_transcription.text)

        pcm = _first_audio_part(content)
        if pcm:
            duration = pcm_duration(pcm, self.config.output_sample_rate)
            chunk = self.playback.schedule(pcm, duration)
            if self.on_audio:
                self.on_audio(chunk)

        if content.interrupted:
            stopped = self.playback.interrupt()
            logger.debug("Playback interrupted, %d chunks dropped", len(stopped))
            if self.on_interrupt:
                self.on_interrupt(stopped)

        if content.turn_complete:
            self.transcript.complete_turn()

    async def run(self, microphone: AsyncIterator[bytes]) -> tuple[TranscriptEntry, ...]:
        """Stream microphone PCM to the coach until the input ends or the session closes.

        Args:
            microphone: Async iterator of 16-bit mono PCM frames at the
                configured input sample rate.

        Returns:
            The transcript history of completed turns.
        """
        try:
            async with self.client.connect_live(
                self.config.live_model,
                voice_name=self.config.voice_name,
            ) as session:
                self.active = True
                sender = asyncio.create_task(self._pump(session, microphone))
                try:
                    await self._receive(session, sender)
                finally:
                    sender.cancel()
        except Exception:
            logger.error("Live session error", exc_info=True)
            raise
        finally:
            self.stop()
        return self.transcript.history

    async def _receive(self, session, sender: asyncio.Task) -> None:
        while self.active:
            received = 0
            # receive() yields the messages of one model turn
            async for message in session.receive():
                received += 1
                self.handle_message(message)
            if sender.done():
                sender.result()
                return
            if received == 0:
                logger.debug("Live session closed by server")
                return

    async def _pump(self, session, microphone: AsyncIterator[bytes]) -> None:
        mime_type = f"audio/pcm;rate={self.config.input_sample_rate}"
        async for frame in microphone:
            if not self.active:
                return
            await session.send_realtime_input(audio=types.Blob(data=frame, mime_type=mime_type))
        await session.send_realtime_input(audio_stream_end=True)

    def stop(self) -> None:
        """End the session and drop any queued audio and partial transcript."""
        self.active = False
        self.playback.interrupt()
        self.transcript.reset()


def _first_audio_part(content) -> bytes | None:
    turn = getattr(content, "model_turn", None)
    if not turn or not turn.parts:
        return None
    inline = turn.parts[0].inline_data
    if not inline or not inline.data:
        return None
    return decode_audio_payload(inline.data)
