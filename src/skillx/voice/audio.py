"""16-bit PCM framing for the live voice session."""

from __future__ import annotations

import base64
import wave
from pathlib import Path

import numpy as np

PCM_SCALE = 32768.0


def float_to_pcm16(samples) -> bytes:
    """Encode float samples in [-1, 1] as little-endian 16-bit PCM."""
    data = np.asarray(samples, dtype=np.float32)
    scaled = np.clip(data * PCM_SCALE, -PCM_SCALE, PCM_SCALE - 1)
    return scaled.astype("<i2").tobytes()


def pcm16_to_float(data: bytes, channels: int = 1) -> np.ndarray:
    """Decode interleaved 16-bit PCM to a (frames, channels) float32 array."""
    if channels < 1:
        raise ValueError("channels must be >= 1")
    ints = np.frombuffer(data, dtype="<i2")
    frames = len(ints) // channels
    return (ints[: frames * channels].astype(np.float32) / PCM_SCALE).reshape(frames, channels)


def decode_audio_payload(payload: bytes | str) -> bytes:
    """Return raw PCM bytes from a payload that may still be base64 text."""
    if isinstance(payload, str):
        return base64.b64decode(payload)
    return payload


def pcm_duration(data: bytes, sample_rate: int, channels: int = 1) -> float:
    """Playback length in seconds of a 16-bit PCM buffer."""
    return len(data) // (2 * channels) / sample_rate


def read_wav_frames(path: str | Path, expected_rate: int, frames_per_chunk: int = 4096) -> list[bytes]:
    """Split a mono 16-bit WAV file into PCM chunks for streaming."""
    with wave.open(str(path), "rb") as wav:
        if wav.getnchannels() != 1 or wav.getsampwidth() != 2:
            raise ValueError(f"{path}: expected mono 16-bit PCM")
        if wav.getframerate() != expected_rate:
            raise ValueError(f"{path}: expected {expected_rate} Hz, got {wav.getframerate()} Hz")
        chunks = []
        while True:
            data = wav.readframes(frames_per_chunk)
            if not data:
                break
            chunks.append(data)
    return chunks


def write_wav(path: str | Path, pcm: bytes, sample_rate: int) -> None:
    with wave.open(str(path), "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(sample_rate)
        wav.writeframes(pcm)
