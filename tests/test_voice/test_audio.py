"""Tests for PCM conversion helpers."""

from __future__ import annotations

import base64

import numpy as np
import pytest

from skillx.voice.audio import (
    decode_audio_payload,
    float_to_pcm16,
    pcm16_to_float,
    pcm_duration,
    read_wav_frames,
    write_wav,
)


class TestPcmConversion:
    def test_float_to_pcm16_scales_and_clips(self):
        data = float_to_pcm16([0.0, 0.5, -1.0, 1.0, 2.0])
        values = np.frombuffer(data, dtype="<i2").tolist()
        assert values == [0, 16384, -32768, 32767, 32767]

    def test_pcm16_to_float_stereo(self):
        data = np.array([16384, -16384, 0, 32767], dtype="<i2").tobytes()
        frames = pcm16_to_float(data, channels=2)
        assert frames.shape == (2, 2)
        assert frames[0].tolist() == [0.5, -0.5]

    def test_invalid_channels(self):
        with pytest.raises(ValueError):
            pcm16_to_float(b"\x00\x00", channels=0)

    def test_decode_payload(self):
        raw = b"\x01\x02\x03\x04"
        assert decode_audio_payload(base64.b64encode(raw).decode()) == raw
        assert decode_audio_payload(raw) == raw

    def test_duration(self):
        assert pcm_duration(b"\x00" * 48000, 24000) == 1.0
        assert pcm_duration(b"\x00" * 32000, 16000, channels=2) == 0.5


class TestWavFiles:
    def test_round_trip_in_chunks(self, tmp_path):
        path = tmp_path / "answer.wav"
        pcm = b"\x01\x00" * 10000
        write_wav(path, pcm, 16000)

        frames = read_wav_frames(path, expected_rate=16000, frames_per_chunk=4096)

        assert [len(f) for f in frames] == [8192, 8192, 3616]
        assert b"".join(frames) == pcm

    def test_wrong_rate_rejected(self, tmp_path):
        path = tmp_path / "answer.wav"
        write_wav(path, b"\x00\x00" * 10, 24000)
        with pytest.raises(ValueError, match="16000"):
            read_wav_frames(path, expected_rate=16000)
