"""Application configuration loaded from config.yaml."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise ValueError(message)


@dataclass(frozen=True)
class LLMConfig:
    fast_model: str = "claude-haiku-4-5-20251001"
    reasoning_model: str = "claude-sonnet-4-5-20250929"
    thinking_budget: int = 16000

    def __post_init__(self):
        _require(self.thinking_budget >= 1024, "llm.thinking_budget must be >= 1024")


@dataclass(frozen=True)
class GatewayConfig:
    max_retries: int = 3
    initial_delay: float = 2.0  # seconds, doubled after each retry
    timeout: float | None = 60.0  # per-attempt deadline in seconds

    def __post_init__(self):
        _require(0 <= self.max_retries <= 10, "gateway.max_retries must be between 0 and 10")
        _require(self.initial_delay > 0, "gateway.initial_delay must be > 0")
        _require(
            self.timeout is None or self.timeout >= 1,
            "gateway.timeout must be >= 1 second or null",
        )


@dataclass(frozen=True)
class PipelineConfig:
    hours_per_day: int = 2
    strict_decoding: bool = False
    resume_char_limit: int = 8000

    def __post_init__(self):
        _require(1 <= self.hours_per_day <= 12, "pipeline.hours_per_day must be between 1 and 12")
        _require(self.resume_char_limit > 0, "pipeline.resume_char_limit must be > 0")


@dataclass(frozen=True)
class VoiceConfig:
    live_model: str = "gemini-2.5-flash-native-audio-preview-12-2025"
    transcription_model: str = "gemini-3-flash-preview"
    voice_name: str = "Zephyr"
    input_sample_rate: int = 16000
    output_sample_rate: int = 24000


@dataclass(frozen=True)
class UsageConfig:
    enabled: bool = True
    db_path: str = "~/.skillx/usage.db"

    @property
    def resolved_db_path(self) -> Path:
        return Path(self.db_path).expanduser()


@dataclass(frozen=True)
class AppConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    gateway: GatewayConfig = field(default_factory=GatewayConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    voice: VoiceConfig = field(default_factory=VoiceConfig)
    usage: UsageConfig = field(default_factory=UsageConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults."""
    if path is None:
        candidates = [
            Path.cwd() / "config.yaml",
            Path(__file__).resolve().parent.parent.parent / "config.yaml",
        ]
        for c in candidates:
            if c.exists():
                path = c
                break

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text()) or {}

    return AppConfig(
        llm=LLMConfig(**raw.get("llm", {})),
        gateway=GatewayConfig(**raw.get("gateway", {})),
        pipeline=PipelineConfig(**raw.get("pipeline", {})),
        voice=VoiceConfig(**raw.get("voice", {})),
        usage=UsageConfig(**raw.get("usage", {})),
    )
