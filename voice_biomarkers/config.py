"""Configuration settings for the voice biomarker pipeline."""

import os
from typing import Literal, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from dotenv import load_dotenv

load_dotenv()


MIN_SAMPLE_RATE = 8000
MAX_SAMPLE_RATE = 48000


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class WhisperConfig(BaseModel):
    """Whisper transcription configuration."""
    model_name: str = Field(default="openai/whisper-small", description="Whisper model name (HuggingFace model ID)")
    language: Optional[str] = Field(default=None, description="Language code or None to follow the adapter language")
    device: str = Field(
        default_factory=lambda: os.getenv("WHISPER_DEVICE", "auto"),
        description="Device to run on (cpu/cuda/cuda:0/mps/auto)"
    )


class AdapterConfig(BaseModel):
    """Voice adapter configuration: framing, pitch search, fusion."""
    model_config = ConfigDict(validate_assignment=True)

    sample_rate: int = Field(
        default_factory=lambda: int(os.getenv("VOICE_SAMPLE_RATE", "16000")),
        description="Target sample rate for analysis (Hz)"
    )
    frame_size_ms: float = Field(default=25.0, gt=0, description="Analysis frame length in milliseconds")
    hop_size_ms: float = Field(default=10.0, gt=0, description="Hop between frames in milliseconds")
    num_mfcc: int = Field(default=13, ge=1, le=26, description="Number of MFCC coefficients")
    min_f0: float = Field(default=75.0, gt=0, description="Minimum F0 for pitch search (Hz)")
    max_f0: float = Field(default=500.0, gt=0, description="Maximum F0 for pitch search (Hz)")

    enable_whisper: bool = Field(
        default_factory=lambda: _env_bool("VOICE_ENABLE_WHISPER", False),
        description="Allow transcription through the Whisper backend"
    )
    whisper: WhisperConfig = Field(default_factory=WhisperConfig)

    fusion_strategy: Literal["early", "late"] = Field(default="late", description="Text-voice fusion strategy")
    fusion_weights: Tuple[float, float] = Field(
        default=(0.6, 0.4),
        description="Fusion weights (text, voice); must sum to 1"
    )

    realtime_buffer_size: int = Field(default=100, ge=1, description="Maximum buffered chunks for streaming")
    realtime_min_chunks: int = Field(default=10, ge=1, description="Chunks required before a live estimate")

    language: Literal["ru", "en", "auto"] = Field(
        default_factory=lambda: os.getenv("VOICE_LANGUAGE", "ru"),
        description="Language hint for transcription, lexicons and recommendations"
    )

    @field_validator("sample_rate")
    @classmethod
    def check_sample_rate(cls, v):
        if v < MIN_SAMPLE_RATE or v > MAX_SAMPLE_RATE:
            raise ValueError(
                f"Sample rate must be between {MIN_SAMPLE_RATE} and {MAX_SAMPLE_RATE} Hz, got {v}"
            )
        return v

    @field_validator("fusion_weights")
    @classmethod
    def check_fusion_weights(cls, v):
        text_weight, voice_weight = v
        if text_weight < 0 or voice_weight < 0:
            raise ValueError("Fusion weights must be non-negative")
        if abs(text_weight + voice_weight - 1.0) > 1e-6:
            raise ValueError(f"Fusion weights must sum to 1, got {text_weight + voice_weight}")
        return (float(text_weight), float(voice_weight))

    @model_validator(mode="after")
    def check_ranges(self):
        if self.min_f0 >= self.max_f0:
            raise ValueError("min_f0 must be lower than max_f0")
        if self.hop_size_ms > self.frame_size_ms:
            raise ValueError("hop_size_ms must not exceed frame_size_ms")
        if self.realtime_min_chunks > self.realtime_buffer_size:
            raise ValueError("realtime_min_chunks must not exceed realtime_buffer_size")
        return self

    @property
    def frame_samples(self) -> int:
        return int(self.frame_size_ms * self.sample_rate / 1000)

    @property
    def hop_samples(self) -> int:
        return max(1, int(self.hop_size_ms * self.sample_rate / 1000))

    @property
    def text_weight(self) -> float:
        return self.fusion_weights[0]

    @property
    def voice_weight(self) -> float:
        return self.fusion_weights[1]


def load_config(**overrides) -> AdapterConfig:
    """Load configuration from environment and defaults, with explicit overrides."""
    return AdapterConfig(**overrides)
