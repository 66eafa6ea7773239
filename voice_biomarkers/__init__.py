"""Voice biomarker extraction with text-voice emotion fusion."""

from .config import AdapterConfig, WhisperConfig, load_config
from .exceptions import (
    TranscriptionDisabledError,
    TranscriptionUnavailableError,
    UnsupportedInputError,
    VoiceBiomarkerError,
)
from .pipeline import VoiceBiomarkerPipeline

__version__ = "0.1.0"

__all__ = [
    "AdapterConfig",
    "WhisperConfig",
    "load_config",
    "VoiceBiomarkerPipeline",
    "VoiceBiomarkerError",
    "TranscriptionDisabledError",
    "TranscriptionUnavailableError",
    "UnsupportedInputError",
]
