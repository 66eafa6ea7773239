"""Utility functions."""

from .audio import as_sample_buffer, concatenate_chunks, resample_audio
from .log import setup_logging

__all__ = [
    "as_sample_buffer",
    "concatenate_chunks",
    "resample_audio",
    "setup_logging",
]
