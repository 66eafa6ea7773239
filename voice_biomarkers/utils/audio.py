"""Audio utility functions."""

from typing import Iterable, Union

import numpy as np

from ..models.schemas import SampleBuffer


AudioLike = Union[SampleBuffer, np.ndarray, Iterable[float]]


def as_sample_buffer(audio: AudioLike, sample_rate: int) -> SampleBuffer:
    """
    Wrap raw samples into an immutable SampleBuffer.

    Args:
        audio: Sample array/sequence or an existing SampleBuffer
        sample_rate: Sample rate used when audio is not already a SampleBuffer

    Returns:
        SampleBuffer with sanitized, read-only samples
    """
    if isinstance(audio, SampleBuffer):
        return audio
    return SampleBuffer(samples=audio, sample_rate=sample_rate)


def resample_audio(
    audio: np.ndarray,
    orig_sr: int,
    target_sr: int,
) -> np.ndarray:
    """
    Resample audio to target sample rate by linear interpolation.

    Output length is floor(len(audio) * target_sr / orig_sr). Positions past
    the last input sample repeat the last sample.
    """
    if orig_sr == target_sr or len(audio) == 0:
        return audio
    ratio = target_sr / orig_sr
    new_length = int(np.floor(len(audio) * ratio))
    positions = np.arange(new_length) / ratio
    return np.interp(positions, np.arange(len(audio)), audio)


def concatenate_chunks(chunks: Iterable[np.ndarray]) -> np.ndarray:
    """Join audio chunks end to end."""
    chunks = [np.asarray(c, dtype=np.float64).ravel() for c in chunks]
    if not chunks:
        return np.zeros(0)
    return np.concatenate(chunks)
