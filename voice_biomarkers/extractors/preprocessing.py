"""Resampling, pre-emphasis, framing and windowing."""

import logging
from typing import Optional

import numpy as np
import librosa

from ..config import AdapterConfig
from ..models.schemas import SampleBuffer
from ..utils.audio import resample_audio


logger = logging.getLogger(__name__)

PRE_EMPHASIS_COEF = 0.97


def pre_emphasis(signal: np.ndarray, coef: float = PRE_EMPHASIS_COEF) -> np.ndarray:
    """First-order high-pass filter y[n] = x[n] - coef * x[n-1], with y[0] = x[0]."""
    if len(signal) == 0:
        return np.zeros(0)
    out = np.empty(len(signal), dtype=np.float64)
    out[0] = signal[0]
    out[1:] = signal[1:] - coef * signal[:-1]
    return out


def frame_count(num_samples: int, frame_size: int, hop_size: int) -> int:
    """Number of complete frames: floor((N - frame) / hop) + 1, or 0 if N < frame."""
    if frame_size <= 0 or num_samples < frame_size:
        return 0
    return (num_samples - frame_size) // hop_size + 1


def frame_signal(signal: np.ndarray, frame_size: int, hop_size: int) -> np.ndarray:
    """Slice a signal into overlapping frames, shape (n_frames, frame_size)."""
    n_frames = frame_count(len(signal), frame_size, hop_size)
    if n_frames == 0:
        return np.zeros((0, max(frame_size, 0)))
    frames = librosa.util.frame(
        np.ascontiguousarray(signal), frame_length=frame_size, hop_length=hop_size, axis=0,
    )
    return np.ascontiguousarray(frames)


def hamming_window(frames: np.ndarray) -> np.ndarray:
    """Apply a Hamming window to every frame."""
    if frames.shape[0] == 0:
        return frames
    return frames * np.hamming(frames.shape[1])


class Preprocessor:
    """Turn a sample buffer into windowed analysis frames."""

    def __init__(self, config: Optional[AdapterConfig] = None):
        self.config = config or AdapterConfig()

    def resample(self, buffer: SampleBuffer) -> SampleBuffer:
        """Resample to the configured rate (lossy, linear interpolation)."""
        target = self.config.sample_rate
        if buffer.sample_rate == target:
            return buffer
        logger.debug("Resampling %d samples from %d Hz to %d Hz", len(buffer), buffer.sample_rate, target)
        resampled = resample_audio(buffer.samples, buffer.sample_rate, target)
        return SampleBuffer(samples=resampled, sample_rate=target)

    def frames(self, samples: np.ndarray) -> np.ndarray:
        """Pre-emphasized, un-windowed frames."""
        emphasized = pre_emphasis(np.asarray(samples, dtype=np.float64))
        frames = frame_signal(emphasized, self.config.frame_samples, self.config.hop_samples)
        if frames.shape[0] == 0:
            logger.debug("Buffer of %d samples is shorter than one frame", len(samples))
        return frames

    def process(self, samples: np.ndarray) -> np.ndarray:
        """Pre-emphasize, frame and window; returns (n_frames, frame_samples)."""
        return hamming_window(self.frames(samples))
