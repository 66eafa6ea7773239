"""Chunk buffering for live voice estimates."""

import logging
from collections import deque
from typing import Callable, Deque, Optional

import numpy as np

from ..config import AdapterConfig
from ..models.schemas import SampleBuffer, VoiceEmotionEstimate
from ..utils.audio import as_sample_buffer, concatenate_chunks, resample_audio


logger = logging.getLogger(__name__)

Estimator = Callable[[SampleBuffer], VoiceEmotionEstimate]


class StreamingAccumulator:
    """
    Bounded FIFO of audio chunks with a cached running estimate.

    Once at least ``realtime_min_chunks`` chunks are buffered, every new
    chunk re-runs the estimator on the concatenation of the whole buffer.
    The oldest chunk is evicted when ``realtime_buffer_size`` is exceeded.
    """

    def __init__(self, config: AdapterConfig, estimator: Estimator):
        self.config = config
        self.estimator = estimator
        self._chunks: Deque[np.ndarray] = deque(maxlen=config.realtime_buffer_size)
        self._estimate: Optional[VoiceEmotionEstimate] = None

    def add_chunk(self, chunk, sample_rate: Optional[int] = None) -> Optional[VoiceEmotionEstimate]:
        """Buffer a chunk; return the refreshed estimate if one was computed."""
        buffer = as_sample_buffer(chunk, sample_rate or self.config.sample_rate)
        samples = buffer.samples
        if buffer.sample_rate != self.config.sample_rate:
            samples = resample_audio(samples, buffer.sample_rate, self.config.sample_rate)
        self._chunks.append(samples)

        if len(self._chunks) < self.config.realtime_min_chunks:
            return None

        combined = SampleBuffer(
            samples=concatenate_chunks(self._chunks),
            sample_rate=self.config.sample_rate,
        )
        self._estimate = self.estimator(combined)
        logger.debug(
            "Live estimate over %d chunks (%.2f s): %s",
            len(self._chunks), combined.duration, self._estimate.primary_emotion,
        )
        return self._estimate

    @property
    def estimate(self) -> Optional[VoiceEmotionEstimate]:
        """Most recent estimate, or None before the first one."""
        return self._estimate

    def clear(self):
        self._chunks.clear()
        self._estimate = None

    def __len__(self) -> int:
        return len(self._chunks)
