"""Autocorrelation pitch tracking."""

from typing import Optional

import numpy as np

from ..config import AdapterConfig
from ..models.schemas import PitchStats


VOICING_THRESHOLD = 0.3


class PitchTracker:
    """Estimate F0 per windowed frame by autocorrelation."""

    def __init__(self, config: Optional[AdapterConfig] = None):
        self.config = config or AdapterConfig()

    def track(self, frames: np.ndarray, sample_rate: int) -> np.ndarray:
        """
        F0 contour, one value per frame (0 = unvoiced).

        The best lag is searched in [sr / max_f0, sr / min_f0]. A frame is
        voiced when its peak autocorrelation exceeds 0.3 x the frame energy.
        """
        contour = np.zeros(frames.shape[0])
        if frames.shape[0] == 0:
            return contour

        frame_len = frames.shape[1]
        min_lag = int(sample_rate // self.config.max_f0)
        max_lag = min(int(sample_rate // self.config.min_f0), frame_len - 1)
        if min_lag < 1 or min_lag > max_lag:
            return contour

        for i, frame in enumerate(frames):
            energy = float(np.dot(frame, frame))
            if energy <= 0:
                continue
            # full autocorrelation, non-negative lags only
            acf = np.correlate(frame, frame, mode="full")[frame_len - 1:]
            search = acf[min_lag:max_lag + 1]
            best = int(np.argmax(search))
            max_corr = float(search[best])
            if max_corr > 0 and max_corr > VOICING_THRESHOLD * energy:
                contour[i] = sample_rate / (min_lag + best)
        return contour

    def stats(self, contour: np.ndarray) -> PitchStats:
        """Statistics over the voiced subset; all zeros when nothing is voiced."""
        contour = np.asarray(contour, dtype=np.float64)
        voiced = contour[contour > 0]
        if len(voiced) == 0:
            return PitchStats(contour=contour.tolist())

        min_f0 = float(np.min(voiced))
        max_f0 = float(np.max(voiced))
        return PitchStats(
            mean_f0=float(np.mean(voiced)),
            std_f0=float(np.std(voiced)),
            min_f0=min_f0,
            max_f0=max_f0,
            range_f0=max_f0 - min_f0,
            voiced_ratio=len(voiced) / len(contour),
            contour=contour.tolist(),
        )
