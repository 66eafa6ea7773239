"""Jitter, shimmer and harmonics-to-noise estimates from the pitch contour."""

import numpy as np

from ..models.schemas import VoiceQualityMetrics
from ..utils.stats import clamp


MIN_VOICED_FRAMES = 3


class VoiceQualityAnalyzer:
    """Perturbation-based voice quality (frame level, not cycle level)."""

    def analyze(self, frames: np.ndarray, contour: np.ndarray) -> VoiceQualityMetrics:
        """
        Compute jitter %, shimmer %, HNR (dB) and NHR.

        Needs at least three voiced frames, otherwise every metric is 0.
        HNR is derived from the unclamped perturbations and then clamped.
        """
        contour = np.asarray(contour, dtype=np.float64)
        voiced_mask = contour > 0
        if int(voiced_mask.sum()) < MIN_VOICED_FRAMES:
            return VoiceQualityMetrics()

        pitches = contour[voiced_mask]
        jitter = np.mean(np.abs(np.diff(pitches))) / np.mean(pitches) * 100

        amplitudes = np.sqrt(np.mean(frames[voiced_mask] ** 2, axis=1))
        mean_amp = np.mean(amplitudes)
        shimmer = np.mean(np.abs(np.diff(amplitudes))) / mean_amp * 100 if mean_amp > 0 else 0.0

        hnr = 20 * np.log10(1 / (jitter / 100 + shimmer / 100 + 0.01))
        nhr = 1 / (10 ** (hnr / 20) + 1)

        return VoiceQualityMetrics(
            jitter_local=clamp(jitter, 0, 10),
            shimmer_local=clamp(shimmer, 0, 20),
            hnr=clamp(hnr, -20, 30),
            nhr=float(nhr),
        )
