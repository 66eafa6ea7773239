"""Prosody analysis from acoustic features."""

from typing import Optional

import numpy as np

from ..models.schemas import (
    AcousticFeatureSet,
    EmotionalIndicators,
    PausePatterns,
    PitchStats,
    ProsodyFeatureSet,
)
from ..utils.stats import clamp, mean_std, safe_ratio
from .text_analysis import count_filler_words


MONOTONE_CV = 0.1
VARIED_CV = 0.3
MAX_HESITATION_MARKERS = 10


class ProsodyAnalyzer:
    """Derive pitch/rhythm/intonation patterns and emotional cues."""

    def analyze(
        self,
        features: AcousticFeatureSet,
        transcript: Optional[str] = None,
    ) -> ProsodyFeatureSet:
        """
        Extract prosodic features.

        Args:
            features: Acoustic features of the utterance
            transcript: Optional transcript, used to count filled pauses

        Returns:
            ProsodyFeatureSet object
        """
        pitch = features.pitch
        filled_pauses = sum(count_filler_words(transcript).values()) if transcript else 0

        return ProsodyFeatureSet(
            pitch_pattern=self._pitch_pattern(pitch),
            rhythm_pattern=self._rhythm_pattern(features),
            # word-level stress needs word timings, which are not available
            stress_patterns=[],
            intonation_type=self._intonation_type(pitch),
            emotional_indicators=EmotionalIndicators(
                arousal_level=self.arousal(features),
                expressiveness=clamp(safe_ratio(pitch.std_f0, pitch.mean_f0), 0, 1),
                energy_level=clamp((features.energy.mean_energy + 60) / 60, 0, 1),
                tremor_indicator=clamp(features.voice_quality.jitter_local / 5, 0, 1),
            ),
            pause_patterns=PausePatterns(
                hesitation_markers=min(MAX_HESITATION_MARKERS, features.temporal.pause_count),
                filled_pauses=filled_pauses,
                cognitive_load_indicator=features.temporal.mean_pause_duration / 0.5,
            ),
        )

    def _pitch_pattern(self, pitch: PitchStats) -> str:
        cv = safe_ratio(pitch.std_f0, pitch.mean_f0)
        if cv < MONOTONE_CV:
            return "monotone"
        if cv > VARIED_CV:
            return "varied"

        voiced = [f for f in pitch.contour if f > 0]
        if len(voiced) < 5:
            return "monotone"

        half = len(voiced) // 2
        first_mean = float(np.mean(voiced[:half]))
        second_mean = float(np.mean(voiced[half:]))
        if second_mean > first_mean * 1.1:
            return "rising"
        if second_mean < first_mean * 0.9:
            return "falling"
        return "varied"

    def _rhythm_pattern(self, features: AcousticFeatureSet) -> str:
        temporal = features.temporal
        # pause-length coefficient of variation
        pause_mean = safe_ratio(temporal.pause_duration, temporal.pause_count)
        pause_cv = safe_ratio(temporal.pause_duration_std, pause_mean)

        if pause_cv > 0.75:
            return "irregular"
        if safe_ratio(temporal.pause_count, temporal.duration) > 0.5:
            return "hesitant"
        if temporal.speech_rate > 5:
            return "rushed"
        return "regular"

    def _intonation_type(self, pitch: PitchStats) -> str:
        voiced = [f for f in pitch.contour if f > 0]
        if len(voiced) < 3:
            return "neutral"

        last_third = voiced[-(len(voiced) // 3):]
        last_mean, _ = mean_std(last_third)

        if last_mean > pitch.mean_f0 * 1.2:
            return "interrogative"
        if last_mean < pitch.mean_f0 * 0.8:
            return "declarative"
        if pitch.range_f0 > pitch.mean_f0 * 0.5:
            return "exclamatory"
        return "neutral"

    @staticmethod
    def arousal(features: AcousticFeatureSet) -> float:
        """Arousal in [-1, 1]: high pitch, fast rate, loud and variable speech raise it."""
        pitch_norm = clamp(features.pitch.mean_f0 / 200, 0, 1)
        rate_norm = clamp(features.temporal.speech_rate / 5, 0, 1)
        energy_norm = clamp((features.energy.mean_energy + 40) / 40, 0, 1)
        variability_norm = clamp(features.pitch.std_f0 / 50, 0, 1)

        weighted = pitch_norm * 0.3 + rate_norm * 0.3 + energy_norm * 0.2 + variability_norm * 0.2
        return clamp(weighted * 2 - 1, -1, 1)
