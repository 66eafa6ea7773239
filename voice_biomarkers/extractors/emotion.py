"""Map acoustic and prosodic features to emotion, VAD and clinical indicators.

Quadrant mapping on the Russell circumplex: arousal comes from prosody,
valence from voice clarity (HNR) and spectral brightness. Clinical
indicators follow the usual voice-biomarker cues: flat affect and slow
speech for depression, high pitch and tremor for anxiety, perturbation and
reduced clarity for stress.
"""

from typing import Dict

from ..models.schemas import (
    VAD,
    AcousticFeatureSet,
    AnxietyIndicators,
    DepressionIndicators,
    EmotionDistribution,
    ProsodyFeatureSet,
    StressIndicators,
    VoiceEmotionEstimate,
)
from ..utils.stats import clamp, safe_ratio


QUADRANT_THRESHOLD = 0.3
JITTER_STRESS_PCT = 2.0
SHIMMER_STRESS_PCT = 5.0
INDICATOR_CONFIDENCE_FACTOR = 0.8


def quadrant_scores(arousal: float, valence: float) -> Dict[str, float]:
    """Unnormalized emotion scores for an arousal-valence point."""
    t = QUADRANT_THRESHOLD
    if arousal > t and valence > t:
        return {"joy": 0.6, "excitement": 0.3}
    if arousal > t and valence < -t:
        return {"anger": 0.4, "anxiety": 0.4}
    if arousal < -t and valence < -t:
        return {"sadness": 0.6, "depression": 0.3}
    if arousal < -t and valence > t:
        return {"calm": 0.6, "contentment": 0.3}
    return {"neutral": 0.8}


class EmotionMapper:
    """Rule-based voice emotion estimator."""

    def map(self, acoustic: AcousticFeatureSet, prosody: ProsodyFeatureSet) -> VoiceEmotionEstimate:
        """
        Build the voice-only emotion estimate.

        Args:
            acoustic: Acoustic features
            prosody: Prosody features derived from them

        Returns:
            VoiceEmotionEstimate
        """
        probabilities = self.emotion_probabilities(acoustic, prosody)
        return VoiceEmotionEstimate(
            primary_emotion=probabilities.primary(),
            emotion_probabilities=probabilities,
            vad=self.vad(acoustic, prosody),
            depression_indicators=self.depression_indicators(acoustic),
            anxiety_indicators=self.anxiety_indicators(acoustic, prosody),
            stress_indicators=self.stress_indicators(acoustic, prosody),
        )

    @staticmethod
    def estimate_valence(acoustic: AcousticFeatureSet) -> float:
        """Higher HNR and a brighter spectrum read as more positive."""
        hnr_norm = clamp(acoustic.voice_quality.hnr / 20, -1, 1)
        centroid_norm = clamp(acoustic.spectral.spectral_centroid / 2000, 0, 1)
        return clamp((hnr_norm * 0.6 + centroid_norm * 0.4) * 2 - 1, -1, 1)

    def emotion_probabilities(
        self,
        acoustic: AcousticFeatureSet,
        prosody: ProsodyFeatureSet,
    ) -> EmotionDistribution:
        arousal = prosody.emotional_indicators.arousal_level
        valence = self.estimate_valence(acoustic)
        scores = quadrant_scores(arousal, valence)

        quality = acoustic.voice_quality
        if quality.jitter_local > JITTER_STRESS_PCT or quality.shimmer_local > SHIMMER_STRESS_PCT:
            scores["stress"] = scores.get("anxiety", 0.0) + 0.2

        return EmotionDistribution.from_scores(scores)

    def vad(self, acoustic: AcousticFeatureSet, prosody: ProsodyFeatureSet) -> VAD:
        indicators = prosody.emotional_indicators
        dominance = clamp(
            0.5 + (acoustic.energy.mean_energy + 30) / 60 * 0.3 + indicators.expressiveness * 0.2,
            0,
            1,
        )
        return VAD(
            valence=self.estimate_valence(acoustic),
            arousal=indicators.arousal_level,
            dominance=dominance,
            confidence=clamp(acoustic.quality.signal_quality * acoustic.pitch.voiced_ratio, 0, 1),
        )

    def _indicator_confidence(self, acoustic: AcousticFeatureSet) -> float:
        return clamp(acoustic.quality.signal_quality * INDICATOR_CONFIDENCE_FACTOR, 0, 1)

    def depression_indicators(self, acoustic: AcousticFeatureSet) -> DepressionIndicators:
        pitch_cv = safe_ratio(acoustic.pitch.std_f0, acoustic.pitch.mean_f0)
        flat_affect = clamp(1 - pitch_cv / 0.2, 0, 1)
        psychomotor_retardation = clamp(1 - acoustic.temporal.speech_rate / 3, 0, 1)
        low_energy = clamp(1 - (acoustic.energy.mean_energy + 40) / 40, 0, 1)

        score = flat_affect * 0.4 + psychomotor_retardation * 0.3 + low_energy * 0.3
        return DepressionIndicators(
            flat_affect=flat_affect,
            psychomotor_retardation=psychomotor_retardation,
            low_energy=low_energy,
            score=clamp(score, 0, 1),
            confidence=self._indicator_confidence(acoustic),
        )

    def anxiety_indicators(
        self,
        acoustic: AcousticFeatureSet,
        prosody: ProsodyFeatureSet,
    ) -> AnxietyIndicators:
        high_pitch = clamp(acoustic.pitch.mean_f0 / 250, 0, 1)
        fast_speech = clamp(acoustic.temporal.speech_rate / 5, 0, 1)
        tremor = clamp(acoustic.voice_quality.jitter_local / 3, 0, 1)
        hesitation = clamp(prosody.pause_patterns.hesitation_markers / 10, 0, 1)

        score = (high_pitch + fast_speech + tremor + hesitation) * 0.25
        return AnxietyIndicators(
            high_pitch=high_pitch,
            fast_speech=fast_speech,
            tremor=tremor,
            hesitation=hesitation,
            score=clamp(score, 0, 1),
            confidence=self._indicator_confidence(acoustic),
        )

    def stress_indicators(
        self,
        acoustic: AcousticFeatureSet,
        prosody: ProsodyFeatureSet,
    ) -> StressIndicators:
        quality = acoustic.voice_quality
        voice_instability = clamp((quality.jitter_local + quality.shimmer_local) / 10, 0, 1)
        reduced_clarity = clamp(1 - (quality.hnr + 10) / 30, 0, 1)
        breathing_irregularity = clamp(prosody.pause_patterns.cognitive_load_indicator, 0, 1)

        score = voice_instability * 0.4 + reduced_clarity * 0.3 + breathing_irregularity * 0.3
        return StressIndicators(
            voice_instability=voice_instability,
            reduced_clarity=reduced_clarity,
            breathing_irregularity=breathing_irregularity,
            score=clamp(score, 0, 1),
            confidence=self._indicator_confidence(acoustic),
        )
