"""Pydantic schemas for data models."""

import math
from datetime import datetime
from typing import Annotated, Dict, List, Literal, Optional, Union

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------

class SampleBuffer(BaseModel):
    """Mono audio samples in [-1, 1] with their sample rate.

    The samples array is copied, sanitized (NaN/inf replaced, clipped) and
    marked read-only on construction.
    """
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    samples: np.ndarray
    sample_rate: int = Field(gt=0, description="Sample rate in Hz")

    @field_validator("samples", mode="before")
    @classmethod
    def coerce_samples(cls, v):
        arr = np.asarray(v, dtype=np.float64).ravel()
        arr = np.nan_to_num(arr, nan=0.0, posinf=1.0, neginf=-1.0)
        arr = np.clip(arr, -1.0, 1.0)
        arr.flags.writeable = False
        return arr

    @property
    def duration(self) -> float:
        return len(self.samples) / self.sample_rate

    def __len__(self) -> int:
        return len(self.samples)


# ---------------------------------------------------------------------------
# Acoustic features
# ---------------------------------------------------------------------------

class PitchStats(BaseModel):
    """F0 statistics over voiced frames plus the full per-frame contour."""
    mean_f0: float = Field(default=0.0, description="Mean F0 in Hz (voiced frames)")
    std_f0: float = Field(default=0.0, description="F0 standard deviation")
    min_f0: float = Field(default=0.0, description="Minimum voiced F0")
    max_f0: float = Field(default=0.0, description="Maximum voiced F0")
    range_f0: float = Field(default=0.0, description="F0 range (max - min)")
    voiced_ratio: float = Field(default=0.0, ge=0, le=1, description="Share of voiced frames")
    contour: List[float] = Field(default_factory=list, description="F0 per frame, 0 = unvoiced")


class VoiceQualityMetrics(BaseModel):
    """Perturbation-based voice quality."""
    jitter_local: float = Field(default=0.0, description="Jitter in percent, clamped to [0, 10]")
    shimmer_local: float = Field(default=0.0, description="Shimmer in percent, clamped to [0, 20]")
    hnr: float = Field(default=0.0, description="Harmonics-to-noise ratio in dB, clamped to [-20, 30]")
    nhr: float = Field(default=0.0, description="Noise-to-harmonics ratio")


class TemporalFeatures(BaseModel):
    """Timing and pause features."""
    speech_rate: float = Field(default=0.0, description="Estimated syllables per second")
    articulation_rate: float = Field(default=0.0, description="Syllables per second of voiced time")
    duration: float = Field(default=0.0, description="Total duration in seconds")
    speaking_time: float = Field(default=0.0, description="Voiced time in seconds")
    pause_duration: float = Field(default=0.0, description="Total unvoiced time in seconds")
    pause_count: int = Field(default=0, description="Number of pauses")
    mean_pause_duration: float = Field(default=0.0, description="Mean pause duration in seconds")
    pause_duration_std: float = Field(default=0.0, description="Pause duration standard deviation")


class SpectralFeatures(BaseModel):
    """Cepstral and spectral shape features."""
    mfcc_mean: List[float] = Field(default_factory=list, description="MFCC mean per coefficient")
    mfcc_std: List[float] = Field(default_factory=list, description="MFCC standard deviation per coefficient")
    spectral_centroid: float = Field(default=0.0, description="Mean spectral centroid in Hz")
    spectral_flux: float = Field(default=0.0, description="Mean frame-to-frame spectral change")
    spectral_rolloff: float = Field(default=0.0, description="Approximate rolloff frequency in Hz")


class EnergyFeatures(BaseModel):
    """Frame energy statistics in dB."""
    mean_energy: float = Field(default=0.0, description="Mean frame energy (dB)")
    std_energy: float = Field(default=0.0, description="Energy standard deviation (dB)")
    range_energy: float = Field(default=0.0, description="Energy range (dB)")
    contour: List[float] = Field(default_factory=list, description="Energy per frame (dB)")


class SignalQuality(BaseModel):
    """Recording quality indicators."""
    signal_quality: float = Field(default=0.0, ge=0, le=1, description="Overall signal quality (0-1)")
    noise_level: float = Field(default=0.0, description="Background noise level (dB)")
    clipping_ratio: float = Field(default=0.0, ge=0, le=1, description="Share of clipped samples")
    silence_ratio: float = Field(default=0.0, ge=0, le=1, description="Share of silent frames")


class AcousticFeatureSet(BaseModel):
    """All acoustic features computed from one sample buffer."""
    pitch: PitchStats
    voice_quality: VoiceQualityMetrics
    temporal: TemporalFeatures
    spectral: SpectralFeatures
    energy: EnergyFeatures
    quality: SignalQuality

    @property
    def frame_count(self) -> int:
        return len(self.pitch.contour)


# ---------------------------------------------------------------------------
# Prosody
# ---------------------------------------------------------------------------

PitchPattern = Literal["monotone", "varied", "rising", "falling", "irregular"]
RhythmPattern = Literal["regular", "irregular", "hesitant", "rushed"]
IntonationType = Literal["declarative", "interrogative", "exclamatory", "neutral"]


class StressPattern(BaseModel):
    word: str
    position: int
    strength: float


class EmotionalIndicators(BaseModel):
    """Prosodic cues of emotional state."""
    arousal_level: float = Field(ge=-1, le=1, description="Arousal from pitch, rate, energy, variability")
    expressiveness: float = Field(ge=0, le=1, description="Pitch coefficient of variation")
    energy_level: float = Field(ge=0, le=1, description="Normalized loudness")
    tremor_indicator: float = Field(ge=0, le=1, description="Jitter-derived tremor")


class PausePatterns(BaseModel):
    hesitation_markers: int = Field(ge=0, le=10, description="Pause count, capped at 10")
    filled_pauses: int = Field(default=0, ge=0, description="Filler words (um, uh) in the transcript")
    cognitive_load_indicator: float = Field(ge=0, description="Mean pause duration relative to 0.5 s")


class ProsodyFeatureSet(BaseModel):
    """Suprasegmental speech characteristics."""
    pitch_pattern: PitchPattern
    rhythm_pattern: RhythmPattern
    stress_patterns: List[StressPattern] = Field(default_factory=list)
    intonation_type: IntonationType
    emotional_indicators: EmotionalIndicators
    pause_patterns: PausePatterns


# ---------------------------------------------------------------------------
# Emotion estimates
# ---------------------------------------------------------------------------

class VAD(BaseModel):
    """Valence-arousal-dominance triple with confidence."""
    valence: float = Field(ge=-1, le=1)
    arousal: float = Field(ge=-1, le=1)
    dominance: float = Field(ge=0, le=1)
    confidence: float = Field(ge=0, le=1)


class EmotionDistribution(RootModel[Dict[str, float]]):
    """Sparse emotion -> probability map whose values sum to 1."""

    @field_validator("root")
    @classmethod
    def check_distribution(cls, v):
        if not v:
            raise ValueError("Emotion distribution must contain at least one emotion")
        for emotion, prob in v.items():
            if prob < 0 or not math.isfinite(prob):
                raise ValueError(f"Probability for {emotion} must be a finite non-negative number")
        total = sum(v.values())
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"Emotion probabilities must sum to 1, got {total}")
        return v

    @classmethod
    def from_scores(cls, scores: Dict[str, float]) -> "EmotionDistribution":
        """Normalize non-negative scores into a distribution."""
        total = sum(scores.values())
        if total <= 0:
            return cls({"neutral": 1.0})
        return cls({k: v / total for k, v in scores.items()})

    def primary(self) -> str:
        """Most probable emotion; the first one wins ties."""
        best, best_prob = "neutral", 0.0
        for emotion, prob in self.root.items():
            if prob > best_prob:
                best, best_prob = emotion, prob
        return best

    def get(self, emotion: str, default: float = 0.0) -> float:
        return self.root.get(emotion, default)

    def keys(self):
        return self.root.keys()

    def items(self):
        return self.root.items()

    def __getitem__(self, emotion: str) -> float:
        return self.root[emotion]

    def __contains__(self, emotion: str) -> bool:
        return emotion in self.root

    def __len__(self) -> int:
        return len(self.root)


class DepressionIndicators(BaseModel):
    flat_affect: float = Field(ge=0, le=1, description="Low pitch variability")
    psychomotor_retardation: float = Field(ge=0, le=1, description="Slow speech")
    low_energy: float = Field(ge=0, le=1, description="Quiet voice")
    score: float = Field(ge=0, le=1)
    confidence: float = Field(ge=0, le=1)


class AnxietyIndicators(BaseModel):
    high_pitch: float = Field(ge=0, le=1)
    fast_speech: float = Field(ge=0, le=1)
    tremor: float = Field(ge=0, le=1)
    hesitation: float = Field(ge=0, le=1)
    score: float = Field(ge=0, le=1)
    confidence: float = Field(ge=0, le=1)


class StressIndicators(BaseModel):
    voice_instability: float = Field(ge=0, le=1, description="Jitter plus shimmer")
    reduced_clarity: float = Field(ge=0, le=1, description="Inverse HNR")
    breathing_irregularity: float = Field(ge=0, le=1, description="Pause irregularity")
    score: float = Field(ge=0, le=1)
    confidence: float = Field(ge=0, le=1)


class VoiceEmotionEstimate(BaseModel):
    """Emotional and clinical estimate derived from voice alone."""
    primary_emotion: str
    emotion_probabilities: EmotionDistribution
    vad: VAD
    depression_indicators: DepressionIndicators
    anxiety_indicators: AnxietyIndicators
    stress_indicators: StressIndicators


# ---------------------------------------------------------------------------
# Text analysis (external contract)
# ---------------------------------------------------------------------------

class RiskKeyword(BaseModel):
    keyword: str
    category: str
    severity: float = Field(ge=0, le=1)


class CognitiveDistortion(BaseModel):
    type: str
    phrase: str
    confidence: float = Field(ge=0, le=1)


class TextAnalysis(BaseModel):
    """Lexicon-based analysis of a transcript."""
    text: str
    language: str = "unknown"
    word_count: int = 0
    sentiment: float = Field(ge=-1, le=1, description="Sentiment score (-1 to 1)")
    key_phrases: List[str] = Field(default_factory=list)
    text_emotions: EmotionDistribution
    cognitive_distortions: List[CognitiveDistortion] = Field(default_factory=list)
    risk_keywords: List[RiskKeyword] = Field(default_factory=list)
    filler_words: Dict[str, int] = Field(default_factory=dict, description="Filler word counts")
    confidence: float = Field(ge=0, le=1)

    @property
    def primary_emotion(self) -> str:
        return self.text_emotions.primary()


# ---------------------------------------------------------------------------
# Fusion
# ---------------------------------------------------------------------------

class NoDiscrepancy(BaseModel):
    """Text and voice do not contradict each other."""
    type: Literal["none"] = "none"


class ModalityDiscrepancy(BaseModel):
    """Text and voice express conflicting affect."""
    type: Literal["suppression", "masking", "amplification"]
    text_emotion: str
    voice_emotion: str
    interpretation: str


Discrepancy = Annotated[Union[NoDiscrepancy, ModalityDiscrepancy], Field(discriminator="type")]


class ModalityContributions(BaseModel):
    text: float = Field(ge=0, le=1)
    voice: float = Field(ge=0, le=1)


class FusionResult(BaseModel):
    """Consolidated text + voice judgment."""
    vad: VAD
    emotion_probabilities: EmotionDistribution
    primary_emotion: str
    contributions: ModalityContributions
    modality_agreement: float = Field(ge=0, le=1)
    discrepancy: Discrepancy = Field(default_factory=NoDiscrepancy)
    confidence: float = Field(ge=0, le=1)
    recommendations: List[str] = Field(default_factory=list)

    @property
    def has_discrepancy(self) -> bool:
        return self.discrepancy.type != "none"


# ---------------------------------------------------------------------------
# Pipeline output
# ---------------------------------------------------------------------------

class ProcessingQuality(BaseModel):
    audio_quality: float = Field(ge=0, le=1)
    feature_reliability: float = Field(ge=0, le=1)
    overall_confidence: float = Field(ge=0, le=1)


class VoiceProcessingResult(BaseModel):
    """Complete output of one pipeline invocation."""
    id: str
    timestamp: datetime
    duration: float = Field(description="Audio duration in seconds after resampling")
    acoustic_features: AcousticFeatureSet
    prosody_features: ProsodyFeatureSet
    voice_emotion: VoiceEmotionEstimate
    text_analysis: Optional[TextAnalysis] = None
    fusion: Optional[FusionResult] = None
    quality: ProcessingQuality
