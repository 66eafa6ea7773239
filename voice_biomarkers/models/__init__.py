"""Data models for the voice biomarker pipeline."""

from .schemas import (
    SampleBuffer,
    PitchStats,
    VoiceQualityMetrics,
    TemporalFeatures,
    SpectralFeatures,
    EnergyFeatures,
    SignalQuality,
    AcousticFeatureSet,
    EmotionalIndicators,
    PausePatterns,
    ProsodyFeatureSet,
    VAD,
    EmotionDistribution,
    DepressionIndicators,
    AnxietyIndicators,
    StressIndicators,
    VoiceEmotionEstimate,
    RiskKeyword,
    CognitiveDistortion,
    TextAnalysis,
    NoDiscrepancy,
    ModalityDiscrepancy,
    ModalityContributions,
    FusionResult,
    ProcessingQuality,
    VoiceProcessingResult,
)

__all__ = [
    "SampleBuffer",
    "PitchStats",
    "VoiceQualityMetrics",
    "TemporalFeatures",
    "SpectralFeatures",
    "EnergyFeatures",
    "SignalQuality",
    "AcousticFeatureSet",
    "EmotionalIndicators",
    "PausePatterns",
    "ProsodyFeatureSet",
    "VAD",
    "EmotionDistribution",
    "DepressionIndicators",
    "AnxietyIndicators",
    "StressIndicators",
    "VoiceEmotionEstimate",
    "RiskKeyword",
    "CognitiveDistortion",
    "TextAnalysis",
    "NoDiscrepancy",
    "ModalityDiscrepancy",
    "ModalityContributions",
    "FusionResult",
    "ProcessingQuality",
    "VoiceProcessingResult",
]
