"""Shared fixtures: synthetic signals and hand-built estimates."""

import numpy as np
import pytest


SAMPLE_RATE = 16000


@pytest.fixture
def sample_rate():
    return SAMPLE_RATE


@pytest.fixture
def silence():
    """One second of digital silence."""
    return np.zeros(SAMPLE_RATE)


@pytest.fixture
def sine_250():
    """0.5 s, 250 Hz sine at amplitude 0.5."""
    t = np.arange(int(SAMPLE_RATE * 0.5)) / SAMPLE_RATE
    return 0.5 * np.sin(2 * np.pi * 250 * t)


@pytest.fixture
def noise():
    """One second of seeded white noise."""
    rng = np.random.default_rng(42)
    return np.clip(rng.normal(0, 0.3, SAMPLE_RATE), -1, 1)


@pytest.fixture
def short_buffer():
    """Fewer samples than one 25 ms frame."""
    return np.full(200, 0.1)


@pytest.fixture
def config():
    from voice_biomarkers.config import AdapterConfig
    return AdapterConfig(sample_rate=SAMPLE_RATE, language="en", enable_whisper=False)


@pytest.fixture
def make_voice():
    """Factory for voice-only estimates with a given valence and emotion."""
    from voice_biomarkers.models.schemas import (
        VAD,
        AnxietyIndicators,
        DepressionIndicators,
        EmotionDistribution,
        StressIndicators,
        VoiceEmotionEstimate,
    )

    def _make(valence=0.0, emotion="neutral", arousal=0.0, depression=0.1, anxiety=0.1, stress=0.1):
        return VoiceEmotionEstimate(
            primary_emotion=emotion,
            emotion_probabilities=EmotionDistribution({emotion: 1.0}),
            vad=VAD(valence=valence, arousal=arousal, dominance=0.5, confidence=0.8),
            depression_indicators=DepressionIndicators(
                flat_affect=depression, psychomotor_retardation=depression,
                low_energy=depression, score=depression, confidence=0.8,
            ),
            anxiety_indicators=AnxietyIndicators(
                high_pitch=anxiety, fast_speech=anxiety, tremor=anxiety,
                hesitation=anxiety, score=anxiety, confidence=0.8,
            ),
            stress_indicators=StressIndicators(
                voice_instability=stress, reduced_clarity=stress,
                breathing_irregularity=stress, score=stress, confidence=0.8,
            ),
        )

    return _make


@pytest.fixture
def make_text():
    """Factory for text analyses with a given sentiment and emotion."""
    from voice_biomarkers.models.schemas import EmotionDistribution, TextAnalysis

    def _make(sentiment=0.0, emotion="neutral", risk_keywords=None, distortions=None, language="en"):
        return TextAnalysis(
            text="synthetic",
            language=language,
            word_count=1,
            sentiment=sentiment,
            text_emotions=EmotionDistribution({emotion: 1.0}),
            risk_keywords=risk_keywords or [],
            cognitive_distortions=distortions or [],
            confidence=0.7,
        )

    return _make
