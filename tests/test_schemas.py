"""Tests for data schemas."""

import numpy as np
import pytest
from pydantic import ValidationError


class TestSchemas:
    """Tests for Pydantic schemas."""

    def test_sample_buffer_sanitizes(self):
        """NaN/inf are replaced, values clipped, array is read-only."""
        from voice_biomarkers.models.schemas import SampleBuffer

        buffer = SampleBuffer(samples=[0.5, np.nan, np.inf, -np.inf, 2.0], sample_rate=16000)
        assert buffer.samples.tolist() == [0.5, 0.0, 1.0, -1.0, 1.0]
        assert not buffer.samples.flags.writeable
        assert len(buffer) == 5
        assert buffer.duration == pytest.approx(5 / 16000)

    def test_sample_buffer_rate(self):
        """Sample rate must be positive."""
        from voice_biomarkers.models.schemas import SampleBuffer

        with pytest.raises(ValidationError):
            SampleBuffer(samples=[0.0], sample_rate=0)

    def test_emotion_distribution_must_sum_to_one(self):
        """Distributions that do not sum to 1 are rejected."""
        from voice_biomarkers.models.schemas import EmotionDistribution

        with pytest.raises(ValidationError):
            EmotionDistribution({"joy": 0.5, "sadness": 0.2})
        with pytest.raises(ValidationError):
            EmotionDistribution({"joy": 1.5, "sadness": -0.5})
        with pytest.raises(ValidationError):
            EmotionDistribution({})

    def test_emotion_distribution_from_scores(self):
        """Scores are normalized; all-zero scores fall back to neutral."""
        from voice_biomarkers.models.schemas import EmotionDistribution

        dist = EmotionDistribution.from_scores({"joy": 3, "calm": 1})
        assert dist["joy"] == pytest.approx(0.75)
        assert dist.get("anger") == 0.0
        assert EmotionDistribution.from_scores({}).primary() == "neutral"

    def test_primary_first_key_wins_ties(self):
        """Ties resolve to the first key."""
        from voice_biomarkers.models.schemas import EmotionDistribution

        dist = EmotionDistribution({"anger": 0.5, "anxiety": 0.5})
        assert dist.primary() == "anger"

    def test_vad_bounds(self):
        """VAD fields are range-checked."""
        from voice_biomarkers.models.schemas import VAD

        VAD(valence=-1, arousal=1, dominance=0, confidence=1)
        with pytest.raises(ValidationError):
            VAD(valence=1.5, arousal=0, dominance=0.5, confidence=0.5)
        with pytest.raises(ValidationError):
            VAD(valence=0, arousal=0, dominance=-0.1, confidence=0.5)

    def test_discrepancy_union(self):
        """Discrepancy is parsed by its type tag."""
        from voice_biomarkers.models.schemas import FusionResult, ModalityDiscrepancy, NoDiscrepancy

        base = {
            "vad": {"valence": 0, "arousal": 0, "dominance": 0.5, "confidence": 0.5},
            "emotion_probabilities": {"neutral": 1.0},
            "primary_emotion": "neutral",
            "contributions": {"text": 0.6, "voice": 0.4},
            "modality_agreement": 0.2,
            "confidence": 0.5,
        }
        plain = FusionResult.model_validate(base)
        assert isinstance(plain.discrepancy, NoDiscrepancy)
        assert not plain.has_discrepancy

        masked = FusionResult.model_validate({
            **base,
            "discrepancy": {
                "type": "masking",
                "text_emotion": "sadness",
                "voice_emotion": "joy",
                "interpretation": "masked",
            },
        })
        assert isinstance(masked.discrepancy, ModalityDiscrepancy)
        assert masked.has_discrepancy

        with pytest.raises(ValidationError):
            FusionResult.model_validate({**base, "discrepancy": {"type": "masking"}})
