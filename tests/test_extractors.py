"""Tests for feature extractors."""

import pytest
import numpy as np


class TestPreprocessor:
    """Tests for framing and pre-emphasis."""

    @pytest.mark.parametrize("n", [400, 401, 560, 16000, 12345])
    def test_frame_count(self, n):
        """Frame count is floor((N - frame) / hop) + 1."""
        from voice_biomarkers.extractors.preprocessing import frame_count, frame_signal

        assert frame_count(n, 400, 160) == (n - 400) // 160 + 1
        assert frame_signal(np.zeros(n), 400, 160).shape == (frame_count(n, 400, 160), 400)

    def test_short_buffer_has_no_frames(self, short_buffer, config):
        """A buffer shorter than one frame yields an empty frame set."""
        from voice_biomarkers.extractors.preprocessing import Preprocessor

        frames = Preprocessor(config).process(short_buffer)
        assert frames.shape[0] == 0

    def test_pre_emphasis(self):
        """y[0] = x[0], y[n] = x[n] - 0.97 x[n-1]."""
        from voice_biomarkers.extractors.preprocessing import pre_emphasis

        out = pre_emphasis(np.array([1.0, 1.0, 0.0]))
        assert out.tolist() == pytest.approx([1.0, 0.03, -0.97])

    def test_resample_length(self, config):
        """Resampling 8 kHz to 16 kHz doubles the length."""
        from voice_biomarkers.extractors.preprocessing import Preprocessor
        from voice_biomarkers.models.schemas import SampleBuffer

        buffer = SampleBuffer(samples=np.zeros(8000), sample_rate=8000)
        resampled = Preprocessor(config).resample(buffer)
        assert resampled.sample_rate == 16000
        assert len(resampled) == 16000


class TestPitchTracker:
    """Tests for autocorrelation pitch tracking."""

    def test_sine_pitch(self, sine_250, config):
        """A 250 Hz sine is tracked within 5%."""
        from voice_biomarkers.extractors.acoustic import AcousticFeatureExtractor
        from voice_biomarkers.models.schemas import SampleBuffer

        features = AcousticFeatureExtractor(config).extract(SampleBuffer(samples=sine_250, sample_rate=16000))
        assert features.pitch.mean_f0 == pytest.approx(250, rel=0.05)
        assert features.pitch.voiced_ratio > 0.8

    def test_silence_is_unvoiced(self, silence, config):
        """Silence has no voiced frames and low signal quality."""
        from voice_biomarkers.extractors.acoustic import AcousticFeatureExtractor
        from voice_biomarkers.models.schemas import SampleBuffer

        features = AcousticFeatureExtractor(config).extract(SampleBuffer(samples=silence, sample_rate=16000))
        assert features.pitch.voiced_ratio == 0
        assert features.pitch.mean_f0 == 0
        assert features.quality.signal_quality <= 0.3
        assert features.voice_quality.jitter_local == 0

    def test_empty_frames(self, config):
        """No frames gives an empty contour and zeroed stats."""
        from voice_biomarkers.extractors.pitch import PitchTracker

        tracker = PitchTracker(config)
        contour = tracker.track(np.zeros((0, 400)), 16000)
        stats = tracker.stats(contour)
        assert len(contour) == 0
        assert stats.mean_f0 == 0
        assert stats.voiced_ratio == 0


class TestSpectralExtractor:
    """Tests for MFCC and spectral shape."""

    @pytest.mark.parametrize("num_mfcc", [1, 13, 20])
    def test_mfcc_length(self, sine_250, num_mfcc):
        """MFCC statistics have num_mfcc entries."""
        from voice_biomarkers.config import AdapterConfig
        from voice_biomarkers.extractors.preprocessing import Preprocessor
        from voice_biomarkers.extractors.spectral import SpectralExtractor

        config = AdapterConfig(sample_rate=16000, num_mfcc=num_mfcc)
        frames = Preprocessor(config).process(sine_250)
        spectral = SpectralExtractor(config).extract(frames, 16000)
        assert len(spectral.mfcc_mean) == num_mfcc
        assert len(spectral.mfcc_std) == num_mfcc
        assert spectral.spectral_rolloff == pytest.approx(2 * spectral.spectral_centroid)

    def test_no_frames(self, config):
        """Empty frame sets produce zero MFCCs and zero flux."""
        from voice_biomarkers.extractors.spectral import SpectralExtractor

        spectral = SpectralExtractor(config).extract(np.zeros((0, 400)), 16000)
        assert spectral.mfcc_mean == [0.0] * 13
        assert spectral.spectral_flux == 0

    def test_filterbank_shape(self):
        """26 triangular filters over the positive-frequency bins."""
        from voice_biomarkers.extractors.spectral import mel_filterbank

        fb = mel_filterbank(200, 16000)
        assert fb.shape == (26, 200)
        assert np.all(fb >= 0)


class TestAcousticFeatureExtractor:
    """Tests for the assembled feature set."""

    def test_short_buffer_is_well_formed(self, short_buffer, config):
        """Too-short input returns zeroed features without raising."""
        from voice_biomarkers.extractors.acoustic import AcousticFeatureExtractor
        from voice_biomarkers.models.schemas import SampleBuffer

        features = AcousticFeatureExtractor(config).extract(SampleBuffer(samples=short_buffer, sample_rate=16000))
        assert features.frame_count == 0
        assert features.pitch.mean_f0 == 0
        assert features.energy.mean_energy == 0
        assert features.temporal.speech_rate == 0
        assert features.temporal.duration == pytest.approx(200 / 16000)

    def test_energy_contour_matches_frames(self, noise, config):
        """One energy value per frame."""
        from voice_biomarkers.extractors.acoustic import AcousticFeatureExtractor
        from voice_biomarkers.models.schemas import SampleBuffer

        features = AcousticFeatureExtractor(config).extract(SampleBuffer(samples=noise, sample_rate=16000))
        assert len(features.energy.contour) == features.frame_count == 98
        assert 0 <= features.quality.signal_quality <= 1

    def test_clipping_ratio(self, config):
        """Full-scale square wave is counted as clipped."""
        from voice_biomarkers.extractors.acoustic import AcousticFeatureExtractor
        from voice_biomarkers.models.schemas import SampleBuffer

        square = np.sign(np.sin(2 * np.pi * 200 * np.arange(16000) / 16000))
        square[square == 0] = 1
        features = AcousticFeatureExtractor(config).extract(SampleBuffer(samples=square, sample_rate=16000))
        assert features.quality.clipping_ratio == pytest.approx(1.0)


class TestProsodyAnalyzer:
    """Tests for prosody patterns."""

    def test_sine_prosody(self, sine_250, config):
        """A steady tone is monotone and its indicators stay in range."""
        from voice_biomarkers.extractors.acoustic import AcousticFeatureExtractor
        from voice_biomarkers.extractors.prosody import ProsodyAnalyzer
        from voice_biomarkers.models.schemas import SampleBuffer

        features = AcousticFeatureExtractor(config).extract(SampleBuffer(samples=sine_250, sample_rate=16000))
        prosody = ProsodyAnalyzer().analyze(features)
        assert prosody.pitch_pattern == "monotone"
        assert -1 <= prosody.emotional_indicators.arousal_level <= 1
        assert prosody.pause_patterns.filled_pauses == 0
        assert prosody.stress_patterns == []

    def test_filled_pauses_from_transcript(self, silence, config):
        """Filler words in the transcript are counted."""
        from voice_biomarkers.extractors.acoustic import AcousticFeatureExtractor
        from voice_biomarkers.extractors.prosody import ProsodyAnalyzer
        from voice_biomarkers.models.schemas import SampleBuffer

        features = AcousticFeatureExtractor(config).extract(SampleBuffer(samples=silence, sample_rate=16000))
        prosody = ProsodyAnalyzer().analyze(features, transcript="um I think um it was fine")
        assert prosody.pause_patterns.filled_pauses == 2


class TestEmotionMapper:
    """Tests for the rule-based voice emotion mapping."""

    def test_quadrants(self):
        """Quadrant rule picks the expected emotion families."""
        from voice_biomarkers.extractors.emotion import quadrant_scores

        assert set(quadrant_scores(0.5, 0.5)) == {"joy", "excitement"}
        assert set(quadrant_scores(0.5, -0.5)) == {"anger", "anxiety"}
        assert set(quadrant_scores(-0.5, -0.5)) == {"sadness", "depression"}
        assert set(quadrant_scores(-0.5, 0.5)) == {"calm", "contentment"}
        assert set(quadrant_scores(0.0, 0.9)) == {"neutral"}

    @pytest.mark.parametrize("signal", ["silence", "sine_250", "noise", "short_buffer"])
    def test_vad_ranges(self, signal, config, request):
        """VAD and indicators stay in range for any input."""
        from voice_biomarkers.extractors.acoustic import AcousticFeatureExtractor
        from voice_biomarkers.extractors.emotion import EmotionMapper
        from voice_biomarkers.extractors.prosody import ProsodyAnalyzer
        from voice_biomarkers.models.schemas import SampleBuffer

        samples = request.getfixturevalue(signal)
        features = AcousticFeatureExtractor(config).extract(SampleBuffer(samples=samples, sample_rate=16000))
        estimate = EmotionMapper().map(features, ProsodyAnalyzer().analyze(features))

        assert -1 <= estimate.vad.valence <= 1
        assert -1 <= estimate.vad.arousal <= 1
        assert 0 <= estimate.vad.dominance <= 1
        assert 0 <= estimate.vad.confidence <= 1
        assert sum(estimate.emotion_probabilities.root.values()) == pytest.approx(1.0)
        assert estimate.primary_emotion in estimate.emotion_probabilities
