"""Acoustic feature extraction: ties framing, pitch, spectrum and voice quality together."""

import logging
from typing import List, Optional

import numpy as np
import librosa

from ..config import AdapterConfig
from ..models.schemas import (
    AcousticFeatureSet,
    EnergyFeatures,
    SampleBuffer,
    SignalQuality,
    TemporalFeatures,
)
from ..utils.stats import clamp, mean_std, safe_ratio
from .pitch import PitchTracker
from .preprocessing import Preprocessor
from .spectral import NUM_MEL_FILTERS, SpectralExtractor
from .voice_quality import VoiceQualityAnalyzer


logger = logging.getLogger(__name__)

ENERGY_FLOOR = 1e-10
CLIPPING_LEVEL = 0.99
SILENCE_DB = -40.0
MAX_SPEECH_RATE = 8.0  # syllables per second


class AcousticFeatureExtractor:
    """Extract the full acoustic feature set from a sample buffer."""

    def __init__(self, config: Optional[AdapterConfig] = None):
        self.config = config or AdapterConfig()
        self.preprocessor = Preprocessor(self.config)
        self.pitch_tracker = PitchTracker(self.config)
        self.spectral_extractor = SpectralExtractor(self.config)
        self.voice_quality_analyzer = VoiceQualityAnalyzer()

    def extract(self, buffer: SampleBuffer) -> AcousticFeatureSet:
        """
        Extract acoustic features.

        Args:
            buffer: Input samples; resampled to the configured rate if needed

        Returns:
            AcousticFeatureSet (zero-valued blocks for silent or too-short input)
        """
        buffer = self.preprocessor.resample(buffer)
        sr = buffer.sample_rate
        samples = buffer.samples

        frames = self.preprocessor.process(samples)

        contour = self.pitch_tracker.track(frames, sr)
        pitch = self.pitch_tracker.stats(contour)
        logger.debug(
            "%d frames, voiced ratio %.2f, mean F0 %.1f Hz",
            frames.shape[0], pitch.voiced_ratio, pitch.mean_f0,
        )

        energy_contour = self._energy_contour(frames)
        energy = self._energy_stats(energy_contour)

        return AcousticFeatureSet(
            pitch=pitch,
            voice_quality=self.voice_quality_analyzer.analyze(frames, contour),
            temporal=self._temporal_features(samples, contour, sr),
            spectral=self.spectral_extractor.extract(frames, sr),
            energy=energy,
            quality=self._assess_quality(samples, energy_contour),
        )

    def _energy_contour(self, frames: np.ndarray) -> np.ndarray:
        """Frame energy in dB."""
        if frames.shape[0] == 0:
            return np.zeros(0)
        return 10 * np.log10(np.mean(frames ** 2, axis=1) + ENERGY_FLOOR)

    def _energy_stats(self, contour: np.ndarray) -> EnergyFeatures:
        if len(contour) == 0:
            return EnergyFeatures()
        mean, std = mean_std(contour)
        return EnergyFeatures(
            mean_energy=mean,
            std_energy=std,
            range_energy=float(np.max(contour) - np.min(contour)),
            contour=contour.tolist(),
        )

    def _temporal_features(
        self,
        samples: np.ndarray,
        contour: np.ndarray,
        sample_rate: int,
    ) -> TemporalFeatures:
        """Speaking time, pauses and rate from the voicing contour."""
        duration = len(samples) / sample_rate
        total_frames = len(contour)
        if total_frames == 0:
            return TemporalFeatures(duration=duration)

        hop_seconds = self.config.hop_size_ms / 1000
        voiced_frames = int(np.sum(contour > 0))
        pause_runs = self._pause_runs(contour)

        pause_count = len(pause_runs)
        pause_duration = (total_frames - voiced_frames) * hop_seconds
        pause_lengths = [run * hop_seconds for run in pause_runs]
        _, pause_std = mean_std(pause_lengths)

        speaking_time = voiced_frames / total_frames * duration
        speech_rate = self._estimate_speech_rate(samples, sample_rate, duration)
        articulation_rate = safe_ratio(speech_rate, speaking_time / duration) if duration > 0 else 0.0

        return TemporalFeatures(
            speech_rate=speech_rate,
            articulation_rate=articulation_rate,
            duration=duration,
            speaking_time=speaking_time,
            pause_duration=pause_duration,
            pause_count=pause_count,
            mean_pause_duration=safe_ratio(pause_duration, pause_count),
            pause_duration_std=pause_std,
        )

    @staticmethod
    def _pause_runs(contour: np.ndarray) -> List[int]:
        """Lengths (in frames) of unvoiced runs that follow a voiced frame."""
        runs = []
        seen_voice = False
        current = 0
        for f0 in contour:
            if f0 > 0:
                if current > 0 and seen_voice:
                    runs.append(current)
                current = 0
                seen_voice = True
            else:
                current += 1
        if current > 0 and seen_voice:
            runs.append(current)
        return runs

    def _estimate_speech_rate(self, samples: np.ndarray, sample_rate: int, duration: float) -> float:
        """Syllables per second from onset detection, capped at a plausible maximum."""
        frame_len = self.config.frame_samples
        hop = self.config.hop_samples
        if duration <= 0 or len(samples) < frame_len or not np.any(samples):
            return 0.0

        onset_env = librosa.onset.onset_strength(
            y=np.array(samples, dtype=np.float64),
            sr=sample_rate,
            hop_length=hop,
            n_fft=frame_len,
            n_mels=NUM_MEL_FILTERS,
        )
        onsets = librosa.onset.onset_detect(
            onset_envelope=onset_env,
            sr=sample_rate,
            hop_length=hop,
            backtrack=False,
        )
        return min(len(onsets) / duration, MAX_SPEECH_RATE)

    def _assess_quality(self, samples: np.ndarray, energy_contour: np.ndarray) -> SignalQuality:
        """Signal quality from dynamic range, clipping and silence."""
        if len(energy_contour) == 0:
            return SignalQuality(
                clipping_ratio=self._clipping_ratio(samples),
            )

        max_energy = float(np.max(energy_contour))
        min_energy = float(np.min(energy_contour))
        dynamic_range = max_energy - min_energy

        clipping_ratio = self._clipping_ratio(samples)
        silence_ratio = float(np.mean(energy_contour < SILENCE_DB))

        signal_quality = clamp(
            (dynamic_range / 60) * (1 - clipping_ratio) * (1 - silence_ratio * 0.5),
            0.0,
            1.0,
        )
        return SignalQuality(
            signal_quality=signal_quality,
            noise_level=min_energy,
            clipping_ratio=clipping_ratio,
            silence_ratio=silence_ratio,
        )

    @staticmethod
    def _clipping_ratio(samples: np.ndarray) -> float:
        if len(samples) == 0:
            return 0.0
        return float(np.mean(np.abs(samples) > CLIPPING_LEVEL))

    def feature_reliability(self, features: AcousticFeatureSet) -> float:
        """Mean of voiced ratio, signal quality and normalized energy range."""
        energy_range = min(1.0, features.energy.range_energy / 30)
        return (features.pitch.voiced_ratio + features.quality.signal_quality + energy_range) / 3
