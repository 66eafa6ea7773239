"""Magnitude spectrum, Mel filterbank, MFCC and spectral shape features."""

from typing import Optional

import numpy as np
import librosa

from ..config import AdapterConfig
from ..models.schemas import SpectralFeatures


NUM_MEL_FILTERS = 26
LOG_FLOOR = 1e-10


def magnitude_spectrum(frames: np.ndarray) -> np.ndarray:
    """
    Magnitude of the DFT for bins k < N/2 of every frame.

    Uses the FFT; magnitudes match the direct O(N^2) transform.
    """
    if frames.shape[0] == 0:
        return np.zeros((0, 0))
    n_bins = (frames.shape[1] + 1) // 2
    return np.abs(np.fft.rfft(frames, axis=1))[:, :n_bins]


def mel_filterbank(n_bins: int, sample_rate: int, num_filters: int = NUM_MEL_FILTERS) -> np.ndarray:
    """
    Triangular filters evenly spaced on the HTK Mel scale from 0 Hz to Nyquist.

    Returns a (num_filters, n_bins) weight matrix. Band edges are truncated
    to whole bins.
    """
    f_max = sample_rate / 2
    mel_max = float(librosa.hz_to_mel(f_max, htk=True))
    mel_points = mel_max * np.arange(num_filters + 2) / (num_filters + 1)
    hz_points = librosa.mel_to_hz(mel_points, htk=True)
    bin_points = np.floor(hz_points / f_max * n_bins).astype(int)

    fb = np.zeros((num_filters, n_bins))
    for i in range(num_filters):
        low, center, high = bin_points[i], bin_points[i + 1], bin_points[i + 2]
        for k in range(low, min(high, n_bins)):
            if k < center:
                weight = (k - low) / (center - low)
            else:
                weight = (high - k) / (high - center)
            fb[i, k] = max(0.0, weight)
    return fb


def dct_matrix(num_inputs: int, num_coeffs: int) -> np.ndarray:
    """Type-II DCT basis scaled by sqrt(2 / N), shape (num_coeffs, num_inputs)."""
    k = np.arange(num_coeffs)[:, None]
    n = np.arange(num_inputs)[None, :]
    return np.cos(np.pi * k * (n + 0.5) / num_inputs) * np.sqrt(2.0 / num_inputs)


class SpectralExtractor:
    """Extract MFCC statistics and spectral shape from windowed frames."""

    def __init__(self, config: Optional[AdapterConfig] = None):
        self.config = config or AdapterConfig()

    def mfcc(self, spectrum: np.ndarray, sample_rate: int) -> np.ndarray:
        """MFCC matrix (n_frames, num_mfcc) from magnitude spectra."""
        num_coeffs = self.config.num_mfcc
        if spectrum.shape[0] == 0:
            return np.zeros((0, num_coeffs))
        power = spectrum ** 2
        fb = mel_filterbank(spectrum.shape[1], sample_rate, NUM_MEL_FILTERS)
        log_mel = np.log(power @ fb.T + LOG_FLOOR)
        return log_mel @ dct_matrix(NUM_MEL_FILTERS, num_coeffs).T

    def extract(self, frames: np.ndarray, sample_rate: int) -> SpectralFeatures:
        """
        Extract spectral features.

        Args:
            frames: Windowed frames, shape (n_frames, frame_samples)
            sample_rate: Sample rate of the frames

        Returns:
            SpectralFeatures; zeros when there are no frames
        """
        num_coeffs = self.config.num_mfcc
        spectrum = magnitude_spectrum(frames)
        if spectrum.shape[0] == 0:
            return SpectralFeatures(mfcc_mean=[0.0] * num_coeffs, mfcc_std=[0.0] * num_coeffs)

        mfccs = self.mfcc(spectrum, sample_rate)

        n_bins = spectrum.shape[1]
        freqs = np.arange(n_bins) * sample_rate / (2 * n_bins)
        totals = spectrum.sum(axis=1) + LOG_FLOOR
        centroids = (spectrum * freqs).sum(axis=1) / totals
        centroid = float(np.mean(centroids))

        if spectrum.shape[0] > 1:
            flux = float(np.mean(np.sqrt(np.sum(np.diff(spectrum, axis=0) ** 2, axis=1))))
        else:
            flux = 0.0

        return SpectralFeatures(
            mfcc_mean=np.mean(mfccs, axis=0).tolist(),
            mfcc_std=np.std(mfccs, axis=0).tolist(),
            spectral_centroid=centroid,
            spectral_flux=flux,
            spectral_rolloff=centroid * 2,
        )
