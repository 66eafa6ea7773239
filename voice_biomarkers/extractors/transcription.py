"""Speech-to-text transcription using Whisper (HuggingFace transformers)."""

import logging
from typing import Optional

import numpy as np

from ..config import WhisperConfig
from ..exceptions import TranscriptionUnavailableError
from ..utils.device import resolve_device


logger = logging.getLogger(__name__)

WHISPER_SAMPLE_RATE = 16000


class WhisperTranscriber:
    """Transcribe audio with a Whisper checkpoint via the transformers ASR pipeline."""

    def __init__(self, config: Optional[WhisperConfig] = None, language: Optional[str] = None):
        self.config = config or WhisperConfig()
        # adapter language hint, used when the whisper config does not pin one
        self.language = self.config.language or (language if language in ("ru", "en") else None)
        self._pipe = None
        self._device: Optional[str] = None

    @property
    def model(self):
        """Lazy load the ASR pipeline."""
        if self._pipe is None:
            try:
                import torch
                from transformers import pipeline
            except ImportError as e:
                raise TranscriptionUnavailableError(
                    "Transcription needs the 'whisper' extra (torch, transformers)"
                ) from e

            self._device = resolve_device(self.config.device)
            torch_dtype = torch.float16 if self._device.startswith("cuda") else torch.float32
            logger.info("Loading Whisper model '%s' on device: %s", self.config.model_name, self._device)

            try:
                self._pipe = pipeline(
                    "automatic-speech-recognition",
                    model=self.config.model_name,
                    torch_dtype=torch_dtype,
                    device=self._device,
                )
            except Exception as e:
                logger.warning("Whisper model load failed: %s", e)
                raise TranscriptionUnavailableError(
                    f"Could not load Whisper model '{self.config.model_name}': {e}"
                ) from e

            logger.info("Whisper model loaded on %s", self._device)
        return self._pipe

    def transcribe(self, audio: np.ndarray, sample_rate: int) -> str:
        """
        Transcribe audio to text.

        Args:
            audio: Mono waveform
            sample_rate: Sample rate of the audio

        Returns:
            Transcript text (may be empty)
        """
        audio = np.asarray(audio, dtype=np.float32)
        if sample_rate != WHISPER_SAMPLE_RATE:
            import librosa
            audio = librosa.resample(audio, orig_sr=sample_rate, target_sr=WHISPER_SAMPLE_RATE)

        generate_kwargs = {}
        if self.language:
            generate_kwargs["language"] = self.language

        pipe = self.model
        try:
            result = pipe(
                {"raw": audio, "sampling_rate": WHISPER_SAMPLE_RATE},
                generate_kwargs=generate_kwargs,
            )
        except Exception as e:
            logger.warning("Transcription failed: %s", e)
            raise TranscriptionUnavailableError(f"Transcription failed: {e}") from e

        text = result.get("text", "").strip()
        logger.debug("Transcribed %.1f s of audio into %d words", len(audio) / WHISPER_SAMPLE_RATE, len(text.split()))
        return text
