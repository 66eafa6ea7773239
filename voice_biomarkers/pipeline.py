"""Voice biomarker pipeline orchestrator."""

import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Sequence, Union

from .config import AdapterConfig, load_config
from .exceptions import TranscriptionDisabledError, UnsupportedInputError
from .extractors import (
    AcousticFeatureExtractor,
    EmotionMapper,
    FusionEngine,
    LexiconTextAnalyzer,
    ProsodyAnalyzer,
    StreamingAccumulator,
    WhisperTranscriber,
    adapt_fusion_weights,
)
from .models.schemas import (
    AcousticFeatureSet,
    FusionResult,
    ProcessingQuality,
    ProsodyFeatureSet,
    SampleBuffer,
    TextAnalysis,
    VoiceEmotionEstimate,
    VoiceProcessingResult,
)
from .utils.audio import AudioLike, as_sample_buffer
from .utils.stats import clamp


logger = logging.getLogger(__name__)


class VoiceBiomarkerPipeline:
    """
    Voice biomarker extraction with optional text fusion.

    Processes sample buffers through:
    1. Preprocessing (resample, pre-emphasis, framing, windowing)
    2. Acoustic features (pitch, spectrum, voice quality, energy, timing)
    3. Prosody analysis
    4. Voice emotion and clinical indicators
    5. Text analysis and fusion when a transcript is available

    The transcriber and text analyzer can be injected; by default a
    Whisper transcriber and the lexicon analyzer are built lazily.
    """

    def __init__(
        self,
        config: Optional[AdapterConfig] = None,
        transcriber=None,
        text_analyzer=None,
    ):
        self.config = config or load_config()

        self._transcriber = transcriber
        self._text_analyzer = text_analyzer
        self._acoustic_extractor: Optional[AcousticFeatureExtractor] = None
        self._prosody_analyzer: Optional[ProsodyAnalyzer] = None
        self._emotion_mapper: Optional[EmotionMapper] = None
        self._fusion_engine: Optional[FusionEngine] = None
        self._accumulator: Optional[StreamingAccumulator] = None

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    @property
    def transcriber(self):
        if self._transcriber is None:
            self._transcriber = WhisperTranscriber(self.config.whisper, language=self.config.language)
        return self._transcriber

    @property
    def text_analyzer(self):
        if self._text_analyzer is None:
            self._text_analyzer = LexiconTextAnalyzer(self.config.language)
        return self._text_analyzer

    @property
    def acoustic_extractor(self) -> AcousticFeatureExtractor:
        if self._acoustic_extractor is None:
            self._acoustic_extractor = AcousticFeatureExtractor(self.config)
        return self._acoustic_extractor

    @property
    def prosody_analyzer(self) -> ProsodyAnalyzer:
        if self._prosody_analyzer is None:
            self._prosody_analyzer = ProsodyAnalyzer()
        return self._prosody_analyzer

    @property
    def emotion_mapper(self) -> EmotionMapper:
        if self._emotion_mapper is None:
            self._emotion_mapper = EmotionMapper()
        return self._emotion_mapper

    @property
    def fusion_engine(self) -> FusionEngine:
        if self._fusion_engine is None:
            self._fusion_engine = FusionEngine(self.config)
        return self._fusion_engine

    @property
    def accumulator(self) -> StreamingAccumulator:
        if self._accumulator is None:
            self._accumulator = StreamingAccumulator(self.config, self._estimate_voice)
        return self._accumulator

    # ------------------------------------------------------------------
    # Processing
    # ------------------------------------------------------------------

    def process_audio(
        self,
        samples: AudioLike,
        sample_rate: Optional[int] = None,
        transcript: Optional[str] = None,
    ) -> VoiceProcessingResult:
        """
        Process a sample buffer through the complete pipeline.

        Args:
            samples: Mono samples in [-1, 1] (or a SampleBuffer)
            sample_rate: Rate of the samples; defaults to the configured rate
            transcript: Optional transcript; enables text analysis and fusion

        Returns:
            VoiceProcessingResult (fusion fields are None without a transcript)
        """
        buffer = as_sample_buffer(samples, sample_rate or self.config.sample_rate)

        acoustic = self.extract_acoustic_features(buffer)
        prosody = self.extract_prosody_features(acoustic, transcript)
        voice_emotion = self.map_to_emotion(acoustic, prosody)

        text_analysis = None
        fusion = None
        if transcript:
            text_analysis = self.analyze_text(transcript)
            fusion = self.fuse_modalities(voice_emotion, text_analysis)

        vad = fusion.vad if fusion is not None else voice_emotion.vad
        quality = ProcessingQuality(
            audio_quality=acoustic.quality.signal_quality,
            feature_reliability=clamp(self.acoustic_extractor.feature_reliability(acoustic), 0, 1),
            overall_confidence=vad.confidence,
        )

        return VoiceProcessingResult(
            id=uuid.uuid4().hex,
            timestamp=datetime.now(timezone.utc),
            duration=acoustic.temporal.duration,
            acoustic_features=acoustic,
            prosody_features=prosody,
            voice_emotion=voice_emotion,
            text_analysis=text_analysis,
            fusion=fusion,
            quality=quality,
        )

    def process_file(self, path: Union[str, Path]) -> VoiceProcessingResult:
        """File input is not supported; decode the audio and call process_audio."""
        raise UnsupportedInputError(
            f"File input is not supported ({path}); pass decoded samples to process_audio()"
        )

    def process_with_transcription(
        self,
        samples: AudioLike,
        existing_transcript: Optional[str] = None,
        sample_rate: Optional[int] = None,
    ) -> VoiceProcessingResult:
        """
        Process audio, transcribing it first when no transcript is given.

        With transcription disabled and no transcript, the result is voice-only.

        Raises:
            TranscriptionUnavailableError: the transcription backend failed
        """
        buffer = as_sample_buffer(samples, sample_rate or self.config.sample_rate)
        if existing_transcript:
            return self.process_audio(buffer, transcript=existing_transcript)
        if not self.config.enable_whisper:
            logger.debug("No transcript and transcription disabled; voice-only result")
            return self.process_audio(buffer)
        return self.process_audio(buffer, transcript=self.transcribe(buffer))

    def extract_acoustic_features(self, buffer: SampleBuffer) -> AcousticFeatureSet:
        return self.acoustic_extractor.extract(buffer)

    def extract_prosody_features(
        self,
        acoustic: AcousticFeatureSet,
        transcript: Optional[str] = None,
    ) -> ProsodyFeatureSet:
        return self.prosody_analyzer.analyze(acoustic, transcript)

    def map_to_emotion(
        self,
        acoustic: AcousticFeatureSet,
        prosody: ProsodyFeatureSet,
    ) -> VoiceEmotionEstimate:
        return self.emotion_mapper.map(acoustic, prosody)

    def fuse_modalities(self, voice: VoiceEmotionEstimate, text: TextAnalysis) -> FusionResult:
        return self.fusion_engine.fuse(voice, text)

    def transcribe(self, samples: AudioLike, sample_rate: Optional[int] = None) -> str:
        """Transcribe through the configured backend; fails immediately when disabled."""
        if not self.config.enable_whisper:
            raise TranscriptionDisabledError("Transcription is disabled (enable_whisper=False)")
        buffer = as_sample_buffer(samples, sample_rate or self.config.sample_rate)
        return self.transcriber.transcribe(buffer.samples, buffer.sample_rate)

    def analyze_text(self, text: str) -> TextAnalysis:
        return self.text_analyzer.analyze(text)

    def _estimate_voice(self, buffer: SampleBuffer) -> VoiceEmotionEstimate:
        acoustic = self.extract_acoustic_features(buffer)
        prosody = self.extract_prosody_features(acoustic)
        return self.map_to_emotion(acoustic, prosody)

    # ------------------------------------------------------------------
    # Streaming
    # ------------------------------------------------------------------

    def add_realtime_chunk(
        self,
        chunk: AudioLike,
        sample_rate: Optional[int] = None,
    ) -> Optional[VoiceEmotionEstimate]:
        """Buffer a live chunk; returns the refreshed estimate once enough chunks arrived."""
        return self.accumulator.add_chunk(chunk, sample_rate)

    def get_realtime_estimate(self) -> Optional[VoiceEmotionEstimate]:
        return self.accumulator.estimate

    def clear_realtime_buffer(self):
        self.accumulator.clear()

    # ------------------------------------------------------------------
    # Downstream views and configuration
    # ------------------------------------------------------------------

    @staticmethod
    def to_state_observation(result: VoiceProcessingResult) -> List[float]:
        """
        Collapse a result into [valence, arousal, dominance, 1 - depression, 1 - stress].

        The fused VAD is used when fusion is available; clinical indicators
        always come from the voice estimate.
        """
        vad = result.fusion.vad if result.fusion is not None else result.voice_emotion.vad
        voice = result.voice_emotion
        return [
            vad.valence,
            vad.arousal,
            vad.dominance,
            1 - voice.depression_indicators.score,
            1 - voice.stress_indicators.score,
        ]

    def get_config(self) -> AdapterConfig:
        """Copy of the active configuration."""
        return self.config.model_copy(deep=True)

    def reconfigure(self, **overrides) -> AdapterConfig:
        """
        Install a new validated config built from the current one plus overrides.

        Raises pydantic.ValidationError (leaving the current config intact)
        when the overrides are invalid. Cached components and the streaming
        buffer are rebuilt on next use.
        """
        data = self.config.model_dump()
        data.update(overrides)
        self._install_config(AdapterConfig(**data))
        return self.get_config()

    def adapt_fusion_weights(
        self,
        predictions: Sequence[FusionResult],
        actuals: Sequence[VoiceEmotionEstimate],
    ) -> AdapterConfig:
        """Tune fusion weights from paired outcomes and install the result."""
        adapted = adapt_fusion_weights(self.config, predictions, actuals)
        if adapted is not self.config:
            logger.info("Fusion weights adapted to text=%.3f voice=%.3f", *adapted.fusion_weights)
            self.config = adapted
            self._fusion_engine = None
        return self.get_config()

    def _install_config(self, config: AdapterConfig):
        self.config = config
        self._acoustic_extractor = None
        self._fusion_engine = None
        self._accumulator = None
        if isinstance(self._text_analyzer, LexiconTextAnalyzer):
            self._text_analyzer = None
        if isinstance(self._transcriber, WhisperTranscriber):
            self._transcriber = None
