"""Feature extraction modules."""

from .preprocessing import Preprocessor
from .pitch import PitchTracker
from .spectral import SpectralExtractor
from .voice_quality import VoiceQualityAnalyzer
from .acoustic import AcousticFeatureExtractor
from .prosody import ProsodyAnalyzer
from .emotion import EmotionMapper
from .emotion_fusion import FusionEngine, adapt_fusion_weights
from .streaming import StreamingAccumulator
from .text_analysis import LexiconTextAnalyzer
from .transcription import WhisperTranscriber

__all__ = [
    "Preprocessor",
    "PitchTracker",
    "SpectralExtractor",
    "VoiceQualityAnalyzer",
    "AcousticFeatureExtractor",
    "ProsodyAnalyzer",
    "EmotionMapper",
    "FusionEngine",
    "adapt_fusion_weights",
    "StreamingAccumulator",
    "LexiconTextAnalyzer",
    "WhisperTranscriber",
]
