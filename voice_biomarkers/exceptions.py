"""Errors raised by the voice biomarker pipeline."""


class VoiceBiomarkerError(Exception):
    """Base class for pipeline errors."""


class TranscriptionDisabledError(VoiceBiomarkerError):
    """Transcription was requested while it is disabled in the config."""


class TranscriptionUnavailableError(VoiceBiomarkerError):
    """The transcription backend is missing or failed."""


class UnsupportedInputError(VoiceBiomarkerError):
    """The input kind is not supported (e.g. file paths)."""
