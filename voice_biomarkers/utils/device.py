"""Device resolution for the optional transcription backend."""

from typing import Optional


def resolve_device(device: Optional[str]) -> str:
    """
    Turn "auto"/"cuda" into a concrete torch device string.

    "auto" prefers CUDA, then Apple MPS, then CPU. Explicit devices pass through.
    """
    if device not in (None, "auto", "cuda"):
        return device

    import torch

    if torch.cuda.is_available():
        return "cuda:0"
    if device == "cuda":
        return "cuda"
    if torch.backends.mps.is_available():
        return "mps"
    return "cpu"
