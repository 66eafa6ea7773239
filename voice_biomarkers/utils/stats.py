"""Small numeric helpers shared by the extractors."""

from typing import Sequence, Tuple

import numpy as np


def clamp(value: float, low: float, high: float) -> float:
    return float(min(high, max(low, value)))


def safe_ratio(numerator: float, denominator: float, default: float = 0.0) -> float:
    """numerator / denominator, or default when the denominator is zero."""
    if denominator == 0:
        return default
    return float(numerator / denominator)


def mean_std(values: Sequence[float]) -> Tuple[float, float]:
    """Population mean and standard deviation; (0, 0) for empty input."""
    if len(values) == 0:
        return 0.0, 0.0
    arr = np.asarray(values, dtype=np.float64)
    return float(np.mean(arr)), float(np.std(arr))
