"""
Confidence scoring for generated insights.

  high    sample >= 56 and effect >= 30
  medium  sample >= 28 and effect >= 20
  low     everything else

`effect_strength` is whatever magnitude the calling detector treats as
its signal (rate spread, share of completions, percentage-point gap).
"""
from __future__ import annotations

import enum


class ConfidenceLevel(str, enum.Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


HIGH_MIN_SAMPLE = 56
HIGH_MIN_EFFECT = 30
MEDIUM_MIN_SAMPLE = 28
MEDIUM_MIN_EFFECT = 20


def calculate_confidence(sample_size: int, effect_strength: float) -> ConfidenceLevel:
    if sample_size >= HIGH_MIN_SAMPLE and effect_strength >= HIGH_MIN_EFFECT:
        return ConfidenceLevel.HIGH
    if sample_size >= MEDIUM_MIN_SAMPLE and effect_strength >= MEDIUM_MIN_EFFECT:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW
