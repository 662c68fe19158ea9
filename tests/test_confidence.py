"""
Tests for insight confidence scoring.
"""
import pytest

from habit_insights.services.confidence import ConfidenceLevel, calculate_confidence


class TestConfidence:
    @pytest.mark.parametrize("sample, effect, expected", [
        (56, 30, ConfidenceLevel.HIGH),
        (200, 95.5, ConfidenceLevel.HIGH),
        (55, 30, ConfidenceLevel.MEDIUM),
        (56, 29.9, ConfidenceLevel.MEDIUM),
        (28, 20, ConfidenceLevel.MEDIUM),
        (27, 20, ConfidenceLevel.LOW),
        (28, 19.9, ConfidenceLevel.LOW),
        (0, 0, ConfidenceLevel.LOW),
        (14, 100, ConfidenceLevel.LOW),
    ])
    def test_thresholds(self, sample, effect, expected):
        assert calculate_confidence(sample, effect) == expected

    def test_levels_serialise_as_lowercase(self):
        assert [level.value for level in ConfidenceLevel] == ["high", "medium", "low"]
