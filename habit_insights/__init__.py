"""Habit Insights — deterministic analytics over habit completion history."""

__version__ = "1.0.0"
