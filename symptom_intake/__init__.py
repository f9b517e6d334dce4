"""Symptom intake API: rule-based symptom classification with per-user history."""

__version__ = "0.1.0"
