"""Test doubles for retry strategies."""

from .strategies import PanickingStrategy, RecordingStrategy

__all__ = ["PanickingStrategy", "RecordingStrategy"]
