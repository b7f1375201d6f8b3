"""Concurrency primitives used by the retry driver (pure asyncio)."""

from __future__ import annotations

from .task import checkpoint

__all__ = ["checkpoint"]
