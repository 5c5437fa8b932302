"""Observability helpers.

This package emits deterministic per-file parse events for auditing.
"""

from .logger import ParseLogger

__all__ = ["ParseLogger"]
