"""Run orchestration: input routing, handoff channel and extraction consumer."""

from .runner import ExtractionRunner, RunStats, read_locations

__all__ = [
    "ExtractionRunner",
    "RunStats",
    "read_locations",
]
