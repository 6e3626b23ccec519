"""Fetch utilities - throttling and the concurrent fetch pipeline."""

from .pipeline import FetchPipeline
from .throttling import RateLimiter

__all__ = [
    "FetchPipeline",
    "RateLimiter",
]
