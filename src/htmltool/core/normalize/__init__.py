"""Normalization helpers for locations and extracted URLs."""

from .urls import (
    URL_ATTRIBUTES,
    is_absolute_uri,
    is_url,
    normalize_attribute_url,
)

__all__ = [
    "URL_ATTRIBUTES",
    "is_absolute_uri",
    "is_url",
    "normalize_attribute_url",
]
