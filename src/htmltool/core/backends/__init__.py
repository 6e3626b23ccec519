"""Backends for opening documents from files and HTTP."""

from .base import (
    BackendError,
    DocumentStream,
    FetchError,
    FetchRequest,
    OpenError,
    RequestBuildError,
    Target,
)
from .file_backend import FileStream, open_file
from .http_backend import HttpBackend, ResponseStream

__all__ = [
    # Base classes
    "DocumentStream",
    "FetchRequest",
    "Target",
    # Base errors
    "BackendError",
    "FetchError",
    "OpenError",
    "RequestBuildError",
    # File backend
    "FileStream",
    "open_file",
    # HTTP backend
    "HttpBackend",
    "ResponseStream",
]
