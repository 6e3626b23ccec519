"""
Extraction base classes and data structures.

Defines the token model and the interface for all extraction strategies.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum

from htmltool.core.backends.base import DocumentStream


class TokenType(str, Enum):
    """Kinds of tokens produced by the tokenizer."""

    START_TAG = "start_tag"
    END_TAG = "end_tag"
    TEXT = "text"
    COMMENT = "comment"
    DOCTYPE = "doctype"


@dataclass
class Token:
    """A single token of an HTML document."""

    type: TokenType
    data: str = ""
    attrs: list[tuple[str, str]] = field(default_factory=list)


class Extractor(ABC):
    """Abstract base class for extraction strategies.

    Extractors are built once per run with their arguments fixed and
    applied to every document. They return a fresh list per document and
    keep no state between documents.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Extractor identifier."""
        pass

    @abstractmethod
    async def extract(self, stream: DocumentStream, origin: str) -> list[str]:
        """Extract strings from a document.

        Must consume the whole stream. Malformed markup never raises;
        extraction stops where the tokenizer gives up.

        Args:
            stream: Document body
            origin: Location the document was read from

        Returns:
            Extracted strings in document order

        Raises:
            BackendError: If reading the stream fails
        """
        pass

    @property
    def config_error(self) -> str | None:
        """Problem with the extractor's arguments, reported once per run."""
        return None
