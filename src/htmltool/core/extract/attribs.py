"""
Attribute value extractor.

Emits the values of requested attributes on every tag. On documents
fetched over HTTP(S), src and href values are made absolute against the
document URL.
"""

from __future__ import annotations

from htmltool.core.backends.base import DocumentStream
from htmltool.core.normalize.urls import URL_ATTRIBUTES, is_url, normalize_attribute_url

from .base import Extractor
from .tokenizer import tokenize


class AttributeExtractor(Extractor):
    """Extract non-empty values of the requested attributes."""

    def __init__(self, attribs: list[str]) -> None:
        self.attribs = frozenset(attribs)

    @property
    def name(self) -> str:
        return "attribs"

    async def extract(self, stream: DocumentStream, origin: str) -> list[str]:
        out: list[str] = []
        normalize = is_url(origin)

        async for token in tokenize(stream):
            for attr_name, value in token.attrs:
                if not value or attr_name not in self.attribs:
                    continue
                if normalize and attr_name in URL_ATTRIBUTES:
                    out.append(normalize_attribute_url(value, origin))
                else:
                    out.append(value)

        return out
