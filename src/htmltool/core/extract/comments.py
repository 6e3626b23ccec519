"""
Comment extractor.
"""

from __future__ import annotations

from htmltool.core.backends.base import DocumentStream

from .base import Extractor, TokenType
from .tokenizer import tokenize


class CommentExtractor(Extractor):
    """Extract HTML comments, one line each."""

    @property
    def name(self) -> str:
        return "comments"

    async def extract(self, stream: DocumentStream, origin: str) -> list[str]:
        out: list[str] = []
        async for token in tokenize(stream):
            if token.type != TokenType.COMMENT:
                continue
            text = token.data.replace("\n", " ").strip()
            if text:
                out.append(text)
        return out
