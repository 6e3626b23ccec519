"""
Tag text extractor.

Emits the text that immediately follows a start tag with one of the
requested names.
"""

from __future__ import annotations

from htmltool.core.backends.base import DocumentStream

from .base import Extractor, TokenType
from .tokenizer import tokenize


class TagTextExtractor(Extractor):
    """Extract the text token directly after matching start tags.

    Only the single token following the start tag is inspected. If it is
    another tag or a comment, that occurrence yields nothing; nested text
    is not collected. The inspected token is not matched itself.
    """

    def __init__(self, tags: list[str]) -> None:
        self.tags = frozenset(tags)

    @property
    def name(self) -> str:
        return "tags"

    async def extract(self, stream: DocumentStream, origin: str) -> list[str]:
        out: list[str] = []
        tokens = tokenize(stream)

        async for token in tokens:
            if token.type != TokenType.START_TAG or token.data not in self.tags:
                continue

            following = await anext(tokens, None)
            if following is None:
                break
            if following.type == TokenType.TEXT:
                text = following.data.strip()
                if text:
                    out.append(text)

        return out
