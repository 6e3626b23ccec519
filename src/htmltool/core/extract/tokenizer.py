"""
Streaming HTML tokenizer built on lxml's parser-target interface.

The libxml2 HTML parser is fed the document chunk by chunk; its callbacks
are turned into a flat token stream. Adjacent text callbacks are merged
into a single text token, including across chunk boundaries.
"""

from __future__ import annotations

import logging
from typing import AsyncIterator

from lxml import etree

from htmltool.core.backends.base import DocumentStream

from .base import Token, TokenType


logger = logging.getLogger(__name__)


class _TokenCollector:
    """lxml parser target that records callbacks as tokens."""

    def __init__(self) -> None:
        self.tokens: list[Token] = []
        self._text: list[str] = []

    def _flush_text(self) -> None:
        if self._text:
            self.tokens.append(Token(TokenType.TEXT, "".join(self._text)))
            self._text = []

    def start(self, tag, attrib) -> None:
        self._flush_text()
        attrs = [(name, value or "") for name, value in attrib.items()]
        self.tokens.append(Token(TokenType.START_TAG, tag, attrs))

    def end(self, tag) -> None:
        self._flush_text()
        self.tokens.append(Token(TokenType.END_TAG, tag))

    def data(self, data) -> None:
        self._text.append(data)

    def comment(self, text) -> None:
        self._flush_text()
        self.tokens.append(Token(TokenType.COMMENT, text or ""))

    def doctype(self, name, pubid, system) -> None:
        self._flush_text()
        self.tokens.append(Token(TokenType.DOCTYPE, name or ""))

    def take(self, final: bool = False) -> list[Token]:
        """Return the tokens collected so far.

        Pending text is held back until a non-text token or the end of the
        document, since more of it may arrive in the next chunk.
        """
        if final:
            self._flush_text()
        tokens, self.tokens = self.tokens, []
        return tokens

    def close(self) -> None:
        self._flush_text()


async def tokenize(stream: DocumentStream) -> AsyncIterator[Token]:
    """Yield the tokens of a document as it is read.

    A parser error ends the token stream quietly; the rest of the
    document is still read so the stream is fully consumed.

    Args:
        stream: Document body

    Yields:
        Tokens in document order
    """
    collector = _TokenCollector()
    parser = etree.HTMLParser(target=collector, recover=True, encoding="utf-8")
    chunks = stream.chunks()

    async for chunk in chunks:
        try:
            parser.feed(chunk)
        except etree.LxmlError as e:
            logger.debug("Tokenizer stopped: %s", e)
            for token in collector.take(final=True):
                yield token
            async for _ in chunks:
                pass
            return
        for token in collector.take():
            yield token

    try:
        parser.close()
    except etree.LxmlError as e:
        logger.debug("Tokenizer stopped at end of document: %s", e)
    for token in collector.take(final=True):
        yield token
