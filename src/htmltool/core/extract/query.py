"""
CSS selector extractor.

Parses the whole document into a tree and emits the first child node of
every element matched by a CSS selector.
"""

from __future__ import annotations

import logging

from lxml import etree
from lxml import html as lxml_html
from lxml.cssselect import CSSSelector, SelectorError
from lxml.html import HtmlElement

from htmltool.core.backends.base import DocumentStream

from .base import Extractor


logger = logging.getLogger(__name__)


def first_child_data(element: HtmlElement) -> str | None:
    """Data of an element's first child node, or None if it has none.

    A leading text node gives its text, a child element its tag name and
    a comment its text. Descendant text beyond the first node is ignored.
    """
    if element.text is not None:
        return element.text
    for child in element:
        if isinstance(child.tag, str):
            return child.tag
        return child.text or ""
    return None


class SelectorExtractor(Extractor):
    """Extract the first child of each element matching a CSS selector."""

    def __init__(self, selector: str) -> None:
        self.selector = selector
        self._error: str | None = None
        self._compiled: CSSSelector | None = None

        try:
            self._compiled = CSSSelector(selector, translator="html")
        except SelectorError as e:
            self._error = f"failed to parse CSS selector: {e}"

    @property
    def name(self) -> str:
        return "query"

    @property
    def config_error(self) -> str | None:
        return self._error

    async def _parse(self, stream: DocumentStream) -> HtmlElement | None:
        """Build a document tree from the stream, None if nothing parsed."""
        parser = lxml_html.HTMLParser(recover=True, encoding="utf-8")
        chunks = stream.chunks()
        fed = False

        async for chunk in chunks:
            try:
                parser.feed(chunk)
                fed = True
            except etree.LxmlError as e:
                logger.debug("Parser stopped: %s", e)
                async for _ in chunks:
                    pass
                break

        if not fed:
            return None
        try:
            return parser.close()
        except etree.LxmlError as e:
            logger.debug("Parser stopped at end of document: %s", e)
            return None

    async def extract(self, stream: DocumentStream, origin: str) -> list[str]:
        if self._compiled is None:
            await stream.drain()
            return []

        root = await self._parse(stream)
        if root is None:
            return []

        out: list[str] = []
        for element in self._compiled(root):
            data = first_child_data(element)
            if data is not None:
                out.append(data)
        return out
