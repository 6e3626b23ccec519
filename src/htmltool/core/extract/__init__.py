"""Extraction strategies for pulling strings out of HTML documents."""

from htmltool.core.config.models import ExtractionConfig, ExtractionMode

from .attribs import AttributeExtractor
from .base import Extractor, Token, TokenType
from .comments import CommentExtractor
from .query import SelectorExtractor
from .tags import TagTextExtractor
from .tokenizer import tokenize


def build_extractor(config: ExtractionConfig) -> Extractor:
    """Create the extractor for the configured mode."""
    mode = config.mode
    if mode == ExtractionMode.TAGS:
        return TagTextExtractor(config.tags)
    elif mode == ExtractionMode.ATTRIBS:
        return AttributeExtractor(config.attribs)
    elif mode == ExtractionMode.COMMENTS:
        return CommentExtractor()
    elif mode == ExtractionMode.QUERY:
        return SelectorExtractor(config.selector or "")
    raise ValueError(f"unsupported mode '{mode}'")


__all__ = [
    "Extractor",
    "Token",
    "TokenType",
    "tokenize",
    "TagTextExtractor",
    "AttributeExtractor",
    "CommentExtractor",
    "SelectorExtractor",
    "build_extractor",
]
