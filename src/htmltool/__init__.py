"""
html-tool - Extract parts of HTML documents in a pipeline.

Reads URLs or file paths on stdin, fetches or opens each document and
prints tag text, attribute values, comments or CSS-selector matches to
stdout, one per line.
"""

__version__ = "0.1.0"
__app_name__ = "html-tool"
