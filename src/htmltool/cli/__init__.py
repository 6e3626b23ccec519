"""Command line interface for html-tool."""
