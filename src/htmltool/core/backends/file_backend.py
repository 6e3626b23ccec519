"""
Local file backend.

Opens filesystem paths as document targets. Files are read synchronously
by the producer and never occupy a fetch slot.
"""

from __future__ import annotations

from typing import AsyncIterator, BinaryIO

from .base import DocumentStream, OpenError, Target


CHUNK_SIZE = 64 * 1024


class FileStream(DocumentStream):
    """Document stream over a binary file object."""

    def __init__(self, fileobj: BinaryIO, chunk_size: int = CHUNK_SIZE) -> None:
        super().__init__()
        self._file = fileobj
        self._chunk_size = chunk_size

    async def chunks(self) -> AsyncIterator[bytes]:
        while not self._closed:
            try:
                chunk = self._file.read(self._chunk_size)
            except OSError as e:
                raise OpenError(f"failed to read file: {e}", cause=e) from e
            if not chunk:
                return
            yield chunk

    async def _release(self) -> None:
        self._file.close()


def open_file(location: str) -> Target:
    """Open a file path as a target.

    Args:
        location: Filesystem path

    Returns:
        Target owning the open file

    Raises:
        OpenError: If the file cannot be opened
    """
    try:
        fileobj = open(location, "rb")
    except OSError as e:
        raise OpenError(f"failed to open file: {e}", url=location, cause=e) from e
    return Target(origin=location, stream=FileStream(fileobj))
