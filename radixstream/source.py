"""
Byte source for the encoder.

Reads a file (or stdin) one byte at a time and yields each byte as an int.
No decoding is done: line breaks and multi-byte sequences are just bytes.
"""

import sys
from typing import BinaryIO, Generator


class ResourceOpenError(Exception):
    """Raised when the input resource cannot be opened or read."""
    pass


class ByteSource:
    """
    Finite, ordered byte stream from a path.

    Each iteration reopens the resource, so a source can be replayed.
    ``"-"`` reads standard input, which can only be consumed once.

    Usage:
        source = ByteSource("notes.txt")
        source.check()  # raises ResourceOpenError early
        for symbol in source:
            process(symbol)
    """

    STDIN = "-"

    def __init__(self, path: str, chunk_size: int = 4096):
        self.path = path
        self.chunk_size = chunk_size
        self._bytes_read = 0

    def _open(self) -> BinaryIO:
        if self.path == self.STDIN:
            return sys.stdin.buffer
        try:
            return open(self.path, "rb")
        except OSError as e:
            raise ResourceOpenError(f"Failed to open {self.path}: {e.strerror or e}") from e

    def check(self):
        """
        Open and close the resource without reading it.

        Raises:
            ResourceOpenError: If the resource cannot be opened.
        """
        if self.path == self.STDIN:
            return
        self._open().close()

    def __iter__(self) -> Generator[int, None, None]:
        stream = self._open()
        self._bytes_read = 0
        try:
            while True:
                try:
                    chunk = stream.read(self.chunk_size)
                except OSError as e:
                    raise ResourceOpenError(f"Read error on {self.path}: {e}") from e
                if not chunk:
                    break
                for byte in chunk:
                    self._bytes_read += 1
                    yield byte
        finally:
            if self.path != self.STDIN:
                stream.close()

    @property
    def bytes_read(self) -> int:
        """Bytes yielded by the most recent iteration."""
        return self._bytes_read
