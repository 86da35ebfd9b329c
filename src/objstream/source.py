"""
Character Sources
=================

The lexer pulls characters one at a time from a *cursor*: any object with a
``next()`` method that returns a single character, or ``END_OF_INPUT`` once
the source is exhausted. Cursors must keep returning ``END_OF_INPUT`` on
every call after the end has been reached.

Three cursors are provided:

- **StringCursor**: walks an in-memory string
- **StreamCursor**: reads an open text stream in fixed-size chunks
- **FileCursor**: opens a file by path and owns the underlying stream

Example
-------
>>> from objstream.source import StringCursor, END_OF_INPUT
>>> cursor = StringCursor("v 1")
>>> [cursor.next() for _ in range(4)]
['v', ' ', '1', '']
"""

from pathlib import Path
from typing import Optional, TextIO, Union
import logging

# Logger for this module
logger = logging.getLogger(__name__)


# Returned once the source is exhausted. Never equal to a real character.
END_OF_INPUT = ""

DEFAULT_CHUNK_SIZE = 65536


def _check_chunk_size(chunk_size: int) -> None:
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")


class StringCursor:
    """Yields the characters of an in-memory string."""

    def __init__(self, text: str):
        self._text = text
        self._pos = 0

    @property
    def characters_read(self) -> int:
        return self._pos

    def next(self) -> str:
        if self._pos >= len(self._text):
            return END_OF_INPUT
        char = self._text[self._pos]
        self._pos += 1
        return char


class StreamCursor:
    """
    Yields the characters of a text stream.

    The stream is read in chunks of ``chunk_size`` characters so that large
    files never need to be held in memory. The cursor does not close the
    stream; whoever opened it is responsible for that.

    Attributes:
        stream: Text stream opened for reading
        chunk_size: Number of characters requested per read
    """

    def __init__(self, stream: TextIO, chunk_size: int = DEFAULT_CHUNK_SIZE):
        _check_chunk_size(chunk_size)
        self.stream = stream
        self.chunk_size = chunk_size
        self._buffer = ""
        self._pos = 0
        self._exhausted = False
        self._characters_read = 0

    @property
    def characters_read(self) -> int:
        return self._characters_read

    def next(self) -> str:
        if self._pos >= len(self._buffer):
            if self._exhausted or not self._fill():
                return END_OF_INPUT
        char = self._buffer[self._pos]
        self._pos += 1
        self._characters_read += 1
        return char

    def _fill(self) -> bool:
        """Read the next chunk. Returns False once the stream is drained."""
        self._buffer = self.stream.read(self.chunk_size)
        self._pos = 0
        if not self._buffer:
            self._exhausted = True
            logger.debug(f"Stream exhausted after {self._characters_read} characters")
            return False
        return True


class FileCursor(StreamCursor):
    """
    A StreamCursor that opens (and later closes) a file by path.

    Usage:
        with FileCursor("model.obj") as cursor:
            Parser(Lexer(cursor, "model.obj"), sink).parse()
    """

    def __init__(
        self,
        path: Union[str, Path],
        encoding: str = "utf-8",
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        _check_chunk_size(chunk_size)
        self.path = Path(path)
        # newline="" keeps '\r' visible to the lexer, which skips it as whitespace
        stream = open(self.path, "r", encoding=encoding, newline="")
        logger.debug(f"Opened {self.path} ({encoding})")
        super().__init__(stream, chunk_size=chunk_size)
        self._closed = False

    def close(self) -> None:
        if not self._closed:
            self.stream.close()
            self._closed = True
            logger.debug(f"Closed {self.path} after {self.characters_read} characters")

    def __enter__(self) -> "FileCursor":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> Optional[bool]:
        self.close()
        return None
