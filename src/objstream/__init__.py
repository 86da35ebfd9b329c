"""
objstream - Streaming Wavefront OBJ Reader
==========================================

This package reads Wavefront OBJ geometry as a stream: characters are pulled
from a source one at a time, grouped into tokens by a lexer, and turned into
geometry events by a recursive-descent parser. Events go straight to a sink
of your choosing, so a file of any size is read in a single pass without
holding it in memory.

Main Components
---------------
- **source**: Character cursors over strings, streams and files
- **wavefront**: The Lexer and Parser
- **sink**: GeometrySink base class, ObjMesh in-memory store, TeeSink
- **writer**: ObjWriter, which serializes events back to OBJ text
- **errors**: LexicalError / ObjSyntaxError with source locations

Quick Start
-----------
Parse a string into an in-memory mesh:
    >>> from objstream import parse_string
    >>> mesh, stats = parse_string("v 1.0 2.0 3.0\\nf 1 1 1\\n")
    >>> mesh.vertices
    [(1.0, 2.0, 3.0, 1.0)]

Stream a file into your own sink:
    >>> from objstream import GeometrySink, parse_file
    >>> class Counter(GeometrySink):
    ...     faces = 0
    ...     def on_face(self, indices, count):
    ...         self.faces += 1
    >>> sink, stats = parse_file("model.obj", Counter())

Or use the command-line tool:
    $ objparse model.obj
    $ objparse model.obj --dump
    $ objparse model.obj -o clean.obj
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from pathlib import Path
from typing import Optional, Union

from objstream.errors import (
    ObjStreamError,
    FatalParseError,
    LexicalError,
    ObjSyntaxError,
    ErrorKind,
    SourceLocation,
)
from objstream.source import (
    END_OF_INPUT,
    StringCursor,
    StreamCursor,
    FileCursor,
)
from objstream.sink import (
    GeometrySink,
    IndexTriplet,
    ObjMesh,
    TeeSink,
)
from objstream.writer import ObjWriter, format_float, write_mesh
from objstream.wavefront import (
    Lexer,
    Parser,
    ParseStatistics,
    ParseToken,
    Token,
    RESERVED_WORDS,
)


def parse_string(
    text: str,
    sink: Optional[GeometrySink] = None,
    filename: str = "<input>",
) -> tuple[GeometrySink, ParseStatistics]:
    """
    Parse OBJ text held in memory.

    Args:
        text: OBJ source
        sink: Receiver of the events (default: a new ObjMesh)
        filename: Name used in error messages

    Returns:
        (sink, statistics)

    Raises:
        FatalParseError: On the first lexical or syntax error
    """
    if sink is None:
        sink = ObjMesh()
    stats = Parser(Lexer(StringCursor(text), filename), sink).parse()
    return sink, stats


def parse_file(
    path: Union[str, Path],
    sink: Optional[GeometrySink] = None,
    encoding: str = "utf-8",
) -> tuple[GeometrySink, ParseStatistics]:
    """
    Parse an OBJ file, streaming it from disk.

    Args:
        path: File to read
        sink: Receiver of the events (default: a new ObjMesh)
        encoding: Text encoding of the file

    Returns:
        (sink, statistics)

    Raises:
        FatalParseError: On the first lexical or syntax error
        OSError: If the file cannot be opened
    """
    if sink is None:
        sink = ObjMesh()
    with FileCursor(path, encoding=encoding) as cursor:
        stats = Parser(Lexer(cursor, str(path)), sink).parse()
    return sink, stats


__all__ = [
    # Version info
    "__version__",
    # Conveniences
    "parse_string",
    "parse_file",
    # Exception hierarchy
    "ObjStreamError",
    "FatalParseError",
    "LexicalError",
    "ObjSyntaxError",
    "ErrorKind",
    "SourceLocation",
    # Sources
    "END_OF_INPUT",
    "StringCursor",
    "StreamCursor",
    "FileCursor",
    # Sinks
    "GeometrySink",
    "IndexTriplet",
    "ObjMesh",
    "TeeSink",
    "ObjWriter",
    "format_float",
    "write_mesh",
    # Lexer / parser
    "Lexer",
    "Parser",
    "ParseStatistics",
    "ParseToken",
    "Token",
    "RESERVED_WORDS",
]
