"""
Wavefront OBJ Reader
====================

Streaming lexer and recursive-descent parser for Wavefront OBJ geometry.

Main Components
---------------
- **Lexer**: Pulls characters from a cursor and produces tokens
- **Parser**: Pulls tokens from a Lexer and emits events to a GeometrySink
- **ParseToken / Token**: Token kinds and records shared by both

Example Usage
-------------
>>> from objstream.source import StringCursor
>>> from objstream.sink import ObjMesh
>>> from objstream.wavefront import Lexer, Parser
>>> mesh = ObjMesh()
>>> Parser(Lexer(StringCursor("vt 0.5 0.25\\n")), mesh).parse().textures
1
>>> mesh.texture_coords
[(0.5, 0.25, 1.0)]
"""

from objstream.wavefront.tokens import (
    RESERVED_WORDS,
    SKIPPED_STATEMENTS,
    ParseToken,
    Token,
    ratio_to_float32,
    to_float32,
)
from objstream.wavefront.lexer import Lexer
from objstream.wavefront.parser import ParseStatistics, Parser

__all__ = [
    "RESERVED_WORDS",
    "SKIPPED_STATEMENTS",
    "ParseToken",
    "Token",
    "ratio_to_float32",
    "to_float32",
    "Lexer",
    "Parser",
    "ParseStatistics",
]
