"""
Wavefront OBJ Parser
====================

This module implements a streaming recursive-descent parser for Wavefront
OBJ geometry. It pulls tokens from a Lexer one at a time and reports every
record it recognizes to a GeometrySink; nothing is buffered beyond the
statement being parsed.

Statements
----------
| Statement              | Event                                   |
|------------------------|-----------------------------------------|
| v x y z [w]            | on_vertex(x, y, z, w)     w = 1.0       |
| vt u v [w]             | on_texture(u, v, w)       w = 1.0       |
| vn x y z               | on_normal(x, y, z)                      |
| vp a [b [c]]           | on_parameter(a, b, c)     b, c = 0.0    |
| f p[/[t][/n]] ...      | on_face(indices, count)                 |

Integer literals are accepted wherever a float is expected. Face index
groups take the forms ``p``, ``p/t``, ``p//n`` and ``p/t/n``; an omitted
index is reported as 0.

Object, group, material and smoothing statements are dropped by the lexer.
Any other token at the start of a statement (an unknown keyword, stray
numbers after a complete record) is ignored.

Example
-------
>>> from objstream.sink import ObjMesh
>>> from objstream.wavefront import Lexer, Parser
>>> mesh = ObjMesh()
>>> stats = Parser(Lexer.from_string("v 1 2 3\\n"), mesh).parse()
>>> mesh.vertices
[(1.0, 2.0, 3.0, 1.0)]
"""

from dataclasses import dataclass
from typing import Optional
import logging

from objstream.errors import ObjSyntaxError
from objstream.sink import GeometrySink, IndexTriplet
from objstream.wavefront.lexer import Lexer
from objstream.wavefront.tokens import (
    SKIPPED_STATEMENTS,
    ParseToken,
    Token,
    to_float32,
)

logger = logging.getLogger(__name__)


# Face indices are reported as unsigned 64-bit integers
INDEX_MASK = 0xFFFF_FFFF_FFFF_FFFF

# A face needs at least this many index groups
MIN_FACE_INDICES = 2


@dataclass
class ParseStatistics:
    """
    Running counts of the records seen during a parse.

    Attributes:
        vertices: Vertex statements parsed
        textures: Texture coordinate statements parsed
        normals: Normal statements parsed
        parameters: Parameter-space vertex statements parsed
        faces: Face statements parsed
        skipped: Object/group/material/smoothing statements dropped
    """
    vertices: int = 0
    textures: int = 0
    normals: int = 0
    parameters: int = 0
    faces: int = 0
    skipped: int = 0

    @property
    def total_records(self) -> int:
        return (
            self.vertices +
            self.textures +
            self.normals +
            self.parameters +
            self.faces
        )

    def __str__(self) -> str:
        lines = [
            f"Vertices:            {self.vertices}",
            f"Texture coordinates: {self.textures}",
            f"Normals:             {self.normals}",
            f"Parameters:          {self.parameters}",
            f"Faces:               {self.faces}",
        ]
        if self.skipped:
            lines.append(f"Skipped statements:  {self.skipped}")
        lines.append(f"Total records:       {self.total_records}")
        return "\n".join(lines)


class Parser:
    """
    Drives a Lexer to completion, emitting geometry events to a sink.

    Usage:
        parser = Parser(Lexer(cursor, "model.obj"), sink)
        stats = parser.parse()
    """

    def __init__(self, lexer: Lexer, sink: GeometrySink):
        self._lexer = lexer
        self._sink = sink
        self.stats = ParseStatistics()

        self._handlers = {
            ParseToken.VERTEX: self._parse_vertex,
            ParseToken.TEXTURE: self._parse_texture,
            ParseToken.NORMAL: self._parse_normal,
            ParseToken.PARAMETER: self._parse_parameter,
            ParseToken.FACE: self._parse_face,
        }

    # =========================================================================
    # Token Navigation
    # =========================================================================

    @property
    def current(self) -> Optional[Token]:
        """The most recently consumed token."""
        return self._lexer.current

    def peek(self) -> Token:
        """Look at the next token without consuming it."""
        return self._lexer.peek()

    def advance(self) -> Token:
        """Consume and return the next token."""
        return self._lexer.advance()

    def expect(self, *kinds: ParseToken, message: Optional[str] = None) -> Token:
        """
        Consume the next token, which must be one of the given kinds.

        Raises:
            ObjSyntaxError: If the next token is of any other kind
        """
        token = self.advance()
        if token.kind not in kinds:
            expected = " or ".join(kind.name.lower() for kind in kinds)
            raise ObjSyntaxError(
                message or f"expected {expected}, found {token.describe()}",
                token.location,
            )
        return token

    def try_consume(self, kind: ParseToken) -> bool:
        """Consume the next token if it is of the given kind."""
        if self.peek().kind is kind:
            self.advance()
            return True
        return False

    # =========================================================================
    # Top Level
    # =========================================================================

    def parse(self) -> ParseStatistics:
        """
        Parse the whole input.

        Returns:
            Counts of the records emitted

        Raises:
            LexicalError: If the lexer meets a character it cannot tokenize
            ObjSyntaxError: If a statement is malformed
        """
        logger.debug(f"Parsing {self._lexer.filename}")

        while True:
            token = self.advance()
            kind = token.kind

            if kind is ParseToken.END_OF_FILE:
                break

            if kind is ParseToken.ERROR:
                raise ObjSyntaxError("invalid token in input", token.location)

            handler = self._handlers.get(kind)
            if handler is not None:
                handler(token)
            elif kind in SKIPPED_STATEMENTS:
                self.stats.skipped += 1

        logger.debug(
            f"Parsed {self._lexer.filename}: {self.stats.total_records} records "
            f"({self.stats.vertices} v, {self.stats.textures} vt, "
            f"{self.stats.normals} vn, {self.stats.parameters} vp, "
            f"{self.stats.faces} f)"
        )
        return self.stats

    # =========================================================================
    # Field Helpers
    # =========================================================================

    def try_parse_float(self) -> Optional[float]:
        """Consume a FLOAT or INTEGER literal as a float32, if one is next."""
        token = self.peek()
        if token.kind is ParseToken.FLOAT:
            return self.advance().value
        if token.kind is ParseToken.INTEGER:
            self.advance()
            try:
                return to_float32(float(token.value))
            except OverflowError:
                raise ObjSyntaxError(
                    f"integer {token.value} is out of range for a 32-bit float",
                    token.location,
                ) from None
        return None

    def try_parse_integer(self) -> Optional[int]:
        """Consume an INTEGER literal as an unsigned 64-bit value, if one is next."""
        if self.peek().kind is ParseToken.INTEGER:
            return self.advance().value & INDEX_MASK
        return None

    def _parse_float(self, keyword: Token, component: str) -> float:
        value = self.try_parse_float()
        if value is None:
            self.expect(
                ParseToken.FLOAT,
                ParseToken.INTEGER,
                message=f"'{keyword.text}' statement is missing its {component} component, "
                        f"found {self.peek().describe()}",
            )
        return value

    # =========================================================================
    # Statements
    # =========================================================================

    def _parse_vertex(self, keyword: Token) -> None:
        self.stats.vertices += 1
        x = self._parse_float(keyword, "x")
        y = self._parse_float(keyword, "y")
        z = self._parse_float(keyword, "z")
        w = self.try_parse_float()
        self._sink.on_vertex(x, y, z, 1.0 if w is None else w)

    def _parse_texture(self, keyword: Token) -> None:
        self.stats.textures += 1
        u = self._parse_float(keyword, "u")
        v = self._parse_float(keyword, "v")
        w = self.try_parse_float()
        self._sink.on_texture(u, v, 1.0 if w is None else w)

    def _parse_normal(self, keyword: Token) -> None:
        self.stats.normals += 1
        x = self._parse_float(keyword, "x")
        y = self._parse_float(keyword, "y")
        z = self._parse_float(keyword, "z")
        self._sink.on_normal(x, y, z)

    def _parse_parameter(self, keyword: Token) -> None:
        self.stats.parameters += 1
        a = self._parse_float(keyword, "first")
        b = self.try_parse_float()
        # The third component is only looked for after a second one
        c = self.try_parse_float() if b is not None else None
        self._sink.on_parameter(
            a,
            0.0 if b is None else b,
            0.0 if c is None else c,
        )

    def _parse_face(self, keyword: Token) -> None:
        self.stats.faces += 1
        indices: list[IndexTriplet] = []
        while True:
            triplet = self._parse_face_indices()
            if triplet is None:
                break
            indices.append(triplet)

        if len(indices) < MIN_FACE_INDICES:
            raise ObjSyntaxError(
                f"face needs at least {MIN_FACE_INDICES} index groups, "
                f"found {len(indices)}",
                keyword.location,
                hint="write faces as e.g. 'f 1 2 3' or 'f 1/1/1 2/2/2 3/3/3'",
            )

        self._sink.on_face(indices, len(indices))

    def _parse_face_indices(self) -> Optional[IndexTriplet]:
        """
        Parse one ``p[/[t][/n]]`` index group.

        Returns:
            The triplet, or None if no position index is next
        """
        position = self.try_parse_integer()
        if position is None:
            return None

        texture = 0
        if self.try_consume(ParseToken.SEPARATOR):
            texture = self.try_parse_integer() or 0

        normal = 0
        if self.try_consume(ParseToken.SEPARATOR):
            normal = self.try_parse_integer() or 0

        return IndexTriplet(position, texture, normal)
