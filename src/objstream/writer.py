"""
OBJ Writer
==========

ObjWriter is a GeometrySink that turns events back into Wavefront OBJ text,
one statement per line. Combined with the parser it normalizes a file:
comments, names, groups and materials disappear, numbers are rewritten in
their shortest exact form, and optional components equal to their defaults
are dropped.

Numbers
-------
format_float() picks the shortest decimal text that reads back as the very
same float32, so parse -> write -> parse reproduces every event bit for bit:

    >>> format_float(0.1)
    '0.1'
    >>> format_float(2.0)
    '2.0'
"""

from decimal import Decimal
from typing import Optional, TextIO
import logging
import math

from objstream.sink import GeometrySink, IndexTriplet, ObjMesh
from objstream.wavefront.tokens import to_float32

logger = logging.getLogger(__name__)

# Nine significant digits always identify a float32 uniquely
MAX_SIGNIFICANT_DIGITS = 9


def format_float(value: float) -> str:
    """
    Shortest text that lexes back to the same float32 as value.

    Raises:
        ValueError: For NaN and infinities, which OBJ cannot express
    """
    if not math.isfinite(value):
        raise ValueError(f"cannot write non-finite value {value!r}")

    value = to_float32(value)
    for digits in range(1, MAX_SIGNIFICANT_DIGITS + 1):
        text = f"{value:.{digits}g}"
        if to_float32(float(text)) == value:
            break

    # Plain notation for whole numbers that %g pushed into exponent form
    if "e" in text and 0 <= int(text.partition("e")[2]) < 16:
        text = format(Decimal(text), "f")

    if "." not in text and "e" not in text:
        text += ".0"
    return text


def _is_zero(value: float) -> bool:
    """True for +0.0 only; -0.0 must be written out to survive a round trip."""
    return value == 0.0 and math.copysign(1.0, value) > 0


def format_triplet(triplet: IndexTriplet) -> str:
    """Render an index group as p, p/t, p//n or p/t/n."""
    if triplet.has_normal:
        texture = str(triplet.texture) if triplet.has_texture else ""
        return f"{triplet.position}/{texture}/{triplet.normal}"
    if triplet.has_texture:
        return f"{triplet.position}/{triplet.texture}"
    return str(triplet.position)


class ObjWriter(GeometrySink):
    """
    Writes each event it receives as an OBJ statement.

    Usage:
        with open("clean.obj", "w") as out:
            Parser(Lexer(cursor), ObjWriter(out)).parse()

    Attributes:
        stream: Text stream the statements are written to
        records_written: Number of statements written so far
    """

    def __init__(self, stream: TextIO, header: Optional[str] = None):
        self.stream = stream
        self.records_written = 0
        if header:
            for line in header.splitlines():
                self.stream.write(f"# {line}\n")

    def _write(self, keyword: str, *fields: str) -> None:
        self.stream.write(" ".join((keyword,) + fields) + "\n")
        self.records_written += 1

    def on_vertex(self, x: float, y: float, z: float, w: float) -> None:
        fields = [format_float(x), format_float(y), format_float(z)]
        if w != 1.0:
            fields.append(format_float(w))
        self._write("v", *fields)

    def on_texture(self, u: float, v: float, w: float) -> None:
        fields = [format_float(u), format_float(v)]
        if w != 1.0:
            fields.append(format_float(w))
        self._write("vt", *fields)

    def on_normal(self, x: float, y: float, z: float) -> None:
        self._write("vn", format_float(x), format_float(y), format_float(z))

    def on_parameter(self, a: float, b: float, c: float) -> None:
        # A third component is only read back after a second one
        if not _is_zero(c):
            values = (a, b, c)
        elif not _is_zero(b):
            values = (a, b)
        else:
            values = (a,)
        self._write("vp", *(format_float(value) for value in values))

    def on_face(self, indices: list[IndexTriplet], count: int) -> None:
        self._write("f", *(format_triplet(triplet) for triplet in indices[:count]))


def write_mesh(mesh: ObjMesh, stream: TextIO, header: Optional[str] = None) -> int:
    """
    Write a stored mesh as OBJ text.

    Records are written grouped by kind (vertices, texture coordinates,
    normals, parameters, faces), which keeps every face index valid.

    Returns:
        Number of statements written
    """
    writer = ObjWriter(stream, header=header)
    for vertex in mesh.vertices:
        writer.on_vertex(*vertex)
    for coord in mesh.texture_coords:
        writer.on_texture(*coord)
    for normal in mesh.normals:
        writer.on_normal(*normal)
    for parameter in mesh.parameters:
        writer.on_parameter(*parameter)
    for face in mesh.faces:
        writer.on_face(face, len(face))

    logger.debug(f"Wrote {writer.records_written} statements")
    return writer.records_written
