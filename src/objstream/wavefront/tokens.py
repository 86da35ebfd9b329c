"""
Wavefront OBJ Tokens
====================

Token kinds, the Token record, and the reserved-word table shared by the
lexer and the parser.

Reserved Words
--------------
| Spelling | Kind        | Statement                  |
|----------|-------------|----------------------------|
| v        | VERTEX      | geometric vertex           |
| vt       | TEXTURE     | texture coordinate         |
| vn       | NORMAL      | vertex normal              |
| vp       | PARAMETER   | parameter-space vertex     |
| f        | FACE        | polygonal face             |
| o        | OBJECT      | object name (skipped)      |
| g        | GROUP       | group name (skipped)       |
| mtllib   | MATERIAL    | material library (skipped) |
| usemtl   | USEMATERIAL | material use (skipped)     |
| s        | SMOOTHING   | smoothing group (skipped)  |

Any other run of letters is a STRING token.
"""

from dataclasses import dataclass
from enum import Enum, auto
from types import MappingProxyType
from typing import Mapping, Optional, Union
import math
import struct

from objstream.errors import SourceLocation


# =============================================================================
# Token Kinds
# =============================================================================

class ParseToken(Enum):
    """Closed set of token kinds produced by the lexer."""

    # Reserved keywords
    VERTEX = auto()
    TEXTURE = auto()
    NORMAL = auto()
    PARAMETER = auto()
    FACE = auto()
    OBJECT = auto()
    GROUP = auto()
    MATERIAL = auto()
    USEMATERIAL = auto()
    SMOOTHING = auto()

    # Values
    STRING = auto()      # Unreserved identifier
    INTEGER = auto()     # 42, -7
    FLOAT = auto()       # 1.5, -.25, 2e3

    # Punctuation and structure
    SEPARATOR = auto()       # '/' between face indices
    END_OF_STATEMENT = auto()  # Newline, or end of a comment line
    END_OF_FILE = auto()
    ERROR = auto()


RESERVED_WORDS: Mapping[str, ParseToken] = MappingProxyType({
    "v": ParseToken.VERTEX,
    "vt": ParseToken.TEXTURE,
    "vn": ParseToken.NORMAL,
    "vp": ParseToken.PARAMETER,
    "f": ParseToken.FACE,
    "o": ParseToken.OBJECT,
    "g": ParseToken.GROUP,
    "mtllib": ParseToken.MATERIAL,
    "usemtl": ParseToken.USEMATERIAL,
    "s": ParseToken.SMOOTHING,
})

# Statements whose bodies are free-form names; the lexer drops the rest of
# the line after one of these keywords.
SKIPPED_STATEMENTS = frozenset({
    ParseToken.OBJECT,
    ParseToken.GROUP,
    ParseToken.SMOOTHING,
    ParseToken.MATERIAL,
    ParseToken.USEMATERIAL,
})


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single lexical unit.

    Attributes:
        kind: The ParseToken classification
        text: Spelling of keyword and STRING tokens, None otherwise
        value: int for INTEGER, float for FLOAT, None otherwise
        line: Line of the token's first character (1-indexed)
        column: Column of the token's first character (1-indexed)
        filename: Name of the source
    """
    kind: ParseToken
    text: Optional[str] = None
    value: Union[int, float, None] = None
    line: int = 1
    column: int = 1
    filename: str = "<input>"

    def __repr__(self) -> str:
        if self.value is not None:
            return f"Token({self.kind.name}, {self.value!r}, {self.line}:{self.column})"
        if self.text is not None:
            return f"Token({self.kind.name}, {self.text!r}, {self.line}:{self.column})"
        return f"Token({self.kind.name}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    def describe(self) -> str:
        """Short human-readable form for error messages."""
        if self.kind is ParseToken.END_OF_STATEMENT:
            return "end of line"
        if self.kind is ParseToken.END_OF_FILE:
            return "end of file"
        if self.value is not None:
            return f"{self.kind.name.lower()} {self.value!r}"
        if self.text is not None:
            return f"'{self.text}'"
        if self.kind is ParseToken.SEPARATOR:
            return "'/'"
        return self.kind.name.lower()


# =============================================================================
# Float32 Helpers
# =============================================================================

def to_float32(value: float) -> float:
    """
    Round a Python float to the nearest IEEE-754 single precision value.

    Raises:
        OverflowError: If the value does not fit in a float32
    """
    return struct.unpack("<f", struct.pack("<f", value))[0]


# Float32 layout: 24-bit significand, smallest normal exponent -126
FLOAT32_SIGNIFICAND_BITS = 24
FLOAT32_MIN_EXPONENT = -126
FLOAT32_MAX_EXPONENT = 127


def ratio_to_float32(numerator: int, denominator: int) -> float:
    """
    Round numerator / denominator straight to the nearest float32.

    Both arguments must be non-negative and the denominator non-zero. The
    quotient is never materialized as a double, so it is rounded exactly
    once (to nearest, ties to even), subnormals included.

    Raises:
        OverflowError: If the rounded value does not fit in a float32
    """
    if numerator == 0:
        return 0.0

    # Binary exponent e with 2**e <= numerator / denominator < 2**(e + 1)
    exponent = numerator.bit_length() - denominator.bit_length()
    if (numerator << max(-exponent, 0)) < (denominator << max(exponent, 0)):
        exponent -= 1

    # Weight of the last significand bit
    quantum = max(exponent, FLOAT32_MIN_EXPONENT) - (FLOAT32_SIGNIFICAND_BITS - 1)
    if quantum < 0:
        scaled, divisor = numerator << -quantum, denominator
    else:
        scaled, divisor = numerator, denominator << quantum

    significand, remainder = divmod(scaled, divisor)
    if 2 * remainder > divisor or (2 * remainder == divisor and significand & 1):
        significand += 1

    if significand.bit_length() + quantum > FLOAT32_MAX_EXPONENT + 1:
        raise OverflowError("value too large for a float32")
    return math.ldexp(significand, quantum)
