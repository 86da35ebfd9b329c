"""
objstream Error Hierarchy
=========================

This module defines the exception hierarchy for the objstream package.
All exceptions inherit from ObjStreamError, allowing callers to catch every
package-related error with a single except clause if desired.

Exception Hierarchy
-------------------
ObjStreamError (base)
└── FatalParseError - any condition that ends a parse
    ├── LexicalError - unrecognized character or malformed literal
    └── ObjSyntaxError - token stream does not match the statement grammar

There is no recoverable error channel. The first error raised by the lexer
or the parser propagates out of Parser.parse() and the parse is over; no
partial results are salvaged.

Error messages follow this format:
    filename:line:column: error: description
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class ObjStreamError(Exception):
    """
    Base exception for all objstream errors.

        try:
            parse_file("model.obj")
        except ObjStreamError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A position in the geometry source, used for diagnostics.

    Attributes:
        filename: Name of the source (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


class ErrorKind(Enum):
    """Which stage of the pipeline gave up."""
    LEXICAL = "lexical"
    SYNTAX = "syntax"


# =============================================================================
# Parse Exceptions
# =============================================================================

class FatalParseError(ObjStreamError):
    """
    Base exception for errors that terminate a parse.

    Carries everything a caller needs to report the failure: which stage
    failed, the message, and where in the source it happened.

    Attributes:
        kind: ErrorKind of the failure
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
    """

    kind: ErrorKind = ErrorKind.SYNTAX

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        super().__init__(self._format_message())

    @property
    def line(self) -> Optional[int]:
        return self.location.line if self.location else None

    @property
    def column(self) -> Optional[int]:
        return self.location.column if self.location else None

    def _format_message(self) -> str:
        """
        Format the error message with location and hint.

        Example output:
            cube.obj:3:7: error: unexpected character '$'
            hint: OBJ statements only contain keywords, numbers and '/'
        """
        if self.location:
            parts = [f"{self.location}: error: {self.message}"]
        else:
            parts = [f"error: {self.message}"]

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class LexicalError(FatalParseError):
    """
    A character sequence could not be turned into a token.

    Examples:
        - A character outside every token class ('$', '_', '@')
        - A sign or decimal point with no digits ("- 1")
        - An exponent marker with no exponent digits ("1.5e")
        - A literal outside the float32 range ("1e39")
    """

    kind = ErrorKind.LEXICAL

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        character: Optional[str] = None,
    ):
        self.character = character
        super().__init__(message, location=location, hint=hint)


class ObjSyntaxError(FatalParseError):
    """
    The token stream does not match the statement grammar.

    Examples:
        - A normal with fewer than three components ("vn 0 1")
        - A face with fewer than two index groups ("f 1")
        - A strict expect() that found the wrong token kind
    """

    kind = ErrorKind.SYNTAX
