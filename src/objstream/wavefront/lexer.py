"""
Wavefront OBJ Lexer
===================

This module converts a stream of characters into a stream of tokens for the
parser. It never holds more than two characters and two tokens at once:

- current/peek character: one character of lookahead over the cursor
- current/peek token: one token of lookahead over itself

Character Classes
-----------------
Checked in this order for each character:

| Character              | Result                                  |
|------------------------|-----------------------------------------|
| end of input           | END_OF_FILE                             |
| space, tab, '\\r'      | skipped                                 |
| '\\n'                  | END_OF_STATEMENT                        |
| '#'                    | rest of line dropped, END_OF_STATEMENT  |
| '/'                    | SEPARATOR                               |
| digit, '+', '-', '.'   | INTEGER or FLOAT                        |
| letter                 | keyword or STRING                       |
| anything else          | LexicalError                            |

Numbers
-------
Digits are folded into integer accumulators as they are read; the literal is
never buffered as text. A literal is FLOAT as soon as it has a decimal point
or an exponent (``1.5``, ``-.25``, ``3.``, ``2e3``, ``1.5E-2``), otherwise
INTEGER. Float values are rounded once, to float32.

Skipped Statements
------------------
Object, group, smoothing and material statements carry free-form names that
are not tokenizable (``o Cube.001``, ``usemtl mat_01``). Once one of those
keywords has been consumed, the lexer drops the remainder of its line,
newline included, before producing the next token.

Example
-------
>>> from objstream.wavefront.lexer import Lexer
>>> for token in Lexer.from_string("f 1//3").tokenize():
...     print(token)
Token(FACE, 'f', 1:1)
Token(INTEGER, 1, 1:3)
Token(SEPARATOR, 1:4)
Token(SEPARATOR, 1:5)
Token(INTEGER, 3, 1:6)
Token(END_OF_FILE, 1:7)
"""

from typing import Iterator, Mapping, Optional
import logging
import string

from objstream.errors import LexicalError, SourceLocation
from objstream.source import END_OF_INPUT, StringCursor
from objstream.wavefront.tokens import (
    RESERVED_WORDS,
    SKIPPED_STATEMENTS,
    ParseToken,
    Token,
    ratio_to_float32,
)

logger = logging.getLogger(__name__)


DIGITS = frozenset(string.digits)
LETTERS = frozenset(string.ascii_letters)
WHITESPACE = frozenset(" \t\r")
SIGNS = frozenset("+-")
NUMBER_START = DIGITS | SIGNS | {"."}
EXPONENT_MARKERS = frozenset("eE")
LINE_ENDS = frozenset({"\n", END_OF_INPUT})

# Exponents beyond this are out of float32 range whatever the mantissa
EXPONENT_LIMIT = 400


class Lexer:
    """
    Tokenizes Wavefront OBJ text pulled from a character cursor.

    Usage:
        lexer = Lexer(StringCursor(text), "model.obj")
        while lexer.advance().kind is not ParseToken.END_OF_FILE:
            ...

    Attributes:
        filename: Name of the source (for error messages)
    """

    def __init__(
        self,
        cursor,
        filename: str = "<input>",
        reserved: Mapping[str, ParseToken] = RESERVED_WORDS,
    ):
        """
        Initialize the lexer.

        Args:
            cursor: Object whose next() returns one character, or
                END_OF_INPUT once the source is exhausted
            filename: Name of the source (for error messages)
            reserved: Keyword spelling to token kind table
        """
        self._cursor = cursor
        self.filename = filename
        self._reserved = reserved

        # Character lookahead; line and column belong to the current char
        self._current_char = END_OF_INPUT
        self._peek_char = cursor.next()
        self._line = 1
        self._column = 0

        # Token lookahead; the peek token is lexed on demand
        self._current_token: Optional[Token] = None
        self._peek_token: Optional[Token] = None

    @classmethod
    def from_string(cls, text: str, filename: str = "<input>") -> "Lexer":
        return cls(StringCursor(text), filename)

    @property
    def line(self) -> int:
        return self._line

    @property
    def column(self) -> int:
        return self._column

    @property
    def current(self) -> Optional[Token]:
        """The most recently consumed token, None before the first advance()."""
        return self._current_token

    # =========================================================================
    # Token Stream
    # =========================================================================

    def peek(self) -> Token:
        """Return the next token without consuming it."""
        if self._peek_token is None:
            self._peek_token = self._lex_token()
        return self._peek_token

    def advance(self) -> Token:
        """Consume and return the next token."""
        self._current_token = self.peek()
        self._peek_token = None
        return self._current_token

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens up to and including END_OF_FILE.

        Raises:
            LexicalError: If a character cannot be tokenized
        """
        while True:
            token = self.advance()
            yield token
            if token.kind is ParseToken.END_OF_FILE:
                return

    # =========================================================================
    # Character Access
    # =========================================================================

    def _next_char(self) -> str:
        """Shift the character lookahead by one and update the counters."""
        if self._current_char == "\n":
            self._line += 1
            self._column = 0

        self._current_char = self._peek_char
        self._peek_char = self._cursor.next()

        if self._current_char != END_OF_INPUT:
            self._column += 1
        return self._current_char

    def _skip_line(self) -> None:
        """Drop everything up to and including the next newline."""
        while self._peek_char not in LINE_ENDS:
            self._next_char()
        if self._peek_char == "\n":
            self._next_char()

    # =========================================================================
    # Tokenization
    # =========================================================================

    def _make_token(
        self,
        kind: ParseToken,
        line: int,
        column: int,
        text: Optional[str] = None,
        value=None,
    ) -> Token:
        return Token(
            kind=kind,
            text=text,
            value=value,
            line=line,
            column=column,
            filename=self.filename,
        )

    def _error(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
        hint: Optional[str] = None,
        character: Optional[str] = None,
    ) -> LexicalError:
        location = SourceLocation(
            self.filename,
            self._line if line is None else line,
            self._column if column is None else column,
        )
        return LexicalError(message, location, hint=hint, character=character)

    def _lex_token(self) -> Token:
        previous = self._current_token
        if previous is not None and previous.kind in SKIPPED_STATEMENTS:
            logger.debug(
                f"{self.filename}:{previous.line}: skipping '{previous.text}' statement"
            )
            self._skip_line()

        while True:
            char = self._next_char()

            if char == END_OF_INPUT:
                return self._make_token(
                    ParseToken.END_OF_FILE, self._line, self._column + 1
                )

            if char in WHITESPACE:
                continue

            line, column = self._line, self._column

            if char == "\n":
                return self._make_token(ParseToken.END_OF_STATEMENT, line, column)

            if char == "#":
                self._skip_line()
                return self._make_token(ParseToken.END_OF_STATEMENT, line, column)

            if char == "/":
                return self._make_token(ParseToken.SEPARATOR, line, column)

            if char in NUMBER_START:
                return self._lex_number(line, column)

            if char in LETTERS:
                return self._lex_identifier(line, column)

            raise self._error(
                f"unexpected character {char!r}",
                hint="statements may only contain keywords, numbers, '/' and '#' comments",
                character=char,
            )

    def _lex_identifier(self, line: int, column: int) -> Token:
        chars = [self._current_char]
        while self._peek_char in LETTERS:
            chars.append(self._next_char())

        text = "".join(chars)
        kind = self._reserved.get(text, ParseToken.STRING)
        return self._make_token(kind, line, column, text=text)

    # =========================================================================
    # Numeric Literals
    # =========================================================================

    def _read_digits(self, value: int, count: int) -> tuple[int, int]:
        """
        Fold lookahead digits into value.

        Returns:
            (value, count) where count includes the digits just read
        """
        while self._peek_char in DIGITS:
            value = value * 10 + int(self._next_char())
            count += 1
        return value, count

    def _lex_number(self, line: int, column: int) -> Token:
        first = self._current_char
        negative = first == "-"

        magnitude, digits = (int(first), 1) if first in DIGITS else (0, 0)
        if first != ".":
            magnitude, digits = self._read_digits(magnitude, digits)

        # Fractional part
        is_float = first == "."
        if not is_float and self._peek_char == ".":
            self._next_char()
            is_float = True

        fraction, scale = 0, 1
        if is_float:
            fraction, count = self._read_digits(0, 0)
            scale = 10 ** count
            digits += count

        if digits == 0:
            raise self._error(
                f"malformed number: {first!r} is not followed by any digits",
                line, column, character=first,
            )

        # Exponent
        exponent = 0
        if self._peek_char in EXPONENT_MARKERS:
            self._next_char()
            is_float = True
            exponent = self._lex_exponent(line, column)

        if not is_float:
            return self._make_token(
                ParseToken.INTEGER, line, column,
                value=-magnitude if negative else magnitude,
            )

        value = self._fold_float(magnitude * scale + fraction, scale, exponent, line, column)
        return self._make_token(
            ParseToken.FLOAT, line, column,
            value=-value if negative else value,
        )

    def _lex_exponent(self, line: int, column: int) -> int:
        sign = 1
        if self._peek_char in SIGNS:
            sign = -1 if self._next_char() == "-" else 1

        if self._peek_char not in DIGITS:
            raise self._error(
                "malformed number: exponent has no digits",
                line, column,
                hint="write exponents as e.g. 1.5e3 or 2E-4",
            )

        exponent, _ = self._read_digits(0, 0)
        return sign * exponent

    def _fold_float(
        self, mantissa: int, scale: int, exponent: int, line: int, column: int
    ) -> float:
        """Round mantissa / scale * 10**exponent to float32 in a single step."""
        if mantissa == 0 or exponent < -EXPONENT_LIMIT:
            return 0.0

        try:
            if exponent > EXPONENT_LIMIT:
                raise OverflowError(exponent)
            if exponent >= 0:
                return ratio_to_float32(mantissa * 10 ** exponent, scale)
            return ratio_to_float32(mantissa, scale * 10 ** -exponent)
        except OverflowError:
            raise self._error(
                "number is out of range for a 32-bit float", line, column
            ) from None
