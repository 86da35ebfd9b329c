# =============================================================================
# test_lexer.py - Lexer Unit Tests
# =============================================================================
# Tests for the Wavefront OBJ lexer.
#
# Test coverage includes:
#   - Keyword resolution and unreserved identifiers
#   - Integer and float literals: signs, fractions, exponents, float32 rounding
#   - Separators, newlines, comments and whitespace
#   - Skipped statements (o, g, s, mtllib, usemtl)
#   - Token lookahead and source positions
#   - Error conditions
# =============================================================================

import math
from types import MappingProxyType

import pytest
from objstream.errors import ErrorKind, LexicalError
from objstream.source import StringCursor
from objstream.wavefront.lexer import Lexer
from objstream.wavefront.tokens import RESERVED_WORDS, ParseToken, to_float32


# =============================================================================
# Helper Functions
# =============================================================================

def tokenize(source: str) -> list:
    """Tokenize source and drop the trailing END_OF_FILE token."""
    tokens = list(Lexer.from_string(source, "<test>").tokenize())
    assert tokens[-1].kind == ParseToken.END_OF_FILE
    return tokens[:-1]


def kinds(source: str) -> list:
    return [t.kind for t in tokenize(source)]


def single(source: str):
    tokens = tokenize(source)
    assert len(tokens) == 1, tokens
    return tokens[0]


# =============================================================================
# Keyword Tests
# =============================================================================

class TestKeywords:
    """Test keyword and identifier recognition."""

    def test_empty_input(self):
        """Empty input produces only END_OF_FILE."""
        assert tokenize("") == []

    def test_whitespace_only(self):
        """Spaces, tabs and carriage returns produce no tokens."""
        assert tokenize("  \t \r ") == []

    @pytest.mark.parametrize("spelling,kind", [
        ("v", ParseToken.VERTEX),
        ("vt", ParseToken.TEXTURE),
        ("vn", ParseToken.NORMAL),
        ("vp", ParseToken.PARAMETER),
        ("f", ParseToken.FACE),
    ])
    def test_statement_keywords(self, spelling, kind):
        token = single(spelling)
        assert token.kind == kind
        assert token.text == spelling

    def test_unreserved_identifier(self):
        """Words that are not keywords are STRING tokens."""
        token = single("foo")
        assert token.kind == ParseToken.STRING
        assert token.text == "foo"

    def test_keywords_are_case_sensitive(self):
        assert single("V").kind == ParseToken.STRING

    def test_identifier_stops_at_digit(self):
        """Identifiers are letters only; a digit starts a new token."""
        assert kinds("v1") == [ParseToken.VERTEX, ParseToken.INTEGER]

    def test_reserved_table_is_immutable(self):
        with pytest.raises(TypeError):
            RESERVED_WORDS["l"] = ParseToken.STRING

    def test_custom_reserved_table(self):
        """The keyword table is injected at construction."""
        table = MappingProxyType({"pt": ParseToken.VERTEX})
        lexer = Lexer(StringCursor("pt v"), reserved=table)
        assert lexer.advance().kind == ParseToken.VERTEX
        assert lexer.advance().kind == ParseToken.STRING


# =============================================================================
# Integer Literal Tests
# =============================================================================

class TestIntegers:
    """Test integer literal recognition."""

    def test_integer(self):
        token = single("123")
        assert token.kind == ParseToken.INTEGER
        assert token.value == 123

    def test_zero(self):
        assert single("0").value == 0

    def test_negative_integer(self):
        token = single("-7")
        assert token.kind == ParseToken.INTEGER
        assert token.value == -7

    def test_explicit_plus(self):
        assert single("+42").value == 42

    def test_large_integer_is_exact(self):
        assert single("18446744073709551615").value == 2 ** 64 - 1


# =============================================================================
# Float Literal Tests
# =============================================================================

class TestFloats:
    """Test decimal and exponent float literals."""

    def test_simple_float(self):
        token = single("1.5")
        assert token.kind == ParseToken.FLOAT
        assert token.value == 1.5

    def test_multi_digit_fraction(self):
        """The fraction scale is 10 per fractional digit."""
        assert single("1.25").value == 1.25
        assert single("3.125").value == 3.125

    def test_fraction_with_leading_zeros(self):
        assert single("2.05").value == to_float32(2.05)

    def test_negative_float(self):
        assert single("-1.25").value == -1.25

    def test_negative_below_one(self):
        """The sign survives an integer part of zero."""
        assert single("-0.5").value == -0.5

    def test_negative_zero(self):
        value = single("-0.0").value
        assert value == 0.0
        assert math.copysign(1.0, value) == -1.0

    def test_leading_decimal_point(self):
        assert single(".5").value == 0.5

    def test_signed_leading_decimal_point(self):
        assert single("-.25").value == -0.25

    def test_trailing_decimal_point(self):
        token = single("3.")
        assert token.kind == ParseToken.FLOAT
        assert token.value == 3.0

    def test_values_are_float32(self):
        """Literals are rounded to single precision."""
        value = single("0.1").value
        assert value == to_float32(0.1)
        assert value != 0.1

    def test_exponent(self):
        """1.5e2 lexed standalone is a FLOAT of 150."""
        tokens = tokenize("1.5e2\n")
        assert tokens[0].kind == ParseToken.FLOAT
        assert tokens[0].value == 150.0
        assert tokens[1].kind == ParseToken.END_OF_STATEMENT

    def test_uppercase_exponent(self):
        assert single("2.5E3").value == 2500.0

    def test_negative_exponent(self):
        assert single("1.5e-2").value == to_float32(0.015)

    def test_positive_exponent_sign(self):
        assert single("1e+2").value == 100.0

    def test_exponent_without_point_is_float(self):
        token = single("2e3")
        assert token.kind == ParseToken.FLOAT
        assert token.value == 2000.0

    def test_negative_mantissa_with_exponent(self):
        assert single("-2.5e1").value == -25.0

    def test_underflow_becomes_zero(self):
        assert single("1e-50").value == 0.0

    def test_rounded_once_from_exact_value(self):
        """Just above the halfway point between 1 and the next float32."""
        literal = "1.000000059604644775390625000000867361737988403547205962240695953369140625"
        assert single(literal).value == 1.0 + 2.0 ** -23

    def test_exact_halfway_rounds_to_even(self):
        assert single("1.000000059604644775390625").value == 1.0
        assert single("1.000000178813934326171875").value == 1.0 + 2.0 ** -22

    def test_smallest_subnormal(self):
        assert single("1.401298464324817e-45").value == 2.0 ** -149
        assert single("7e-46").value == 0.0

    def test_largest_float32(self):
        assert single("3.4028234e38").value == (2 - 2.0 ** -23) * 2.0 ** 127

    def test_float_then_separator(self):
        assert kinds("1.5/2") == [
            ParseToken.FLOAT, ParseToken.SEPARATOR, ParseToken.INTEGER,
        ]


# =============================================================================
# Structure Tests
# =============================================================================

class TestStructure:
    """Test separators, newlines, comments and whitespace."""

    def test_separators(self):
        assert kinds("1/2/3") == [
            ParseToken.INTEGER, ParseToken.SEPARATOR,
            ParseToken.INTEGER, ParseToken.SEPARATOR,
            ParseToken.INTEGER,
        ]

    def test_double_separator(self):
        assert kinds("4//6") == [
            ParseToken.INTEGER, ParseToken.SEPARATOR,
            ParseToken.SEPARATOR, ParseToken.INTEGER,
        ]

    def test_newline_ends_statement(self):
        assert kinds("v\nf") == [
            ParseToken.VERTEX, ParseToken.END_OF_STATEMENT, ParseToken.FACE,
        ]

    def test_crlf_is_one_statement_end(self):
        assert kinds("v\r\nf") == [
            ParseToken.VERTEX, ParseToken.END_OF_STATEMENT, ParseToken.FACE,
        ]

    def test_comment_line(self):
        """A comment line becomes a single END_OF_STATEMENT."""
        assert kinds("# a comment $ with junk\nv") == [
            ParseToken.END_OF_STATEMENT, ParseToken.VERTEX,
        ]

    def test_trailing_comment(self):
        assert kinds("v 1 # one\nf") == [
            ParseToken.VERTEX, ParseToken.INTEGER,
            ParseToken.END_OF_STATEMENT, ParseToken.FACE,
        ]

    def test_comment_at_end_of_input(self):
        assert kinds("v # no newline") == [
            ParseToken.VERTEX, ParseToken.END_OF_STATEMENT,
        ]

    def test_tabs_between_tokens(self):
        assert kinds("v\t1\t2") == [
            ParseToken.VERTEX, ParseToken.INTEGER, ParseToken.INTEGER,
        ]


# =============================================================================
# Skipped Statement Tests
# =============================================================================

class TestSkippedStatements:
    """Names after o/g/s/mtllib/usemtl are never tokenized."""

    @pytest.mark.parametrize("line,kind", [
        ("o Cube.001", ParseToken.OBJECT),
        ("g left_arm $pecial", ParseToken.GROUP),
        ("s off", ParseToken.SMOOTHING),
        ("mtllib scene-materials.mtl", ParseToken.MATERIAL),
        ("usemtl mat_01", ParseToken.USEMATERIAL),
    ])
    def test_rest_of_line_dropped(self, line, kind):
        assert kinds(line + "\nv") == [kind, ParseToken.VERTEX]

    def test_newline_is_consumed(self):
        """A skipped statement produces no END_OF_STATEMENT of its own."""
        assert kinds("g name\n\nv") == [
            ParseToken.GROUP, ParseToken.END_OF_STATEMENT, ParseToken.VERTEX,
        ]

    def test_skipped_statement_at_end_of_input(self):
        assert kinds("g name") == [ParseToken.GROUP]

    def test_keyword_followed_by_newline(self):
        """Only the keyword's own line is dropped."""
        assert kinds("g\nv 1") == [
            ParseToken.GROUP, ParseToken.VERTEX, ParseToken.INTEGER,
        ]

    def test_line_counter_after_skip(self):
        tokens = tokenize("g name\nv")
        assert tokens[1].line == 2
        assert tokens[1].column == 1


# =============================================================================
# Lookahead Tests
# =============================================================================

class TestLookahead:
    """Test the current/peek token interface."""

    def test_current_before_advance(self):
        assert Lexer.from_string("v").current is None

    def test_peek_does_not_consume(self):
        lexer = Lexer.from_string("v 1")
        first = lexer.peek()
        assert lexer.peek() is first
        assert lexer.advance() is first
        assert lexer.current is first
        assert lexer.peek().kind == ParseToken.INTEGER

    def test_end_of_file_repeats(self):
        lexer = Lexer.from_string("v")
        lexer.advance()
        assert lexer.advance().kind == ParseToken.END_OF_FILE
        assert lexer.advance().kind == ParseToken.END_OF_FILE
        assert lexer.peek().kind == ParseToken.END_OF_FILE

    def test_tokenize_ends_with_end_of_file(self):
        tokens = list(Lexer.from_string("v 1 2 3\n").tokenize())
        assert [t.kind for t in tokens] == [
            ParseToken.VERTEX,
            ParseToken.INTEGER, ParseToken.INTEGER, ParseToken.INTEGER,
            ParseToken.END_OF_STATEMENT,
            ParseToken.END_OF_FILE,
        ]


# =============================================================================
# Position Tracking Tests
# =============================================================================

class TestPositions:
    """Tokens carry the 1-based line and column of their first character."""

    def test_positions(self):
        tokens = tokenize("v 1\n  vt")
        assert (tokens[0].line, tokens[0].column) == (1, 1)
        assert (tokens[1].line, tokens[1].column) == (1, 3)
        assert (tokens[2].line, tokens[2].column) == (1, 4)
        assert (tokens[3].line, tokens[3].column) == (2, 3)

    def test_multi_character_token_position(self):
        tokens = tokenize("vn -12.5")
        assert tokens[1].column == 4

    def test_location_includes_filename(self):
        token = single("v")
        assert str(token.location) == "<test>:1:1"


# =============================================================================
# Error Tests
# =============================================================================

class TestErrors:
    """Malformed input is a fatal LexicalError."""

    def test_unexpected_character(self):
        with pytest.raises(LexicalError) as exc_info:
            tokenize("$")
        error = exc_info.value
        assert error.character == "$"
        assert error.kind == ErrorKind.LEXICAL
        assert (error.line, error.column) == (1, 1)

    def test_error_position_on_later_line(self):
        with pytest.raises(LexicalError) as exc_info:
            tokenize("v 1 2 3\nv 1 $ 3\n")
        assert exc_info.value.line == 2
        assert exc_info.value.column == 5
        assert "unexpected character '$'" in str(exc_info.value)

    def test_error_after_comment(self):
        with pytest.raises(LexicalError) as exc_info:
            tokenize("# comment\n# another\n@")
        assert exc_info.value.line == 3
        assert exc_info.value.column == 1

    def test_underscore_outside_skipped_statement(self):
        with pytest.raises(LexicalError):
            tokenize("v_1")

    def test_bare_sign(self):
        with pytest.raises(LexicalError) as exc_info:
            tokenize("v - 1")
        assert exc_info.value.column == 3

    def test_bare_decimal_point(self):
        with pytest.raises(LexicalError):
            tokenize(". 1")

    def test_exponent_without_digits(self):
        with pytest.raises(LexicalError):
            tokenize("1.5e")

    def test_exponent_sign_without_digits(self):
        with pytest.raises(LexicalError):
            tokenize("1.5e- 2")

    def test_out_of_float32_range(self):
        with pytest.raises(LexicalError) as exc_info:
            tokenize("1e39")
        assert "out of range" in str(exc_info.value)

    def test_huge_exponent(self):
        with pytest.raises(LexicalError):
            tokenize("1e100000")
