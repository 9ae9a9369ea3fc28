import pytest

from ycalc.classes import Operator, Span, TokenKind
from ycalc.exceptions import ErrorCode, ErrorKind, YCalcError
from ycalc.lexer import Lexer, tokenize

# This file tests the lexer in isolation:
# 1) integer and float literals -> "nu" -> pytest id
# 2) identifiers and keywords -> "id"
# 3) operators, including the two-character ones resolved by lookahead -> "op"
# 4) whitespace handling and byte spans -> "ws"
# The sad paths check both the error code and the span of the offending character.


@pytest.mark.parametrize(
    "source, texts",
    [
        pytest.param("12831984", ["12831984"], id="nu_integer"),
        pytest.param("8", ["8"], id="nu_integer_single"),
        pytest.param("1283 1984", ["1283", "1984"], id="nu_integer_ws"),
        pytest.param("1 9", ["1", "9"], id="nu_integer_ws_single"),
        pytest.param("007", ["007"], id="nu_leading_zeros_kept"),
    ],
)
def test_integer_literals(source, texts):
    tokens = tokenize(source)
    assert [t.kind for t in tokens[:-1]] == [TokenKind.INTEGER] * len(texts)
    assert [t.text for t in tokens[:-1]] == texts


def test_float_literals():
    tokens = tokenize("8.10 1230E219 1023.123e39")
    assert [t.kind for t in tokens] == [TokenKind.FLOAT, TokenKind.FLOAT, TokenKind.FLOAT, TokenKind.EOF]
    assert [t.text for t in tokens[:3]] == ["8.10", "1230E219", "1023.123e39"]


@pytest.mark.parametrize(
    "source",
    [
        pytest.param("8.10", id="nu_decimal"),
        pytest.param("1230E219", id="nu_exponent_upper"),
        pytest.param("1023.123e39", id="nu_decimal_exponent"),
        pytest.param("0.0", id="nu_zero"),
    ],
)
def test_float_literal_is_a_single_token(source):
    tokens = tokenize(source)
    assert len(tokens) == 2
    assert tokens[0].kind == TokenKind.FLOAT
    assert tokens[0].text == source
    assert tokens[0].span == Span(start=0, end=len(source))


@pytest.mark.parametrize(
    "source, marker, span",
    [
        pytest.param("8.", ".", Span(start=2, end=3), id="nu_dot_at_eof"),
        pytest.param("8.  ", ".", Span(start=2, end=3), id="nu_dot_then_space"),
        pytest.param("8e", "e", Span(start=2, end=3), id="nu_lower_exponent"),
        pytest.param("8E", "E", Span(start=2, end=3), id="nu_upper_exponent"),
        pytest.param("8.10e", "e", Span(start=5, end=6), id="nu_decimal_lower_exponent"),
        pytest.param("8.12E", "E", Span(start=5, end=6), id="nu_decimal_upper_exponent"),
        pytest.param("8.e5", ".", Span(start=2, end=3), id="nu_exponent_right_after_dot"),
        pytest.param("1 + 2.x", ".", Span(start=6, end=7), id="nu_dot_then_letter"),
        pytest.param("1e-400", "e", Span(start=2, end=3), id="nu_signed_exponent"),
    ],
)
def test_malformed_number(source, marker, span):
    with pytest.raises(YCalcError) as excinfo:
        tokenize(source)

    assert excinfo.value.code == ErrorCode.EXPECTED_NUMBER
    assert excinfo.value.kind == ErrorKind.LEX_ERROR
    assert excinfo.value.span == span
    assert excinfo.value.message == f"expected number after `{marker}`"


def test_number_followed_by_identifier_is_two_tokens():
    tokens = tokenize("1abc")
    assert [(t.kind, t.text) for t in tokens[:-1]] == [(TokenKind.INTEGER, "1"), (TokenKind.IDENTIFIER, "abc")]


@pytest.mark.parametrize(
    "source, kind, operator",
    [
        pytest.param("as", TokenKind.OPERATOR, Operator.AS, id="id_as_keyword"),
        pytest.param("true", TokenKind.TRUE, None, id="id_true"),
        pytest.param("false", TokenKind.FALSE, None, id="id_false"),
        pytest.param("float", TokenKind.IDENTIFIER, None, id="id_type_name_is_identifier"),
        pytest.param("asx", TokenKind.IDENTIFIER, None, id="id_keyword_prefix"),
        pytest.param("True", TokenKind.IDENTIFIER, None, id="id_keywords_are_case_sensitive"),
        pytest.param("_a1", TokenKind.IDENTIFIER, None, id="id_underscore_start"),
    ],
)
def test_identifiers_and_keywords(source, kind, operator):
    token = tokenize(source)[0]
    assert token.kind == kind
    assert token.operator == operator
    assert token.text == source


def test_identifier_expression():
    tokens = tokenize("pi * 8 as float ** 2")
    assert tokens[0].text == "pi"
    assert tokens[0].kind == TokenKind.IDENTIFIER
    assert tokens[1].operator == Operator.MUL
    assert tokens[2].text == "8"
    assert tokens[3].operator == Operator.AS
    assert tokens[4].text == "float"
    assert tokens[4].kind == TokenKind.IDENTIFIER
    assert tokens[5].operator == Operator.POW
    assert tokens[6].text == "2"
    assert tokens[7].kind == TokenKind.EOF


def test_all_operators_in_order():
    tokens = tokenize("// && & | || + - == != / > < >> << >= <= ! ~ ** ^ % ( )")

    operators = [t.operator for t in tokens[:21]]
    assert operators == [
        Operator.INTDIV,
        Operator.LAND,
        Operator.BAND,
        Operator.BOR,
        Operator.LOR,
        Operator.ADD,
        Operator.SUB,
        Operator.EQL,
        Operator.NEQL,
        Operator.DIV,
        Operator.GT,
        Operator.LT,
        Operator.BIT_SHIFT_R,
        Operator.BIT_SHIFT_L,
        Operator.GE,
        Operator.LE,
        Operator.LNOT,
        Operator.BNOT,
        Operator.POW,
        Operator.BXOR,
        Operator.MOD,
    ]
    assert [t.kind for t in tokens[21:]] == [TokenKind.LPAREN, TokenKind.RPAREN, TokenKind.EOF]


@pytest.mark.parametrize(
    "source, operators",
    [
        pytest.param("***", [Operator.POW, Operator.MUL], id="op_pow_then_mul"),
        pytest.param("!!", [Operator.LNOT, Operator.LNOT], id="op_double_not"),
        pytest.param("|||", [Operator.LOR, Operator.BOR], id="op_lor_then_bor"),
        pytest.param("-1", [Operator.SUB], id="op_minus_is_never_part_of_a_number"),
    ],
)
def test_operator_lookahead_is_greedy(source, operators):
    tokens = [t for t in tokenize(source) if t.kind == TokenKind.OPERATOR]
    assert [t.operator for t in tokens] == operators


def test_bare_equals_after_operator():
    # `<<=` is a shift followed by a lone `=`, which is not an operator.
    with pytest.raises(YCalcError) as excinfo:
        tokenize("<<=")
    assert excinfo.value.code == ErrorCode.UNRECOGNIZED_CHARACTER
    assert excinfo.value.span == Span(start=2, end=3)


def test_two_character_operator_spans():
    tokens = tokenize("1 >= 2")
    assert tokens[1].operator == Operator.GE
    assert tokens[1].text == ">="
    assert tokens[1].span == Span(start=2, end=4)


@pytest.mark.parametrize(
    "source, char, span",
    [
        pytest.param("=", "=", Span(start=0, end=1), id="op_bare_equals"),
        pytest.param("1 = 2", "=", Span(start=2, end=3), id="op_assignment_is_not_supported"),
        pytest.param("#", "#", Span(start=0, end=1), id="op_unknown_symbol"),
        pytest.param("1 , 2", ",", Span(start=2, end=3), id="op_comma"),
        pytest.param("1\u00a0", "\u00a0", Span(start=1, end=2), id="ws_nbsp_is_not_whitespace"),
        pytest.param("é", "é", Span(start=0, end=1), id="id_non_ascii_letter"),
        pytest.param(".5", ".", Span(start=0, end=1), id="nu_leading_dot"),
    ],
)
def test_unrecognized_character(source, char, span):
    with pytest.raises(YCalcError) as excinfo:
        tokenize(source)

    assert excinfo.value.code == ErrorCode.UNRECOGNIZED_CHARACTER
    assert excinfo.value.kind == ErrorKind.LEX_ERROR
    assert excinfo.value.span == span
    assert excinfo.value.message == f"unrecognized character `{char}`"


def test_spans_and_eof():
    tokens = tokenize("1 + 23")
    assert [t.span for t in tokens] == [
        Span(start=0, end=1),
        Span(start=2, end=3),
        Span(start=4, end=6),
        Span(start=6, end=6),
    ]
    assert tokens[-1].kind == TokenKind.EOF
    assert tokens[-1].text == ""


@pytest.mark.parametrize(
    "source",
    [
        pytest.param("", id="ws_empty"),
        pytest.param(" \t\n\r\x0b\x0c", id="ws_ascii"),
        pytest.param("\u0085\u200e\u200f\u2028\u2029", id="ws_unicode"),
    ],
)
def test_whitespace_only_yields_eof(source):
    tokens = tokenize(source)
    length = len(source.encode("utf-8"))
    assert len(tokens) == 1
    assert tokens[0].kind == TokenKind.EOF
    assert tokens[0].span == Span(start=length, end=length)


def test_spans_are_byte_offsets():
    # U+2028 is whitespace and takes three bytes in UTF-8.
    tokens = tokenize("1\u20282")
    assert tokens[1].text == "2"
    assert tokens[1].span == Span(start=4, end=5)
    assert tokens[2].span == Span(start=5, end=5)


def test_exactly_one_eof_token():
    tokens = Lexer("(1 + 2) * x").tokenize()
    assert [t.kind for t in tokens].count(TokenKind.EOF) == 1
    assert tokens[-1].kind == TokenKind.EOF
