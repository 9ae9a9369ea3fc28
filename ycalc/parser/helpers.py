from typing import List

from lark.exceptions import LarkError, UnexpectedEOF, UnexpectedInput, UnexpectedToken

from ycalc.classes import Span, Token, TokenKind
from ycalc.config import FRIENDLY_TOKEN_NAMES
from ycalc.exceptions import ErrorCode, YCalcError


def pre_parsing_checks(tokens: List[Token]):
    """
    Performs simple checks on the token stream before handing it to Lark, to
    provide better error messages than a generic "unexpected token".
    This function checks for:
    1. An input that contains no tokens at all (only whitespace).
    2. Mismatched or unclosed parentheses.
    """

    # --- Check #1: Empty input ---
    if tokens[0].kind == TokenKind.EOF:
        raise YCalcError(ErrorCode.EMPTY_EXPRESSION, tokens[0].span)

    # --- Check #2: Mismatched or Unclosed Parentheses ---
    open_parens: List[Token] = []
    for token in tokens:
        if token.kind == TokenKind.LPAREN:
            open_parens.append(token)
        elif token.kind == TokenKind.RPAREN:
            if not open_parens:
                raise YCalcError(ErrorCode.UNMATCHED_PARENTHESIS, token.span, char=")")
            open_parens.pop()

    if open_parens:
        # Report the innermost parenthesis that was never closed.
        raise YCalcError(ErrorCode.UNMATCHED_PARENTHESIS, open_parens[-1].span, char="(")


def _describe_expected(expected) -> str:
    friendly_expected = [FRIENDLY_TOKEN_NAMES.get(e, e) for e in sorted(expected)]
    if len(friendly_expected) > 1:
        return f"expected one of: {', '.join(friendly_expected[:-1])} or {friendly_expected[-1]}"
    if friendly_expected:
        return f"expected {friendly_expected[0]}"
    return ""


def _translate_lark_error(err: LarkError, source: str) -> YCalcError:
    """Translates a generic LarkError into a ycalc ParseError."""

    source_length = len(source.encode("utf-8"))

    if isinstance(err, UnexpectedToken):
        found_token = err.token
        if found_token.type == "$END":
            span = Span(start=source_length, end=source_length)
            found_str = "but reached the end of the input instead"
        else:
            span = Span(start=found_token.start_pos, end=found_token.end_pos)
            found_str = f"but found `{found_token.value}` instead"

        expected_str = _describe_expected(err.expected)
        details = f"{expected_str}, {found_str}" if expected_str else f"found unexpected token `{found_token.value}`"
        return YCalcError(ErrorCode.UNEXPECTED_TOKEN, span, details=details)

    if isinstance(err, UnexpectedEOF):
        span = Span(start=source_length, end=source_length)
        expected_str = _describe_expected(err.expected)
        details = f"{expected_str}, but reached the end of the input instead" if expected_str else "unexpected end of the input"
        return YCalcError(ErrorCode.UNEXPECTED_TOKEN, span, details=details)

    position = getattr(err, "pos_in_stream", None)
    if isinstance(err, UnexpectedInput) and position is not None and 0 <= position <= source_length:
        return YCalcError(ErrorCode.PARSING_ERROR, Span(start=position, end=position), details=str(err))

    # Fallback for any other Lark error
    return YCalcError(ErrorCode.PARSING_ERROR, Span(start=source_length, end=source_length), details=str(err))
