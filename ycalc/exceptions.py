"""
Custom exception types for the ycalc expression engine.
"""

from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ycalc.classes import Span


class ErrorKind(str, Enum):
    LEX_ERROR = "LexError"
    PARSE_ERROR = "ParseError"
    TYPE_ERROR = "TypeError"
    RUNTIME_ERROR = "RuntimeError"


class ErrorCode(Enum):
    """Every failure the engine can report: its kind and a message template."""

    # --- Lexical Errors ---
    EXPECTED_NUMBER = (ErrorKind.LEX_ERROR, "expected number after `{marker}`")
    UNRECOGNIZED_CHARACTER = (ErrorKind.LEX_ERROR, "unrecognized character `{char}`")

    # --- Syntax Errors ---
    # A token that is valid on its own but not in this position.
    # The 'details' are generated from the parser's expectations.
    UNEXPECTED_TOKEN = (ErrorKind.PARSE_ERROR, "invalid syntax: {details}")
    UNMATCHED_PARENTHESIS = (ErrorKind.PARSE_ERROR, "unmatched parenthesis `{char}`")
    EMPTY_EXPRESSION = (ErrorKind.PARSE_ERROR, "expected an expression but the input is empty")
    # Fallback for any other, less common parsing errors from Lark.
    PARSING_ERROR = (ErrorKind.PARSE_ERROR, "a general parsing error occurred: {details}")

    # --- Type Errors ---
    OPERATOR_TYPE_MISMATCH = (ErrorKind.TYPE_ERROR, "cannot apply operator `{op}` on types `{left_type}` and `{right_type}`")
    NEGATE_TYPE_MISMATCH = (ErrorKind.TYPE_ERROR, "cannot make type `{type}` negative")
    ABSOLUTE_TYPE_MISMATCH = (ErrorKind.TYPE_ERROR, "cannot make type `{type}` positive")
    LOGICAL_NOT_TYPE_MISMATCH = (ErrorKind.TYPE_ERROR, "cannot logically negate `{type}`")
    BITWISE_NOT_TYPE_MISMATCH = (ErrorKind.TYPE_ERROR, "cannot bitwise negate `{type}`")
    UNKNOWN_CAST_TYPE = (ErrorKind.TYPE_ERROR, "unknown type `{name}`")
    INVALID_CAST_OPERAND = (ErrorKind.TYPE_ERROR, "invalid type for `as` type operand")
    UNSUPPORTED_PREFIX_OPERATOR = (ErrorKind.TYPE_ERROR, "prefix operator `{op}` is not supported")
    UNSUPPORTED_INFIX_OPERATOR = (ErrorKind.TYPE_ERROR, "infix operator `{op}` is not supported")

    # --- Runtime Errors ---
    INVALID_INTEGER_LITERAL = (ErrorKind.RUNTIME_ERROR, "error converting `{text}` to integer: {reason}")
    INVALID_FLOAT_LITERAL = (ErrorKind.RUNTIME_ERROR, "error converting `{text}` to float: {reason}")
    UNDEFINED_VARIABLE = (ErrorKind.RUNTIME_ERROR, "no variable `{name}` found")
    ADD_OVERFLOW = (ErrorKind.RUNTIME_ERROR, "failed to add `{left}` and `{right}`: value overflowed")
    SUBTRACT_OVERFLOW = (ErrorKind.RUNTIME_ERROR, "failed to subtract `{right}` from `{left}`: value overflowed")
    MULTIPLY_OVERFLOW = (ErrorKind.RUNTIME_ERROR, "failed to multiply `{left}` by `{right}`: value overflowed")
    INTEGER_DIVIDE_FAILED = (ErrorKind.RUNTIME_ERROR, "failed to integer divide `{left}` by `{right}`: {reason}")
    MODULO_FAILED = (ErrorKind.RUNTIME_ERROR, "failed to take `{left}` modulo `{right}`: {reason}")
    POWER_FAILED = (ErrorKind.RUNTIME_ERROR, "failed to raise `{left}` to the power of `{right}`: {reason}")
    BITSHIFT_FAILED = (ErrorKind.RUNTIME_ERROR, "failed to bitshift `{left}` {direction} by `{right}`: {reason}")
    NEGATE_OVERFLOW = (ErrorKind.RUNTIME_ERROR, "failed to negate `{value}`: value overflowed")
    ABSOLUTE_OVERFLOW = (ErrorKind.RUNTIME_ERROR, "failed to take the absolute value of `{value}`: value overflowed")
    CAST_FAILED = (ErrorKind.RUNTIME_ERROR, "failed to convert `{value}` to `{target}`: {reason}")

    @property
    def kind(self) -> ErrorKind:
        return self.value[0]

    @property
    def template(self) -> str:
        return self.value[1]


class YCalcError(Exception):
    """
    The single error type raised by the lexer, the parser and the evaluator.

    Carries the `ErrorCode`, the derived `ErrorKind`, the offending `Span` and
    the formatted message. Rendering the span against the source is left to
    the caller (see `ycalc.utils.format_diagnostic`).
    """

    def __init__(
        self,
        code: ErrorCode,
        span: Optional["Span"] = None,
        **kwargs,
    ):
        self.code = code
        self.kind = code.kind
        self.span = span
        self.details = kwargs

        # The format string (e.g., "no variable `{name}` found") is populated
        # with any extra data it needs from kwargs.
        self.message = code.template.format(**kwargs)

        super().__init__(self.message)


class InternalEvaluatorError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
