"""
Defines the formal data structures shared by every stage: source spans,
operators and the tokens produced by the lexer.

Spans are half-open byte offsets into the UTF-8 encoded source text, so that an
embedder can point at the exact offending substring when reporting an error.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, NonNegativeInt, model_validator

# --- Core Data Structures ---


class Span(BaseModel):
    """A half-open `[start, end)` byte range in the source text."""

    model_config = ConfigDict(frozen=True)

    start: NonNegativeInt
    end: NonNegativeInt

    @model_validator(mode="after")
    def _check_order(self) -> "Span":
        if self.start > self.end:
            raise ValueError(f"span start {self.start} is after its end {self.end}")
        return self

    @classmethod
    def combine(cls, left: "Span", right: "Span") -> "Span":
        """The span running from the start of `left` to the end of `right`."""
        return cls(start=left.start, end=right.end)


class Operator(str, Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    INTDIV = "//"
    MOD = "%"
    POW = "**"
    BIT_SHIFT_L = "<<"
    BIT_SHIFT_R = ">>"
    BAND = "&"
    BOR = "|"
    BXOR = "^"
    BNOT = "~"
    LAND = "&&"
    LOR = "||"
    LNOT = "!"
    AS = "as"
    EQL = "=="
    NEQL = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="


class TokenKind(str, Enum):
    INTEGER = "integer"
    FLOAT = "float"
    IDENTIFIER = "identifier"
    TRUE = "true"
    FALSE = "false"
    LPAREN = "lparen"
    RPAREN = "rparen"
    OPERATOR = "operator"
    EOF = "eof"


class Token(BaseModel):
    """A single lexical unit. `operator` is set only for OPERATOR tokens."""

    model_config = ConfigDict(frozen=True)

    kind: TokenKind
    text: str
    span: Span
    operator: Optional[Operator] = None

    @model_validator(mode="after")
    def _check_operator(self) -> "Token":
        if (self.kind == TokenKind.OPERATOR) != (self.operator is not None):
            raise ValueError("only operator tokens carry an operator")
        return self
