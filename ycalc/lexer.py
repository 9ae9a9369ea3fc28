"""
The lexical analyzer: turns source text into a list of `Token`s.

The lexer makes a single left-to-right pass with one character of lookahead and
never backtracks. Spans are tracked in UTF-8 byte offsets while the text of
each token is sliced from the original string.
"""

from typing import List, Optional

from .classes import Operator, Span, Token, TokenKind
from .config import (
    DIGITS,
    DOUBLE_CHAR_OPERATORS,
    EXPONENT_MARKERS,
    IDENTIFIER_CONTINUE,
    IDENTIFIER_START,
    KEYWORDS,
    SINGLE_CHAR_OPERATORS,
    WHITESPACE_CHARS,
)
from .exceptions import ErrorCode, YCalcError

EOF_CHAR = ""


class Lexer:
    def __init__(self, source: str):
        self.source = source
        self.index = 0  # position in `source`, in characters
        self.pos = 0  # position in the encoded source, in bytes

    # --- Character stream ---
    def _peek(self) -> str:
        if self.index < len(self.source):
            return self.source[self.index]
        return EOF_CHAR

    def _bump(self) -> str:
        char = self._peek()
        if char:
            self.index += 1
            self.pos += len(char.encode("utf-8"))
        return char

    def _eat_while(self, chars) -> int:
        """Consumes characters while they belong to `chars`; returns how many were eaten."""
        eaten = 0
        while self._peek() in chars:
            self._bump()
            eaten += 1
        return eaten

    # --- Token builders ---
    def _token(self, kind: TokenKind, start_index: int, start_pos: int, operator: Optional[Operator] = None) -> Token:
        return Token(
            kind=kind,
            text=self.source[start_index : self.index],
            span=Span(start=start_pos, end=self.pos),
            operator=operator,
        )

    def _number(self, start_index: int, start_pos: int) -> Token:
        # The first digit has already been consumed.
        self._eat_while(DIGITS)
        marker = self._peek()

        if marker == ".":
            self._bump()
            self._expect_digits(marker)
            exponent = self._peek()
            if exponent in EXPONENT_MARKERS:
                self._bump()
                self._expect_digits(exponent)
            return self._token(TokenKind.FLOAT, start_index, start_pos)

        if marker in EXPONENT_MARKERS:
            self._bump()
            self._expect_digits(marker)
            return self._token(TokenKind.FLOAT, start_index, start_pos)

        return self._token(TokenKind.INTEGER, start_index, start_pos)

    def _expect_digits(self, marker: str):
        """After a `.` or exponent marker at least one digit is mandatory."""
        if self._eat_while(DIGITS) == 0:
            raise YCalcError(ErrorCode.EXPECTED_NUMBER, Span(start=self.pos, end=self.pos + 1), marker=marker)

    def _identifier(self, start_index: int, start_pos: int) -> Token:
        self._eat_while(IDENTIFIER_CONTINUE)
        text = self.source[start_index : self.index]
        keyword = KEYWORDS.get(text)

        if keyword is None:
            return self._token(TokenKind.IDENTIFIER, start_index, start_pos)
        if keyword in TokenKind.__members__:
            return self._token(TokenKind[keyword], start_index, start_pos)
        return self._token(TokenKind.OPERATOR, start_index, start_pos, Operator[keyword])

    def _operator(self, char: str, start_index: int, start_pos: int) -> Token:
        if char in SINGLE_CHAR_OPERATORS:
            return self._token(TokenKind.OPERATOR, start_index, start_pos, Operator[SINGLE_CHAR_OPERATORS[char]])

        alone, pairs = DOUBLE_CHAR_OPERATORS[char]
        second = self._peek()
        if second in pairs:
            self._bump()
            return self._token(TokenKind.OPERATOR, start_index, start_pos, Operator[pairs[second]])

        if alone is None:
            raise YCalcError(ErrorCode.UNRECOGNIZED_CHARACTER, Span(start=start_pos, end=start_pos + 1), char=char)
        return self._token(TokenKind.OPERATOR, start_index, start_pos, Operator[alone])

    # --- Main loop ---
    def tokenize(self) -> List[Token]:
        """Lexes the whole source. The result always ends with a single EOF token."""
        tokens: List[Token] = []

        while True:
            start_index, start_pos = self.index, self.pos
            char = self._bump()
            if char == EOF_CHAR:
                break

            if char in DIGITS:
                tokens.append(self._number(start_index, start_pos))
            elif char in WHITESPACE_CHARS:
                continue
            elif char in IDENTIFIER_START:
                tokens.append(self._identifier(start_index, start_pos))
            elif char == "(":
                tokens.append(self._token(TokenKind.LPAREN, start_index, start_pos))
            elif char == ")":
                tokens.append(self._token(TokenKind.RPAREN, start_index, start_pos))
            elif char in SINGLE_CHAR_OPERATORS or char in DOUBLE_CHAR_OPERATORS:
                tokens.append(self._operator(char, start_index, start_pos))
            else:
                raise YCalcError(ErrorCode.UNRECOGNIZED_CHARACTER, Span(start=start_pos, end=start_pos + 1), char=char)

        tokens.append(Token(kind=TokenKind.EOF, text="", span=Span(start=self.pos, end=self.pos)))
        return tokens


def tokenize(source: str) -> List[Token]:
    """Convenience wrapper: lex `source` in one call."""
    return Lexer(source).tokenize()
