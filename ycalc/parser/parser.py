import os

from lark import Lark, LarkError, Token, Transformer
from lark.lexer import Lexer

from ycalc.classes import Operator, Span, TokenKind
from ycalc.lexer import tokenize
from .classes import *
from .helpers import _translate_lark_error, pre_parsing_checks

# Lark terminal names for the non-operator token kinds; operator tokens use
# their Operator member name (ADD, POW, BIT_SHIFT_L, ...).
LARK_TERMINALS = {
    TokenKind.INTEGER: "INTEGER",
    TokenKind.FLOAT: "FLOAT",
    TokenKind.IDENTIFIER: "IDENTIFIER",
    TokenKind.TRUE: "TRUE",
    TokenKind.FALSE: "FALSE",
    TokenKind.LPAREN: "LPAR",
    TokenKind.RPAREN: "RPAR",
}


class YCalcLarkLexer(Lexer):
    """
    Feeds the tokens of the hand-written `ycalc.lexer.Lexer` to Lark.
    Lexical errors surface from here as `YCalcError`s, before Lark sees any
    token, and so do the pre-parsing checks.
    """

    def __init__(self, lexer_conf):
        pass

    def lex(self, data):
        tokens = tokenize(data)
        pre_parsing_checks(tokens)

        for token in tokens:
            if token.kind == TokenKind.EOF:
                break
            token_type = token.operator.name if token.kind == TokenKind.OPERATOR else LARK_TERMINALS[token.kind]
            yield Token(token_type, token.text, start_pos=token.span.start, end_pos=token.span.end)


LARK_PARSER = None

try:
    # Use importlib.resources for robust package data access
    from importlib.resources import files as pkg_files

    ycalc_grammar = (pkg_files("ycalc.parser") / "ycalc.lark").read_text()
    LARK_PARSER = Lark(ycalc_grammar, start="start", parser="lalr", lexer=YCalcLarkLexer)
except (ImportError, FileNotFoundError, ModuleNotFoundError):
    # Fallback for development checkouts that are not installed as a package
    grammar_path = os.path.join(os.path.dirname(__file__), "ycalc.lark")
    with open(grammar_path, "r") as f:
        ycalc_grammar = f.read()
    LARK_PARSER = Lark(ycalc_grammar, start="start", parser="lalr", lexer=YCalcLarkLexer)


class YCalcTransformer(Transformer):
    """
    Transforms the Lark parse tree into the pydantic AST.
    Each method is called when Lark reaches a rule, alias or terminal with the
    same name; the transformation starts from the atoms and works upwards.
    Precedence is already encoded in the shape of the tree, so the only work
    left is turning tokens into nodes and stretching spans over them.
    """

    # --- Helper methods for creating spans ---
    def _create_span_from_token(self, token: Token) -> Span:
        return Span(start=token.start_pos, end=token.end_pos)

    def _get_span_from_items(self, items: list) -> Span:
        """Calculates a Span that covers a list of tokens and/or AST nodes."""
        first, last = items[0], items[-1]
        start = first.span.start if isinstance(first, ASTNode) else first.start_pos
        end = last.span.end if isinstance(last, ASTNode) else last.end_pos
        return Span(start=start, end=end)

    # --- Terminal Transformations ---
    def INTEGER(self, token: Token):
        return IntLiteral(text=token.value, span=self._create_span_from_token(token))

    def FLOAT(self, token: Token):
        return FloatLiteral(text=token.value, span=self._create_span_from_token(token))

    def TRUE(self, token: Token):
        return BoolLiteral(value=True, span=self._create_span_from_token(token))

    def FALSE(self, token: Token):
        return BoolLiteral(value=False, span=self._create_span_from_token(token))

    def IDENTIFIER(self, token: Token):
        return Identifier(name=token.value, span=self._create_span_from_token(token))

    # --- Rule Transformations ---
    def infix(self, items):
        left, op, right = items
        return InfixOperation(op=Operator[op.type], left=left, right=right, span=self._get_span_from_items(items))

    def prefix(self, items):
        op, operand = items
        return PrefixOperation(op=Operator[op.type], operand=operand, span=self._get_span_from_items(items))

    def group(self, items):
        # The parentheses belong to the span of the expression they wrap.
        _lpar, expression, _rpar = items
        return expression.model_copy(update={"span": self._get_span_from_items(items)})

    def start(self, items):
        return items[0]


def parse_expression(source: str) -> Expression:
    """Lexes and parses `source` into an AST."""

    try:
        parse_tree = LARK_PARSER.parse(source)
        return YCalcTransformer().transform(parse_tree)
    except LarkError as e:
        raise _translate_lark_error(e, source) from e
