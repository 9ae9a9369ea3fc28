"""
ycalc: a typed arithmetic and boolean expression engine.

    >>> from ycalc import evaluate_expression
    >>> evaluate_expression("4 / 2").render()
    '2.0'
"""

from .classes import Operator, Span, Token, TokenKind
from .evaluator import BoolValue, Evaluator, FloatValue, IntegerValue, Value
from .exceptions import ErrorCode, ErrorKind, YCalcError
from .lexer import Lexer, tokenize
from .parser import parse_expression
from .pipeline import EvaluationPipeline, evaluate_expression
