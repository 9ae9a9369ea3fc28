import re
from types import MappingProxyType
from typing import Mapping, Optional

from ycalc.classes import Operator, Span
from ycalc.config import DEFAULT_CONSTANTS, IDENTIFIER_CONTINUE, IDENTIFIER_START, INT128_MAX, INT128_MIN, KEYWORDS
from ycalc.exceptions import ErrorCode, InternalEvaluatorError, YCalcError
from ycalc.parser.classes import BoolLiteral, Expression, FloatLiteral, Identifier, InfixOperation, IntLiteral, PrefixOperation
from .operations import INFIX_OPERATIONS, PREFIX_OPERATIONS, cast
from .values import AnyValue, BoolValue, FloatValue, IntegerValue, value_from_python

# The literal forms accepted when converting literal text. Both are ASCII-only;
# Python's int()/float() alone would also accept underscores and padding.
INTEGER_LITERAL_REGEX = re.compile(r"[+-]?[0-9]+")
FLOAT_LITERAL_REGEX = re.compile(r"[+-]?(?:inf|infinity|nan|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)", re.IGNORECASE)

MAX_INT128_DIGITS = len(str(INT128_MAX))

# Constants are not tied to any source text.
CONSTANT_SPAN = Span(start=0, end=0)


def _is_identifier(name: str) -> bool:
    return bool(name) and name[0] in IDENTIFIER_START and all(c in IDENTIFIER_CONTINUE for c in name) and name not in KEYWORDS


def build_environment(constants: Optional[Mapping[str, object]] = None) -> Mapping[str, AnyValue]:
    """
    Creates the read-only name -> value mapping used to resolve identifiers:
    the mathematical constants, overridden or extended by `constants`.
    """
    environment = {name: FloatValue(value=value, span=CONSTANT_SPAN) for name, value in DEFAULT_CONSTANTS.items()}

    for name, value in (constants or {}).items():
        if not _is_identifier(name):
            raise ValueError(f"'{name}' is not a valid constant name")
        environment[name] = value_from_python(value, CONSTANT_SPAN)

    return MappingProxyType(environment)


class Evaluator:
    """
    Walks an AST and computes its value.

    The walk is a plain recursion over the tree: each nesting level costs one
    Python stack frame, and operands are evaluated left to right. The first
    error raised aborts the whole evaluation.
    """

    def __init__(self, constants: Optional[Mapping[str, object]] = None):
        self.environment = build_environment(constants)

    def eval(self, expr: Expression) -> AnyValue:
        if isinstance(expr, BoolLiteral):
            return BoolValue(value=expr.value, span=expr.span)

        if isinstance(expr, IntLiteral):
            return self._integer_literal(expr)

        if isinstance(expr, FloatLiteral):
            return self._float_literal(expr)

        if isinstance(expr, Identifier):
            value = self.environment.get(expr.name)
            if value is None:
                raise YCalcError(ErrorCode.UNDEFINED_VARIABLE, expr.span, name=expr.name)
            return value.with_span(expr.span)

        if isinstance(expr, PrefixOperation):
            operation = PREFIX_OPERATIONS.get(expr.op)
            if operation is None:
                raise YCalcError(ErrorCode.UNSUPPORTED_PREFIX_OPERATOR, expr.span, op=expr.op.value)
            return operation(self.eval(expr.operand))

        if isinstance(expr, InfixOperation):
            # The right-hand side of `as` names a type and is never evaluated.
            if expr.op == Operator.AS:
                return cast(self.eval(expr.left), expr.right)

            operation = INFIX_OPERATIONS.get(expr.op)
            if operation is None:
                raise YCalcError(ErrorCode.UNSUPPORTED_INFIX_OPERATOR, expr.span, op=expr.op.value)
            left = self.eval(expr.left)
            right = self.eval(expr.right)
            return operation(left, right)

        raise InternalEvaluatorError(f"Unknown expression node '{type(expr).__name__}'")

    # --- Literals ---
    def _integer_literal(self, expr: IntLiteral) -> IntegerValue:
        text = expr.text
        if not text:
            raise YCalcError(ErrorCode.INVALID_INTEGER_LITERAL, expr.span, text=text, reason="cannot parse integer from empty string")
        if not INTEGER_LITERAL_REGEX.fullmatch(text):
            raise YCalcError(ErrorCode.INVALID_INTEGER_LITERAL, expr.span, text=text, reason="invalid digit found in string")

        # Anything longer than 39 significant digits is out of range; checking
        # first also keeps int() clear of the interpreter's digit limit.
        significant_digits = text.lstrip("+-").lstrip("0")
        value = int(text) if len(significant_digits) <= MAX_INT128_DIGITS else None
        if value is None or not INT128_MIN <= value <= INT128_MAX:
            reason = "number too small to fit in target type" if text.startswith("-") else "number too large to fit in target type"
            raise YCalcError(ErrorCode.INVALID_INTEGER_LITERAL, expr.span, text=text, reason=reason)
        return IntegerValue(value=value, span=expr.span)

    def _float_literal(self, expr: FloatLiteral) -> FloatValue:
        if not FLOAT_LITERAL_REGEX.fullmatch(expr.text):
            raise YCalcError(ErrorCode.INVALID_FLOAT_LITERAL, expr.span, text=expr.text, reason="invalid float literal")
        # Out-of-range literals become +-inf or 0.0 rather than failing.
        return FloatValue(value=float(expr.text), span=expr.span)


def evaluate(expr: Expression, constants: Optional[Mapping[str, object]] = None) -> AnyValue:
    """Evaluates `expr` with a fresh evaluator."""
    return Evaluator(constants).eval(expr)
