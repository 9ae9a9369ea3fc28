"""
The typed operation rules applied by the evaluator.

Every binary rule takes two already-evaluated values and either returns a new
value spanning both operands or raises a `YCalcError`. Integers behave like
signed 128-bit machine integers (checked arithmetic, overflow is an error),
floats follow IEEE-754 (division by zero and overflow produce inf/NaN rather
than errors).
"""

import math
from typing import Callable, Dict

from ycalc.classes import Operator, Span
from ycalc.config import (
    CAST_TARGET_FLOAT,
    CAST_TARGET_INT,
    INT128_MAX,
    INT128_MIN,
    INT32_MAX,
    INT32_MIN,
    INT_BITS,
    OPERATOR_DISPLAY_NAMES,
    UINT32_MAX,
)
from ycalc.exceptions import ErrorCode, YCalcError
from ycalc.parser.classes import ASTNode, Identifier
from .values import AnyValue, BoolValue, FloatValue, IntegerValue

OUT_OF_RANGE = "out of range integral type conversion attempted"
OVERFLOWED = "value overflowed"
DIVIDE_BY_ZERO = "attempt to divide by zero"
REMAINDER_BY_ZERO = "attempt to calculate the remainder with a divisor of zero"

INT128_MODULUS = 1 << INT_BITS


# --- Numeric helpers ---


def fits_int128(value: int) -> bool:
    return INT128_MIN <= value <= INT128_MAX


def wrap_int128(value: int) -> int:
    """Reinterprets the low 128 bits of `value` as a two's complement integer."""
    value &= INT128_MODULUS - 1
    return value - INT128_MODULUS if value > INT128_MAX else value


def saturate_to_int128(value: float) -> int:
    """Float to integer conversion that truncates, clamps to the 128-bit range and maps NaN to 0."""
    if math.isnan(value):
        return 0
    if math.isinf(value):
        return INT128_MAX if value > 0 else INT128_MIN
    return max(INT128_MIN, min(INT128_MAX, int(value)))


def round_half_away_from_zero(value: float) -> float:
    if math.isnan(value) or math.isinf(value):
        return value
    magnitude = abs(value)
    rounded = math.floor(magnitude)
    if magnitude - rounded >= 0.5:
        rounded += 1
    return math.copysign(rounded, value)


def truncating_divide(left: int, right: int) -> int:
    quotient = abs(left) // abs(right)
    return quotient if (left < 0) == (right < 0) else -quotient


def truncating_remainder(left: int, right: int) -> int:
    remainder = abs(left) % abs(right)
    return -remainder if left < 0 else remainder


def ieee_divide(left: float, right: float) -> float:
    if right == 0.0:
        if left == 0.0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


def ieee_remainder(left: float, right: float) -> float:
    """The C `fmod` remainder: NaN for a zero divisor or an infinite dividend."""
    if right == 0.0 or math.isinf(left):
        return math.nan
    return math.fmod(left, right)


def _is_odd_integral(value: float) -> bool:
    return math.isfinite(value) and value.is_integer() and int(value) % 2 == 1


def ieee_power(base: float, exponent: float) -> float:
    """`math.pow` with the IEEE results instead of Python's OverflowError/ValueError."""
    try:
        return math.pow(base, exponent)
    except OverflowError:
        negative = base < 0 and _is_odd_integral(exponent)
        return -math.inf if negative else math.inf
    except ValueError:
        # Either a zero base with a negative exponent or a negative base with a
        # fractional exponent.
        if base == 0.0:
            return math.copysign(math.inf, base) if _is_odd_integral(exponent) else math.inf
        return math.nan


# --- Error helpers ---


def _type_error(left: AnyValue, right: AnyValue, op: Operator) -> YCalcError:
    return YCalcError(
        ErrorCode.OPERATOR_TYPE_MISMATCH,
        Span.combine(left.span, right.span),
        op=OPERATOR_DISPLAY_NAMES[op.name],
        left_type=left.type_name,
        right_type=right.type_name,
    )


def _both(left: AnyValue, right: AnyValue, value_class) -> bool:
    return isinstance(left, value_class) and isinstance(right, value_class)


def _checked_integer(value: int, code: ErrorCode, left: AnyValue, right: AnyValue, **kwargs) -> IntegerValue:
    span = Span.combine(left.span, right.span)
    if not fits_int128(value):
        raise YCalcError(code, span, left=left.render(), right=right.render(), **kwargs)
    return IntegerValue(value=value, span=span)


def _shift_amount(left: IntegerValue, right: IntegerValue, direction: str) -> int:
    span = Span.combine(left.span, right.span)
    details = dict(left=left.render(), right=right.render(), direction=direction)
    if not 0 <= right.value <= UINT32_MAX:
        raise YCalcError(ErrorCode.BITSHIFT_FAILED, span, reason=OUT_OF_RANGE, **details)
    if right.value >= INT_BITS:
        raise YCalcError(ErrorCode.BITSHIFT_FAILED, span, reason="overflowed", **details)
    return right.value


# --- Arithmetic ---


def add(left: AnyValue, right: AnyValue) -> AnyValue:
    if _both(left, right, IntegerValue):
        return _checked_integer(left.value + right.value, ErrorCode.ADD_OVERFLOW, left, right)
    if _both(left, right, FloatValue):
        return FloatValue(value=left.value + right.value, span=Span.combine(left.span, right.span))
    raise _type_error(left, right, Operator.ADD)


def subtract(left: AnyValue, right: AnyValue) -> AnyValue:
    if _both(left, right, IntegerValue):
        return _checked_integer(left.value - right.value, ErrorCode.SUBTRACT_OVERFLOW, left, right)
    if _both(left, right, FloatValue):
        return FloatValue(value=left.value - right.value, span=Span.combine(left.span, right.span))
    raise _type_error(left, right, Operator.SUB)


def multiply(left: AnyValue, right: AnyValue) -> AnyValue:
    if _both(left, right, IntegerValue):
        return _checked_integer(left.value * right.value, ErrorCode.MULTIPLY_OVERFLOW, left, right)
    if _both(left, right, FloatValue):
        return FloatValue(value=left.value * right.value, span=Span.combine(left.span, right.span))
    raise _type_error(left, right, Operator.MUL)


def divide(left: AnyValue, right: AnyValue) -> FloatValue:
    """True division. Always produces a float, even for two integers."""
    if _both(left, right, IntegerValue) or _both(left, right, FloatValue):
        return FloatValue(value=ieee_divide(float(left.value), float(right.value)), span=Span.combine(left.span, right.span))
    raise _type_error(left, right, Operator.DIV)


def integer_divide(left: AnyValue, right: AnyValue) -> IntegerValue:
    """Truncating division. Float operands are first converted to integers."""
    if _both(left, right, IntegerValue):
        dividend, divisor = left.value, right.value
    elif _both(left, right, FloatValue):
        dividend, divisor = saturate_to_int128(left.value), saturate_to_int128(right.value)
    else:
        raise _type_error(left, right, Operator.INTDIV)

    span = Span.combine(left.span, right.span)
    if divisor == 0:
        raise YCalcError(ErrorCode.INTEGER_DIVIDE_FAILED, span, left=left.render(), right=right.render(), reason=DIVIDE_BY_ZERO)
    return _checked_integer(truncating_divide(dividend, divisor), ErrorCode.INTEGER_DIVIDE_FAILED, left, right, reason=OVERFLOWED)


def modulo(left: AnyValue, right: AnyValue) -> AnyValue:
    span = Span.combine(left.span, right.span)
    if _both(left, right, IntegerValue):
        if right.value == 0:
            raise YCalcError(ErrorCode.MODULO_FAILED, span, left=left.render(), right=right.render(), reason=REMAINDER_BY_ZERO)
        return IntegerValue(value=truncating_remainder(left.value, right.value), span=span)
    if _both(left, right, FloatValue):
        return FloatValue(value=ieee_remainder(left.value, right.value), span=span)
    raise _type_error(left, right, Operator.MOD)


def power(left: AnyValue, right: AnyValue) -> AnyValue:
    if _both(left, right, IntegerValue):
        span = Span.combine(left.span, right.span)
        base, exponent = left.value, right.value
        if not 0 <= exponent <= UINT32_MAX:
            raise YCalcError(ErrorCode.POWER_FAILED, span, left=left.render(), right=right.render(), reason=OUT_OF_RANGE)
        # Any base other than -1, 0 or 1 overflows long before the exponent reaches 128.
        if abs(base) > 1 and exponent >= INT_BITS:
            raise YCalcError(ErrorCode.POWER_FAILED, span, left=left.render(), right=right.render(), reason=OVERFLOWED)
        return _checked_integer(base**exponent, ErrorCode.POWER_FAILED, left, right, reason=OVERFLOWED)
    if _both(left, right, FloatValue):
        return FloatValue(value=ieee_power(left.value, right.value), span=Span.combine(left.span, right.span))
    raise _type_error(left, right, Operator.POW)


# --- Bitwise ---


def bitwise_and(left: AnyValue, right: AnyValue) -> IntegerValue:
    if _both(left, right, IntegerValue):
        return IntegerValue(value=left.value & right.value, span=Span.combine(left.span, right.span))
    raise _type_error(left, right, Operator.BAND)


def bitwise_or(left: AnyValue, right: AnyValue) -> IntegerValue:
    if _both(left, right, IntegerValue):
        return IntegerValue(value=left.value | right.value, span=Span.combine(left.span, right.span))
    raise _type_error(left, right, Operator.BOR)


def bitwise_xor(left: AnyValue, right: AnyValue) -> IntegerValue:
    if _both(left, right, IntegerValue):
        return IntegerValue(value=left.value ^ right.value, span=Span.combine(left.span, right.span))
    raise _type_error(left, right, Operator.BXOR)


def shift_left(left: AnyValue, right: AnyValue) -> IntegerValue:
    """Bits shifted past the 128th are discarded, as with a machine shift."""
    if _both(left, right, IntegerValue):
        amount = _shift_amount(left, right, "left")
        return IntegerValue(value=wrap_int128(left.value << amount), span=Span.combine(left.span, right.span))
    raise _type_error(left, right, Operator.BIT_SHIFT_L)


def shift_right(left: AnyValue, right: AnyValue) -> IntegerValue:
    """Arithmetic shift: the sign bit is preserved."""
    if _both(left, right, IntegerValue):
        amount = _shift_amount(left, right, "right")
        return IntegerValue(value=left.value >> amount, span=Span.combine(left.span, right.span))
    raise _type_error(left, right, Operator.BIT_SHIFT_R)


# --- Logical ---


def logical_and(left: AnyValue, right: AnyValue) -> BoolValue:
    if _both(left, right, BoolValue):
        return BoolValue(value=left.value and right.value, span=Span.combine(left.span, right.span))
    raise _type_error(left, right, Operator.LAND)


def logical_or(left: AnyValue, right: AnyValue) -> BoolValue:
    if _both(left, right, BoolValue):
        return BoolValue(value=left.value or right.value, span=Span.combine(left.span, right.span))
    raise _type_error(left, right, Operator.LOR)


# --- Comparison ---


def structurally_equal(left: AnyValue, right: AnyValue) -> bool:
    # Values of different variants are never equal: `1 == true` is false.
    return type(left) is type(right) and left.value == right.value


def equal(left: AnyValue, right: AnyValue) -> BoolValue:
    return BoolValue(value=structurally_equal(left, right), span=Span.combine(left.span, right.span))


def not_equal(left: AnyValue, right: AnyValue) -> BoolValue:
    return BoolValue(value=not structurally_equal(left, right), span=Span.combine(left.span, right.span))


def _ordering(op: Operator, compare: Callable) -> Callable:
    def rule(left: AnyValue, right: AnyValue) -> BoolValue:
        if _both(left, right, IntegerValue) or _both(left, right, FloatValue):
            return BoolValue(value=compare(left.value, right.value), span=Span.combine(left.span, right.span))
        raise _type_error(left, right, op)

    rule.__name__ = op.name.lower()
    return rule


less_than = _ordering(Operator.LT, lambda a, b: a < b)
less_equal = _ordering(Operator.LE, lambda a, b: a <= b)
greater_than = _ordering(Operator.GT, lambda a, b: a > b)
greater_equal = _ordering(Operator.GE, lambda a, b: a >= b)


# --- Unary ---


def negate(operand: AnyValue) -> AnyValue:
    if isinstance(operand, IntegerValue):
        if not fits_int128(-operand.value):
            raise YCalcError(ErrorCode.NEGATE_OVERFLOW, operand.span, value=operand.render())
        return IntegerValue(value=-operand.value, span=operand.span)
    if isinstance(operand, FloatValue):
        return FloatValue(value=-operand.value, span=operand.span)
    raise YCalcError(ErrorCode.NEGATE_TYPE_MISMATCH, operand.span, type=operand.type_name)


def absolute(operand: AnyValue) -> AnyValue:
    """Unary plus. This is the absolute value, not the identity: `+(-3)` is 3."""
    if isinstance(operand, IntegerValue):
        if not fits_int128(abs(operand.value)):
            raise YCalcError(ErrorCode.ABSOLUTE_OVERFLOW, operand.span, value=operand.render())
        return IntegerValue(value=abs(operand.value), span=operand.span)
    if isinstance(operand, FloatValue):
        return FloatValue(value=abs(operand.value), span=operand.span)
    raise YCalcError(ErrorCode.ABSOLUTE_TYPE_MISMATCH, operand.span, type=operand.type_name)


def logical_not(operand: AnyValue) -> BoolValue:
    if isinstance(operand, BoolValue):
        return BoolValue(value=not operand.value, span=operand.span)
    raise YCalcError(ErrorCode.LOGICAL_NOT_TYPE_MISMATCH, operand.span, type=operand.type_name)


def bitwise_not(operand: AnyValue) -> IntegerValue:
    if isinstance(operand, IntegerValue):
        return IntegerValue(value=~operand.value, span=operand.span)
    raise YCalcError(ErrorCode.BITWISE_NOT_TYPE_MISMATCH, operand.span, type=operand.type_name)


# --- Cast ---


def cast(operand: AnyValue, target: ASTNode) -> AnyValue:
    """
    Applies `operand as <target>`. The target is the unevaluated right-hand
    node and must be the identifier `float` or `int`. The result keeps the
    operand's span.
    """
    if not isinstance(target, Identifier):
        raise YCalcError(ErrorCode.INVALID_CAST_OPERAND, target.span)

    if target.name == CAST_TARGET_FLOAT:
        if isinstance(operand, IntegerValue):
            # Only integers that fit in 32 bits convert exactly.
            if not INT32_MIN <= operand.value <= INT32_MAX:
                raise YCalcError(ErrorCode.CAST_FAILED, operand.span, value=operand.render(), target=target.name, reason=OUT_OF_RANGE)
            return FloatValue(value=float(operand.value), span=operand.span)
        if isinstance(operand, FloatValue):
            return operand
        return FloatValue(value=1.0 if operand.value else 0.0, span=operand.span)

    if target.name == CAST_TARGET_INT:
        if isinstance(operand, IntegerValue):
            return operand
        if isinstance(operand, FloatValue):
            return IntegerValue(value=saturate_to_int128(round_half_away_from_zero(operand.value)), span=operand.span)
        return IntegerValue(value=1 if operand.value else 0, span=operand.span)

    raise YCalcError(ErrorCode.UNKNOWN_CAST_TYPE, target.span, name=target.name)


INFIX_OPERATIONS: Dict[Operator, Callable[[AnyValue, AnyValue], AnyValue]] = {
    Operator.ADD: add,
    Operator.SUB: subtract,
    Operator.MUL: multiply,
    Operator.DIV: divide,
    Operator.INTDIV: integer_divide,
    Operator.MOD: modulo,
    Operator.POW: power,
    Operator.BIT_SHIFT_L: shift_left,
    Operator.BIT_SHIFT_R: shift_right,
    Operator.BAND: bitwise_and,
    Operator.BOR: bitwise_or,
    Operator.BXOR: bitwise_xor,
    Operator.LAND: logical_and,
    Operator.LOR: logical_or,
    Operator.EQL: equal,
    Operator.NEQL: not_equal,
    Operator.LT: less_than,
    Operator.LE: less_equal,
    Operator.GT: greater_than,
    Operator.GE: greater_equal,
}

PREFIX_OPERATIONS: Dict[Operator, Callable[[AnyValue], AnyValue]] = {
    Operator.SUB: negate,
    Operator.ADD: absolute,
    Operator.LNOT: logical_not,
    Operator.BNOT: bitwise_not,
}
