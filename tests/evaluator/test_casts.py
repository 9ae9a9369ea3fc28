import pytest

from tests.utils.factory_helpers import *
from ycalc.config import INT128_MAX, INT128_MIN
from ycalc.evaluator import FloatValue, IntegerValue
from ycalc.exceptions import ErrorCode, ErrorKind, YCalcError


@pytest.mark.parametrize(
    "source, value",
    [
        pytest.param("8 as float", 8.0, id="int_to_float"),
        pytest.param("2147483647 as float", 2147483647.0, id="int32_max_to_float"),
        pytest.param("(-2147483648) as float", -2147483648.0, id="int32_min_to_float"),
        pytest.param("2.5 as float", 2.5, id="float_to_float"),
        pytest.param("true as float", 1.0, id="true_to_float"),
        pytest.param("false as float", 0.0, id="false_to_float"),
        pytest.param("8 as float ** 2.0", 64.0, id="cast_before_power"),
        pytest.param("7 as float / 2 as float", 3.5, id="cast_both_operands"),
    ],
)
def test_cast_to_float(source, value):
    result = evaluate_source(source)
    assert isinstance(result, FloatValue)
    assert result.value == value


@pytest.mark.parametrize(
    "source, value",
    [
        pytest.param("8 as int", 8, id="int_to_int"),
        pytest.param("2.4 as int", 2, id="float_rounds_down"),
        pytest.param("2.5 as int", 3, id="float_half_rounds_away_from_zero"),
        pytest.param("(-2.5) as int", -3, id="negative_half_rounds_away_from_zero"),
        pytest.param("(-2.4) as int", -2, id="negative_rounds_toward_zero"),
        pytest.param("0.5 as int", 1, id="half_rounds_up"),
        pytest.param("1e300 as int", INT128_MAX, id="large_float_saturates"),
        pytest.param("(-1e300) as int", INT128_MIN, id="small_float_saturates"),
        pytest.param("(1.0 / 0.0) as int", INT128_MAX, id="infinity_saturates"),
        pytest.param("(-1.0 / 0.0) as int", INT128_MIN, id="negative_infinity_saturates"),
        pytest.param("(0.0 / 0.0) as int", 0, id="nan_is_zero"),
        pytest.param("true as int", 1, id="true_to_int"),
        pytest.param("false as int", 0, id="false_to_int"),
        pytest.param("2.7 as int as float as int", 3, id="chained_casts"),
    ],
)
def test_cast_to_int(source, value):
    result = evaluate_source(source)
    assert isinstance(result, IntegerValue)
    assert result.value == value


@pytest.mark.parametrize(
    "n",
    [
        pytest.param(0, id="zero"),
        pytest.param(1, id="one"),
        pytest.param(-1, id="minus_one"),
        pytest.param(2147483647, id="int32_max"),
        pytest.param(-2147483648, id="int32_min"),
    ],
)
def test_int32_survives_float_round_trip(n):
    result = evaluate_source(f"(({n}) as float) as int")
    assert result == IntegerValue(value=n, span=result.span)


def test_cast_binds_tighter_than_negation():
    # -2147483648 as float is -(2147483648 as float), which is out of range.
    with pytest.raises(YCalcError) as excinfo:
        evaluate_source("-2147483648 as float")

    assert excinfo.value.code == ErrorCode.CAST_FAILED
    assert excinfo.value.kind == ErrorKind.RUNTIME_ERROR
    assert excinfo.value.message == "failed to convert `2147483648` to `float`: out of range integral type conversion attempted"
    assert excinfo.value.span == get_span(1, 11)


@pytest.mark.parametrize(
    "source",
    [
        pytest.param("2147483648 as float", id="past_int32_max"),
        pytest.param("(-2147483649) as float", id="past_int32_min"),
        pytest.param(f"{INT128_MAX} as float", id="int128_max"),
    ],
)
def test_int_to_float_range(source):
    with pytest.raises(YCalcError) as excinfo:
        evaluate_source(source)

    assert excinfo.value.code == ErrorCode.CAST_FAILED


def test_cast_result_keeps_operand_span():
    assert evaluate_source("8 as float").span == get_span(0, 1)


@pytest.mark.parametrize(
    "source, name, span",
    [
        pytest.param("true as bool", "bool", get_span(8, 12), id="bool_is_not_a_cast_target"),
        pytest.param("1 as integer", "integer", get_span(5, 12), id="long_type_name"),
        pytest.param("1 as Float", "Float", get_span(5, 10), id="type_names_are_case_sensitive"),
        pytest.param("1 as pi", "pi", get_span(5, 7), id="constant_is_not_a_type"),
        pytest.param("1 as undefined", "undefined", get_span(5, 14), id="target_is_never_evaluated"),
    ],
)
def test_unknown_cast_type(source, name, span):
    with pytest.raises(YCalcError) as excinfo:
        evaluate_source(source)

    assert excinfo.value.code == ErrorCode.UNKNOWN_CAST_TYPE
    assert excinfo.value.kind == ErrorKind.TYPE_ERROR
    assert excinfo.value.message == f"unknown type `{name}`"
    assert excinfo.value.span == span


@pytest.mark.parametrize(
    "source, span",
    [
        pytest.param("1 as (2)", get_span(5, 8), id="literal_target"),
        pytest.param("1 as (1 + 2)", get_span(5, 12), id="expression_target"),
        pytest.param("1 as true", get_span(5, 9), id="bool_target"),
        pytest.param("1 as 2.0", get_span(5, 8), id="float_target"),
    ],
)
def test_invalid_cast_operand(source, span):
    with pytest.raises(YCalcError) as excinfo:
        evaluate_source(source)

    assert excinfo.value.code == ErrorCode.INVALID_CAST_OPERAND
    assert excinfo.value.kind == ErrorKind.TYPE_ERROR
    assert excinfo.value.message == "invalid type for `as` type operand"
    assert excinfo.value.span == span


def test_cast_operand_is_evaluated_before_the_target_is_checked():
    with pytest.raises(YCalcError) as excinfo:
        evaluate_source("(1 // 0) as bool")

    assert excinfo.value.code == ErrorCode.INTEGER_DIVIDE_FAILED


def test_parenthesized_type_name():
    # Parentheses do not change the node, so `(float)` still names the type.
    result = evaluate_source("1 as (float)")
    assert result == FloatValue(value=1.0, span=get_span(0, 1))
