import math

import pytest
from pydantic import TypeAdapter, ValidationError

from tests.utils.factory_helpers import *
from ycalc.config import INT128_MAX, INT128_MIN
from ycalc.evaluator import BoolValue, FloatValue, IntegerValue, Value, value_from_python


@pytest.mark.parametrize(
    "value, rendered",
    [
        pytest.param(IntegerValue(value=-12, span=get_span()), "-12", id="integer"),
        pytest.param(FloatValue(value=2.0, span=get_span()), "2.0", id="float_integral"),
        pytest.param(FloatValue(value=0.1, span=get_span()), "0.1", id="float_shortest_repr"),
        pytest.param(FloatValue(value=math.inf, span=get_span()), "inf", id="float_infinity"),
        pytest.param(FloatValue(value=-math.inf, span=get_span()), "-inf", id="float_negative_infinity"),
        pytest.param(FloatValue(value=math.nan, span=get_span()), "nan", id="float_nan"),
        pytest.param(BoolValue(value=True, span=get_span()), "true", id="bool_true"),
        pytest.param(BoolValue(value=False, span=get_span()), "false", id="bool_false"),
    ],
)
def test_render(value, rendered):
    assert value.render() == rendered
    assert str(value) == rendered


def test_type_names():
    assert IntegerValue.type_name == "integer"
    assert FloatValue.type_name == "float"
    assert BoolValue.type_name == "boolean"


@pytest.mark.parametrize(
    "value_class, raw",
    [
        pytest.param(IntegerValue, INT128_MAX + 1, id="integer_above_range"),
        pytest.param(IntegerValue, INT128_MIN - 1, id="integer_below_range"),
        pytest.param(IntegerValue, True, id="integer_rejects_bool"),
        pytest.param(IntegerValue, 1.0, id="integer_rejects_float"),
        pytest.param(BoolValue, 1, id="bool_rejects_integer"),
    ],
)
def test_values_are_strict(value_class, raw):
    with pytest.raises(ValidationError):
        value_class(value=raw, span=get_span())


def test_values_are_frozen():
    value = IntegerValue(value=1, span=get_span())
    with pytest.raises(ValidationError):
        value.value = 2


def test_with_span():
    value = IntegerValue(value=1, span=get_span(0, 1))
    moved = value.with_span(get_span(4, 9))
    assert moved == IntegerValue(value=1, span=get_span(4, 9))
    assert value.span == get_span(0, 1)


@pytest.mark.parametrize(
    "raw, expected",
    [
        pytest.param(True, BoolValue(value=True, span=get_span()), id="bool_before_int"),
        pytest.param(7, IntegerValue(value=7, span=get_span()), id="int"),
        pytest.param(0.25, FloatValue(value=0.25, span=get_span()), id="float"),
    ],
)
def test_value_from_python(raw, expected):
    assert value_from_python(raw, get_span()) == expected


def test_value_json_dump_is_discriminated():
    value = evaluate_source("1 + 2")
    dumped = value.model_dump(mode="json")
    assert dumped == {"span": {"start": 0, "end": 5}, "value_type": "integer", "value": 3}
    assert TypeAdapter(Value).validate_python(dumped) == value


@pytest.mark.parametrize(
    "raw, dumped",
    [
        pytest.param(math.inf, "Infinity", id="infinity"),
        pytest.param(-math.inf, "-Infinity", id="negative_infinity"),
        pytest.param(math.nan, "NaN", id="nan"),
    ],
)
def test_non_finite_floats_dump_as_strings(raw, dumped):
    value = FloatValue(value=raw, span=get_span())
    assert value.model_dump(mode="json")["value"] == dumped
    assert value.model_dump_json() == f'{{"span":{{"start":0,"end":0}},"value_type":"float","value":"{dumped}"}}'
