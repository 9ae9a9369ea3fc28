"""
The runtime values produced by the evaluator.

A value is one of three closed variants (integer, float, boolean) and always
carries the span of the sub-expression that produced it.
"""

from typing import Annotated, ClassVar, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt, ValidationError

from ycalc.classes import Span
from ycalc.config import INT128_MAX, INT128_MIN


class BaseValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Name used in type errors, e.g. "cannot apply operator `add` on types `integer` and `boolean`"
    type_name: ClassVar[str]

    span: Span

    def render(self) -> str:
        """The human-readable form shown to users."""
        return repr(self.value)

    def with_span(self, span: Span) -> "BaseValue":
        return self.model_copy(update={"span": span})

    def __str__(self) -> str:
        return self.render()


class IntegerValue(BaseValue):
    type_name: ClassVar[str] = "integer"

    value_type: Literal["integer"] = "integer"
    value: StrictInt = Field(ge=INT128_MIN, le=INT128_MAX)


class FloatValue(BaseValue):
    # JSON has no literal for inf or NaN; they are written as "Infinity", "-Infinity" and "NaN".
    model_config = ConfigDict(frozen=True, ser_json_inf_nan="strings")

    type_name: ClassVar[str] = "float"

    value_type: Literal["float"] = "float"
    value: StrictFloat


class BoolValue(BaseValue):
    type_name: ClassVar[str] = "boolean"

    value_type: Literal["boolean"] = "boolean"
    value: StrictBool

    def render(self) -> str:
        return "true" if self.value else "false"


AnyValue = Union[IntegerValue, FloatValue, BoolValue]
Value = Annotated[AnyValue, Field(discriminator="value_type")]


def value_from_python(obj, span: Span) -> AnyValue:
    """
    Wraps a plain Python bool, int or float (or re-spans an existing value).
    Used to build the constant environment from embedder-supplied data.
    """
    if isinstance(obj, BaseValue):
        return obj.with_span(span)
    # bool first: it is a subclass of int.
    if isinstance(obj, bool):
        return BoolValue(value=obj, span=span)
    if isinstance(obj, int):
        try:
            return IntegerValue(value=obj, span=span)
        except ValidationError as e:
            raise ValueError(f"integer constant {obj} does not fit in 128 bits") from e
    if isinstance(obj, float):
        return FloatValue(value=obj, span=span)
    raise TypeError(f"cannot use a value of type '{type(obj).__name__}' as a constant")
