"""
Defines the formal data structures (contracts) for the Abstract Syntax Tree (AST)
produced by the parser stage and consumed by the evaluator.

Each node is a pydantic model and includes a `Span` covering every token of the
sub-expression it represents (parentheses included), enabling precise error
reporting in the evaluator.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool

from ycalc.classes import Operator, Span


class ASTNode(BaseModel):
    """A base class for all AST nodes, ensuring they have a span."""

    model_config = ConfigDict(frozen=True)

    span: Span


# --- Literals and Identifiers ---


class BoolLiteral(ASTNode):
    expr_type: Literal["bool_literal"] = "bool_literal"
    value: StrictBool


# Numeric literals keep their source text; conversion happens in the evaluator
# so that a failure is reported with the literal's span.
class IntLiteral(ASTNode):
    expr_type: Literal["int_literal"] = "int_literal"
    text: str


class FloatLiteral(ASTNode):
    expr_type: Literal["float_literal"] = "float_literal"
    text: str


class Identifier(ASTNode):
    expr_type: Literal["identifier"] = "identifier"
    name: str


# --- Operations ---


class PrefixOperation(ASTNode):
    expr_type: Literal["prefix"] = "prefix"
    op: Operator
    operand: "Expression"


class InfixOperation(ASTNode):
    expr_type: Literal["infix"] = "infix"
    op: Operator
    left: "Expression"
    right: "Expression"


AnyExpression = Union[BoolLiteral, IntLiteral, FloatLiteral, Identifier, PrefixOperation, InfixOperation]
Expression = Annotated[AnyExpression, Field(discriminator="expr_type")]

PrefixOperation.model_rebuild()
InfixOperation.model_rebuild()
