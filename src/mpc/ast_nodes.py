"""AST node definitions for expressions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Protocol, Union

# ── Operators ────────────────────────────────────────────────────


class BinaryOperator(Enum):
    UNKNOWN = auto()  # mapping-table default; never in a parsed tree
    ADD = auto()
    SUBTRACT = auto()
    MULTIPLY = auto()
    DIVIDE = auto()
    EQUAL_TO = auto()
    NOT_EQUAL_TO = auto()


# ── Visitor ──────────────────────────────────────────────────────


class ExpressionVisitor(Protocol):
    def visit_binary(self, op: BinaryOperator, left: Expression, right: Expression) -> None: ...

    def visit_number_literal(self, value: float) -> None: ...

    def visit_identifier(self, name: str) -> None: ...


# ── Expressions ──────────────────────────────────────────────────


@dataclass(frozen=True)
class BinaryExpression:
    op: BinaryOperator
    left: Expression
    right: Expression

    def apply(self, visitor: ExpressionVisitor) -> None:
        visitor.visit_binary(self.op, self.left, self.right)


@dataclass(frozen=True)
class NumberLiteralExpression:
    value: float

    def apply(self, visitor: ExpressionVisitor) -> None:
        visitor.visit_number_literal(self.value)


@dataclass(frozen=True)
class IdentifierExpression:
    name: str

    def apply(self, visitor: ExpressionVisitor) -> None:
        visitor.visit_identifier(self.name)


Expression = Union[BinaryExpression, NumberLiteralExpression, IdentifierExpression]
