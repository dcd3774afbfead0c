"""Shared test helpers for the mpc test suite."""

from __future__ import annotations

from mpc.ast_nodes import (
    BinaryExpression,
    BinaryOperator,
    Expression,
    IdentifierExpression,
    NumberLiteralExpression,
)
from mpc.formatter import stringify
from mpc.grammar import parse_expression


def parse_ok(source: str, **kwargs) -> Expression:
    """Parse source, asserting success. Returns the AST."""
    result = parse_expression(source, **kwargs)
    assert result.success, f"expected {source!r} to parse"
    return result.value


def parse_fails(source: str, **kwargs) -> None:
    """Parse source, asserting failure."""
    result = parse_expression(source, **kwargs)
    assert not result.success, f"expected {source!r} to be rejected, got {result.value!r}"
    assert result.value is None


def roundtrip(source: str) -> str:
    """Parse source and serialize it back to text."""
    return stringify(parse_ok(source))


def num(value: float) -> NumberLiteralExpression:
    return NumberLiteralExpression(float(value))


def ident(name: str) -> IdentifierExpression:
    return IdentifierExpression(name)


def binary(left: Expression, op: BinaryOperator, right: Expression) -> BinaryExpression:
    return BinaryExpression(op, left, right)
