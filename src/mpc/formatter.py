"""Visitor-based serializer for expression ASTs.

Every binary node is fully parenthesized, so the output re-parses to the same
tree regardless of precedence.
"""

from __future__ import annotations

import math

from mpc.ast_nodes import BinaryOperator, Expression

_SYMBOLS: dict[BinaryOperator, str] = {
    BinaryOperator.ADD: "+",
    BinaryOperator.SUBTRACT: "-",
    BinaryOperator.MULTIPLY: "*",
    BinaryOperator.DIVIDE: "/",
    BinaryOperator.EQUAL_TO: "=",
    BinaryOperator.NOT_EQUAL_TO: "<>",
}

_UNKNOWN_SYMBOL = "<UNK>"


def operator_symbol(op: BinaryOperator) -> str:
    return _SYMBOLS.get(op, _UNKNOWN_SYMBOL)


def format_number(value: float) -> str:
    """Shortest decimal text for ``value``; integral values drop the ``.0``."""
    if math.isinf(value):
        # Overflows back to the same infinity when re-parsed.
        return ("-" if value < 0 else "") + "1" + "0" * 309
    if math.isfinite(value) and value.is_integer():
        return str(int(value))
    return repr(value)


class ExpressionSerializer:
    """Accumulates the text of the visited expression in :attr:`parts`."""

    def __init__(self) -> None:
        self.parts: list[str] = []

    def visit_binary(self, op: BinaryOperator, left: Expression, right: Expression) -> None:
        self.parts.append("(")
        left.apply(self)
        self.parts.append(f" {operator_symbol(op)} ")
        right.apply(self)
        self.parts.append(")")

    def visit_number_literal(self, value: float) -> None:
        self.parts.append(format_number(value))

    def visit_identifier(self, name: str) -> None:
        self.parts.append(name)

    def __str__(self) -> str:
        return "".join(self.parts)


def stringify(expr: Expression) -> str:
    """Render ``expr`` as fully parenthesized infix text."""
    serializer = ExpressionSerializer()
    expr.apply(serializer)
    return str(serializer)
