"""Expression grammar built from the combinator library.

Lexing and parsing are fused: every token parser consumes the whitespace
that *follows* it, so the grammar expects its input to start on a token.
Operators are layered by chaining, tightest first::

    term   := number | identifier | "(" expression ")"
    level1 := term   (("*" | "/")  term)*
    level2 := level1 (("+" | "-")  level1)*
    level3 := level2 (("=" | "<>") level2)*     (comparisons only)
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from typing import Iterator

from mpc.ast_nodes import (
    BinaryExpression,
    BinaryOperator,
    Expression,
    IdentifierExpression,
    NumberLiteralExpression,
)
from mpc.combinators import chain_left, choice
from mpc.core import Parser, circular
from mpc.errors import (
    INVALID_EXPRESSION,
    Diagnostic,
    InvalidExpressionError,
    Severity,
)
from mpc.primitives import (
    any_char_of_mapped,
    any_string_of,
    eos,
    is_letter,
    is_whitespace,
    satisfy_many,
    skip_satisfy_many,
    skip_string,
)
from mpc.state import ParseResult, ParserState

logger = logging.getLogger(__name__)

_DIGITS = "0123456789"


def _make_binary(left: Expression, op: BinaryOperator, right: Expression) -> Expression:
    return BinaryExpression(op, left, right)


def build_grammar(*, comparisons: bool = True) -> Parser[Expression]:
    """Assemble a fresh expression parser.

    With ``comparisons`` the outermost layer also accepts ``=`` and ``<>``.
    """
    whitespace = skip_satisfy_many(is_whitespace)

    add_op = any_char_of_mapped(
        "+-", [BinaryOperator.ADD, BinaryOperator.SUBTRACT],
    ).keep_left(whitespace)

    mul_op = any_char_of_mapped(
        "*/", [BinaryOperator.MULTIPLY, BinaryOperator.DIVIDE],
    ).keep_left(whitespace)

    cmp_op = choice(
        skip_string("=").result(BinaryOperator.EQUAL_TO),
        skip_string("<>").result(BinaryOperator.NOT_EQUAL_TO),
    ).keep_left(whitespace)

    number = (
        any_string_of(_DIGITS)
        .consumed_at_least(1)
        .keep_left(whitespace)
        .transform(lambda digits: NumberLiteralExpression(float(digits)))
    )

    identifier = (
        satisfy_many(is_letter)
        .consumed_at_least(1)
        .keep_left(whitespace)
        .transform(IdentifierExpression)
    )

    expression = circular()

    sub_expression = (
        whitespace.keep_right(expression)
        .in_between(skip_string("("), skip_string(")"))
        .keep_left(whitespace)
    )

    term = choice(number, identifier, sub_expression)
    level1 = chain_left(term, mul_op, _make_binary)
    level2 = chain_left(level1, add_op, _make_binary)
    top = chain_left(level2, cmp_op, _make_binary) if comparisons else level2

    logger.debug("built expression grammar (comparisons=%s)", comparisons)
    return expression.define(top)


EXPRESSION = build_grammar(comparisons=True)
BASIC_EXPRESSION = build_grammar(comparisons=False)

_COMPLETE = EXPRESSION.keep_left(eos())
_BASIC_COMPLETE = BASIC_EXPRESSION.keep_left(eos())

# Each level of parentheses costs roughly 18 Python frames, so this admits
# about 500 levels of nesting. Deeper input is reported as a failed parse.
RECURSION_LIMIT = 10_000


@contextmanager
def _recursion_limit(limit: int) -> Iterator[None]:
    """Temporarily raise the interpreter recursion limit to at least ``limit``."""
    previous = sys.getrecursionlimit()
    if previous < limit:
        sys.setrecursionlimit(limit)
    try:
        yield
    finally:
        sys.setrecursionlimit(previous)


def parse_expression(
    text: str, *, comparisons: bool = True, require_end: bool = True,
) -> ParseResult[Expression]:
    """Parse ``text`` as an expression.

    With ``require_end`` (the default) the whole input must be consumed and
    trailing characters make the parse fail. Without it the longest valid
    prefix is accepted and ``result.position`` marks where parsing stopped.
    Input nested beyond what :data:`RECURSION_LIMIT` allows fails.
    """
    if require_end:
        p = _COMPLETE if comparisons else _BASIC_COMPLETE
    else:
        p = EXPRESSION if comparisons else BASIC_EXPRESSION
    ps = ParserState(text)
    start = ps.snapshot()
    try:
        with _recursion_limit(RECURSION_LIMIT):
            return p.parse(ps)
    except RecursionError:
        logger.debug("expression nested too deeply at %d", ps.position)
        ps.restore(start)
        return ps.fail()


def expression_from_result(result: ParseResult[Expression]) -> Expression:
    """Return the parsed tree or raise :class:`InvalidExpressionError`."""
    if not result.success:
        raise InvalidExpressionError([
            Diagnostic(
                severity=Severity.ERROR,
                code=INVALID_EXPRESSION,
                message="invalid expression",
            ),
        ])
    return result.value


def expression_or_raise(
    text: str, *, comparisons: bool = True, require_end: bool = True,
) -> Expression:
    """Parse ``text`` or raise :class:`InvalidExpressionError`."""
    return expression_from_result(parse_expression(
        text, comparisons=comparisons, require_end=require_end,
    ))
