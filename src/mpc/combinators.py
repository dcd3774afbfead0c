"""Combinators that build larger parsers out of smaller ones."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, TypeVar

from mpc.core import Parser
from mpc.errors import GrammarError
from mpc.state import ParseResult, ParserState

T = TypeVar("T")
S = TypeVar("S")
U = TypeVar("U")

# (left, operator, right) -> combined
Combiner = Callable[[T, S, T], T]


# ── Repetition ───────────────────────────────────────────────────


def _repeat(p: Parser[T], ps: ParserState, name: str) -> list[T]:
    values: list[T] = []
    while True:
        before = ps.position
        r = p.parse(ps)
        if not r.success:
            return values
        if ps.position == before:
            raise GrammarError(f"{name}() applied to a parser that succeeded without consuming input")
        values.append(r.value)


def many(p: Parser[T]) -> Parser[list[T]]:
    """Apply ``p`` until it fails; yield every value. Never fails.

    ``p`` must consume input whenever it succeeds, otherwise the repetition
    could not terminate; that case raises :class:`GrammarError`.
    """
    return Parser(lambda ps: ps.succeed(_repeat(p, ps, "many")))


def many_string(p: Parser[int]) -> Parser[str]:
    """Like :func:`many` for a parser of code points; yields the joined string."""
    return Parser(lambda ps: ps.succeed("".join(map(chr, _repeat(p, ps, "many_string")))))


# ── Sequencing ───────────────────────────────────────────────────


def combine2(p0: Parser[T], p1: Parser[U]) -> Parser[tuple[T, U]]:
    """Run two parsers in order; yield both values as a tuple."""
    def run(ps: ParserState) -> ParseResult[tuple[T, U]]:
        snapshot = ps.snapshot()
        r0 = p0.parse(ps)
        if not r0.success:
            return ps.fail()
        r1 = p1.parse(ps)
        if not r1.success:
            ps.restore(snapshot)
            return ps.fail()
        return ps.succeed((r0.value, r1.value))
    return Parser(run)


def combine3(p0: Parser[T], p1: Parser[U], p2: Parser[S]) -> Parser[tuple[T, U, S]]:
    """Run three parsers in order; yield all values as a tuple."""
    def run(ps: ParserState) -> ParseResult[tuple[T, U, S]]:
        snapshot = ps.snapshot()
        r0 = p0.parse(ps)
        if not r0.success:
            return ps.fail()
        r1 = p1.parse(ps)
        if not r1.success:
            ps.restore(snapshot)
            return ps.fail()
        r2 = p2.parse(ps)
        if not r2.success:
            ps.restore(snapshot)
            return ps.fail()
        return ps.succeed((r0.value, r1.value, r2.value))
    return Parser(run)


def keep_left(a: Parser[T], b: Parser[Any]) -> Parser[T]:
    return a.keep_left(b)


def keep_right(a: Parser[Any], b: Parser[U]) -> Parser[U]:
    return a.keep_right(b)


def between(begin: Parser[Any], inner: Parser[T], end: Parser[Any]) -> Parser[T]:
    return inner.in_between(begin, end)


def transform(p: Parser[T], fn: Callable[[T], U]) -> Parser[U]:
    return p.transform(fn)


def test(p: Parser[T], predicate: Callable[[T], bool]) -> Parser[T]:
    return p.test(predicate)


def optional(p: Parser[T], default: Any = None) -> Parser[T]:
    return p.opt(default)


def except_(p: Parser[T], excluded: Parser[Any]) -> Parser[T]:
    return p.except_(excluded)


# ── Choice ───────────────────────────────────────────────────────


def choice(*choices: Parser[T]) -> Parser[T]:
    """Try each alternative from the same position; first success wins."""
    def run(ps: ParserState) -> ParseResult[T]:
        for p in choices:
            r = p.parse(ps)
            if r.success:
                return ps.succeed(r.value)
        return ps.fail()
    return Parser(run)


@dataclass(frozen=True)
class Case:
    """A :func:`switch_over` branch, selected by any char in ``differentiator``."""

    differentiator: str
    parser: Parser[Any]


def switch_over(default: Parser[T] | None, *cases: Case) -> Parser[T]:
    """Pick a branch by peeking at the next character.

    When no case claims the character (or the input is exhausted), ``default``
    runs if given; otherwise the switch fails. Later cases override earlier
    ones for a shared differentiator.
    """
    table: dict[int, Parser[Any]] = {}
    for case in cases:
        for c in case.differentiator:
            table[ord(c)] = case.parser

    def run(ps: ParserState) -> ParseResult[T]:
        ch = ps.current_char_code()
        p = table.get(ch) if ch is not None else None
        if p is None:
            p = default
        if p is None:
            return ps.fail()
        return p.parse(ps)
    return Parser(run)


# ── Operator chains ──────────────────────────────────────────────


def chain_left(
    p: Parser[T], separator: Parser[S], combiner: Combiner[T, S],
) -> Parser[T]:
    """Parse ``p (separator p)*`` and fold it into a left-leaning tree.

    Stops at the first separator or operand that fails and rewinds to the
    end of the last complete pair, so a dangling separator is left
    unconsumed. Fails only if the first operand fails.
    """
    def run(ps: ParserState) -> ParseResult[T]:
        r = p.parse(ps)
        if not r.success:
            return ps.fail()
        value = r.value
        snapshot = ps.snapshot()
        while True:
            sep = separator.parse(ps)
            if not sep.success:
                break
            other = p.parse(ps)
            if not other.success:
                break
            value = combiner(value, sep.value, other.value)
            snapshot = ps.snapshot()
        ps.restore(snapshot)
        return ps.succeed(value)
    return Parser(run)
