"""The Parser abstraction and its fluent combinators.

A parser wraps a function ``ParserState -> ParseResult``. Every parser obeys
one contract: when it fails, the state is left exactly as it was found.
Primitives get this for free by checking before they consume; anything that
runs more than one step takes a snapshot and restores it on failure.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Generic, TypeVar

from mpc.errors import GrammarError
from mpc.state import ParseResult, ParserState

T = TypeVar("T")
U = TypeVar("U")

logger = logging.getLogger(__name__)

ParseFn = Callable[[ParserState], ParseResult[Any]]


class Parser(Generic[T]):
    """A composable unit of parsing. Runs only when :meth:`parse` is called."""

    def __init__(self, fn: ParseFn) -> None:
        self._fn = fn

    def parse(self, ps: ParserState) -> ParseResult[T]:
        return self._fn(ps)

    # ── Value shaping ────────────────────────────────────────────

    def no_result(self) -> Parser[None]:
        """Discard the value, keep success/failure."""
        def run(ps: ParserState) -> ParseResult[None]:
            if not self.parse(ps).success:
                return ps.fail()
            return ps.succeed(None)
        return Parser(run)

    def result(self, value: U) -> Parser[U]:
        """Replace the value with a constant on success."""
        def run(ps: ParserState) -> ParseResult[U]:
            if not self.parse(ps).success:
                return ps.fail()
            return ps.succeed(value)
        return Parser(run)

    def transform(self, fn: Callable[[T], U]) -> Parser[U]:
        def run(ps: ParserState) -> ParseResult[U]:
            r = self.parse(ps)
            if not r.success:
                return ps.fail()
            return ps.succeed(fn(r.value))
        return Parser(run)

    def opt(self, default: Any = None) -> Parser[T]:
        """Always succeed; yield ``default`` when this parser fails."""
        def run(ps: ParserState) -> ParseResult[T]:
            r = self.parse(ps)
            if not r.success:
                return ps.succeed(default)
            return ps.succeed(r.value)
        return Parser(run)

    # ── Filtering ────────────────────────────────────────────────

    def test(self, predicate: Callable[[T], bool]) -> Parser[T]:
        """Succeed only if the parsed value satisfies ``predicate``."""
        def run(ps: ParserState) -> ParseResult[T]:
            snapshot = ps.snapshot()
            r = self.parse(ps)
            if not r.success:
                return ps.fail()
            if not predicate(r.value):
                ps.restore(snapshot)
                return ps.fail()
            return ps.succeed(r.value)
        return Parser(run)

    def consumed_at_least(self, n: int) -> Parser[T]:
        """Succeed only if at least ``n`` characters were consumed."""
        def run(ps: ParserState) -> ParseResult[T]:
            snapshot = ps.snapshot()
            r = self.parse(ps)
            if not r.success:
                return ps.fail()
            if ps.position < snapshot.position + n:
                ps.restore(snapshot)
                return ps.fail()
            return ps.succeed(r.value)
        return Parser(run)

    def except_(self, excluded: Parser[Any]) -> Parser[T]:
        """Run this parser only where ``excluded`` does not match.

        The lookahead on ``excluded`` is zero-width: it is always undone.
        """
        def run(ps: ParserState) -> ParseResult[T]:
            snapshot = ps.snapshot()
            if excluded.parse(ps).success:
                ps.restore(snapshot)
                return ps.fail()
            r = self.parse(ps)
            if not r.success:
                return ps.fail()
            return ps.succeed(r.value)
        return Parser(run)

    # ── Sequencing ───────────────────────────────────────────────

    def keep_left(self, other: Parser[Any]) -> Parser[T]:
        """Run this then ``other``; keep this parser's value."""
        def run(ps: ParserState) -> ParseResult[T]:
            snapshot = ps.snapshot()
            r = self.parse(ps)
            if not r.success:
                return ps.fail()
            if not other.parse(ps).success:
                ps.restore(snapshot)
                return ps.fail()
            return ps.succeed(r.value)
        return Parser(run)

    def keep_right(self, other: Parser[U]) -> Parser[U]:
        """Run this then ``other``; keep ``other``'s value."""
        def run(ps: ParserState) -> ParseResult[U]:
            snapshot = ps.snapshot()
            if not self.parse(ps).success:
                return ps.fail()
            r = other.parse(ps)
            if not r.success:
                ps.restore(snapshot)
                return ps.fail()
            return ps.succeed(r.value)
        return Parser(run)

    def in_between(self, begin: Parser[Any], end: Parser[Any]) -> Parser[T]:
        """Run ``begin``, this parser, then ``end``; keep the middle value."""
        def run(ps: ParserState) -> ParseResult[T]:
            snapshot = ps.snapshot()
            if not begin.parse(ps).success:
                return ps.fail()
            r = self.parse(ps)
            if not r.success:
                ps.restore(snapshot)
                return ps.fail()
            if not end.parse(ps).success:
                ps.restore(snapshot)
                return ps.fail()
            return ps.succeed(r.value)
        return Parser(run)

    # ── Debugging ────────────────────────────────────────────────

    def log(self, name: str) -> Parser[T]:
        """Trace begin/success/failure of this parser at DEBUG level."""
        def run(ps: ParserState) -> ParseResult[T]:
            logger.debug("%s: begin at %d", name, ps.position)
            r = self.parse(ps)
            if r.success:
                logger.debug("%s: success at %d", name, ps.position)
            else:
                logger.debug("%s: failed at %d", name, ps.position)
            return r
        return Parser(run)


class Forward(Parser[T]):
    """A placeholder parser bound after construction.

    Recursive grammars reference a ``Forward`` before the parser it stands
    for exists, then call :meth:`define` once the grammar is assembled. All
    holders share this object, so they all observe the binding.
    """

    def __init__(self) -> None:
        super().__init__(self._unbound)
        self._target: Parser[T] | None = None

    @property
    def defined(self) -> bool:
        return self._target is not None

    def define(self, target: Parser[T]) -> Parser[T]:
        if self._target is not None:
            raise GrammarError("forward parser is already defined")
        if target is self:
            raise GrammarError("forward parser cannot be defined as itself")
        self._target = target
        self._fn = target.parse
        return target

    def _unbound(self, ps: ParserState) -> ParseResult[T]:
        raise GrammarError("forward parser used before it was defined")


# ── Entry points ─────────────────────────────────────────────────


def parser(fn: ParseFn) -> Parser[Any]:
    """Wrap a raw parse function as a :class:`Parser`."""
    return Parser(fn)


def parse(p: Parser[T], text: str) -> ParseResult[T]:
    """Run ``p`` against a fresh state over ``text``.

    Does not require the whole input to be consumed; compare
    ``result.position`` with ``len(text)`` or add ``eos()`` to the grammar.
    """
    return p.parse(ParserState(text))


def success(value: T) -> Parser[T]:
    """A parser that always succeeds with ``value`` without consuming."""
    return Parser(lambda ps: ps.succeed(value))


def fail() -> Parser[Any]:
    """A parser that always fails."""
    return Parser(lambda ps: ps.fail())


def circular() -> Forward[Any]:
    """Create an unbound :class:`Forward` for a recursive grammar."""
    return Forward()
