"""Character-level parsers and predicates.

These parsers check before they consume, so on failure the state is
untouched without needing a snapshot (``skip_string`` and ``indention`` are
the exceptions and restore explicitly).
"""

from __future__ import annotations

from typing import Any, Callable, Sequence, TypeVar

from mpc.core import Parser
from mpc.state import ParseResult, ParserState, Satisfy

T = TypeVar("T")

_TAB = 0x09
_LF = 0x0A
_CR = 0x0D
_SPACE = 0x20


# ── Predicates ───────────────────────────────────────────────────


def is_whitespace(ch: int, pos: int) -> bool:
    return ch in (_TAB, _LF, _CR, _SPACE)


def is_tab(ch: int, pos: int) -> bool:
    return ch == _TAB


def is_digit(ch: int, pos: int) -> bool:
    return 0x30 <= ch <= 0x39


def is_letter(ch: int, pos: int) -> bool:
    """ASCII letters only."""
    return 0x41 <= ch <= 0x5A or 0x61 <= ch <= 0x7A


# ── Single characters ────────────────────────────────────────────


def any_char() -> Parser[int]:
    """Consume one character and yield its code point."""
    def run(ps: ParserState) -> ParseResult[int]:
        if ps.is_eos():
            return ps.fail()
        ch = ord(ps.text[ps.position])
        ps.position += 1
        return ps.succeed(ch)
    return Parser(run)


def any_char_of(chars: str, mapper: Callable[[int], T] | None = None) -> Parser[Any]:
    """Consume one character from ``chars``.

    Yields the character's index within ``chars``, or ``mapper(index)``.
    """
    codes = [ord(c) for c in chars]

    def run(ps: ParserState) -> ParseResult[Any]:
        ch = ps.current_char_code()
        if ch is None or ch not in codes:
            return ps.fail()
        index = codes.index(ch)
        ps.position += 1
        return ps.succeed(mapper(index) if mapper is not None else index)
    return Parser(run)


def any_char_of_mapped(chars: str, table: Sequence[T]) -> Parser[T]:
    """Consume one character from ``chars`` and yield ``table[index]``.

    Fails without consuming when the index has no entry in ``table``.
    """
    codes = [ord(c) for c in chars]

    def run(ps: ParserState) -> ParseResult[T]:
        ch = ps.current_char_code()
        if ch is None or ch not in codes:
            return ps.fail()
        index = codes.index(ch)
        if index >= len(table):
            return ps.fail()
        ps.position += 1
        return ps.succeed(table[index])
    return Parser(run)


def satisfy(predicate: Satisfy) -> Parser[int]:
    """Consume one character for which ``predicate(code, 0)`` holds."""
    def run(ps: ParserState) -> ParseResult[int]:
        ch = ps.current_char_code()
        if ch is None or not predicate(ch, 0):
            return ps.fail()
        ps.position += 1
        return ps.succeed(ch)
    return Parser(run)


# ── Runs ─────────────────────────────────────────────────────────


def any_string_of(chars: str) -> Parser[str]:
    """Consume zero or more characters from ``chars``. Never fails."""
    codes = frozenset(ord(c) for c in chars)
    return satisfy_many(lambda ch, pos: ch in codes)


def satisfy_many(predicate: Satisfy) -> Parser[str]:
    """Consume the longest run accepted by ``predicate``. Never fails."""
    return Parser(lambda ps: ps.succeed(ps.advance(predicate)))


def skip_satisfy_many(predicate: Satisfy) -> Parser[int]:
    """Like :func:`satisfy_many` but yields only the count consumed."""
    return Parser(lambda ps: ps.succeed(ps.skip_advance(predicate)))


def skip_string(s: str) -> Parser[None]:
    """Consume exactly ``s`` or nothing at all."""
    def run(ps: ParserState) -> ParseResult[None]:
        snapshot = ps.snapshot()
        n = len(s)
        consumed = ps.skip_advance(lambda ch, pos: pos < n and ord(s[pos]) == ch)
        if consumed != n:
            ps.restore(snapshot)
            return ps.fail()
        return ps.succeed(None)
    return Parser(run)


# ── Boundaries ───────────────────────────────────────────────────


def eos() -> Parser[None]:
    """Succeed only at the end of the input."""
    def run(ps: ParserState) -> ParseResult[None]:
        if not ps.is_eos():
            return ps.fail()
        return ps.succeed(None)
    return Parser(run)


def eol() -> Parser[None]:
    """Match a line end: end of input, ``\\n``, ``\\r`` or ``\\r\\n``."""
    def run(ps: ParserState) -> ParseResult[None]:
        ch = ps.current_char_code()
        if ch is None:
            return ps.succeed(None)
        if ch == _LF:
            ps.position += 1
            return ps.succeed(None)
        if ch == _CR:
            ps.position += 1
            if ps.current_char_code() == _LF:
                ps.position += 1
            return ps.succeed(None)
        return ps.fail()
    return Parser(run)


# ── Indentation ──────────────────────────────────────────────────


def indent() -> Parser[None]:
    """Raise the expected indentation level by one."""
    def run(ps: ParserState) -> ParseResult[None]:
        ps.increase_indent()
        return ps.succeed(None)
    return Parser(run)


def dedent() -> Parser[None]:
    """Lower the expected indentation level; fails at level 0."""
    def run(ps: ParserState) -> ParseResult[None]:
        if not ps.decrease_indent():
            return ps.fail()
        return ps.succeed(None)
    return Parser(run)


def indention() -> Parser[int]:
    """Consume exactly as many tabs as the current indentation level."""
    def run(ps: ParserState) -> ParseResult[int]:
        if ps.indent == 0:
            return ps.succeed(0)
        snapshot = ps.snapshot()
        level = ps.indent
        tabs = ps.skip_advance(lambda ch, pos: pos < level and ch == _TAB)
        if tabs != level:
            ps.restore(snapshot)
            return ps.fail()
        return ps.succeed(tabs)
    return Parser(run)


def any_indention() -> Parser[int]:
    """Skip any amount of whitespace."""
    return skip_satisfy_many(is_whitespace)
