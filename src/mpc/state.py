"""Parser state: the mutable cursor threaded through every parser."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

T = TypeVar("T")

# (char_code, local_index) -> bool; local_index counts accepted chars in a run
Satisfy = Callable[[int, int], bool]


@dataclass(frozen=True)
class Snapshot:
    """Saved cursor state used to undo a speculative parse."""

    position: int
    indent: int


@dataclass(frozen=True)
class ParseResult(Generic[T]):
    """Outcome of running a parser: success with a value, or failure."""

    success: bool
    value: T | None = None
    position: int = 0

    def __bool__(self) -> bool:
        return self.success


class ParserState:
    """A cursor into the input text plus an indentation counter.

    One state belongs to exactly one parse call. Parsers advance it in place;
    combinators take a snapshot before speculating and restore it on failure.
    """

    def __init__(self, text: str | None) -> None:
        self.text = text or ""
        self.position = 0
        self.indent = 0

    def __repr__(self) -> str:
        return f"ParserState(position={self.position}, indent={self.indent})"

    # ── Backtracking ─────────────────────────────────────────────

    def snapshot(self) -> Snapshot:
        return Snapshot(self.position, self.indent)

    def restore(self, snapshot: Snapshot) -> None:
        self.position = snapshot.position
        self.indent = snapshot.indent

    # ── Indentation ──────────────────────────────────────────────

    def increase_indent(self) -> None:
        self.indent += 1

    def decrease_indent(self) -> bool:
        """Drop one indent level. Returns False (and changes nothing) at 0."""
        if self.indent < 1:
            return False
        self.indent -= 1
        return True

    # ── Scanning ─────────────────────────────────────────────────

    def is_eos(self) -> bool:
        return self.position >= len(self.text)

    def current_char_code(self) -> int | None:
        """Peek at the next code point without consuming it."""
        if self.is_eos():
            return None
        return ord(self.text[self.position])

    @property
    def remainder(self) -> str:
        """The unconsumed tail of the input."""
        return self.text[self.position:]

    def _scan(self, satisfy: Satisfy) -> int:
        text = self.text
        end = len(text)
        pos = self.position
        i = 0
        while pos < end and satisfy(ord(text[pos]), i):
            pos += 1
            i += 1
        return pos

    def advance(self, satisfy: Satisfy) -> str:
        """Consume the longest run accepted by ``satisfy``; return it."""
        begin = self.position
        self.position = self._scan(satisfy)
        return self.text[begin:self.position]

    def skip_advance(self, satisfy: Satisfy) -> int:
        """Like :meth:`advance` but only return how many chars were consumed."""
        begin = self.position
        self.position = self._scan(satisfy)
        return self.position - begin

    # ── Results ──────────────────────────────────────────────────

    def succeed(self, value: Any = None) -> ParseResult[Any]:
        return ParseResult(True, value, self.position)

    def fail(self) -> ParseResult[Any]:
        return ParseResult(False, None, self.position)
