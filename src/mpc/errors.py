"""Exceptions and colored diagnostic rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"
    NOTE = "note"


# ANSI color codes
_COLORS = {
    Severity.ERROR: "\033[1;31m",    # bold red
    Severity.WARNING: "\033[1;33m",  # bold yellow
    Severity.NOTE: "\033[1;36m",     # bold cyan
}
_BOLD = "\033[1m"
_BLUE = "\033[1;34m"
_RESET = "\033[0m"

# Diagnostic codes
INVALID_EXPRESSION = "E100"
UNPARSED_INPUT = "W100"


@dataclass
class Diagnostic:
    """A single message reported to the user. Carries no source position."""

    severity: Severity
    code: str
    message: str
    notes: list[str] = field(default_factory=list)


class DiagnosticRenderer:
    """Renders diagnostics as ``error[E100]: message`` with optional colors."""

    def __init__(self, *, color: bool = True) -> None:
        self.color = color

    def _c(self, code: str) -> str:
        return code if self.color else ""

    def render(self, diag: Diagnostic) -> str:
        lines: list[str] = []
        color = _COLORS[diag.severity]

        lines.append(
            f"{self._c(color)}{diag.severity.value}[{diag.code}]{self._c(_RESET)}"
            f"{self._c(_BOLD)}: {diag.message}{self._c(_RESET)}"
        )
        for note in diag.notes:
            lines.append(f"  {self._c(_BLUE)}={self._c(_RESET)} note: {note}")

        return "\n".join(lines)


class MpcError(Exception):
    """Base class for all errors raised by mpc."""


class GrammarError(MpcError):
    """A parser was built or wired incorrectly.

    Raised for programming mistakes, never for input that fails to parse.
    """


class InvalidExpressionError(MpcError):
    """Input text is not a valid expression."""

    def __init__(self, diagnostics: list[Diagnostic]) -> None:
        self.diagnostics = diagnostics
        messages = [d.message for d in diagnostics]
        super().__init__(f"{len(diagnostics)} error(s): {'; '.join(messages)}")
