"""mpc: monadic parser combinators and an expression grammar."""

from mpc.core import Forward, Parser, circular, fail, parse, parser, success
from mpc.state import ParseResult, ParserState, Snapshot

__version__ = "0.1.0"

__all__ = [
    "Forward",
    "ParseResult",
    "Parser",
    "ParserState",
    "Snapshot",
    "__version__",
    "circular",
    "fail",
    "parse",
    "parser",
    "success",
]
