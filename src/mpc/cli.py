"""mpc command line: parse an expression and print it back."""

from __future__ import annotations

import logging
import sys
from enum import Enum

import click

from mpc import __version__
from mpc.ast_nodes import Expression
from mpc.config import MpcConfig, discover_config
from mpc.errors import (
    UNPARSED_INPUT,
    Diagnostic,
    DiagnosticRenderer,
    InvalidExpressionError,
    Severity,
)
from mpc.formatter import stringify
from mpc.grammar import expression_from_result, parse_expression


def _read_source(expression: str | None, use_stdin: bool) -> str:
    if use_stdin:
        return sys.stdin.read()
    if expression is None:
        raise click.UsageError("missing EXPRESSION (or pass --stdin)")
    return expression


def _parse_or_exit(
    source: str, config: MpcConfig, renderer: DiagnosticRenderer,
) -> Expression:
    """Parse ``source`` per ``config``; render diagnostics and exit 1 on failure."""
    text = source.strip()
    result = parse_expression(
        text,
        comparisons=config.grammar.comparisons,
        require_end=config.parse.require_end,
    )

    try:
        expr = expression_from_result(result)
    except InvalidExpressionError as e:
        for diag in e.diagnostics:
            click.echo(renderer.render(diag), err=True)
        raise SystemExit(1)

    rest = text[result.position:]
    if rest:
        diag = Diagnostic(
            severity=Severity.WARNING,
            code=UNPARSED_INPUT,
            message=f"unparsed input: {rest!r}",
        )
        click.echo(renderer.render(diag), err=True)

    return expr


def _apply_flags(
    config: MpcConfig, *, basic: bool, partial: bool, no_color: bool,
) -> MpcConfig:
    if basic:
        config.grammar.comparisons = False
    if partial:
        config.parse.require_end = False
    if no_color:
        config.output.color = False
    return config


@click.group()
@click.version_option(__version__, prog_name="mpc")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """Parse arithmetic expressions with monadic parser combinators."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
        )


_grammar_options = [
    click.option("--basic", is_flag=True, help="Disable = and <> comparisons."),
    click.option("--partial", is_flag=True, help="Accept a valid prefix of the input."),
    click.option("--no-color", is_flag=True, help="Plain diagnostics without ANSI colors."),
    click.option("--stdin", "use_stdin", is_flag=True, help="Read the expression from stdin."),
]


def grammar_options(fn):
    for option in reversed(_grammar_options):
        fn = option(fn)
    return fn


@main.command(name="parse")
@click.argument("expression", required=False)
@grammar_options
def parse_cmd(
    expression: str | None, basic: bool, partial: bool, no_color: bool, use_stdin: bool,
) -> None:
    """Parse EXPRESSION and print it fully parenthesized."""
    config = _apply_flags(discover_config(), basic=basic, partial=partial, no_color=no_color)
    renderer = DiagnosticRenderer(color=config.output.color)
    source = _read_source(expression, use_stdin)
    expr = _parse_or_exit(source, config, renderer)
    click.echo(stringify(expr))


@main.command()
@click.argument("expression", required=False)
@grammar_options
def view(
    expression: str | None, basic: bool, partial: bool, no_color: bool, use_stdin: bool,
) -> None:
    """View the AST of EXPRESSION."""
    config = _apply_flags(discover_config(), basic=basic, partial=partial, no_color=no_color)
    renderer = DiagnosticRenderer(color=config.output.color)
    source = _read_source(expression, use_stdin)
    expr = _parse_or_exit(source, config, renderer)
    _dump_ast(expr, 0)


def _dump_ast(node: object, depth: int) -> None:
    """Print a readable AST dump."""
    indent = "  " * depth
    name = type(node).__name__

    if hasattr(node, "__dataclass_fields__"):
        fields = node.__dataclass_fields__  # type: ignore[union-attr]
        click.echo(f"{indent}{name}")
        for field_name in fields:
            value = getattr(node, field_name)
            if hasattr(value, "__dataclass_fields__"):
                click.echo(f"{indent}  {field_name}:")
                _dump_ast(value, depth + 2)
            elif isinstance(value, Enum):
                click.echo(f"{indent}  {field_name}: {value.name}")
            else:
                click.echo(f"{indent}  {field_name}: {value!r}")
    else:
        click.echo(f"{indent}{name}: {node!r}")
