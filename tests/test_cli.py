"""Tests for the mpc CLI, config, and error rendering."""

from __future__ import annotations

import logging

import pytest

from mpc import __version__, cli
from mpc.cli import main
from mpc.config import MpcConfig, discover_config, find_config, load_config
from mpc.errors import (
    Diagnostic,
    DiagnosticRenderer,
    GrammarError,
    InvalidExpressionError,
    MpcError,
    Severity,
)
from mpc.grammar import RECURSION_LIMIT, parse_expression


@pytest.fixture
def tmp_config(isolated_cwd):
    """Write an mpc.toml into the (isolated) working directory."""
    def write(text: str):
        path = isolated_cwd / "mpc.toml"
        path.write_text(text)
        return path
    return write


# --- CLI tests ---


class TestCLI:
    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "parse" in result.output
        assert "view" in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_parse(self, runner, isolated_cwd):
        result = runner.invoke(main, ["parse", "x+3*(y+3*z)"])
        assert result.exit_code == 0
        assert result.output == "(x + (3 * (y + (3 * z))))\n"

    def test_parse_strips_input(self, runner, isolated_cwd):
        result = runner.invoke(main, ["parse", "  1 - 2 - 3  "])
        assert result.exit_code == 0
        assert result.output.strip() == "((1 - 2) - 3)"

    def test_parse_comparison(self, runner, isolated_cwd):
        result = runner.invoke(main, ["parse", "x = y"])
        assert result.exit_code == 0
        assert result.output.strip() == "(x = y)"

    def test_parse_invalid(self, runner, isolated_cwd):
        result = runner.invoke(main, ["parse", "--no-color", "(1+2"])
        assert result.exit_code == 1
        assert "error[E100]: invalid expression" in result.output

    def test_parse_empty_is_invalid(self, runner, isolated_cwd):
        result = runner.invoke(main, ["parse", "--no-color", "   "])
        assert result.exit_code == 1
        assert "invalid expression" in result.output

    def test_parse_basic_rejects_comparison(self, runner, isolated_cwd):
        result = runner.invoke(main, ["parse", "--basic", "x = y"])
        assert result.exit_code == 1

    def test_parse_partial_warns_about_remainder(self, runner, isolated_cwd):
        result = runner.invoke(main, ["parse", "--partial", "--no-color", "1 + 2 )"])
        assert result.exit_code == 0
        assert "(1 + 2)" in result.output
        assert "warning[W100]: unparsed input: ')'" in result.output

    def test_parse_partial_full_input_no_warning(self, runner, isolated_cwd):
        result = runner.invoke(main, ["parse", "--partial", "1 + 2"])
        assert result.exit_code == 0
        assert "warning" not in result.output

    def test_parse_partial_parses_once(self, runner, isolated_cwd, monkeypatch):
        calls = []

        def counting_parse(text, **kwargs):
            calls.append(text)
            return parse_expression(text, **kwargs)

        monkeypatch.setattr(cli, "parse_expression", counting_parse)
        result = runner.invoke(main, ["parse", "--partial", "--no-color", "1 + 2 )"])
        assert result.exit_code == 0
        assert "warning[W100]" in result.output
        assert calls == ["1 + 2 )"]

    def test_parse_partial_invalid(self, runner, isolated_cwd):
        result = runner.invoke(main, ["parse", "--partial", "--no-color", ")"])
        assert result.exit_code == 1
        assert "error[E100]: invalid expression" in result.output
        assert "W100" not in result.output

    def test_parse_deep_nesting(self, runner, isolated_cwd):
        depth = 200
        result = runner.invoke(main, ["parse", "(" * depth + "1" + ")" * depth])
        assert result.exit_code == 0
        assert result.output == "1\n"

    def test_parse_nesting_beyond_limit(self, runner, isolated_cwd):
        depth = RECURSION_LIMIT
        result = runner.invoke(main, ["parse", "--no-color", "(" * depth + "1" + ")" * depth])
        assert result.exit_code == 1
        assert "error[E100]: invalid expression" in result.output

    def test_parse_stdin(self, runner, isolated_cwd):
        result = runner.invoke(main, ["parse", "--stdin"], input="a*b\n")
        assert result.exit_code == 0
        assert result.output.strip() == "(a * b)"

    def test_parse_missing_expression(self, runner, isolated_cwd):
        result = runner.invoke(main, ["parse"])
        assert result.exit_code == 2
        assert "missing EXPRESSION" in result.output

    def test_view(self, runner, isolated_cwd):
        result = runner.invoke(main, ["view", "a + 1"])
        assert result.exit_code == 0
        assert "BinaryExpression" in result.output
        assert "op: ADD" in result.output
        assert "IdentifierExpression" in result.output
        assert "name: 'a'" in result.output
        assert "value: 1.0" in result.output

    def test_view_invalid(self, runner, isolated_cwd):
        result = runner.invoke(main, ["view", "1+"])
        assert result.exit_code == 1

    def test_verbose_enables_debug_logging(self, runner, isolated_cwd, monkeypatch):
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))
        result = runner.invoke(main, ["-v", "parse", "1"])
        assert result.exit_code == 0
        assert calls and calls[0]["level"] == logging.DEBUG

    def test_config_disables_comparisons(self, runner, tmp_config):
        tmp_config("[grammar]\ncomparisons = false\n")
        result = runner.invoke(main, ["parse", "x = y"])
        assert result.exit_code == 1

    def test_config_partial(self, runner, tmp_config):
        tmp_config("[parse]\nrequire_end = false\n[output]\ncolor = false\n")
        result = runner.invoke(main, ["parse", "1 2"])
        assert result.exit_code == 0
        assert "warning[W100]" in result.output


# --- Config tests ---


class TestConfig:
    def test_defaults(self):
        config = MpcConfig()
        assert config.grammar.comparisons is True
        assert config.parse.require_end is True
        assert config.output.color is True

    def test_load_config(self, tmp_config):
        path = tmp_config(
            "[grammar]\ncomparisons = false\n"
            "[parse]\nrequire_end = false\n"
            "[output]\ncolor = false\n"
        )
        config = load_config(path)
        assert config.grammar.comparisons is False
        assert config.parse.require_end is False
        assert config.output.color is False

    def test_load_partial_config(self, tmp_config):
        config = load_config(tmp_config("[output]\ncolor = false\n"))
        assert config.grammar.comparisons is True
        assert config.output.color is False

    def test_find_config_walks_up(self, tmp_config, isolated_cwd):
        path = tmp_config("")
        nested = isolated_cwd / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config(nested) == path.resolve()

    def test_find_config_missing(self, isolated_cwd):
        with pytest.raises(FileNotFoundError):
            find_config(isolated_cwd)

    def test_discover_config_defaults(self, isolated_cwd):
        assert discover_config() == MpcConfig()


# --- Error rendering tests ---


class TestErrorRendering:
    def test_render_plain(self):
        diag = Diagnostic(Severity.ERROR, "E100", "invalid expression")
        text = DiagnosticRenderer(color=False).render(diag)
        assert text == "error[E100]: invalid expression"

    def test_render_notes(self):
        diag = Diagnostic(Severity.WARNING, "W100", "unparsed input", notes=["try --partial"])
        text = DiagnosticRenderer(color=False).render(diag)
        assert "warning[W100]: unparsed input" in text
        assert "= note: try --partial" in text

    def test_render_color(self):
        diag = Diagnostic(Severity.ERROR, "E100", "invalid expression")
        text = DiagnosticRenderer(color=True).render(diag)
        assert "\033[" in text

    def test_exception_hierarchy(self):
        err = InvalidExpressionError([Diagnostic(Severity.ERROR, "E100", "invalid expression")])
        assert isinstance(err, MpcError)
        assert issubclass(GrammarError, MpcError)
        assert "1 error(s): invalid expression" in str(err)
