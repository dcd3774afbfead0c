"""Shared pytest fixtures for the mpc test suite."""

from __future__ import annotations

import pytest
from click.testing import CliRunner


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def isolated_cwd(tmp_path, monkeypatch):
    """Run in an empty temp dir so no stray mpc.toml is picked up."""
    monkeypatch.chdir(tmp_path)
    return tmp_path
