"""Tests for the command line interface."""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from docscope import __main__ as cli_module
from docscope.__main__ import cli


runner = CliRunner()


@pytest.fixture
def patched_app(monkeypatch, app):
    monkeypatch.setattr(cli_module, "_app", lambda: app)
    return app


def test_invalid_mode_is_rejected():
    result = runner.invoke(cli, ["docs", "marketplace-api", "--mode", "verbose"])
    assert result.exit_code == 1
    assert "Invalid mode" in result.output


def test_invalid_scope_is_rejected():
    result = runner.invoke(cli, ["search", "webhook", "--scope", "everything"])
    assert result.exit_code == 1
    assert "Invalid scope" in result.output


def test_invalid_transport_is_rejected():
    result = runner.invoke(cli, ["mcp", "--transport", "carrier-pigeon"])
    assert result.exit_code == 1


def test_resolve_prints_json(patched_app):
    result = runner.invoke(cli, ["--log-level", "error", "resolve", "webhook"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["services"][0]["id"] == "marketplace-api"


def test_search_prints_ranked_results(patched_app):
    args = ["--log-level", "error", "search", "points ledger", "--scope", "services"]
    result = runner.invoke(cli, [*args, "--k", "1"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["results"][0]["document"]["name"] == "points-ledger"


def test_index_prints_stats(patched_app):
    result = runner.invoke(cli, ["--log-level", "error", "index"])
    assert result.exit_code == 0, result.output
    stats = json.loads(result.output)
    assert stats["indexed"] is True
    assert stats["documents"] == 7  # noqa: PLR2004


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
