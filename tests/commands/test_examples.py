"""Tests for --examples flag on CLI commands."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from flightlog.cli import cli

# (CLI args, expected keywords in output)
EXAMPLES_COMMANDS: list[tuple[list[str], list[str]]] = [
    (["record", "--examples"], ["flightlog record VT-ABC departing", "--at"]),
    (["ingest", "--examples"], ["flightlog ingest"]),
    (["sessions", "--examples"], ["flightlog sessions"]),
    (["costs", "--examples"], ["--month 2025-03", "--rate 750"]),
    (["policy", "--examples"], ["flightlog policy"]),
]


@pytest.mark.usefixtures("_isolated_root")
class TestExamples:
    @pytest.mark.parametrize(("args", "keywords"), EXAMPLES_COMMANDS)
    def test_examples(self, cli_runner: CliRunner, args: list[str], keywords: list[str]) -> None:
        result = cli_runner.invoke(cli, args)
        assert result.exit_code == 0, result.output
        assert "Examples for" in result.output
        for keyword in keywords:
            assert keyword in result.output

    def test_help_lists_examples_flag(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["costs", "--help"])
        assert "--examples" in result.output
