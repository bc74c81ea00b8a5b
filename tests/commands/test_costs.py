"""Tests for the costs command."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from flightlog.cli import cli


def _seed_ninety_minutes(runner: CliRunner) -> None:
    runner.invoke(cli, ["record", "VT-ABC", "departing", "--at", "2025-03-01T09:00:00Z"])
    runner.invoke(cli, ["record", "VT-ABC", "arriving", "--at", "2025-03-01T10:30:00Z"])


@pytest.mark.usefixtures("_isolated_root")
class TestCostsCommand:
    def test_default_policy(self, cli_runner: CliRunner) -> None:
        _seed_ninety_minutes(cli_runner)
        result = cli_runner.invoke(cli, ["--json", "costs"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)["data"]
        assert data["total_cost"] == 1211
        assert data["items"][0]["total_cost"] == 1211

    def test_human_output(self, cli_runner: CliRunner) -> None:
        _seed_ninety_minutes(cli_runner)
        result = cli_runner.invoke(cli, ["costs"])
        assert result.exit_code == 0, result.output
        assert "1,211" in result.stdout
        assert "total_cost" in result.stdout

    def test_overrides(self, cli_runner: CliRunner) -> None:
        _seed_ninety_minutes(cli_runner)
        result = cli_runner.invoke(cli, ["--json", "costs", "--rate", "100", "--escalation", "0"])
        data = json.loads(result.stdout)["data"]
        assert data["total_cost"] == 150
        assert data["policy"]["base_rate_per_hour"] == 100.0

    def test_out_of_range_override(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "costs", "--tier1-discount", "1.5"])
        assert result.exit_code == 1
        error = json.loads(result.stderr)["error"]
        assert error["code"] == "POLICY_OUT_OF_RANGE"
        assert error["detail"]["errors"]

    def test_non_numeric_rate_is_usage_error(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["costs", "--rate", "cheap"])
        assert result.exit_code == 2

    def test_config_pricing(self, cli_runner: CliRunner, tmp_path) -> None:
        (tmp_path / "flightlog.toml").write_text('[pricing]\nescalation_pct = "0"\n')
        _seed_ninety_minutes(cli_runner)
        data = json.loads(cli_runner.invoke(cli, ["--json", "costs"]).stdout)["data"]
        assert data["total_cost"] == 1053

    def test_bad_config_pricing(self, cli_runner: CliRunner, tmp_path) -> None:
        (tmp_path / "flightlog.toml").write_text('[pricing]\nbase_rate_per_hour = "0"\n')
        result = cli_runner.invoke(cli, ["costs"])
        assert result.exit_code == 1
        assert "Cost policy out of range" in result.stderr

    def test_invalid_ingest_not_priced(self, cli_runner: CliRunner, tmp_path) -> None:
        _seed_ninety_minutes(cli_runner)
        events = tmp_path / "bad.json"
        events.write_text('[{"tail_number": "VT-ABC", "status": "departing", "timestamp": null}]')
        cli_runner.invoke(cli, ["ingest", str(events)])
        result = cli_runner.invoke(cli, ["costs"])
        assert result.exit_code == 0
        assert "1,211" in result.stdout

    def test_corrupt_log_exits_1(self, cli_runner: CliRunner, tmp_path) -> None:
        (tmp_path / ".flightlog").mkdir()
        (tmp_path / ".flightlog" / "flightlog.db").write_bytes(b"\x00garbage" * 256)
        result = cli_runner.invoke(cli, ["costs"])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Event log unavailable" in result.stderr
        assert result.stdout == ""
