"""End-to-end tests for verbose telemetry.

Covers the full pipeline:
  CLI flag (-v) -> AppContext -> enable_telemetry() -> @traced service methods
  -> span tree in ServiceResult.meta -> renderer outputs the span tree.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from conftest import T0, FakeKihoServer
from kihopunch.cli import cli


@pytest.mark.usefixtures("patched_server")
class TestVerboseTelemetry:
    """-v attaches the span tree to punch results."""

    def test_verbose_start_shows_phases(self, cli_runner: CliRunner, config_file: Path) -> None:
        result = cli_runner.invoke(cli, ["-v", "-c", str(config_file), "start", "Traced"])
        assert result.exit_code == 0, result.output
        assert "meta:" in result.stdout
        assert "PunchService.start" in result.stdout
        assert "pre_check" in result.stdout
        assert "submit" in result.stdout
        assert "ms" in result.stdout

    def test_verbose_stop_shows_previous(
        self, cli_runner: CliRunner, config_file: Path, server: FakeKihoServer
    ) -> None:
        server.add("LOGIN", T0, "morning work")
        result = cli_runner.invoke(cli, ["-v", "-c", str(config_file), "stop"])
        assert result.exit_code == 0, result.output
        assert "previous:" in result.stdout
        assert "morning work" in result.stdout

    def test_non_verbose_has_no_meta(self, cli_runner: CliRunner, config_file: Path) -> None:
        result = cli_runner.invoke(cli, ["-c", str(config_file), "start", "Quiet"])
        assert result.exit_code == 0, result.output
        assert "meta:" not in result.stdout

    def test_verbose_json_carries_span_tree(
        self, cli_runner: CliRunner, config_file: Path
    ) -> None:
        args = ["-v", "--json", "-c", str(config_file), "start", "Json trace"]
        result = cli_runner.invoke(cli, args)
        assert result.exit_code == 0, result.output
        tree = json.loads(result.stdout)["meta"]["telemetry"]
        assert tree["name"] == "PunchService.start"
        assert [c["name"] for c in tree["children"]] == ["pre_check", "submit"]

    def test_verbose_logs_go_to_stderr(self, cli_runner: CliRunner, config_file: Path) -> None:
        result = cli_runner.invoke(cli, ["-v", "-c", str(config_file), "start", "Logged"])
        assert result.exit_code == 0, result.output
        assert "punch.started" in result.stderr
        assert "punch.started" not in result.stdout
