"""Tests for the ``get`` command group."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from conftest import T0, FakeKihoServer
from kihopunch.cli import cli


def _seed(server: FakeKihoServer) -> None:
    for minute in range(6):
        kind = "LOGIN" if minute % 2 == 0 else "LOGOUT"
        server.add(kind, T0.replace(minute=minute), f"punch {minute}")


@pytest.mark.usefixtures("patched_server")
class TestLatest:
    def test_latest_table(
        self, cli_runner: CliRunner, config_file: Path, server: FakeKihoServer
    ) -> None:
        _seed(server)
        result = cli_runner.invoke(cli, ["-c", str(config_file), "get", "latest", "3"])
        assert result.exit_code == 0, result.output
        assert "Latest 3 worktime punch line(s):" in result.stdout
        assert "punch 5" in result.stdout
        assert "punch 2" not in result.stdout

    def test_latest_login_json(
        self, cli_runner: CliRunner, config_file: Path, server: FakeKihoServer
    ) -> None:
        _seed(server)
        args = ["--json", "-c", str(config_file), "get", "latest", "10", "login"]
        result = cli_runner.invoke(cli, args)
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)["data"]
        assert [i["type"] for i in data["items"]] == ["LOGIN"] * 3
        assert server.calls[0]["params"]["type"] == "LOGIN"

    def test_latest_quiet_ids(
        self, cli_runner: CliRunner, config_file: Path, server: FakeKihoServer
    ) -> None:
        _seed(server)
        result = cli_runner.invoke(cli, ["-q", "-c", str(config_file), "get", "latest", "2"])
        assert result.exit_code == 0
        newest = [str(server.punches[i]["id"]) for i in (5, 4)]
        assert result.stdout.split() == newest

    @pytest.mark.parametrize("count", ["0", "abc"])
    def test_invalid_count(
        self, cli_runner: CliRunner, config_file: Path, server: FakeKihoServer, count: str
    ) -> None:
        args = ["--json", "-c", str(config_file), "get", "latest", count, "all"]
        result = cli_runner.invoke(cli, args)
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["code"] == "INVALID_ARGUMENT"
        assert server.calls == []

    def test_verbose_shows_timing(
        self, cli_runner: CliRunner, config_file: Path, server: FakeKihoServer
    ) -> None:
        result = cli_runner.invoke(cli, ["-v", "-c", str(config_file), "get", "latest", "1"])
        assert result.exit_code == 0, result.output
        assert "meta:" in result.stdout
        assert "HistoryService.latest" in result.stdout


class TestConfigViews:
    def test_invalid_config_value_exits_cleanly(
        self, cli_runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("KIHOPUNCH_API__URL", raising=False)
        path = tmp_path / "config.toml"
        path.write_text('[api]\nurl = ""\napi_key = "k"\n')
        result = cli_runner.invoke(cli, ["-c", str(path), "get", "config"])
        assert result.exit_code == 1
        assert "Invalid settings" in result.stderr
        assert "api.url" in result.stderr
        assert not isinstance(result.exception, ValueError)

    def test_get_config(self, cli_runner: CliRunner, config_file: Path) -> None:
        result = cli_runner.invoke(cli, ["--json", "-c", str(config_file), "get", "config"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)["data"]
        assert data["api_key"].endswith("1234")
        assert "secret" not in result.stdout

    def test_get_config_with_placeholder_key(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        first = cli_runner.invoke(cli, ["-c", str(path), "get", "config"])
        assert first.exit_code == 3
        result = cli_runner.invoke(cli, ["-c", str(path), "get", "config"])
        assert result.exit_code == 0, result.output
        assert "Ask API Key from administrator" in result.stdout

    def test_get_tasks(self, cli_runner: CliRunner, config_file: Path) -> None:
        result = cli_runner.invoke(cli, ["-c", str(config_file), "get", "tasks"])
        assert result.exit_code == 0
        assert "Code review" in result.stdout

    def test_get_ccc(self, cli_runner: CliRunner, config_file: Path) -> None:
        result = cli_runner.invoke(cli, ["-c", str(config_file), "get", "ccc"])
        assert result.exit_code == 0
        assert "ISO27001 2024" in result.stdout

    def test_get_payload(self, cli_runner: CliRunner, config_file: Path) -> None:
        args = ["--json", "-c", str(config_file), "get", "payload", "login", "ISO27 prep"]
        result = cli_runner.invoke(cli, args)
        assert result.exit_code == 0, result.output
        body = json.loads(result.stdout)["data"]["body"]
        assert body["newPunch"]["customerCostcentre"] == {"id": 892621}
