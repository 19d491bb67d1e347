"""Tests for InfoService — config, tasks, cost centres, payload preview."""

from __future__ import annotations

from pathlib import Path

from kihopunch.config.settings import PunchSettings
from kihopunch.services.info import InfoService


def _settings(config_file: Path) -> PunchSettings:
    return PunchSettings.from_cli(config_path=str(config_file))


class TestConfig:
    def test_masks_api_key(self, config_file: Path) -> None:
        result = InfoService(_settings(config_file)).config()
        assert result.ok
        assert result.data["api_key"].endswith("1234")
        assert "secret" not in result.data["api_key"]
        assert result.data["api_url"] == "https://kiho.test/api/v1/punch"
        assert result.data["config_path"] == str(config_file)
        assert result.data["default_cost_centre"] == 901184


class TestTasks:
    def test_grouped(self, config_file: Path) -> None:
        result = InfoService(_settings(config_file)).tasks()
        assert result.data["count"] == 2
        assert result.data["groups"] == {"Dev": ["Code review"], "unclassified": ["Standup"]}


class TestCostCentres:
    def test_items_and_default(self, config_file: Path) -> None:
        result = InfoService(_settings(config_file)).cost_centres()
        assert result.data["count"] == 2
        by_id = {i["id"]: i for i in result.data["items"]}
        assert by_id["901184"]["default"] is True
        assert by_id["892621"]["default"] is False
        assert result.data["rules"] == {"ISO27": 892621}


class TestPayload:
    def test_login_uses_rules(self, config_file: Path) -> None:
        result = InfoService(_settings(config_file)).payload("login", "ISO27001 audit")
        assert result.ok
        punch = result.data["body"]["newPunch"]
        assert punch["type"] == "LOGIN"
        assert punch["customerCostcentre"] == {"id": 892621}
        assert result.data["method"] == "POST"

    def test_logout(self, config_file: Path) -> None:
        result = InfoService(_settings(config_file)).payload("LOGOUT")
        assert result.data["body"]["newPunch"]["type"] == "LOGOUT"

    def test_unknown_kind(self, config_file: Path) -> None:
        result = InfoService(_settings(config_file)).payload("break")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INVALID_ARGUMENT"
