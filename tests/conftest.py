"""Shared pytest fixtures and a fake Kiho punch server for kihopunch tests."""

from __future__ import annotations

import json
from collections.abc import Generator
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from kihopunch.config.models import ApiConfig
from kihopunch.infrastructure.api import KihoApiClient
from kihopunch.services.telemetry import disable_telemetry

HELSINKI = timezone(timedelta(hours=3))
T0 = datetime(2024, 9, 4, 8, 0, 0, tzinfo=HELSINKI)
API_URL = "https://kiho.test/api/v1/punch"
API_KEY = "secret-key-1234"


# ---------------------------------------------------------------------------
# Fake HTTP layer
# ---------------------------------------------------------------------------


class FakeResponse:
    """Minimal stand-in for ``requests.Response``."""

    def __init__(self, status_code: int = 200, body: Any = None, *, text: str | None = None):
        self.status_code = status_code
        self.reason = "OK" if status_code < 400 else "Error"
        self.text = text if text is not None else json.dumps(body)

    def json(self) -> Any:
        return json.loads(self.text)


class FakeKihoServer:
    """In-memory punch endpoint that behaves like a ``requests.Session``.

    Punches are stored as API objects and served most-recent-first.
    Queued responses or exceptions are consumed one per request before
    the normal handling.
    """

    def __init__(self, punches: list[dict[str, Any]] | None = None) -> None:
        self.punches: list[dict[str, Any]] = list(punches or [])
        self.calls: list[dict[str, Any]] = []
        self.queued: list[FakeResponse | Exception] = []
        self.ignore_type_filter = False
        self.cost_centre_names: dict[int, str] = {}
        self.closed = False
        self._next_id = 1000

    # --- requests.Session surface ---

    def request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> FakeResponse:
        self.calls.append(
            {
                "method": method,
                "url": url,
                "params": params,
                "json": json,
                "headers": headers,
                "timeout": timeout,
            }
        )
        if self.queued:
            queued = self.queued.pop(0)
            if isinstance(queued, Exception):
                raise queued
            return queued
        if method == "GET":
            return self._list(params or {})
        return self._create(json or {})

    def close(self) -> None:
        self.closed = True

    # --- helpers ---

    @property
    def writes(self) -> list[dict[str, Any]]:
        return [c for c in self.calls if c["method"] == "POST"]

    @property
    def reads(self) -> list[dict[str, Any]]:
        return [c for c in self.calls if c["method"] == "GET"]

    def add(self, kind: str, timestamp: datetime, description: str | None = None) -> None:
        self._next_id += 1
        self.punches.append(
            {
                "id": self._next_id,
                "type": kind,
                "timestamp": timestamp.isoformat(),
                "realTimestamp": timestamp.isoformat(),
                "description": description or "",
                "customerCostcentre": None,
            }
        )

    def kinds(self) -> list[str]:
        """Stored punch types, oldest first."""
        return [p["type"] for p in self._ordered(reverse=False)]

    def _ordered(self, *, reverse: bool) -> list[dict[str, Any]]:
        return sorted(
            self.punches,
            key=lambda p: (datetime.fromisoformat(p["timestamp"]), p["id"]),
            reverse=reverse,
        )

    def _list(self, params: dict[str, str]) -> FakeResponse:
        rows = self._ordered(reverse=True)
        kind = params.get("type")
        if kind and not self.ignore_type_filter:
            rows = [r for r in rows if r["type"] == kind]
        rows = rows[: int(params.get("pageSize", "10"))]
        return FakeResponse(200, {"result": rows})

    def _create(self, body: dict[str, Any]) -> FakeResponse:
        new = body["newPunch"]
        self._next_id += 1
        ccc = new.get("customerCostcentre")
        punch = {
            "id": self._next_id,
            "type": new["type"],
            "timestamp": new["timestamp"],
            "realTimestamp": new["realTimestamp"],
            "description": new.get("description", ""),
            "customerCostcentre": (
                {"id": ccc["id"], "name": self.cost_centre_names.get(ccc["id"], "General")}
                if ccc
                else None
            ),
        }
        self.punches.append(punch)
        return FakeResponse(200, {"result": punch})


class FakeClock:
    """Settable clock for punch timestamps."""

    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Generator[None]:
    """Verbose CLI runs enable telemetry on the shared context; undo it."""
    yield
    disable_telemetry()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def api_config() -> ApiConfig:
    return ApiConfig(url=API_URL, api_key=API_KEY, timeout=5.0)


@pytest.fixture
def server() -> FakeKihoServer:
    return FakeKihoServer()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def client(api_config: ApiConfig, server: FakeKihoServer, clock: FakeClock) -> KihoApiClient:
    """API client wired to the fake server and clock."""
    return KihoApiClient(api_config, session=server, clock=clock)  # type: ignore[arg-type]


@pytest.fixture
def config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A filled-in config.toml; env overrides are cleared."""
    for var in ("KIHOPUNCH_CONFIG", "KIHOPUNCH_API__API_KEY", "KIHOPUNCH_API__URL"):
        monkeypatch.delenv(var, raising=False)
    path = tmp_path / "config.toml"
    path.write_text(
        f"""\
title = "test"

[api]
url = "{API_URL}"
api_key = "{API_KEY}"
timeout = 5.0

[punch]
recurring_tasks = ["Dev | Code review", "Standup"]
default_cost_centre = 901184

[punch.cost_centres]
"901184" = "Tuotekehitys Yleinen"
"892621" = "ISO27001 2024"

[punch.cost_centre_rules]
"ISO27" = 892621
""",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def patched_server(server: FakeKihoServer, monkeypatch: pytest.MonkeyPatch) -> FakeKihoServer:
    """Route every ``requests.Session()`` the CLI creates to the fake server."""
    monkeypatch.setattr("kihopunch.infrastructure.api.requests.Session", lambda: server)
    return server
