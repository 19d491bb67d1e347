"""KihoApiClient — blocking client for the Kiho v3 punch API.

Documentation: http://developers.kiho.fi/api

Examples::

    GET  https://v3.kiho.fi/api/v1/punch?orderBy=timestamp+DESC&pageSize=10&type=LOGIN
    POST https://v3.kiho.fi/api/v1/punch  {"newPunch": {"type": "LOGOUT", ...}}

Every call issues exactly one request bounded by the configured timeout.
Failures are classified into :class:`ApiError` and never retried here.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING, Any

import requests
import structlog

from kihopunch import APP_NAME, __version__
from kihopunch.domain.errors import ApiError, ErrorKind
from kihopunch.domain.punch import PunchRecord
from kihopunch.domain.types import PunchKind

if TYPE_CHECKING:
    from kihopunch.config.models import ApiConfig

log = structlog.get_logger(__name__)

USER_AGENT = f"{APP_NAME} v{__version__}"


def local_now() -> datetime:
    """Current local time with its UTC offset."""
    return datetime.now().astimezone()


class KihoApiClient:
    """Wraps the punch submission and punch history endpoints.

    Args:
        config: Validated ``[api]`` settings (url, key, timeout).
        session: HTTP session; a fresh ``requests.Session`` when omitted.
        dry_run: Build punches locally instead of POSTing them.
        clock: Source of punch timestamps.
    """

    def __init__(
        self,
        config: ApiConfig,
        *,
        session: requests.Session | None = None,
        dry_run: bool = False,
        clock: Callable[[], datetime] = local_now,
    ) -> None:
        self._config = config
        self._session = session if session is not None else requests.Session()
        self._dry_run = dry_run
        self._clock = clock

    @property
    def dry_run(self) -> bool:
        return self._dry_run

    def close(self) -> None:
        self._session.close()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build_punch_payload(
        self,
        kind: PunchKind,
        description: str | None = None,
        cost_centre: int | None = None,
    ) -> dict[str, Any]:
        """Request body for a new punch, stamped with the client clock."""
        if not kind.submittable:
            raise ApiError(ErrorKind.INVALID_ARGUMENT, f"{kind} punches cannot be submitted")
        timestamp = self._clock().isoformat(timespec="seconds")
        punch: dict[str, Any] = {"type": str(kind)}
        if kind is PunchKind.LOGIN:
            if description:
                punch["description"] = description
            if cost_centre is not None:
                punch["customerCostcentre"] = {"id": cost_centre}
        punch["timestamp"] = timestamp
        punch["realTimestamp"] = timestamp
        return {"newPunch": punch}

    def submit_punch(
        self,
        kind: PunchKind,
        description: str | None = None,
        cost_centre: int | None = None,
    ) -> PunchRecord:
        """POST a new punch and return the record the server created."""
        body = self.build_punch_payload(kind, description, cost_centre)
        log.debug("punch.payload", payload=body)

        if self._dry_run:
            log.info("punch.dry_run", kind=str(kind))
            punch = body["newPunch"]
            return PunchRecord(
                kind=kind,
                timestamp=datetime.fromisoformat(punch["timestamp"]),
                description=punch.get("description"),
            )

        resp = self._send("POST", json=body, headers={"Content-Type": "application/json"})
        return self._parse_punch(self._result(resp))

    def fetch_latest(self, count: int, kind: PunchKind | None = None) -> list[PunchRecord]:
        """GET the *count* most recent punches, optionally of one *kind*.

        Server order is kept as-is. Records of another kind are dropped
        without reordering the rest.
        """
        if count < 1:
            raise ApiError(
                ErrorKind.INVALID_ARGUMENT,
                f"Punch count must be a positive integer, got {count}",
            )

        params: dict[str, str] = {
            "orderBy": "timestamp DESC",
            "pageSize": str(count),
        }
        if kind is not None:
            params["type"] = str(kind)

        resp = self._send("GET", params=params)
        result = self._result(resp)
        if not isinstance(result, list):
            raise ApiError(
                ErrorKind.PROTOCOL,
                f"Expected a list of punches, got {type(result).__name__}",
                status_code=resp.status_code,
            )

        records = [self._parse_punch(item) for item in result]
        if kind is not None:
            records = [r for r in records if r.kind is kind]
        return records

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _send(
        self,
        method: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> requests.Response:
        """Issue one request and classify its HTTP outcome."""
        all_headers = {
            "Authorization": self._config.api_key,
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
            **(headers or {}),
        }
        log.info("http.request", method=method, url=self._config.url, params=params)
        try:
            resp = self._session.request(
                method,
                self._config.url,
                params=params,
                json=json,
                headers=all_headers,
                timeout=self._config.timeout,
            )
        except requests.Timeout as exc:
            raise ApiError(
                ErrorKind.UNAVAILABLE,
                f"No response from {self._config.url} within {self._config.timeout:g}s",
            ) from exc
        except requests.RequestException as exc:
            raise ApiError(ErrorKind.UNAVAILABLE, f"Request failed: {exc}") from exc

        log.info("http.response", method=method, status=resp.status_code)
        status = resp.status_code
        if 400 <= status < 500:
            raise ApiError(
                ErrorKind.REJECTED,
                f"Request rejected: HTTP {status} {_reason(resp)}".rstrip(),
                status_code=status,
            )
        if status >= 500:
            raise ApiError(
                ErrorKind.UNAVAILABLE,
                f"Server error: HTTP {status} {_reason(resp)}".rstrip(),
                status_code=status,
            )
        if not 200 <= status < 300:
            raise ApiError(
                ErrorKind.PROTOCOL,
                f"Unexpected HTTP status {status}",
                status_code=status,
            )
        return resp

    @staticmethod
    def _result(resp: requests.Response) -> Any:
        """Extract ``result`` from a JSON response body."""
        try:
            body = resp.json()
        except ValueError as exc:
            raise ApiError(
                ErrorKind.PROTOCOL,
                "Response body is not valid JSON",
                status_code=resp.status_code,
            ) from exc
        log.debug("http.body", body=body)
        if not isinstance(body, dict) or "result" not in body:
            raise ApiError(
                ErrorKind.PROTOCOL,
                "Response has no 'result' field",
                status_code=resp.status_code,
            )
        return body["result"]

    @staticmethod
    def _parse_punch(item: Any) -> PunchRecord:
        try:
            return PunchRecord.from_api(item)
        except ValueError as exc:
            raise ApiError(ErrorKind.PROTOCOL, f"Malformed punch in response: {exc}") from exc


def _reason(resp: requests.Response) -> str:
    return getattr(resp, "reason", None) or ""
