"""PunchService — start/stop with a server-side pre-check.

No session state is kept between invocations. Every start/stop first
reads the latest punch from the server and only writes when the
LOGIN/LOGOUT alternation would hold.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from kihopunch.domain.errors import ApiError, ErrorKind
from kihopunch.domain.punch import PunchRecord, can_start, can_stop
from kihopunch.domain.tasks import resolve_cost_centre
from kihopunch.domain.types import PunchKind
from kihopunch.services.base import BaseService
from kihopunch.services.contracts import PunchResultData, dump_validated
from kihopunch.services.result import ServiceResult
from kihopunch.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from kihopunch.config.models import PunchConfig
    from kihopunch.infrastructure.api import KihoApiClient

log = structlog.get_logger(__name__)

PRE_CHECK = "pre_check"
SUBMIT = "submit"


class PunchService(BaseService):
    """Mediates start/stop requests against the punch sequence invariant."""

    def __init__(self, client: KihoApiClient, punch_config: PunchConfig | None = None) -> None:
        super().__init__(client)
        self._punch_config = punch_config

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @traced
    def start(
        self, description: str | None = None, cost_centre: int | None = None
    ) -> ServiceResult:
        """Punch LOGIN unless the latest punch already is one."""
        op = "punch_start"
        try:
            last = self._last_punch()
        except ApiError as exc:
            return self._api_failure(op, exc, phase=PRE_CHECK)

        if not can_start(last):
            assert last is not None
            return self._failure(
                op,
                ErrorKind.ALREADY_STARTED,
                f"Worktime already started at {last.timestamp.isoformat()}"
                + (f" ({last.description})" if last.description else ""),
                last=last.to_item(),
            )

        if cost_centre is None:
            cost_centre = self._cost_centre_for(description)

        try:
            with trace_span(SUBMIT):
                record = self._client.submit_punch(PunchKind.LOGIN, description, cost_centre)
        except ApiError as exc:
            return self._api_failure(op, exc, phase=SUBMIT)

        log.info("punch.started", timestamp=record.timestamp.isoformat(), cost_centre=cost_centre)
        return self._success(op, record, last)

    @traced
    def stop(self) -> ServiceResult:
        """Punch LOGOUT if the latest punch is a LOGIN."""
        op = "punch_stop"
        try:
            last = self._last_punch()
        except ApiError as exc:
            return self._api_failure(op, exc, phase=PRE_CHECK)

        if not can_stop(last):
            if last is None:
                msg = "Worktime not started: no punches found"
            else:
                msg = f"Worktime not started: last punch was LOGOUT at {last.timestamp.isoformat()}"
            return self._failure(op, ErrorKind.NOT_STARTED, msg)

        try:
            with trace_span(SUBMIT):
                record = self._client.submit_punch(PunchKind.LOGOUT)
        except ApiError as exc:
            return self._api_failure(op, exc, phase=SUBMIT)

        log.info("punch.stopped", timestamp=record.timestamp.isoformat())
        return self._success(op, record, last)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _last_punch(self) -> PunchRecord | None:
        with trace_span(PRE_CHECK):
            records = self._client.fetch_latest(1)
        return records[0] if records else None

    def _cost_centre_for(self, description: str | None) -> int | None:
        cfg = self._punch_config
        if cfg is None:
            return None
        return resolve_cost_centre(description, cfg.cost_centre_rules, cfg.default_cost_centre)

    def _success(self, op: str, record: PunchRecord, previous: PunchRecord | None) -> ServiceResult:
        data = dump_validated(
            PunchResultData,
            {
                "punch": record.to_item(),
                "previous": previous.to_item() if previous else None,
                "dry_run": self._client.dry_run,
            },
        )
        warnings = ["Dry run: punch was not sent"] if self._client.dry_run else []
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)
