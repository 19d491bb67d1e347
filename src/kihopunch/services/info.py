"""InfoService — read-only views of the loaded configuration.

Backs ``get config``, ``get tasks``, ``get ccc`` and ``get payload``.
None of these touch the network.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from kihopunch.domain.errors import ErrorKind
from kihopunch.domain.tasks import group_task_descriptions, resolve_cost_centre
from kihopunch.domain.types import PunchKind
from kihopunch.infrastructure.api import USER_AGENT, KihoApiClient
from kihopunch.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from kihopunch.config.settings import PunchSettings


class InfoService:
    """Reports configuration without making API calls."""

    def __init__(self, settings: PunchSettings) -> None:
        self._settings = settings

    def config(self) -> ServiceResult:
        """Current effective configuration, API key masked."""
        s = self._settings
        return ServiceResult(
            ok=True,
            op="config",
            data={
                "config_path": str(s.config_path) if s.config_path else None,
                "api_url": s.api.url,
                "api_key": s.api.api_key if s.api.has_placeholder_key else s.api.masked_key,
                "timeout": s.api.timeout,
                "user_agent": USER_AGENT,
                "dry_run": s.dry_run,
                "recurring_tasks": len(s.punch.recurring_tasks),
                "cost_centres": len(s.punch.cost_centres),
                "default_cost_centre": s.punch.default_cost_centre,
            },
        )

    def tasks(self) -> ServiceResult:
        """Recurring task descriptions grouped as in the start menu."""
        grouped = group_task_descriptions(self._settings.punch.recurring_tasks)
        return ServiceResult(
            ok=True,
            op="tasks",
            data={"count": sum(len(v) for v in grouped.values()), "groups": grouped},
        )

    def cost_centres(self) -> ServiceResult:
        """Configured customer cost centres."""
        cfg = self._settings.punch
        items = [
            {"id": ccc_id, "name": name, "default": str(cfg.default_cost_centre) == ccc_id}
            for ccc_id, name in sorted(cfg.cost_centres.items())
        ]
        return ServiceResult(
            ok=True,
            op="cost_centres",
            data={"count": len(items), "items": items, "rules": dict(cfg.cost_centre_rules)},
        )

    def payload(self, kind: str, description: str | None = None) -> ServiceResult:
        """Request body that ``start``/``stop`` would send right now."""
        op = "payload"
        try:
            punch_kind = PunchKind(kind.strip().upper())
            if not punch_kind.submittable:
                raise ValueError(kind)
        except ValueError:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code=str(ErrorKind.INVALID_ARGUMENT),
                    message=f"Punch type must be login or logout, got {kind!r}",
                ),
            )
        cfg = self._settings.punch
        cost_centre = None
        if punch_kind is PunchKind.LOGIN:
            cost_centre = resolve_cost_centre(
                description, cfg.cost_centre_rules, cfg.default_cost_centre
            )
        client = KihoApiClient(self._settings.api, dry_run=True)
        try:
            body = client.build_punch_payload(punch_kind, description, cost_centre)
        finally:
            client.close()
        return ServiceResult(
            ok=True,
            op=op,
            data={"method": "POST", "url": self._settings.api.url, "body": body},
        )
