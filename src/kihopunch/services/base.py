"""BaseService — foundation for the API-backed services.

Every service receives a :class:`KihoApiClient` at construction time and
never talks to the network any other way.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from kihopunch.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from kihopunch.domain.errors import ApiError, ErrorKind
    from kihopunch.infrastructure.api import KihoApiClient


class BaseService:
    """Base for service-layer classes that use the Kiho API.

    Usage::

        class HistoryService(BaseService):
            def latest(self, count: int) -> ServiceResult:
                try:
                    records = self._client.fetch_latest(count)
                except ApiError as exc:
                    return self._api_failure("latest", exc)
                ...
    """

    def __init__(self, client: KihoApiClient) -> None:
        self._client = client

    @staticmethod
    def _failure(
        op: str,
        kind: ErrorKind,
        message: str,
        **detail: Any,
    ) -> ServiceResult:
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(code=str(kind), message=message, detail=detail),
        )

    @classmethod
    def _api_failure(cls, op: str, exc: ApiError, *, phase: str | None = None) -> ServiceResult:
        """Forward an ApiError unchanged, tagged with the phase that raised it."""
        detail: dict[str, Any] = {}
        if phase is not None:
            detail["phase"] = phase
        if exc.status_code is not None:
            detail["status_code"] = exc.status_code
        return cls._failure(op, exc.kind, exc.message, **detail)
