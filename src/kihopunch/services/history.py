"""HistoryService — ``get latest N <login|logout|break|all>``."""

from __future__ import annotations

from typing import Any

from kihopunch.domain.errors import ApiError, ErrorKind
from kihopunch.domain.types import PunchFilter
from kihopunch.services.base import BaseService
from kihopunch.services.contracts import LatestResultData, dump_validated
from kihopunch.services.result import ServiceResult
from kihopunch.services.telemetry import traced


def parse_count(value: Any) -> int | None:
    """Positive integer from an int or a decimal string, else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value.isdecimal():
            return None
        value = int(value)
    if not isinstance(value, int) or value < 1:
        return None
    return value


class HistoryService(BaseService):
    """Read-only access to recent punches."""

    @traced
    def latest(self, count: int | str, punch_filter: str = "all") -> ServiceResult:
        """Fetch the *count* latest punches matching *punch_filter*.

        Input is validated before any network call. Records are returned
        in the order the server sent them.
        """
        op = "latest"
        n = parse_count(count)
        if n is None:
            return self._failure(
                op,
                ErrorKind.INVALID_ARGUMENT,
                f"Count must be a positive integer, got {count!r}",
            )
        try:
            flt = PunchFilter(str(punch_filter).strip().lower())
        except ValueError:
            choices = ", ".join(f.value for f in PunchFilter)
            return self._failure(
                op,
                ErrorKind.INVALID_ARGUMENT,
                f"Punch type must be one of {choices}, got {punch_filter!r}",
            )

        try:
            records = self._client.fetch_latest(n, flt.kind)
        except ApiError as exc:
            return self._api_failure(op, exc)

        data = dump_validated(
            LatestResultData,
            {
                "requested": n,
                "count": len(records),
                "filter": flt.value,
                "items": [r.to_item() for r in records],
            },
        )
        return ServiceResult(ok=True, op=op, data=data)
