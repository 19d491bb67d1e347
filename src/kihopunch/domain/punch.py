"""Punch records and the session state derived from them.

There is no stored session: the open/closed state is always re-derived
from the most recent punch the server reports.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ValidationError, field_validator

from kihopunch.domain.types import PunchKind


class SessionState(StrEnum):
    """Worktime session implied by the latest punch."""

    OPEN = "open"
    PAUSED = "paused"
    CLOSED = "closed"


class PunchRecord(BaseModel):
    """One punch, as submitted or fetched from history."""

    model_config = {"frozen": True}

    kind: PunchKind
    timestamp: datetime
    description: str | None = None
    id: int | None = None
    cost_centre: str | None = None

    @field_validator("timestamp")
    @classmethod
    def _require_offset(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            raise ValueError("punch timestamp must carry a UTC offset")
        return value

    @field_validator("description")
    @classmethod
    def _empty_is_none(cls, value: str | None) -> str | None:
        return value or None

    @classmethod
    def from_api(cls, payload: Any) -> PunchRecord:
        """Parse one punch object from a Kiho API response.

        Raises ValueError when the object is not a usable punch.
        """
        if not isinstance(payload, dict):
            raise ValueError(f"punch must be an object, got {type(payload).__name__}")
        ccc = payload.get("customerCostcentre")
        try:
            return cls(
                kind=payload.get("type"),
                timestamp=payload.get("timestamp"),
                description=payload.get("description"),
                id=payload.get("id"),
                cost_centre=ccc.get("name") if isinstance(ccc, dict) else None,
            )
        except ValidationError as exc:
            raise ValueError(str(exc)) from exc

    def to_item(self) -> dict[str, Any]:
        """Flatten into the payload shape used in ServiceResult data."""
        return {
            "id": self.id,
            "type": str(self.kind),
            "timestamp": self.timestamp.isoformat(),
            "description": self.description,
            "cost_centre": self.cost_centre,
        }


def session_state(last: PunchRecord | None) -> SessionState:
    """OPEN after a LOGIN, PAUSED after a BREAK, otherwise CLOSED."""
    if last is None or last.kind is PunchKind.LOGOUT:
        return SessionState.CLOSED
    if last.kind is PunchKind.BREAK:
        return SessionState.PAUSED
    return SessionState.OPEN


def can_start(last: PunchRecord | None) -> bool:
    """A LOGIN is allowed unless the session is already open."""
    return session_state(last) is not SessionState.OPEN


def can_stop(last: PunchRecord | None) -> bool:
    """A LOGOUT is allowed from an open or paused session."""
    return session_state(last) is not SessionState.CLOSED
