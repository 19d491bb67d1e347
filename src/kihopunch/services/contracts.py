"""Typed payload contracts for service results.

These models validate operation payload shapes before they leave the
service layer so renderer/JSON regressions fail fast in tests.
"""

from __future__ import annotations

from typing import Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T", bound=BaseModel)


def dump_validated(model_cls: type[T], data: dict[str, Any]) -> dict[str, Any]:
    """Validate *data* against *model_cls* and return a normalized payload dict."""
    model = model_cls.model_validate(data)
    return model.model_dump(mode="python")


class PunchItem(BaseModel):
    """One punch row."""

    model_config = ConfigDict(extra="forbid")

    id: int | None = None
    type: Literal["LOGIN", "LOGOUT", "BREAK"]
    timestamp: str
    description: str | None = None
    cost_centre: str | None = None


class PunchResultData(BaseModel):
    """Payload contract for ``PunchService.start`` and ``PunchService.stop``."""

    punch: PunchItem
    previous: PunchItem | None = None
    dry_run: bool = False


class LatestResultData(BaseModel):
    """Payload contract for ``HistoryService.latest``."""

    requested: int
    count: int
    filter: Literal["login", "logout", "break", "all"]
    items: list[PunchItem]
