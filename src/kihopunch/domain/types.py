"""Punch kinds and history filters."""

from __future__ import annotations

from enum import StrEnum


class PunchKind(StrEnum):
    """Worktime punch types reported by the Kiho API.

    BREAK punches are made elsewhere (e.g. the web UI); they show up in
    history but are never submitted from here.
    """

    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"
    BREAK = "BREAK"

    @property
    def submittable(self) -> bool:
        return self is not PunchKind.BREAK


class PunchFilter(StrEnum):
    """Filter values accepted by ``get latest``."""

    LOGIN = "login"
    LOGOUT = "logout"
    BREAK = "break"
    ALL = "all"

    @property
    def kind(self) -> PunchKind | None:
        """The punch kind to request, or None for every kind."""
        if self is PunchFilter.ALL:
            return None
        return PunchKind(self.value.upper())
