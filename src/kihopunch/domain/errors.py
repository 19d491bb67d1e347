"""Error taxonomy shared by the API client and the services."""

from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    """Error categories surfaced in ``ServiceError.code``."""

    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    ALREADY_STARTED = "ALREADY_STARTED"
    NOT_STARTED = "NOT_STARTED"
    REJECTED = "REJECTED"
    UNAVAILABLE = "UNAVAILABLE"
    PROTOCOL = "PROTOCOL"
    CONFIG_CREATED = "CONFIG_CREATED"
    CONFIG_PLACEHOLDER = "CONFIG_PLACEHOLDER"


class ApiError(Exception):
    """Classified failure of a single Kiho API call."""

    def __init__(self, kind: ErrorKind, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code

    def __repr__(self) -> str:
        return f"ApiError({self.kind!s}, {self.message!r}, status_code={self.status_code})"
