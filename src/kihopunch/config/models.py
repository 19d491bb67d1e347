"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, config.toml only contains
overrides. A working setup needs only ``[api] api_key``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, PositiveFloat, field_validator

DEFAULT_API_URL = "https://v3.kiho.fi/api/v1/punch"
PLACEHOLDER_API_KEY = "Ask API Key from administrator"


class ApiConfig(BaseModel):
    """[api] section."""

    model_config = {"frozen": True}

    url: str = DEFAULT_API_URL
    api_key: str = PLACEHOLDER_API_KEY
    timeout: PositiveFloat = 10.0

    @field_validator("url")
    @classmethod
    def _url_not_empty(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("api url must not be empty")
        return value

    @property
    def has_placeholder_key(self) -> bool:
        return not self.api_key.strip() or self.api_key == PLACEHOLDER_API_KEY

    @property
    def masked_key(self) -> str:
        """API key with everything but the last four characters hidden."""
        if self.has_placeholder_key:
            return self.api_key
        return "*" * max(len(self.api_key) - 4, 4) + self.api_key[-4:]


class PunchConfig(BaseModel):
    """[punch] section."""

    model_config = {"frozen": True}

    recurring_tasks: list[str] = Field(default_factory=list)
    cost_centres: dict[str, str] = Field(default_factory=dict)
    default_cost_centre: int | None = None
    cost_centre_rules: dict[str, int] = Field(default_factory=dict)
