"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``KIHOPUNCH_*`` prefix (``KIHOPUNCH_API__API_KEY``)
  3. TOML file    — ``config.toml`` in the platform config directory
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from kihopunch.config.discovery import resolve_config_path
from kihopunch.config.models import ApiConfig, PunchConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from the resolved ``config.toml``."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class PunchSettings(BaseSettings):
    """Unified settings for the kihopunch CLI.

    Frozen after construction and stored on the Click context.

    Attributes:
        config_path: Where the config file is (or will be created).
        verbose: ``-v`` count; 1 logs INFO, 2 or more logs DEBUG.
        debug: ``-d``; DEBUG logging regardless of ``verbose``.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "KIHOPUNCH_",
        "env_nested_delimiter": "__",
        "extra": "ignore",
    }

    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: int = 0
    debug: bool = False
    log_json: bool = False
    dry_run: bool = False
    no_interact: bool = False

    # --- TOML sections ---
    api: ApiConfig = Field(default_factory=ApiConfig)
    punch: PunchConfig = Field(default_factory=PunchConfig)

    @property
    def config_exists(self) -> bool:
        return self.config_path is not None and self.config_path.is_file()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(cls, *, config_path: str | None = None, **cli_flags: Any) -> PunchSettings:
        """Construct settings from a CLI invocation.

        Resolves the config location (explicit path, env var, or platform
        default) and merges CLI flags as highest-priority overrides.
        A missing file is not an error here; the CLI context bootstraps it.
        Invalid values are reported as a ClickException (exit code 1).
        """
        toml_path = resolve_config_path(config_path)
        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **cli_flags)
        except ValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
            )
            raise click.ClickException(f"Invalid settings in {toml_path}: {problems}") from exc
        finally:
            _tls.toml_path = None
