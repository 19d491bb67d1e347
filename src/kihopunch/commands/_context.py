"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Owns first-run config bootstrap, lazy API client
creation, and centralized result emission (stdout/stderr routing + exit
codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click
import structlog

from kihopunch.domain.errors import ErrorKind
from kihopunch.output.formatters import OutputSettings, format_result
from kihopunch.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from kihopunch.config.settings import PunchSettings
    from kihopunch.infrastructure.api import KihoApiClient

log = structlog.get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
# 2 is Click's usage error.
EXIT_CONFIG_CREATED = 3


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``.  The config file is
    checked and the API client built only when a command needs them, so
    ``--help`` and ``--version`` never touch the filesystem or network.
    """

    def __init__(self, settings: PunchSettings) -> None:
        self.settings = settings
        self._client: KihoApiClient | None = None

        from kihopunch.config.logging import configure_logging

        configure_logging(
            verbosity=settings.verbose,
            debug=settings.debug,
            log_json=settings.log_json,
        )

        if settings.verbose:
            from kihopunch.services.telemetry import enable_telemetry

            enable_telemetry()

    def require_config(self, *, credentials: bool = True) -> PunchSettings:
        """Ensure a usable config file exists.

        On first run the sample config is written and the process exits
        with :data:`EXIT_CONFIG_CREATED`.  With *credentials*, a config
        still holding the placeholder API key is a failure.
        """
        s = self.settings
        if not s.config_exists:
            from kihopunch.config.discovery import default_config_path, write_sample_config

            path = write_sample_config(s.config_path or default_config_path())
            log.info("config.created", path=str(path))
            self.emit(
                ServiceResult(
                    ok=False,
                    op="config",
                    error=ServiceError(
                        code=str(ErrorKind.CONFIG_CREATED),
                        message=f"Created sample config at {path}. Edit it and run again.",
                        detail={"path": str(path)},
                    ),
                ),
                exit_code=EXIT_CONFIG_CREATED,
            )
        if credentials and s.api.has_placeholder_key:
            self.emit(
                ServiceResult(
                    ok=False,
                    op="config",
                    error=ServiceError(
                        code=str(ErrorKind.CONFIG_PLACEHOLDER),
                        message=f"Set [api] api_key in {s.config_path} before punching.",
                        detail={"path": str(s.config_path)},
                    ),
                )
            )
        return s

    @property
    def client(self) -> KihoApiClient:
        """The API client (created lazily, after the config check)."""
        if self._client is None:
            self.require_config()
            from kihopunch.infrastructure.api import KihoApiClient

            self._client = KihoApiClient(self.settings.api, dry_run=self.settings.dry_run)
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def emit(self, result: ServiceResult, *, exit_code: int = EXIT_FAILURE) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with *exit_code*.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=bool(self.settings.verbose),
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(exit_code)
