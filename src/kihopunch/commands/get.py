"""Command group: read configuration and punch history."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from kihopunch.commands._base import PunchGroup

if TYPE_CHECKING:
    from kihopunch.commands._context import AppContext

_GET_EXAMPLES = """\
  kihopunch get config
  kihopunch get latest 10
  kihopunch get latest 5 login
  kihopunch --json get latest 20 logout
  kihopunch get tasks
  kihopunch get ccc
  kihopunch get payload login "Code review\""""


@click.group(cls=PunchGroup, examples=_GET_EXAMPLES)
def get() -> None:
    """Get current configuration or latest worktime punches."""


@get.command(
    examples="""\
  kihopunch get config
  kihopunch --json get config"""
)
@click.pass_obj
def config(app: AppContext) -> None:
    """Show the currently loaded configuration."""
    from kihopunch.services.info import InfoService

    app.emit(InfoService(app.require_config(credentials=False)).config())


@get.command(
    examples="""\
  kihopunch get latest 10
  kihopunch get latest 3 login
  kihopunch -q get latest 5 logout"""
)
@click.argument("count", metavar="COUNT")
@click.argument("punch_type", metavar="[login|logout|break|all]", default="all")
@click.pass_obj
def latest(app: AppContext, count: str, punch_type: str) -> None:
    """Get the latest COUNT LOGIN/LOGOUT/BREAK punches (default: all types)."""
    from kihopunch.services.history import HistoryService

    app.emit(HistoryService(app.client).latest(count, punch_type))


@get.command(examples="  kihopunch get tasks")
@click.pass_obj
def tasks(app: AppContext) -> None:
    """List configured recurring tasks by group."""
    from kihopunch.services.info import InfoService

    app.emit(InfoService(app.require_config(credentials=False)).tasks())


@get.command(examples="  kihopunch get ccc")
@click.pass_obj
def ccc(app: AppContext) -> None:
    """List configured customer cost centres."""
    from kihopunch.services.info import InfoService

    app.emit(InfoService(app.require_config(credentials=False)).cost_centres())


@get.command(
    examples="""\
  kihopunch get payload login "ISO27001 audit"
  kihopunch get payload logout"""
)
@click.argument("punch_type", metavar="[login|logout]", default="login")
@click.argument("description", required=False)
@click.pass_obj
def payload(app: AppContext, punch_type: str, description: str | None) -> None:
    """Print the JSON body a start/stop would send, without sending it."""
    from kihopunch.services.info import InfoService

    app.emit(InfoService(app.require_config(credentials=False)).payload(punch_type, description))
