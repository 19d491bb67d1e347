"""Standalone commands: start and stop worktime."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from kihopunch.commands._base import PunchCommand
from kihopunch.domain.tasks import task_menu

if TYPE_CHECKING:
    from kihopunch.commands._context import AppContext

_START_EXAMPLES = """\
  kihopunch start "Fix login bug"
  kihopunch start "ISO27001 audit" --ccc 892621
  kihopunch start                      # pick one of the recurring tasks
  kihopunch --dry-run start "Try it out\""""


def choose_recurring_task(tasks: list[str]) -> str | None:
    """Prompt for one of the recurring tasks; None when none are configured."""
    entries = task_menu(tasks)
    if not entries:
        return None
    click.echo("No punch description given! Choose one of the recurring tasks:")
    for idx, entry in enumerate(entries, start=1):
        click.echo(f"{idx:>4}: {entry}")
    choice = click.prompt(
        f"==> Select description [1-{len(entries)}]",
        type=click.IntRange(1, len(entries)),
    )
    return entries[choice - 1]


@click.command(cls=PunchCommand, examples=_START_EXAMPLES)
@click.argument("description", required=False)
@click.option("--ccc", "cost_centre", type=int, default=None, help="Customer cost centre id.")
@click.pass_obj
def start(app: AppContext, description: str | None, cost_centre: int | None) -> None:
    """Start working on something (LOGIN punch)."""
    from kihopunch.services.punch import PunchService

    client = app.client
    settings = app.settings
    if description is None and not settings.no_interact:
        description = choose_recurring_task(settings.punch.recurring_tasks)
    app.emit(PunchService(client, settings.punch).start(description, cost_centre))


@click.command(
    cls=PunchCommand,
    examples="""\
  kihopunch stop
  kihopunch --json stop""",
)
@click.pass_obj
def stop(app: AppContext) -> None:
    """Stop whatever worktime task was active (LOGOUT punch)."""
    from kihopunch.services.punch import PunchService

    app.emit(PunchService(app.client, app.settings.punch).stop())
