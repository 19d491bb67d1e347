"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from kihopunch.output.console import create_console, get_output, style_for_type

if TYPE_CHECKING:
    from rich.console import Console

    from kihopunch.services.result import ServiceResult

DISPLAY_FORMAT = "%d.%m.%Y %H:%M:%S"


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    if "items" in result.data:
        return "\n".join(
            str(item["id"]) for item in result.data["items"] if item.get("id") is not None
        )
    punch = result.data.get("punch")
    if punch and punch.get("id") is not None:
        return str(punch["id"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def display_time(stamp: str) -> str:
    """``2024-09-04T15:39:37+03:00`` -> ``04.09.2024 15:39:37``."""
    try:
        return datetime.fromisoformat(stamp).strftime(DISPLAY_FORMAT)
    except ValueError:
        return stamp


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="punch.ok")
    op = Text(f"  {result.op}", style="punch.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="punch.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="punch.id")
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))

    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"

    console.print(f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}")

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _punch_table(items: list[dict[str, Any]]) -> Table:
    """Build a Rich Table of punch rows in the given order."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Punch Timestamp", style="punch.time", no_wrap=True)
    table.add_column("Type", no_wrap=True)
    table.add_column("Punch ID", style="punch.id", justify="right")
    table.add_column("Cost Centre", style="punch.ccc")
    table.add_column("Description")

    for item in items:
        kind = str(item.get("type", ""))
        table.add_row(
            display_time(str(item.get("timestamp", ""))),
            Text(kind, style=style_for_type(kind)),
            "" if item.get("id") is None else str(item["id"]),
            Text(item.get("cost_centre") or ""),
            Text(item.get("description") or ""),
        )
    return table


def _punch_line(item: dict[str, Any]) -> Text:
    kind = str(item.get("type", ""))
    line = Text()
    line.append(display_time(str(item.get("timestamp", ""))), style="punch.time")
    line.append("  ")
    line.append(kind, style=style_for_type(kind))
    if item.get("description"):
        line.append(f"  '{item['description']}'")
    if item.get("cost_centre"):
        line.append(f"  [{item['cost_centre']}]", style="punch.ccc")
    if item.get("id") is not None:
        line.append(f"  (id: {item['id']})", style="punch.key")
    return line


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="punch.error")
    op = Text(f"  {result.op}", style="punch.op")
    sep = Text(" — ")
    console.print(label, op, sep, Text(msg))

    if verbose and err:
        console.print(Text(f"  code: {err.code}", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Punch renderers ───────────────────────────────────────────────────


def _render_punch(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render punch_start / punch_stop results."""
    _status_line(console, result)
    label = "Dry run, would create" if result.data.get("dry_run") else "Created"
    console.print(f"  {label}:")
    console.print(Text("  ").append_text(_punch_line(result.data["punch"])))
    previous = result.data.get("previous")
    if verbose and previous:
        console.print(Text("  previous: ", style="punch.key").append_text(_punch_line(previous)))
    if verbose:
        _render_meta(console, result)


def _render_latest(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the latest-punches table in server order."""
    d = result.data
    flt = d.get("filter", "all")
    kind = "" if flt == "all" else f" {flt.upper()}"
    console.print(f"Latest {d.get('requested', '?')} worktime{kind} punch line(s):")
    items = d.get("items", [])
    if not items:
        console.print("NONE FOUND!")
    else:
        console.print(_punch_table(items))
        console.print(f"\n{d.get('count', len(items))} punches")
    if verbose:
        _render_meta(console, result)


# ── Config renderers ──────────────────────────────────────────────────


def _render_tasks(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    groups: dict[str, list[str]] = result.data.get("groups", {})
    if not groups:
        console.print("No recurring tasks configured.")
        return
    for group, descs in groups.items():
        console.print(Text(group, style="bold"))
        for desc in descs:
            console.print(Text(f"  - {desc}"))


def _render_cost_centres(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    items = result.data.get("items", [])
    if not items:
        console.print("No cost centres configured.")
    else:
        table = Table(show_header=True, pad_edge=False, expand=False)
        table.add_column("ID", style="punch.id")
        table.add_column("Name", style="punch.ccc")
        table.add_column("Default")
        for item in items:
            default = "*" if item.get("default") else ""
            table.add_row(str(item["id"]), Text(str(item["name"])), default)
        console.print(table)
    rules = result.data.get("rules") or {}
    for keyword, ccc_id in rules.items():
        console.print(Text(f"  rule: '{keyword}' -> {ccc_id}"))


def _render_payload(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    body = json.dumps(d.get("body", {}), indent=2, ensure_ascii=False)
    console.print(Panel(Text(body), title=f"{d.get('method')} {d.get('url')}", expand=False))


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback: status line plus key-value fields."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


_OP_RENDERERS: dict[str, Any] = {
    "punch_start": _render_punch,
    "punch_stop": _render_punch,
    "latest": _render_latest,
    "config": _render_generic,
    "tasks": _render_tasks,
    "cost_centres": _render_cost_centres,
    "payload": _render_payload,
}
