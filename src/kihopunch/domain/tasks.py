"""Recurring task descriptions and cost-centre selection.

Recurring tasks are configured as ``"Group | description"`` strings.
Tasks without a group separator are collected under ``UNCLASSIFIED``,
which always sorts last.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

UNCLASSIFIED = "unclassified"
GROUP_SEPARATOR = "|"


def group_task_descriptions(tasks: Sequence[str]) -> dict[str, list[str]]:
    """Group task strings by their prefix before the first ``|``.

    Examples:
        >>> group_task_descriptions(["A | one", "misc", "A | two"])
        {'A': ['one', 'two'], 'unclassified': ['misc']}
    """
    grouped: dict[str, list[str]] = {}
    for task in tasks:
        group, sep, desc = task.partition(GROUP_SEPARATOR)
        if sep:
            grouped.setdefault(group.strip(), []).append(desc.strip())
        else:
            grouped.setdefault(UNCLASSIFIED, []).append(task.strip())
    ordered = sorted(grouped, key=lambda g: (g == UNCLASSIFIED, g.casefold()))
    return {group: grouped[group] for group in ordered}


def task_menu(tasks: Sequence[str]) -> list[str]:
    """Flatten grouped tasks into selectable descriptions.

    Grouped entries read ``"Group: description"``; unclassified entries
    keep their bare description.
    """
    entries: list[str] = []
    for group, descs in group_task_descriptions(tasks).items():
        for desc in descs:
            entries.append(desc if group == UNCLASSIFIED else f"{group}: {desc}")
    return entries


def resolve_cost_centre(
    description: str | None,
    rules: Mapping[str, int],
    default: int | None = None,
) -> int | None:
    """Pick the customer cost-centre id for a LOGIN punch.

    The first rule whose keyword occurs in *description* wins; otherwise
    *default* is returned.
    """
    if description:
        for keyword, ccc_id in rules.items():
            if keyword in description:
                return ccc_id
    return default
