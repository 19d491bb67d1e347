"""Config file location and first-run bootstrap.

The config lives in the platform config directory (via
``click.get_app_dir``) unless ``KIHOPUNCH_CONFIG`` or ``--config``
points elsewhere.
"""

from __future__ import annotations

import os
from datetime import date
from pathlib import Path

import click

from kihopunch import APP_NAME
from kihopunch.config.models import DEFAULT_API_URL, PLACEHOLDER_API_KEY

APP_DIR_NAME = "kiho-worktime-puncher"
CONFIG_FILENAME = "config.toml"
CONFIG_ENV_VAR = "KIHOPUNCH_CONFIG"

_SAMPLE_CONFIG = """\
title = "Configuration file for '{app_name}'"
updated = "{updated}"

[api]
url = "{url}"
api_key = "{api_key}"
timeout = 10.0

[punch]
# "Group | description" entries are grouped in the start menu.
recurring_tasks = [
    "Group A | Dummy task A-1",
    "Group A | Dummy task A-2",
    "Group B | Dummy task B-1",
    "Misc task description I",
    "Misc task description II",
]
# Every LOGIN is sent with a customer cost centre; this one unless a
# rule below or --ccc picks another.
default_cost_centre = 901184

[punch.cost_centres]
"901184" = "Example default customer cost centre"
"892621" = "Example ISO27001 cost centre"

# Descriptions containing the keyword are punched to the given cost centre.
[punch.cost_centre_rules]
"ISO27" = 892621
"""


def default_config_path() -> Path:
    """Platform config path, e.g. ``~/.config/kiho-worktime-puncher/config.toml``."""
    return Path(click.get_app_dir(APP_DIR_NAME)) / CONFIG_FILENAME


def resolve_config_path(config_path: str | None = None) -> Path:
    """Resolve the config file location.

    Priority: explicit *config_path*, then ``KIHOPUNCH_CONFIG``, then the
    platform default. The file does not need to exist.
    """
    if config_path:
        return Path(config_path)
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return default_config_path()


def sample_config() -> str:
    """Render the sample config written on first run."""
    return _SAMPLE_CONFIG.format(
        app_name=APP_NAME,
        updated=date.today().strftime("%d.%m.%Y"),
        url=DEFAULT_API_URL,
        api_key=PLACEHOLDER_API_KEY,
    )


def write_sample_config(path: Path) -> Path:
    """Create *path* (and parents) holding the sample config.

    Never overwrites an existing file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("x", encoding="utf-8") as fh:
        fh.write(sample_config())
    return path
