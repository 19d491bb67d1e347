"""kihopunch — Kiho worktime punch CLI."""

__version__ = "0.3.0"

APP_NAME = "Kiho Worktime Puncher"
