"""
Login import package.

Provides the idempotent batch import service and the ``flask turf`` CLI group.
"""

from __future__ import annotations

from flask import Flask

from .cli import turf_cli
from .service import ImportSummary, import_logins

__all__ = [
    "init_importer",
    "import_logins",
    "ImportSummary",
    "turf_cli",
]


def init_importer(app: Flask) -> None:
    """Register the importer CLI group on the application."""
    if "turf" not in app.cli.commands:
        app.cli.add_command(turf_cli)
