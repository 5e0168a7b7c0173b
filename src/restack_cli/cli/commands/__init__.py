"""CLI command modules for gh-restack."""

from __future__ import annotations

import typer

from .restack import restack as restack_command

__all__ = ["register_commands", "restack_command"]


def register_commands(app: typer.Typer) -> None:
    """Attach all commands to the root Typer application."""
    app.command("restack")(restack_command)
