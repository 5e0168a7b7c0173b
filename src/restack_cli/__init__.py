"""
gh-restack - restack your pull requests once their dependencies merge.

Usage:
    gh-restack
    gh-restack restack
    gh-restack restack --dry-run
    gh-restack restack --json --strict

A pull request declares its dependency in its description::

    Depends on: #123

Once #123 is merged, the dependent branch is rebased onto the default
branch, replacing the commits that came from #123.
"""

from __future__ import annotations

import typer

from restack_cli.cli.commands import register_commands, restack_command

__version__ = "0.3.0"

app = typer.Typer(
    name="gh-restack",
    help="Rebase dependent pull requests onto their merged dependencies.",
    add_completion=False,
    invoke_without_command=True,
)
register_commands(app)


@app.callback()
def callback(ctx: typer.Context) -> None:
    """Run ``restack`` with default options when no subcommand is given."""
    if ctx.invoked_subcommand is None:
        restack_command(
            repo_root=None,
            remote=None,
            author=None,
            dry_run=False,
            as_json=False,
            strict=False,
            verbose=False,
        )


@app.command("version")
def version() -> None:
    """Show the installed gh-restack version."""
    typer.echo(f"gh-restack {__version__}")


def main() -> None:
    app()


__all__ = ["app", "main", "__version__"]
