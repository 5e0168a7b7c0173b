"""Progress display for restack runs."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator

from rich.console import Console
from rich.live import Live
from rich.markup import escape
from rich.tree import Tree

__all__ = ["RESTACK_STEPS", "Step", "StepTracker", "live_tracker"]

RESTACK_STEPS = (
    ("preflight", "Check working copy"),
    ("fetch", "Fetch default branch"),
    ("list", "Fetch pull requests"),
    ("restack", "Rebase pull requests"),
)

_SYMBOLS = {
    "done": "[green]●[/green]",
    "pending": "[green dim]○[/green dim]",
    "running": "[cyan]○[/cyan]",
    "error": "[red]●[/red]",
    "skipped": "[yellow]○[/yellow]",
}


@dataclass
class Step:
    key: str
    label: str
    status: str = "pending"
    detail: str = ""

    def line(self) -> str:
        symbol = _SYMBOLS.get(self.status, " ")
        label_style = "bright_black" if self.status == "pending" else "white"
        text = f"{symbol} [{label_style}]{escape(self.label)}[/{label_style}]"
        detail = self.detail.strip()
        if detail:
            text += f" [bright_black]({escape(detail)})[/bright_black]"
        return text


class StepTracker:
    """Ordered run steps rendered as a Rich tree, refreshed on every change."""

    def __init__(self, title: str):
        self.title = title
        self._steps: dict[str, Step] = {}
        self._refresh_cb: Callable[[], None] | None = None

    @classmethod
    def for_restack(cls) -> "StepTracker":
        tracker = cls("Restack pull requests")
        for key, label in RESTACK_STEPS:
            tracker.add(key, label)
        return tracker

    @property
    def steps(self) -> list[Step]:
        return list(self._steps.values())

    def attach_refresh(self, cb: Callable[[], None]) -> None:
        self._refresh_cb = cb

    def add(self, key: str, label: str) -> None:
        if key in self._steps:
            return
        self._steps[key] = Step(key, label)
        self._refresh()

    def start(self, key: str, detail: str = "") -> None:
        self._set(key, "running", detail)

    def complete(self, key: str, detail: str = "") -> None:
        self._set(key, "done", detail)

    def error(self, key: str, detail: str = "") -> None:
        self._set(key, "error", detail)

    def skip(self, key: str, detail: str = "") -> None:
        self._set(key, "skipped", detail)

    def status_of(self, key: str) -> str | None:
        step = self._steps.get(key)
        return step.status if step else None

    def _set(self, key: str, status: str, detail: str) -> None:
        # Steps outside RESTACK_STEPS are labelled by their key
        step = self._steps.setdefault(key, Step(key, key))
        step.status = status
        if detail:
            step.detail = detail
        self._refresh()

    def _refresh(self) -> None:
        if self._refresh_cb:
            self._refresh_cb()

    def render(self) -> Tree:
        tree = Tree(f"[cyan]{escape(self.title)}[/cyan]", guide_style="grey50")
        for step in self._steps.values():
            tree.add(step.line())
        return tree


@contextmanager
def live_tracker(tracker: StepTracker, console: Console) -> Iterator[StepTracker]:
    """Render ``tracker`` live for the duration of the block."""
    with Live(tracker.render(), console=console, refresh_per_second=8, transient=False) as live:
        tracker.attach_refresh(lambda: live.update(tracker.render()))
        yield tracker
        live.update(tracker.render())
