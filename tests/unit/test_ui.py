"""Tests for the StepTracker progress display."""

from __future__ import annotations

from rich.console import Console

from restack_cli.cli.ui import RESTACK_STEPS, StepTracker, live_tracker


def _text(tracker: StepTracker) -> str:
    console = Console(record=True, width=100, color_system=None)
    console.print(tracker.render())
    return console.export_text()


def test_for_restack_adds_all_steps_pending():
    tracker = StepTracker.for_restack()
    assert [s.key for s in tracker.steps] == [key for key, _ in RESTACK_STEPS]
    assert all(s.status == "pending" for s in tracker.steps)


def test_add_is_idempotent():
    tracker = StepTracker("t")
    tracker.add("a", "Step A")
    tracker.add("a", "Step A again")
    assert len(tracker.steps) == 1
    assert tracker.steps[0].label == "Step A"


def test_status_transitions_and_detail():
    tracker = StepTracker.for_restack()
    tracker.start("fetch")
    assert tracker.status_of("fetch") == "running"
    tracker.complete("fetch", "origin/main")
    assert tracker.status_of("fetch") == "done"
    assert "origin/main" in _text(tracker)


def test_unknown_key_is_added():
    tracker = StepTracker("t")
    tracker.error("surprise", "boom")
    assert tracker.status_of("surprise") == "error"
    assert tracker.status_of("missing") is None


def test_refresh_callback_invoked():
    calls = []
    tracker = StepTracker("t")
    tracker.attach_refresh(lambda: calls.append(1))
    tracker.add("a", "A")
    tracker.skip("a", "nothing to do")
    assert len(calls) == 2


def test_live_tracker_renders_final_state():
    console = Console(record=True, width=100, color_system=None, force_terminal=False)
    tracker = StepTracker.for_restack()
    with live_tracker(tracker, console):
        tracker.complete("preflight", "working copy clean")
    assert "working copy clean" in console.export_text()


def test_detail_with_brackets_is_rendered_literally():
    tracker = StepTracker.for_restack()
    tracker.skip("restack", "[wip] branch")
    text = _text(tracker)
    assert "([wip] branch)" in text
    assert tracker.status_of("restack") == "skipped"
