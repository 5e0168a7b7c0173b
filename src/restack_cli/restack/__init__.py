"""Restack subpackage: dependency resolution and rebase orchestration.

Modules:
    models: Pull request snapshots and per-request outcomes
    dependencies: Extraction of "depends on #N" annotations
    resolver: Classification of a pull request's declared dependency
    executor: Checkout and rebase --onto with abort-on-failure cleanup
    pipeline: Sequential processing of all fetched pull requests
    report: Partitioning and rendering of outcomes
"""

from __future__ import annotations

__all__: list[str] = []
