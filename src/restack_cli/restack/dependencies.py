"""Extraction of dependency declarations from pull request bodies."""

from __future__ import annotations

import re

__all__ = ["DEPENDS_ON_PATTERN", "extract_dependencies"]

# depend / depends / depended / depending, "on", optional colon, whitespace, "#<digits>"
DEPENDS_ON_PATTERN = re.compile(r"depend(?:s|ed|ing)?\s+on:?\s+#(\d+)", re.IGNORECASE)


def extract_dependencies(body: str | None) -> list[int]:
    """Return every referenced pull request number in order of appearance.

    Duplicates are kept; deciding what multiple references mean is up to
    the resolver.
    """
    if not body:
        return []
    return [int(match.group(1)) for match in DEPENDS_ON_PATTERN.finditer(body)]
