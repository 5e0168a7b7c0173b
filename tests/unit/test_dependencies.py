"""Unit tests for dependency annotation extraction."""

from __future__ import annotations

import pytest

from restack_cli.restack.dependencies import extract_dependencies


class TestExtractDependencies:
    """Tests for extract_dependencies."""

    @pytest.mark.parametrize(
        "body",
        [
            "Depends on #123",
            "depends on: #123",
            "Depended on #123",
            "depending on #123",
            "DEPEND ON #123",
            "Depends on:   #123",
        ],
    )
    def test_phrase_family(self, body: str):
        assert extract_dependencies(body) == [123]

    def test_returns_references_in_order_of_appearance(self):
        body = "Depends on #7\n\nSome text.\n\nDepending on: #3"
        assert extract_dependencies(body) == [7, 3]

    def test_keeps_duplicates(self):
        assert extract_dependencies("Depends on #5 and depends on #5") == [5, 5]

    def test_ignores_non_matching_text(self):
        body = "Fixes #12. Related to #13. See #14 for context."
        assert extract_dependencies(body) == []

    @pytest.mark.parametrize("body", ["depends on#5", "Depends on:#5"])
    def test_requires_whitespace_before_hash(self, body: str):
        assert extract_dependencies(body) == []

    def test_requires_digits(self):
        assert extract_dependencies("Depends on #abc") == []

    def test_reference_inside_longer_body(self):
        body = "## Summary\nAdds a cache.\n\n> Depends on: #42\n\n- [x] tests"
        assert extract_dependencies(body) == [42]

    @pytest.mark.parametrize("body", ["", None])
    def test_empty_body(self, body):
        assert extract_dependencies(body) == []
