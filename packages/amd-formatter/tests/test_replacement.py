# SPDX-License-Identifier: MIT
"""Tests for statement edit operations."""

from __future__ import annotations

import pytest

from amd_formatter import nodes as n
from amd_formatter.replacement import Replacement, ReplacementError, apply_replacements


def _body() -> list[n.Node]:
    return [n.RawStatement("a;"), n.RawStatement("b;"), n.RawStatement("c;")]


class TestApplyReplacements:
    """Tests for apply_replacements."""

    def test_removes(self):
        """A removal drops only the addressed statement."""
        body = _body()

        result = apply_replacements(body, [Replacement.removes(1)])

        assert result == [n.RawStatement("a;"), n.RawStatement("c;")]

    def test_swaps_with_several_statements(self):
        """A swap may expand one statement into several."""
        body = _body()
        extra = [n.RawStatement("x;"), n.RawStatement("y;")]

        result = apply_replacements(body, [Replacement.swaps(0, extra)])

        assert result == [n.RawStatement("x;"), n.RawStatement("y;"), n.RawStatement("b;"), n.RawStatement("c;")]

    def test_original_body_is_not_mutated(self):
        """The input list is left as it was."""
        body = _body()

        apply_replacements(body, [Replacement.removes(0), Replacement.removes(2)])

        assert body == _body()

    def test_duplicate_index_rejected(self):
        """Two edits for the same statement conflict."""
        with pytest.raises(ReplacementError, match="replaced twice"):
            apply_replacements(_body(), [Replacement.removes(1), Replacement.removes(1)])

    def test_out_of_range_rejected(self):
        with pytest.raises(ReplacementError, match="out of range"):
            apply_replacements(_body(), [Replacement.removes(3)])
