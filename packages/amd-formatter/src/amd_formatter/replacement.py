# SPDX-License-Identifier: MIT
"""Statement edit operations.

The rewrite never mutates a module body in place. Each import/export
statement yields a ``Replacement`` addressed by its index in the original
body, and ``apply_replacements`` builds the new body from them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from . import nodes as n


class ReplacementError(Exception):
    """Raised when edit operations conflict."""

    pass


@dataclass(frozen=True)
class Replacement:
    """Replace the statement at ``index`` with ``nodes`` (possibly none).

    Attributes:
        index: Position of the statement in the original body
        nodes: Statements to emit in its place
    """

    index: int
    nodes: tuple[n.Node, ...] = field(default_factory=tuple)

    @classmethod
    def removes(cls, index: int) -> "Replacement":
        """Drop the statement at ``index``."""
        return cls(index=index)

    @classmethod
    def swaps(cls, index: int, nodes: Iterable[n.Node]) -> "Replacement":
        """Swap the statement at ``index`` for one or more statements."""
        return cls(index=index, nodes=tuple(nodes))


def apply_replacements(body: Sequence[n.Node], replacements: Iterable[Replacement]) -> list[n.Node]:
    """Build a new statement list with the given edits applied.

    Statements without a replacement are carried over untouched.

    Raises:
        ReplacementError: If two edits address the same statement or an
            index falls outside the body
    """
    by_index: dict[int, Replacement] = {}
    for replacement in replacements:
        if not 0 <= replacement.index < len(body):
            raise ReplacementError(f"replacement index {replacement.index} out of range")
        if replacement.index in by_index:
            raise ReplacementError(f"statement {replacement.index} replaced twice")
        by_index[replacement.index] = replacement

    result: list[n.Node] = []
    for index, statement in enumerate(body):
        replacement = by_index.get(index)
        if replacement is None:
            result.append(statement)
        else:
            result.extend(replacement.nodes)
    return result
