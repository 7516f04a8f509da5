"""Linear undo/redo history of workflow graph snapshots.

The history is a single branch: pushing after an undo discards every entry
beyond the current position.

Snapshots never alias live state. A pushed graph is deep-copied on the way in
and a restored graph is deep-copied on the way out, so mutating either the
live graph or a restored copy leaves the recorded entry untouched.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from workflow_designer.designer.graph.models import (
    WorkflowEdge,
    WorkflowNode,
    clone_edges,
    clone_nodes,
)


@dataclass(frozen=True, slots=True)
class HistorySnapshot:
    """An immutable copy of (nodes, edges) at one point in time.

    Validation tags are stripped; they are recomputed on restore.
    """

    nodes: tuple[WorkflowNode, ...]
    edges: tuple[WorkflowEdge, ...]

    @staticmethod
    def capture(nodes: Sequence[WorkflowNode], edges: Sequence[WorkflowEdge]) -> HistorySnapshot:
        return HistorySnapshot(
            nodes=tuple(clone_nodes(nodes, strip_validation=True)),
            edges=tuple(clone_edges(edges)),
        )

    def restore(self) -> tuple[list[WorkflowNode], list[WorkflowEdge]]:
        """Fresh, independent copies of the recorded graph."""

        return clone_nodes(self.nodes), clone_edges(self.edges)


class HistoryManager:
    def __init__(self) -> None:
        self._entries: list[HistorySnapshot] = []
        self._index = -1

    @property
    def index(self) -> int:
        """Position of the current entry; ``-1`` when the history is empty."""

        return self._index

    @property
    def entries(self) -> tuple[HistorySnapshot, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._entries) - 1

    def push(self, nodes: Sequence[WorkflowNode], edges: Sequence[WorkflowEdge]) -> None:
        del self._entries[self._index + 1 :]
        self._entries.append(HistorySnapshot.capture(nodes, edges))
        self._index = len(self._entries) - 1

    def undo(self) -> tuple[list[WorkflowNode], list[WorkflowEdge]] | None:
        """Step back one entry; ``None`` (and no change) at the oldest entry."""

        if not self.can_undo:
            return None
        self._index -= 1
        return self._entries[self._index].restore()

    def redo(self) -> tuple[list[WorkflowNode], list[WorkflowEdge]] | None:
        """Step forward one entry; ``None`` (and no change) at the newest entry."""

        if not self.can_redo:
            return None
        self._index += 1
        return self._entries[self._index].restore()

    def clear(self) -> None:
        self._entries.clear()
        self._index = -1
