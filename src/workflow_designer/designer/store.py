"""The workflow store: single owner of the graph being designed.

Every mutation goes through the same sequence, under one lock:

1. validate the candidate graph
2. commit it with refreshed ``__validation`` tags
3. push a history snapshot

So no caller can observe a committed graph without its validation pass and
its history entry. Simulation is a read path: it never touches history.

Known limitation: there is a single simulation result slot and no
cancellation. A paced simulation that resolves after a newer one started
overwrites the newer result.
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections.abc import Mapping, Sequence
from typing import Any

from workflow_designer.designer.catalog import AutomationCatalog
from workflow_designer.designer.config import DesignerSettings
from workflow_designer.designer.graph.fields import FieldCheck, check_node_fields
from workflow_designer.designer.graph.models import (
    VALIDATION_KEY,
    NodeData,
    Position,
    SimulationResult,
    ValidationResult,
    WorkflowDocument,
    WorkflowEdge,
    WorkflowNode,
    clone_edges,
    clone_nodes,
)
from workflow_designer.designer.graph.simulator import simulate_workflow, simulate_workflow_paced
from workflow_designer.designer.graph.validator import validate_workflow_structure
from workflow_designer.designer.history import HistoryManager
from workflow_designer.designer.workflow_file import (
    InvalidWorkflowFile,
    dump_workflow,
    parse_workflow_json,
    parse_workflow_payload,
)

logger = logging.getLogger(__name__)


class CatalogNotReady(RuntimeError):
    """Simulation needs the automation catalog, which is still loading."""


class DuplicateNodeId(ValueError):
    """A node with the same id is already part of the graph."""


def new_node_id(node_type: str) -> str:
    return f"{node_type}-{uuid.uuid4().hex[:12]}"


def make_node(
    node_type: str,
    position: Position | None = None,
    *,
    node_id: str | None = None,
    title: str | None = None,
) -> WorkflowNode:
    """Build a fresh node the way the canvas does on drop.

    The default title is ``"<Type> Node"``.
    """

    return WorkflowNode(
        id=node_id or new_node_id(node_type),
        type=node_type,
        position=position or Position(),
        data=NodeData(title=title if title is not None else f"{node_type.capitalize()} Node"),
    )


def _tag_nodes(nodes: Sequence[WorkflowNode], validation: ValidationResult) -> list[WorkflowNode]:
    errors_by_id = {v.nodeId: v.errors for v in validation.nodeValidation}
    tagged: list[WorkflowNode] = []
    for n in nodes:
        data = n.data.model_copy(update={"validation": list(errors_by_id.get(n.id, []))})
        tagged.append(n.model_copy(update={"data": data}))
    return tagged


class WorkflowStore:
    """Owns (nodes, edges, selection, simulation result, history)."""

    def __init__(
        self,
        *,
        catalog: AutomationCatalog | None = None,
        settings: DesignerSettings | None = None,
    ) -> None:
        self._lock = threading.RLock()
        self._catalog = catalog if catalog is not None else AutomationCatalog()
        self._settings = settings or DesignerSettings()

        self._nodes: list[WorkflowNode] = []
        self._edges: list[WorkflowEdge] = []
        self._validation = ValidationResult()
        self._selected_node_id: str | None = None
        self._simulation_result: SimulationResult | None = None
        self._history = HistoryManager()

        # Entry 0 is the empty workflow, so undoing every edit gets back here.
        self._apply([], [], action="init")

    # ── Queries ──

    @property
    def catalog(self) -> AutomationCatalog:
        return self._catalog

    @property
    def nodes(self) -> list[WorkflowNode]:
        with self._lock:
            return clone_nodes(self._nodes)

    @property
    def edges(self) -> list[WorkflowEdge]:
        with self._lock:
            return clone_edges(self._edges)

    @property
    def validation(self) -> ValidationResult:
        with self._lock:
            return self._validation.model_copy(deep=True)

    @property
    def selected_node(self) -> WorkflowNode | None:
        with self._lock:
            if self._selected_node_id is None:
                return None
            for n in self._nodes:
                if n.id == self._selected_node_id:
                    return n.model_copy(deep=True)
            return None

    @property
    def selected_node_id(self) -> str | None:
        return self._selected_node_id

    @property
    def simulation_result(self) -> SimulationResult | None:
        with self._lock:
            if self._simulation_result is None:
                return None
            return self._simulation_result.model_copy(deep=True)

    @property
    def history_index(self) -> int:
        return self._history.index

    @property
    def history_length(self) -> int:
        return len(self._history)

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    def get_node(self, node_id: str) -> WorkflowNode | None:
        with self._lock:
            for n in self._nodes:
                if n.id == node_id:
                    return n.model_copy(deep=True)
            return None

    # ── Internals ──

    def _commit(self, nodes: Sequence[WorkflowNode], edges: Sequence[WorkflowEdge]) -> None:
        validation = validate_workflow_structure(nodes, edges)
        self._nodes = _tag_nodes(nodes, validation)
        self._edges = list(edges)
        self._validation = validation

    def _apply(
        self, nodes: Sequence[WorkflowNode], edges: Sequence[WorkflowEdge], *, action: str
    ) -> None:
        with self._lock:
            self._commit(nodes, edges)
            self._history.push(self._nodes, self._edges)
            logger.debug(
                "Workflow committed",
                extra={
                    "action": action,
                    "node_count": len(self._nodes),
                    "edge_count": len(self._edges),
                    "global_errors": list(self._validation.globalErrors),
                    "history_index": self._history.index,
                },
            )

    # ── Mutations ──

    def set_nodes(self, nodes: Sequence[WorkflowNode]) -> None:
        with self._lock:
            self._apply(clone_nodes(nodes, strip_validation=True), self._edges, action="set_nodes")

    def set_edges(self, edges: Sequence[WorkflowEdge]) -> None:
        with self._lock:
            self._apply(
                clone_nodes(self._nodes, strip_validation=True),
                clone_edges(edges),
                action="set_edges",
            )

    def _require_node(self, node_id: str) -> None:
        if all(n.id != node_id for n in self._nodes):
            raise KeyError(node_id)

    def update_node(
        self,
        node_id: str,
        partial_data: Mapping[str, Any],
        *,
        require_existing: bool = False,
    ) -> WorkflowNode | None:
        """Merge `partial_data` (wire keys) into the data of node `node_id`.

        An unknown id leaves the nodes unchanged but still counts as a
        committed edit, unless `require_existing` is set. ``__validation`` in
        the patch is ignored.

        Returns:
            The updated node with its fresh validation tags, or ``None`` when
            no node has that id.

        Raises:
            KeyError: if `require_existing` is set and no node has that id.
                Nothing is committed in that case.
            pydantic.ValidationError: if the merged data has the wrong shape.
                Nothing is committed in that case.
        """

        patch = {k: v for k, v in partial_data.items() if k != VALIDATION_KEY}
        with self._lock:
            if require_existing:
                self._require_node(node_id)
            found = False
            updated: list[WorkflowNode] = []
            for n in clone_nodes(self._nodes, strip_validation=True):
                if n.id == node_id:
                    found = True
                    data = NodeData.model_validate({**n.data.to_wire(), **patch})
                    n = n.model_copy(update={"data": data})
                updated.append(n)
            if not found:
                logger.warning("Update for unknown node ignored", extra={"node_id": node_id})
            self._apply(updated, self._edges, action="update_node")
            return self.get_node(node_id)

    def add_node(self, node: WorkflowNode, *, unique: bool = False) -> WorkflowNode:
        """Append `node` and return it with its validation tags.

        Without `unique` the caller guarantees the id is not taken.

        Raises:
            DuplicateNodeId: if `unique` is set and the id is already taken.
                Nothing is committed in that case.
        """

        with self._lock:
            if unique and any(n.id == node.id for n in self._nodes):
                raise DuplicateNodeId(node.id)
            nodes = clone_nodes(self._nodes, strip_validation=True)
            nodes.append(node.without_validation())
            self._apply(nodes, self._edges, action="add_node")
            return self._nodes[-1].model_copy(deep=True)

    def remove_node(self, node_id: str, *, missing_ok: bool = True) -> None:
        """Delete the node and every edge that touches it.

        Raises:
            KeyError: if `missing_ok` is false and no node has that id.
        """

        with self._lock:
            if not missing_ok:
                self._require_node(node_id)
            nodes = [n for n in clone_nodes(self._nodes, strip_validation=True) if n.id != node_id]
            edges = [e for e in self._edges if e.source != node_id and e.target != node_id]
            if self._selected_node_id == node_id:
                self._selected_node_id = None
            self._apply(nodes, edges, action="remove_node")

    def connect(
        self,
        source: str,
        target: str,
        *,
        source_handle: str | None = None,
        target_handle: str | None = None,
    ) -> WorkflowEdge:
        """Append an edge from `source` to `target` and return it."""

        edge = WorkflowEdge(
            id=f"edge-{uuid.uuid4().hex[:12]}",
            source=source,
            target=target,
            sourceHandle=source_handle,
            targetHandle=target_handle,
        )
        with self._lock:
            edges = clone_edges(self._edges)
            edges.append(edge)
            self._apply(
                clone_nodes(self._nodes, strip_validation=True), edges, action="connect"
            )
        return edge.model_copy()

    def disconnect(self, edge_id: str) -> None:
        """Remove the edge with id `edge_id`.

        Raises:
            KeyError: if no edge has that id.
        """

        with self._lock:
            edges = [e for e in self._edges if e.id != edge_id]
            if len(edges) == len(self._edges):
                raise KeyError(edge_id)
            self._apply(
                clone_nodes(self._nodes, strip_validation=True), edges, action="disconnect"
            )

    def select_node(self, node_id: str | None) -> None:
        """Change the selection. Not a graph mutation: no history entry.

        Raises:
            KeyError: if `node_id` is not a node of the current graph.
        """

        with self._lock:
            if node_id is not None:
                self._require_node(node_id)
            self._selected_node_id = node_id

    # ── History ──

    def undo(self) -> bool:
        """Restore the previous snapshot. Returns False when there is none."""

        with self._lock:
            restored = self._history.undo()
            if restored is None:
                return False
            # Re-validate: badges must describe the restored graph.
            self._commit(*restored)
            self._selected_node_id = None
            logger.debug("Workflow undo", extra={"history_index": self._history.index})
            return True

    def redo(self) -> bool:
        """Restore the next snapshot. Returns False when there is none."""

        with self._lock:
            restored = self._history.redo()
            if restored is None:
                return False
            self._commit(*restored)
            self._selected_node_id = None
            logger.debug("Workflow redo", extra={"history_index": self._history.index})
            return True

    # ── Export / import ──

    def export_workflow(self) -> str:
        """Current graph as pretty JSON, without validation tags."""

        with self._lock:
            return dump_workflow(self._nodes, self._edges)

    def import_document(self, document: WorkflowDocument) -> None:
        """Replace nodes and edges together, as one history entry."""

        with self._lock:
            self._apply(
                clone_nodes(document.nodes, strip_validation=True),
                clone_edges(document.edges),
                action="import",
            )

    def import_workflow(self, payload: object) -> None:
        """Import a decoded ``{"nodes": [...], "edges": [...]}`` object.

        Raises:
            InvalidWorkflowFile: the payload is rejected; the graph is unchanged.
        """

        try:
            document = parse_workflow_payload(payload)
        except InvalidWorkflowFile as e:
            logger.warning("Workflow import rejected", extra={"reason": str(e)})
            raise
        self.import_document(document)

    def import_workflow_json(self, text: str | bytes) -> None:
        try:
            document = parse_workflow_json(text)
        except InvalidWorkflowFile as e:
            logger.warning("Workflow import rejected", extra={"reason": str(e)})
            raise
        self.import_document(document)

    # ── Simulation ──

    def _simulation_inputs(self) -> tuple[list[WorkflowNode], list[WorkflowEdge]]:
        nodes = clone_nodes(self._nodes, strip_validation=True)
        edges = clone_edges(self._edges)
        if not self._catalog.is_loaded and any(
            check_node_fields(n, None) == FieldCheck.UNKNOWN for n in nodes
        ):
            raise CatalogNotReady(
                "Automations are still loading. Please wait a moment and try again."
            )
        return nodes, edges

    def run_simulation(self) -> SimulationResult:
        """Simulate the current graph and keep the result.

        Raises:
            CatalogNotReady: an automated node needs the catalog, which is
                still loading. The previous result is kept.
        """

        with self._lock:
            nodes, edges = self._simulation_inputs()
            result = simulate_workflow(nodes, edges, self._catalog.actions)
            self._simulation_result = result
            return result.model_copy(deep=True)

    async def run_simulation_async(self) -> SimulationResult:
        """Paced variant of `run_simulation`; the last call to resolve wins."""

        with self._lock:
            nodes, edges = self._simulation_inputs()
            catalog = self._catalog.actions
            delay = self._settings.simulation_delay(len(nodes))

        result = await simulate_workflow_paced(nodes, edges, catalog, delay=delay)

        with self._lock:
            self._simulation_result = result
        return result.model_copy(deep=True)

    def clear_simulation(self) -> None:
        with self._lock:
            self._simulation_result = None
