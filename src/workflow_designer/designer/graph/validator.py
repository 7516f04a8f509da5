"""Structural validation of a workflow graph.

`validate_workflow_structure` is pure and total: any list of nodes and edges,
including an empty graph, dangling edge endpoints or a graph made only of
cycles, yields a result. Every rule is evaluated; none short-circuits another.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import IntEnum

from .fields import is_blank
from .models import NodeType, NodeValidation, ValidationResult, WorkflowEdge, WorkflowNode

START_COUNT_ERROR = "Exactly one Start node is required."
EMPTY_WORKFLOW_ERROR = "Workflow is empty."
CYCLE_ERROR = "Cycle detected in workflow."

START_CONSTRAINT_TAG = "Start node constraint"
START_OUTGOING_TAG = "Start node should have an outgoing connection."
END_INCOMING_TAG = "End node should have an incoming connection."
TASK_TITLE_TAG = "Task title is required."
CYCLE_TAG = "Part of a cycle"


class _Color(IntEnum):
    WHITE = 0
    GRAY = 1
    BLACK = 2


def build_adjacency(
    nodes: Sequence[WorkflowNode], edges: Sequence[WorkflowEdge]
) -> tuple[dict[str, list[str]], dict[str, list[str]]]:
    """Return ``(outgoing, incoming)`` maps in edge order.

    Edges with an endpoint that is not a known node id are left out of both
    maps.
    """

    known = {n.id for n in nodes}
    outgoing: dict[str, list[str]] = {}
    incoming: dict[str, list[str]] = {}
    for edge in edges:
        if edge.source not in known or edge.target not in known:
            continue
        outgoing.setdefault(edge.source, []).append(edge.target)
        incoming.setdefault(edge.target, []).append(edge.source)
    return outgoing, incoming


def has_cycle(node_ids: Sequence[str], outgoing: dict[str, list[str]]) -> bool:
    """Three-color depth-first search; an edge into a gray node is a cycle.

    Iterative so that long chains never hit the interpreter recursion limit.
    """

    color: dict[str, _Color] = {}
    for root in node_ids:
        if color.get(root, _Color.WHITE) != _Color.WHITE:
            continue
        color[root] = _Color.GRAY
        stack: list[tuple[str, int]] = [(root, 0)]
        while stack:
            current, next_child = stack[-1]
            children = outgoing.get(current, [])
            if next_child >= len(children):
                color[current] = _Color.BLACK
                stack.pop()
                continue
            stack[-1] = (current, next_child + 1)
            child = children[next_child]
            state = color.get(child, _Color.WHITE)
            if state == _Color.GRAY:
                return True
            if state == _Color.WHITE:
                color[child] = _Color.GRAY
                stack.append((child, 0))
    return False


def validate_workflow_structure(
    nodes: Sequence[WorkflowNode], edges: Sequence[WorkflowEdge]
) -> ValidationResult:
    global_errors: list[str] = []
    node_errors: dict[str, list[str]] = {n.id: [] for n in nodes}

    start_nodes = [n for n in nodes if n.type == NodeType.START.value]
    if len(start_nodes) != 1:
        global_errors.append(START_COUNT_ERROR)
        for n in start_nodes:
            node_errors[n.id].append(START_CONSTRAINT_TAG)

    if not nodes:
        global_errors.append(EMPTY_WORKFLOW_ERROR)

    outgoing, incoming = build_adjacency(nodes, edges)

    for n in nodes:
        if n.type == NodeType.START.value and not outgoing.get(n.id):
            node_errors[n.id].append(START_OUTGOING_TAG)
        elif n.type == NodeType.END.value and not incoming.get(n.id):
            node_errors[n.id].append(END_INCOMING_TAG)
        elif n.type == NodeType.TASK.value and is_blank(n.data.title):
            node_errors[n.id].append(TASK_TITLE_TAG)

    if has_cycle([n.id for n in nodes], outgoing):
        global_errors.append(CYCLE_ERROR)
        # Coarse signal: every node is tagged, not only the ones on the cycle.
        for n in nodes:
            node_errors[n.id].append(CYCLE_TAG)

    return ValidationResult(
        globalErrors=global_errors,
        nodeValidation=[
            NodeValidation(nodeId=n.id, errors=list(node_errors[n.id])) for n in nodes
        ],
    )
