"""Deterministic workflow simulation.

The simulator walks the nodes in canvas order (left to right, then top to
bottom) and evaluates each one with the field rules. It never executes an
automation.

Two channels are reported separately:
- ``errors`` / ``valid``: global pre-simulation checks only
- ``steps[*].status``: per-node field completeness
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from .fields import FieldCheck, check_node_fields, is_blank
from .models import (
    AutomationAction,
    NodeType,
    SimulationResult,
    SimulationStep,
    StepStatus,
    WorkflowEdge,
    WorkflowNode,
)
from .validator import EMPTY_WORKFLOW_ERROR, START_COUNT_ERROR

logger = logging.getLogger(__name__)

TOO_MANY_EDGES_ERROR = "Too many edges - possible cycle."

_STATUS_BY_CHECK: dict[FieldCheck, StepStatus] = {
    FieldCheck.PASSED: StepStatus.COMPLETED,
    FieldCheck.FAILED: StepStatus.ERROR,
    FieldCheck.UNKNOWN: StepStatus.PENDING,
}


def pre_simulation_errors(
    nodes: Sequence[WorkflowNode], edges: Sequence[WorkflowEdge]
) -> list[str]:
    errors: list[str] = []
    if sum(1 for n in nodes if n.type == NodeType.START.value) != 1:
        errors.append(START_COUNT_ERROR)
    if not nodes:
        errors.append(EMPTY_WORKFLOW_ERROR)
    # Cheap heuristic kept for compatibility; the validator runs the real DFS.
    if len(edges) > len(nodes) * 2:
        errors.append(TOO_MANY_EDGES_ERROR)
    return errors


def execution_order(nodes: Sequence[WorkflowNode]) -> list[WorkflowNode]:
    """Nodes sorted by ``(x, y)``; missing positions count as ``(0, 0)``.

    ``sorted`` is stable, so exact position ties keep their input order.
    """

    def _key(node: WorkflowNode) -> tuple[float, float]:
        if node.position is None:
            return (0.0, 0.0)
        return (node.position.x, node.position.y)

    return sorted(nodes, key=_key)


def step_label(index: int, node: WorkflowNode) -> str:
    name = node.type if is_blank(node.data.title) else node.data.title
    return f"{index}. {name}"


def simulate_workflow(
    nodes: Sequence[WorkflowNode],
    edges: Sequence[WorkflowEdge],
    catalog: Sequence[AutomationAction] | None,
) -> SimulationResult:
    """Simulate one run of the workflow.

    Args:
        nodes: Graph nodes. Any ``__validation`` tags are ignored.
        edges: Graph edges. Only their count is consulted.
        catalog: Available automation actions, or ``None`` while the catalog
            is still loading (automated nodes then report ``pending``).

    Returns:
        The ordered steps and the global validity of the graph.
    """

    errors = pre_simulation_errors(nodes, edges)

    steps = [
        SimulationStep(
            step=step_label(i, node),
            status=_STATUS_BY_CHECK[check_node_fields(node, catalog)],
            nodeId=node.id,
        )
        for i, node in enumerate(execution_order(nodes), start=1)
    ]

    result = SimulationResult(steps=steps, valid=not errors, errors=errors)
    logger.debug(
        "Workflow simulated",
        extra={
            "node_count": len(nodes),
            "edge_count": len(edges),
            "valid": result.valid,
            "error_steps": sum(1 for s in steps if s.status == StepStatus.ERROR),
        },
    )
    return result


async def simulate_workflow_paced(
    nodes: Sequence[WorkflowNode],
    edges: Sequence[WorkflowEdge],
    catalog: Sequence[AutomationAction] | None,
    *,
    delay: float,
) -> SimulationResult:
    """Same result as `simulate_workflow`, delivered after `delay` seconds.

    The pause only paces the UI. The result is computed up front from the
    inputs as they were when the call started.
    """

    result = simulate_workflow(nodes, edges, catalog)
    if delay > 0:
        await asyncio.sleep(delay)
    return result
