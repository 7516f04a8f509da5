"""Per-node-type field completeness rules.

These rules decide whether a single node carries everything its type needs.
They never raise: every node produces one of three outcomes.

The automated-node rule consults the automation catalog. While the catalog is
still loading (``catalog is None``) that rule cannot decide, which is reported
as ``FieldCheck.UNKNOWN`` rather than defaulting to pass or fail.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

from .models import AutomationAction, NodeData, NodeType, WorkflowNode


class FieldCheck(str, Enum):
    PASSED = "passed"
    FAILED = "failed"
    UNKNOWN = "unknown"


def is_blank(value: object) -> bool:
    """True for ``None`` and for values that are empty after trimming."""

    if value is None:
        return True
    return str(value).strip() == ""


def find_automation(
    catalog: Sequence[AutomationAction], action_id: str | None
) -> AutomationAction | None:
    for action in catalog:
        if action.id == action_id:
            return action
    return None


def missing_action_params(action: AutomationAction, data: NodeData) -> list[str]:
    """Required parameters of `action` that are absent or blank in `data`."""

    params = data.actionParams or {}
    return [name for name in action.requiredParams if is_blank(params.get(name))]


def _check_automated(data: NodeData, catalog: Sequence[AutomationAction] | None) -> FieldCheck:
    if is_blank(data.actionId):
        return FieldCheck.FAILED
    if catalog is None:
        return FieldCheck.UNKNOWN
    action = find_automation(catalog, data.actionId)
    if action is None:
        return FieldCheck.FAILED
    if missing_action_params(action, data):
        return FieldCheck.FAILED
    return FieldCheck.PASSED


def check_node_fields(
    node: WorkflowNode, catalog: Sequence[AutomationAction] | None = ()
) -> FieldCheck:
    """Evaluate the type-specific required fields of one node.

    Args:
        node: The node to check.
        catalog: Available automation actions, or ``None`` while the catalog
            is still loading.

    Returns:
        The field check outcome. Unknown node types always pass.
    """

    data = node.data
    node_type = node.type

    if node_type in (NodeType.START.value, NodeType.TASK.value):
        failed = is_blank(data.title)
    elif node_type == NodeType.APPROVAL.value:
        failed = is_blank(data.approverRole)
    elif node_type == NodeType.AUTOMATED.value:
        return _check_automated(data, catalog)
    elif node_type == NodeType.END.value:
        failed = bool(data.summary) and is_blank(data.endMessage)
    else:
        failed = False

    return FieldCheck.FAILED if failed else FieldCheck.PASSED
