"""Unit tests for per-node field rules."""

from __future__ import annotations

from typing import Any

import pytest

from workflow_designer.designer.catalog import DEFAULT_AUTOMATIONS
from workflow_designer.designer.graph.fields import FieldCheck, check_node_fields, is_blank
from workflow_designer.designer.graph.models import WorkflowNode


def _node(node_type: str, **data: Any) -> WorkflowNode:
    return WorkflowNode.model_validate({"id": "n", "type": node_type, "data": data})


@pytest.mark.parametrize("node_type", ["start", "task"])
def test_title_is_required_for_start_and_task(node_type: str) -> None:
    assert check_node_fields(_node(node_type)) == FieldCheck.FAILED
    assert check_node_fields(_node(node_type, title=" \t")) == FieldCheck.FAILED
    assert check_node_fields(_node(node_type, title="Go")) == FieldCheck.PASSED


def test_approval_requires_approver_role() -> None:
    assert check_node_fields(_node("approval", title="A")) == FieldCheck.FAILED
    assert check_node_fields(_node("approval", approverRole="  ")) == FieldCheck.FAILED
    assert check_node_fields(_node("approval", approverRole="HRBP")) == FieldCheck.PASSED


def test_end_requires_message_only_with_summary() -> None:
    assert check_node_fields(_node("end")) == FieldCheck.PASSED
    assert check_node_fields(_node("end", summary=False)) == FieldCheck.PASSED
    assert check_node_fields(_node("end", summary=True)) == FieldCheck.FAILED
    assert check_node_fields(_node("end", summary=True, endMessage="Bye")) == FieldCheck.PASSED


def test_automated_checks_action_and_required_params() -> None:
    catalog = DEFAULT_AUTOMATIONS

    assert check_node_fields(_node("automated"), catalog) == FieldCheck.FAILED
    assert check_node_fields(_node("automated", actionId="launch_rocket"), catalog) == (
        FieldCheck.FAILED
    )
    partial = _node("automated", actionId="send_email", actionParams={"to": "a@b.com"})
    assert check_node_fields(partial, catalog) == FieldCheck.FAILED

    blank = _node(
        "automated",
        actionId="notify_slack",
        actionParams={"channel": "#hr", "message": "   "},
    )
    assert check_node_fields(blank, catalog) == FieldCheck.FAILED

    complete = _node(
        "automated",
        actionId="notify_slack",
        actionParams={"channel": "#hr", "message": "Welcome!"},
    )
    assert check_node_fields(complete, catalog) == FieldCheck.PASSED


def test_automated_is_unknown_while_catalog_loads() -> None:
    node = _node("automated", actionId="send_email")

    assert check_node_fields(node, None) == FieldCheck.UNKNOWN
    # A missing action fails regardless of the catalog.
    assert check_node_fields(_node("automated"), None) == FieldCheck.FAILED


def test_unknown_type_passes() -> None:
    assert check_node_fields(_node("webhook")) == FieldCheck.PASSED


def test_is_blank_stringifies_values() -> None:
    assert is_blank(None)
    assert is_blank("  ")
    assert not is_blank(0)
    assert not is_blank(" x ")
