"""Workflow export/import file format.

A workflow file is a UTF-8 JSON object ``{"nodes": [...], "edges": [...]}``,
pretty-printed with a 2-space indent. Validation tags are never written.

There is no version field in the format yet.
"""

from __future__ import annotations

import json
import time
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError

from workflow_designer.designer.graph.models import WorkflowDocument, WorkflowEdge, WorkflowNode

MISSING_KEYS_MESSAGE = "Invalid workflow file: missing nodes/edges."
UNPARSABLE_MESSAGE = "Failed to parse JSON file."


class InvalidWorkflowFile(ValueError):
    """Raised when an import payload is rejected. The message is user-facing."""


def dump_workflow(nodes: Sequence[WorkflowNode], edges: Sequence[WorkflowEdge]) -> str:
    document = {
        "nodes": [n.to_wire() for n in nodes],
        "edges": [e.to_wire() for e in edges],
    }
    return json.dumps(document, indent=2, ensure_ascii=False)


def parse_workflow_payload(payload: object) -> WorkflowDocument:
    """Validate a decoded JSON object as a workflow document.

    The whole payload is validated before anything is returned, so a caller
    never sees a partially-parsed graph.
    """

    if not isinstance(payload, dict):
        raise InvalidWorkflowFile(MISSING_KEYS_MESSAGE)
    if payload.get("nodes") is None or payload.get("edges") is None:
        raise InvalidWorkflowFile(MISSING_KEYS_MESSAGE)

    try:
        document = WorkflowDocument.model_validate(
            {"nodes": payload["nodes"], "edges": payload["edges"]}
        )
    except ValidationError as e:
        raise InvalidWorkflowFile(
            f"Invalid workflow file: {e.error_count()} invalid entries."
        ) from e

    # Validation tags in a file are stale by definition.
    return WorkflowDocument(
        nodes=[n.without_validation() for n in document.nodes], edges=document.edges
    )


def parse_workflow_json(text: str | bytes) -> WorkflowDocument:
    """Parse a workflow file. Bytes must be UTF-8."""

    try:
        if isinstance(text, bytes):
            text = text.decode("utf-8")
        payload = json.loads(text)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise InvalidWorkflowFile(UNPARSABLE_MESSAGE) from e
    return parse_workflow_payload(payload)


def read_workflow_file(path: Path) -> WorkflowDocument:
    return parse_workflow_json(path.read_bytes())


def write_workflow_file(
    path: Path, nodes: Sequence[WorkflowNode], edges: Sequence[WorkflowEdge]
) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_workflow(nodes, edges) + "\n", encoding="utf-8")
    return path


def default_export_filename() -> str:
    return f"workflow-{int(time.time() * 1000)}.json"
