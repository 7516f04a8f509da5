"""Pydantic models for the REST server."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from workflow_designer.designer.graph.models import (
    Position,
    ValidationResult,
    WorkflowEdge,
    WorkflowNode,
)


class WorkflowStateResponse(BaseModel):
    nodes: list[WorkflowNode]
    edges: list[WorkflowEdge]
    selectedNodeId: str | None = None
    validation: ValidationResult
    historyIndex: int
    historyLength: int
    canUndo: bool
    canRedo: bool


class NodeCreateRequest(BaseModel):
    """Either a full node, or just a type (and position) for a default node."""

    type: str
    id: str | None = None
    position: Position | None = None
    data: dict[str, Any] | None = None


class ConnectRequest(BaseModel):
    source: str
    target: str
    sourceHandle: str | None = None
    targetHandle: str | None = None


class SelectionRequest(BaseModel):
    nodeId: str | None = None


class HistoryResponse(BaseModel):
    changed: bool
    historyIndex: int
    canUndo: bool
    canRedo: bool


class ImportResponse(BaseModel):
    nodeCount: int
    edgeCount: int
    globalErrors: list[str] = Field(default_factory=list)
