"""Pydantic models for the workflow graph.

Field names follow the wire format used by the canvas (camelCase), so a node
dumped with ``by_alias=True`` is exactly what the export file contains.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

VALIDATION_KEY = "__validation"


class NodeType(str, Enum):
    START = "start"
    TASK = "task"
    APPROVAL = "approval"
    AUTOMATED = "automated"
    END = "end"


class Position(BaseModel):
    """Canvas position. Display-only; the simulator orders steps by it.

    Integer coordinates stay integers so an exported file keeps the
    numbers it was imported with.
    """

    x: int | float = 0
    y: int | float = 0


class CustomField(BaseModel):
    key: str = ""
    value: Any = ""


class NodeData(BaseModel):
    """Type-dependent attribute bag of a node.

    Unknown keys are preserved so data authored by newer editors survives an
    import/export cycle. ``__validation`` is derived state written by the
    store; it is never part of the authoritative graph.
    """

    model_config = ConfigDict(extra="allow")

    title: str | None = None

    # task
    description: str | None = None
    assignee: str | None = None
    dueDate: str | None = None
    customFields: list[CustomField] | None = None

    # approval
    approverRole: str | None = None
    autoApproveThreshold: float | None = None

    # automated
    actionId: str | None = None
    actionParams: dict[str, Any] | None = None

    # end
    summary: bool | None = None
    endMessage: str | None = None

    validation: list[str] | None = Field(default=None, alias=VALIDATION_KEY)

    @field_validator("customFields", mode="before")
    @classmethod
    def _custom_fields_from_mapping(cls, value: object) -> object:
        # Older files stored custom fields as a plain {key: value} mapping.
        if isinstance(value, dict):
            return [{"key": k, "value": v} for k, v in value.items()]
        return value

    def to_wire(self, *, include_validation: bool = False) -> dict[str, Any]:
        exclude = None if include_validation else {"validation"}
        return self.model_dump(by_alias=True, exclude_none=True, exclude=exclude)


class WorkflowNode(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    type: str
    position: Position | None = None
    data: NodeData = Field(default_factory=NodeData)

    @property
    def validation_errors(self) -> list[str]:
        return list(self.data.validation or [])

    def without_validation(self) -> WorkflowNode:
        """Deep copy of this node with the derived validation tags removed."""

        clean = self.model_copy(deep=True)
        clean.data.validation = None
        return clean

    def to_wire(self) -> dict[str, Any]:
        payload = self.model_dump(by_alias=True, exclude_none=True, exclude={"data"})
        payload["data"] = self.data.to_wire()
        return payload


class WorkflowEdge(BaseModel):
    """A directed connection between two nodes.

    Multi-edges and self-loops are allowed; endpoints are not checked against
    the node set here.
    """

    model_config = ConfigDict(extra="allow")

    source: str
    target: str
    id: str | None = None
    sourceHandle: str | None = None
    targetHandle: str | None = None

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class WorkflowDocument(BaseModel):
    """The export/import file shape: ``{"nodes": [...], "edges": [...]}``."""

    nodes: list[WorkflowNode]
    edges: list[WorkflowEdge]

    def to_wire(self) -> dict[str, Any]:
        return {
            "nodes": [n.to_wire() for n in self.nodes],
            "edges": [e.to_wire() for e in self.edges],
        }


class AutomationAction(BaseModel):
    """One entry of the automation catalog."""

    id: str
    label: str = ""
    requiredParams: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("requiredParams", "params"),
    )


class NodeValidation(BaseModel):
    nodeId: str
    errors: list[str] = Field(default_factory=list)


class ValidationResult(BaseModel):
    globalErrors: list[str] = Field(default_factory=list)
    nodeValidation: list[NodeValidation] = Field(default_factory=list)

    def errors_for(self, node_id: str) -> list[str]:
        for entry in self.nodeValidation:
            if entry.nodeId == node_id:
                return list(entry.errors)
        return []

    @property
    def is_clean(self) -> bool:
        return not self.globalErrors and all(not v.errors for v in self.nodeValidation)


class StepStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    ERROR = "error"


class SimulationStep(BaseModel):
    step: str
    status: StepStatus
    nodeId: str


class SimulationResult(BaseModel):
    steps: list[SimulationStep] = Field(default_factory=list)
    valid: bool
    errors: list[str] = Field(default_factory=list)


def clone_nodes(
    nodes: Iterable[WorkflowNode], *, strip_validation: bool = False
) -> list[WorkflowNode]:
    if strip_validation:
        return [n.without_validation() for n in nodes]
    return [n.model_copy(deep=True) for n in nodes]


def clone_edges(edges: Iterable[WorkflowEdge]) -> list[WorkflowEdge]:
    return [e.model_copy(deep=True) for e in edges]
