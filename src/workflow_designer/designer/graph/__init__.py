"""Workflow graph domain.

This package holds the parts of the designer that are pure functions of a
graph:
- Typed node/edge models
- Per-node field rules
- Structural validation (start cardinality, connections, cycles)
- Deterministic simulation

Nothing here keeps state between calls.
"""

from workflow_designer.designer.graph.fields import FieldCheck, check_node_fields
from workflow_designer.designer.graph.models import (
    AutomationAction,
    NodeData,
    NodeType,
    NodeValidation,
    Position,
    SimulationResult,
    SimulationStep,
    StepStatus,
    ValidationResult,
    WorkflowDocument,
    WorkflowEdge,
    WorkflowNode,
)
from workflow_designer.designer.graph.simulator import simulate_workflow, simulate_workflow_paced
from workflow_designer.designer.graph.validator import validate_workflow_structure

__all__ = [
    "AutomationAction",
    "FieldCheck",
    "NodeData",
    "NodeType",
    "NodeValidation",
    "Position",
    "SimulationResult",
    "SimulationStep",
    "StepStatus",
    "ValidationResult",
    "WorkflowDocument",
    "WorkflowEdge",
    "WorkflowNode",
    "check_node_fields",
    "simulate_workflow",
    "simulate_workflow_paced",
    "validate_workflow_structure",
]
