"""Workflow Designer.

Core of a visual workflow designer:
- a typed node/edge graph model
- structural validation and a deterministic simulation pass
- an undo/redo history driving a single workflow store
"""

__version__ = "0.1.0"

from workflow_designer.designer.config import DesignerSettings

__all__ = ["__version__", "DesignerSettings"]
