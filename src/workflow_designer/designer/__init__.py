"""Workflow designer core.

This package provides:
- The workflow graph model, validator and simulator (``graph``)
- The automation catalog lookup
- The undo/redo history and the workflow store that drives it
- Workflow file export/import
"""
