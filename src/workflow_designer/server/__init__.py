"""FastAPI server adapter for the workflow designer.

This module exposes a REST API over the in-process workflow store.

Design intent:
- Keep graph logic in `workflow_designer.designer.*`
- Keep server-specific concerns (routing, CORS, status codes) here
"""

from __future__ import annotations

__all__ = ["create_app"]

from workflow_designer.server.app import create_app
