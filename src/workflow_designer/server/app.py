"""FastAPI app factory.

Endpoints are intentionally thin wrappers over the workflow store.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from workflow_designer import __version__
from workflow_designer.designer.catalog import catalog_from_settings
from workflow_designer.designer.config import DesignerSettings
from workflow_designer.designer.store import WorkflowStore
from workflow_designer.server.config import ServerSettings
from workflow_designer.server.workflow_router import router as workflow_router

logger = logging.getLogger(__name__)


def create_app(store: WorkflowStore | None = None) -> FastAPI:
    settings = ServerSettings()

    if store is None:
        designer_settings = DesignerSettings()
        store = WorkflowStore(
            catalog=catalog_from_settings(designer_settings.catalog_path),
            settings=designer_settings,
        )

    app = FastAPI(
        title="Workflow Designer",
        version=__version__,
        description="REST API over the in-process workflow designer store.",
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.state.settings = settings
    app.state.store = store

    # Minimal dev-friendly CORS so a Vite dev server can call the API.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.parsed_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(workflow_router, prefix="/api")

    logger.info(
        "Designer API created",
        extra={"catalog_loaded": store.catalog.is_loaded, "cors": settings.parsed_cors_origins()},
    )
    return app
