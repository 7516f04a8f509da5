"""Workflow designer REST API.

This router implements the endpoints used by the canvas UI.

All routes are mounted under `/api`.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, HTTPException, Request, Response
from pydantic import ValidationError

from workflow_designer import __version__
from workflow_designer.designer.graph.models import (
    AutomationAction,
    NodeData,
    SimulationResult,
    WorkflowEdge,
    WorkflowNode,
)
from workflow_designer.designer.store import (
    CatalogNotReady,
    DuplicateNodeId,
    WorkflowStore,
    make_node,
)
from workflow_designer.designer.workflow_file import InvalidWorkflowFile, default_export_filename
from workflow_designer.server.models import (
    ConnectRequest,
    HistoryResponse,
    ImportResponse,
    NodeCreateRequest,
    SelectionRequest,
    WorkflowStateResponse,
)

router = APIRouter()


def _store(request: Request) -> WorkflowStore:
    store = getattr(request.app.state, "store", None)
    if not isinstance(store, WorkflowStore):
        raise HTTPException(status_code=500, detail="Workflow store not configured")
    return store


def _state(store: WorkflowStore) -> WorkflowStateResponse:
    return WorkflowStateResponse(
        nodes=store.nodes,
        edges=store.edges,
        selectedNodeId=store.selected_node_id,
        validation=store.validation,
        historyIndex=store.history_index,
        historyLength=store.history_length,
        canUndo=store.can_undo,
        canRedo=store.can_redo,
    )


def _unprocessable(e: ValidationError) -> HTTPException:
    return HTTPException(
        status_code=422, detail=e.errors(include_url=False, include_context=False)
    )


def _history(store: WorkflowStore, changed: bool) -> HistoryResponse:
    return HistoryResponse(
        changed=changed,
        historyIndex=store.history_index,
        canUndo=store.can_undo,
        canRedo=store.can_redo,
    )


@router.get("/health")
def health(request: Request) -> dict[str, object]:
    store = _store(request)
    return {
        "status": "ok",
        "version": __version__,
        "catalogLoaded": store.catalog.is_loaded,
    }


@router.get(
    "/workflow",
    response_model=WorkflowStateResponse,
    response_model_exclude_none=True,
)
def get_workflow(request: Request) -> WorkflowStateResponse:
    return _state(_store(request))


@router.put(
    "/workflow/nodes",
    response_model=WorkflowStateResponse,
    response_model_exclude_none=True,
)
def put_nodes(request: Request, nodes: list[WorkflowNode]) -> WorkflowStateResponse:
    store = _store(request)
    store.set_nodes(nodes)
    return _state(store)


@router.put(
    "/workflow/edges",
    response_model=WorkflowStateResponse,
    response_model_exclude_none=True,
)
def put_edges(request: Request, edges: list[WorkflowEdge]) -> WorkflowStateResponse:
    store = _store(request)
    store.set_edges(edges)
    return _state(store)


@router.post(
    "/workflow/nodes",
    status_code=201,
    response_model=WorkflowNode,
    response_model_exclude_none=True,
)
def create_node(request: Request, req: NodeCreateRequest) -> WorkflowNode:
    store = _store(request)
    node = make_node(req.type, req.position, node_id=req.id)
    if req.data is not None:
        try:
            node = node.model_copy(update={"data": NodeData.model_validate(req.data)})
        except ValidationError as e:
            raise _unprocessable(e) from e
    try:
        return store.add_node(node, unique=True)
    except DuplicateNodeId as e:
        raise HTTPException(status_code=409, detail="Node id already exists") from e


@router.patch(
    "/workflow/nodes/{node_id}",
    response_model=WorkflowNode,
    response_model_exclude_none=True,
)
def patch_node(
    request: Request, node_id: str, data: dict[str, Any] = Body(...)
) -> WorkflowNode:
    store = _store(request)
    try:
        updated = store.update_node(node_id, data, require_existing=True)
    except KeyError as e:
        raise HTTPException(status_code=404, detail="Node not found") from e
    except ValidationError as e:
        raise _unprocessable(e) from e
    assert updated is not None
    return updated


@router.delete("/workflow/nodes/{node_id}", status_code=204)
def delete_node(request: Request, node_id: str) -> Response:
    store = _store(request)
    try:
        store.remove_node(node_id, missing_ok=False)
    except KeyError as e:
        raise HTTPException(status_code=404, detail="Node not found") from e
    return Response(status_code=204)


@router.post(
    "/workflow/edges",
    status_code=201,
    response_model=WorkflowEdge,
    response_model_exclude_none=True,
)
def create_edge(request: Request, req: ConnectRequest) -> WorkflowEdge:
    store = _store(request)
    return store.connect(
        req.source,
        req.target,
        source_handle=req.sourceHandle,
        target_handle=req.targetHandle,
    )


@router.delete("/workflow/edges/{edge_id}", status_code=204)
def delete_edge(request: Request, edge_id: str) -> Response:
    store = _store(request)
    try:
        store.disconnect(edge_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail="Edge not found") from e
    return Response(status_code=204)


@router.put("/workflow/selection")
def put_selection(request: Request, req: SelectionRequest) -> dict[str, str | None]:
    store = _store(request)
    try:
        store.select_node(req.nodeId)
    except KeyError as e:
        raise HTTPException(status_code=404, detail="Node not found") from e
    return {"nodeId": store.selected_node_id}


@router.post("/workflow/undo", response_model=HistoryResponse)
def undo(request: Request) -> HistoryResponse:
    store = _store(request)
    return _history(store, store.undo())


@router.post("/workflow/redo", response_model=HistoryResponse)
def redo(request: Request) -> HistoryResponse:
    store = _store(request)
    return _history(store, store.redo())


@router.get("/workflow/export")
def export_workflow(request: Request) -> Response:
    store = _store(request)
    return Response(
        content=store.export_workflow(),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{default_export_filename()}"'},
    )


@router.post("/workflow/import", response_model=ImportResponse)
async def import_workflow(request: Request) -> ImportResponse:
    # The raw body is parsed here so unparsable files get the same 400 as invalid ones.
    store = _store(request)
    body = await request.body()
    try:
        store.import_workflow_json(body)
    except InvalidWorkflowFile as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    validation = store.validation
    return ImportResponse(
        nodeCount=len(validation.nodeValidation),
        edgeCount=len(store.edges),
        globalErrors=validation.globalErrors,
    )


@router.post("/workflow/simulate", response_model=SimulationResult)
async def simulate(request: Request) -> SimulationResult:
    store = _store(request)
    try:
        return await store.run_simulation_async()
    except CatalogNotReady as e:
        raise HTTPException(status_code=409, detail=str(e)) from e


@router.get("/workflow/simulation", response_model=SimulationResult | None)
def get_simulation(request: Request) -> SimulationResult | None:
    return _store(request).simulation_result


@router.get("/automations", response_model=list[AutomationAction])
def list_automations(request: Request) -> list[AutomationAction]:
    return _store(request).catalog.list_automations()
