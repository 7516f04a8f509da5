from __future__ import annotations

import json

from fastapi.testclient import TestClient

from workflow_designer.designer.catalog import AutomationCatalog
from workflow_designer.designer.config import DesignerSettings
from workflow_designer.designer.store import WorkflowStore
from workflow_designer.server.app import create_app


def _client(store: WorkflowStore) -> TestClient:
    return TestClient(create_app(store))


def _build_flow(client: TestClient) -> None:
    for body in (
        {"type": "start", "id": "s", "position": {"x": 0, "y": 0}, "data": {"title": "Go"}},
        {"type": "task", "id": "t", "position": {"x": 100, "y": 0}, "data": {"title": "Do"}},
        {"type": "end", "id": "e", "position": {"x": 200, "y": 0}},
    ):
        assert client.post("/api/workflow/nodes", json=body).status_code == 201
    client.post("/api/workflow/edges", json={"source": "s", "target": "t"})
    client.post("/api/workflow/edges", json={"source": "t", "target": "e"})


def test_health_and_initial_state(store: WorkflowStore) -> None:
    client = _client(store)

    health = client.get("/api/health").json()
    assert health["status"] == "ok"
    assert health["catalogLoaded"] is True
    assert "version" in health

    state = client.get("/api/workflow").json()
    assert state["nodes"] == []
    assert state["historyIndex"] == 0
    assert state["canUndo"] is False
    assert "Workflow is empty." in state["validation"]["globalErrors"]


def test_create_node_defaults_and_validation_tags(store: WorkflowStore) -> None:
    client = _client(store)

    created = client.post("/api/workflow/nodes", json={"type": "start"})
    assert created.status_code == 201
    node = created.json()
    assert node["id"].startswith("start-")
    assert node["data"]["title"] == "Start Node"
    assert node["data"]["__validation"] == ["Start node should have an outgoing connection."]

    duplicate = client.post("/api/workflow/nodes", json={"type": "task", "id": node["id"]})
    assert duplicate.status_code == 409


def test_create_node_with_bad_data_is_unprocessable(store: WorkflowStore) -> None:
    client = _client(store)

    response = client.post(
        "/api/workflow/nodes", json={"type": "end", "data": {"summary": {"x": 1}}}
    )

    assert response.status_code == 422
    assert store.nodes == []


def test_patch_and_delete_node(store: WorkflowStore) -> None:
    client = _client(store)
    _build_flow(client)

    patched = client.patch("/api/workflow/nodes/t", json={"title": " ", "assignee": "kim"})
    assert patched.status_code == 200
    assert patched.json()["data"]["assignee"] == "kim"
    assert patched.json()["data"]["__validation"] == ["Task title is required."]

    assert client.patch("/api/workflow/nodes/ghost", json={"title": "x"}).status_code == 404

    assert client.delete("/api/workflow/nodes/t").status_code == 204
    state = client.get("/api/workflow").json()
    assert [n["id"] for n in state["nodes"]] == ["s", "e"]
    assert state["edges"] == []
    assert client.delete("/api/workflow/nodes/t").status_code == 404


def test_edges_and_selection(store: WorkflowStore) -> None:
    client = _client(store)
    _build_flow(client)

    edge = client.post("/api/workflow/edges", json={"source": "e", "target": "s"}).json()
    assert edge["id"].startswith("edge-")
    state = client.get("/api/workflow").json()
    assert "Cycle detected in workflow." in state["validation"]["globalErrors"]

    assert client.delete(f"/api/workflow/edges/{edge['id']}").status_code == 204
    assert client.delete(f"/api/workflow/edges/{edge['id']}").status_code == 404

    assert client.put("/api/workflow/selection", json={"nodeId": "t"}).json() == {"nodeId": "t"}
    assert client.put("/api/workflow/selection", json={"nodeId": "zz"}).status_code == 404
    assert client.put("/api/workflow/selection", json={}).json() == {"nodeId": None}


def test_undo_redo(store: WorkflowStore) -> None:
    client = _client(store)
    client.post("/api/workflow/nodes", json={"type": "start", "id": "s"})

    undone = client.post("/api/workflow/undo").json()
    assert undone == {"changed": True, "historyIndex": 0, "canUndo": False, "canRedo": True}
    assert client.post("/api/workflow/undo").json()["changed"] is False

    redone = client.post("/api/workflow/redo").json()
    assert redone["changed"] is True
    assert [n["id"] for n in client.get("/api/workflow").json()["nodes"]] == ["s"]


def test_export_and_import(store: WorkflowStore, designer_settings: DesignerSettings) -> None:
    client = _client(store)
    _build_flow(client)

    exported = client.get("/api/workflow/export")
    assert exported.status_code == 200
    assert exported.headers["content-type"].startswith("application/json")
    assert "attachment" in exported.headers["content-disposition"]
    payload = json.loads(exported.text)
    assert all("__validation" not in n["data"] for n in payload["nodes"])

    other = _client(WorkflowStore(catalog=AutomationCatalog(), settings=designer_settings))
    imported = other.post("/api/workflow/import", json=payload)
    assert imported.status_code == 200
    assert imported.json() == {"nodeCount": 3, "edgeCount": 2, "globalErrors": []}


def test_import_rejection_leaves_state_unchanged(store: WorkflowStore) -> None:
    client = _client(store)
    _build_flow(client)
    before = client.get("/api/workflow").json()

    response = client.post("/api/workflow/import", json={"nodes": []})

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid workflow file: missing nodes/edges."
    assert client.get("/api/workflow").json() == before


def test_simulate_and_read_back(store: WorkflowStore) -> None:
    client = _client(store)
    assert client.get("/api/workflow/simulation").json() is None
    _build_flow(client)

    result = client.post("/api/workflow/simulate").json()

    assert result["valid"] is True
    assert [s["step"] for s in result["steps"]] == ["1. Go", "2. Do", "3. End Node"]
    assert client.get("/api/workflow/simulation").json() == result
    assert client.get("/api/workflow").json()["historyLength"] == 6


def test_simulate_conflicts_while_catalog_loads(designer_settings: DesignerSettings) -> None:
    store = WorkflowStore(catalog=AutomationCatalog.loading(), settings=designer_settings)
    client = _client(store)
    client.post(
        "/api/workflow/nodes", json={"type": "automated", "data": {"actionId": "send_email"}}
    )

    assert client.get("/api/health").json()["catalogLoaded"] is False
    assert client.get("/api/automations").json() == []
    response = client.post("/api/workflow/simulate")
    assert response.status_code == 409


def test_list_automations(store: WorkflowStore) -> None:
    actions = _client(store).get("/api/automations").json()

    assert [a["id"] for a in actions] == ["send_email", "generate_doc", "notify_slack"]
    assert actions[2]["requiredParams"] == ["channel", "message"]


def test_import_of_unparsable_body_is_a_bad_request(store: WorkflowStore) -> None:
    client = _client(store)
    _build_flow(client)
    before = client.get("/api/workflow").json()

    response = client.post(
        "/api/workflow/import",
        content=b"{not json",
        headers={"content-type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Failed to parse JSON file."
    assert client.get("/api/workflow").json() == before


def test_node_mutations_on_missing_ids_commit_nothing(store: WorkflowStore) -> None:
    client = _client(store)
    client.post("/api/workflow/nodes", json={"type": "start", "id": "s"})
    length = client.get("/api/workflow").json()["historyLength"]

    assert client.post("/api/workflow/nodes", json={"type": "task", "id": "s"}).status_code == 409
    assert client.patch("/api/workflow/nodes/ghost", json={"title": "x"}).status_code == 404
    assert client.delete("/api/workflow/nodes/ghost").status_code == 404

    state = client.get("/api/workflow").json()
    assert state["historyLength"] == length
    assert [n["id"] for n in state["nodes"]] == ["s"]
