"""Unit tests for the automation catalog."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from workflow_designer.designer.catalog import (
    DEFAULT_AUTOMATIONS,
    AutomationCatalog,
    CatalogError,
    catalog_from_settings,
    load_catalog_file,
)
from workflow_designer.designer.graph.models import AutomationAction


def test_default_catalog_lists_builtin_actions() -> None:
    """Test the built-in catalog content."""
    catalog = AutomationCatalog()

    assert catalog.is_loaded
    assert [a.id for a in catalog.list_automations()] == [
        "send_email",
        "generate_doc",
        "notify_slack",
    ]
    email = catalog.get("send_email")
    assert email is not None
    assert email.requiredParams == ["to", "subject", "body"]
    assert catalog.get("missing") is None


def test_loading_catalog_resolves_later() -> None:
    """Test that a loading catalog is empty until resolved."""
    catalog = AutomationCatalog.loading()

    assert not catalog.is_loaded
    assert catalog.actions is None
    assert catalog.list_automations() == []

    catalog.resolve([AutomationAction(id="ping", requiredParams=["host"])])

    assert catalog.is_loaded
    assert catalog.get("ping") is not None


def test_empty_catalog_is_loaded() -> None:
    catalog = AutomationCatalog([])

    assert catalog.is_loaded
    assert catalog.actions == ()


def test_load_catalog_file_accepts_legacy_params_key(tmp_path: Path) -> None:
    path = tmp_path / "automations.json"
    path.write_text(
        json.dumps(
            [
                {"id": "archive", "label": "Archive", "params": ["folder"]},
                {"id": "ping", "requiredParams": []},
            ]
        ),
        encoding="utf-8",
    )

    catalog = load_catalog_file(path)

    archive = catalog.get("archive")
    assert archive is not None
    assert archive.requiredParams == ["folder"]
    assert catalog.get("ping") is not None


@pytest.mark.parametrize(
    ("content", "message"),
    [
        (None, "not found"),
        ("{oops", "not valid JSON"),
        ('{"id": "x"}', "must be a JSON list"),
        ('[{"label": "no id"}]', "invalid entries"),
    ],
)
def test_load_catalog_file_errors(tmp_path: Path, content: str | None, message: str) -> None:
    path = tmp_path / "automations.json"
    if content is not None:
        path.write_text(content, encoding="utf-8")

    with pytest.raises(CatalogError, match=message):
        load_catalog_file(path)


def test_catalog_from_settings_defaults_to_builtin() -> None:
    catalog = catalog_from_settings(None)

    assert catalog.actions == DEFAULT_AUTOMATIONS


def test_load_catalog_file_rejects_non_utf8(tmp_path: Path) -> None:
    path = tmp_path / "automations.json"
    path.write_bytes(b"\xff\xfe[]")

    with pytest.raises(CatalogError, match="not valid JSON"):
        load_catalog_file(path)
