"""Automation catalog lookup.

The catalog is supplied from outside the designer core. It may not be
available yet (for example while a UI is still fetching it); that state is
explicit here so callers can defer catalog-dependent checks instead of
treating every automated node as invalid.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError

from workflow_designer.designer.graph.models import AutomationAction

logger = logging.getLogger(__name__)

DEFAULT_AUTOMATIONS: tuple[AutomationAction, ...] = (
    AutomationAction(
        id="send_email", label="Send Email", requiredParams=["to", "subject", "body"]
    ),
    AutomationAction(
        id="generate_doc", label="Generate Document", requiredParams=["template", "recipient"]
    ),
    AutomationAction(
        id="notify_slack", label="Notify Slack", requiredParams=["channel", "message"]
    ),
)


class CatalogError(ValueError):
    pass


class AutomationCatalog:
    """Read-only view over the available automation actions.

    ``actions is None`` means the catalog has not been loaded yet.
    """

    def __init__(self, actions: Sequence[AutomationAction] | None = DEFAULT_AUTOMATIONS) -> None:
        self._actions: tuple[AutomationAction, ...] | None = (
            None if actions is None else tuple(actions)
        )

    @classmethod
    def loading(cls) -> AutomationCatalog:
        return cls(None)

    @property
    def is_loaded(self) -> bool:
        return self._actions is not None

    @property
    def actions(self) -> tuple[AutomationAction, ...] | None:
        return self._actions

    def resolve(self, actions: Sequence[AutomationAction]) -> None:
        """Finish loading with the given actions."""

        self._actions = tuple(actions)
        logger.info("Automation catalog loaded", extra={"action_count": len(self._actions)})

    def list_automations(self) -> list[AutomationAction]:
        """Return the catalog entries; empty while still loading."""

        return list(self._actions or ())

    def get(self, action_id: str) -> AutomationAction | None:
        for action in self._actions or ():
            if action.id == action_id:
                return action
        return None


def load_catalog_file(path: Path) -> AutomationCatalog:
    """Load a catalog from a JSON list of ``{id, label, requiredParams}`` entries.

    The legacy ``params`` key is accepted in place of ``requiredParams``.
    """

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise CatalogError(f"Automation catalog not found: {path}") from e
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise CatalogError(f"Automation catalog is not valid JSON: {path}") from e

    if not isinstance(raw, list):
        raise CatalogError(f"Automation catalog must be a JSON list: {path}")

    try:
        actions = [AutomationAction.model_validate(item) for item in raw]
    except ValidationError as e:
        raise CatalogError(f"Automation catalog has invalid entries: {path}: {e}") from e

    logger.info(
        "Automation catalog read", extra={"path": str(path), "action_count": len(actions)}
    )
    return AutomationCatalog(actions)


def catalog_from_settings(catalog_path: Path | None) -> AutomationCatalog:
    if catalog_path is None:
        return AutomationCatalog()
    return load_catalog_file(catalog_path)
