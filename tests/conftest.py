"""Test configuration and fixtures."""

from pathlib import Path

import pytest

from workflow_designer.designer.catalog import AutomationCatalog
from workflow_designer.designer.config import DesignerSettings
from workflow_designer.designer.store import WorkflowStore


@pytest.fixture
def designer_settings(tmp_path: Path) -> DesignerSettings:
    """Provide settings with no simulation pacing and a temporary export dir."""
    return DesignerSettings(
        _env_file=None,
        simulation_base_delay=0.0,
        simulation_per_node_delay=0.0,
        simulation_max_extra_delay=0.0,
        export_dir=tmp_path / "exports",
    )


@pytest.fixture
def catalog() -> AutomationCatalog:
    """Provide the built-in automation catalog."""
    return AutomationCatalog()


@pytest.fixture
def store(catalog: AutomationCatalog, designer_settings: DesignerSettings) -> WorkflowStore:
    """Provide an empty workflow store."""
    return WorkflowStore(catalog=catalog, settings=designer_settings)
