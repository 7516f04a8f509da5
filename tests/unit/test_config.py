"""Unit tests for settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from workflow_designer.designer.config import DesignerSettings
from workflow_designer.server.config import ServerSettings

_DESIGNER_ENV = (
    "LOG_LEVEL",
    "DESIGNER_CATALOG_PATH",
    "DESIGNER_SIMULATION_BASE_DELAY",
    "DESIGNER_SIMULATION_PER_NODE_DELAY",
    "DESIGNER_SIMULATION_MAX_EXTRA_DELAY",
    "DESIGNER_EXPORT_DIR",
    "DESIGNER_HOST",
    "DESIGNER_PORT",
    "DESIGNER_CORS_ORIGINS",
)


@pytest.fixture
def clean_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    for name in _DESIGNER_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_designer_settings_defaults(clean_env: Path) -> None:
    """Test designer settings default values."""
    settings = DesignerSettings()

    assert settings.log_level == "INFO"
    assert settings.catalog_path is None
    assert settings.export_dir == Path("exports")
    assert settings.simulation_delay(0) == pytest.approx(0.4)


def test_designer_settings_loads_from_dotenv(clean_env: Path) -> None:
    (clean_env / ".env").write_text(
        "\n".join(
            [
                "LOG_LEVEL=DEBUG",
                "DESIGNER_CATALOG_PATH=catalog.json",
                "DESIGNER_SIMULATION_BASE_DELAY=0",
                "",
            ]
        ),
        encoding="utf-8",
    )

    settings = DesignerSettings()

    assert settings.log_level == "DEBUG"
    assert settings.catalog_path == Path("catalog.json")
    assert settings.simulation_base_delay == 0


def test_environment_overrides_dotenv(clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (clean_env / ".env").write_text("DESIGNER_EXPORT_DIR=from-file\n", encoding="utf-8")
    monkeypatch.setenv("DESIGNER_EXPORT_DIR", "from-env")

    assert DesignerSettings().export_dir == Path("from-env")


def test_simulation_delay_is_capped(clean_env: Path) -> None:
    """Test that the per-node latency is capped."""
    settings = DesignerSettings()

    assert settings.simulation_delay(4) == pytest.approx(0.6)
    assert settings.simulation_delay(12) == pytest.approx(1.0)
    assert settings.simulation_delay(500) == pytest.approx(1.0)


def test_negative_delay_is_rejected(clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DESIGNER_SIMULATION_BASE_DELAY", "-1")

    with pytest.raises(ValidationError):
        DesignerSettings()


def test_server_settings_defaults_and_cors(
    clean_env: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    settings = ServerSettings()
    assert settings.host == "127.0.0.1"
    assert settings.port == 8000

    monkeypatch.setenv("DESIGNER_PORT", "9001")
    monkeypatch.setenv("DESIGNER_CORS_ORIGINS", " http://a.test , ,http://b.test")
    settings = ServerSettings()

    assert settings.port == 9001
    assert settings.parsed_cors_origins() == ["http://a.test", "http://b.test"]
