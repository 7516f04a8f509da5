"""Configuration for the workflow designer core.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

Nothing here is required: the designer runs with the built-in automation
catalog and the default simulation pacing when no configuration exists.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DesignerSettings(BaseSettings):
    """Settings for the designer core and CLI.

    Environment variables:
    - LOG_LEVEL                            (optional)
    - DESIGNER_CATALOG_PATH                (optional)
    - DESIGNER_SIMULATION_BASE_DELAY       (optional)
    - DESIGNER_SIMULATION_PER_NODE_DELAY   (optional)
    - DESIGNER_SIMULATION_MAX_EXTRA_DELAY  (optional)
    - DESIGNER_EXPORT_DIR                  (optional)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `DesignerSettings(_env_file=path_to_env)`.
    """

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    catalog_path: Path | None = Field(
        default=None,
        validation_alias="DESIGNER_CATALOG_PATH",
        description=(
            "JSON file listing the available automation actions. "
            "When unset, the built-in catalog is used."
        ),
    )

    simulation_base_delay: float = Field(
        default=0.4,
        ge=0.0,
        validation_alias="DESIGNER_SIMULATION_BASE_DELAY",
        description="Fixed artificial latency (seconds) of a paced simulation run",
    )
    simulation_per_node_delay: float = Field(
        default=0.05,
        ge=0.0,
        validation_alias="DESIGNER_SIMULATION_PER_NODE_DELAY",
        description="Additional latency (seconds) per node of a paced simulation run",
    )
    simulation_max_extra_delay: float = Field(
        default=0.6,
        ge=0.0,
        validation_alias="DESIGNER_SIMULATION_MAX_EXTRA_DELAY",
        description="Upper bound (seconds) of the per-node part of the latency",
    )

    export_dir: Path = Field(
        default=Path("exports"),
        validation_alias="DESIGNER_EXPORT_DIR",
        description="Directory where exported workflow files are written",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    def simulation_delay(self, node_count: int) -> float:
        """Artificial latency (seconds) for simulating `node_count` nodes."""

        extra = min(self.simulation_max_extra_delay, self.simulation_per_node_delay * node_count)
        return self.simulation_base_delay + extra
