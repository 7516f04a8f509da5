"""Configuration for the REST server."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseSettings):
    """Settings for hosting the designer API.

    Notes:
        The server always runs a single worker: the workflow store is an
        in-process object and cannot be shared between worker processes.
    """

    host: str = Field(default="127.0.0.1", validation_alias="DESIGNER_HOST")
    port: int = Field(default=8000, ge=1, le=65535, validation_alias="DESIGNER_PORT")

    # Dev-friendly CORS (Vite). Override via DESIGNER_CORS_ORIGINS=...
    cors_origins: str = Field(
        default="http://localhost:5173,http://127.0.0.1:5173",
        validation_alias="DESIGNER_CORS_ORIGINS",
        description="Comma-separated list of allowed CORS origins.",
    )

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")

    def parsed_cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]
