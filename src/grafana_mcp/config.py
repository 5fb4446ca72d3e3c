"""Backend targets and process settings read from the environment."""

import logging
import os
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_GRAFANA_URL = "http://localhost:3000"
DEFAULT_GRAFANA_API_KEY = "admin"
DEFAULT_PROMETHEUS_URL = "http://localhost:9090"


class BackendTarget(BaseModel):
    """Where one backend lives and how to authenticate against it."""

    model_config = ConfigDict(frozen=True)

    base_url: str
    auth_token: Optional[str] = None

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    def headers(self) -> dict:
        """Authorization header for this backend, empty without a token."""
        if self.auth_token:
            return {"Authorization": f"Bearer {self.auth_token}"}
        return {}


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    grafana: BackendTarget
    prometheus: BackendTarget
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from GRAFANA_*, PROMETHEUS_URL, LOG_LEVEL, HOST and PORT."""
        return cls(
            grafana=BackendTarget(
                base_url=os.environ.get("GRAFANA_URL", DEFAULT_GRAFANA_URL),
                auth_token=os.environ.get("GRAFANA_API_KEY", DEFAULT_GRAFANA_API_KEY) or None,
            ),
            prometheus=BackendTarget(
                base_url=os.environ.get("PROMETHEUS_URL", DEFAULT_PROMETHEUS_URL),
            ),
            log_level=os.environ.get("LOG_LEVEL", "INFO"),
            host=os.environ.get("HOST", "0.0.0.0"),
            port=int(os.environ.get("PORT", "8000")),
        )


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Configure logging with standard format.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)

    Returns:
        Logger for this package
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    return logging.getLogger("grafana_mcp")
