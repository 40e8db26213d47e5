"""Centralised settings for the Idea Canvas backend.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _split_csv(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Workspace / storage
    # ------------------------------------------------------------------
    workspace_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("IDEACANVAS_WORKSPACE", Path.home() / ".ideacanvas")
        )
    )

    @property
    def db_path(self) -> Path:
        """Absolute path to the SQLite database file."""
        return self.workspace_dir / "canvas.db"

    @property
    def schema_path(self) -> Path:
        """Absolute path to the schema SQL file bundled with the package."""
        return Path(__file__).resolve().parent / "db" / "schema.sql"

    # Seconds a connection waits on another writer's lock before failing.
    db_busy_timeout: float = field(
        default_factory=lambda: float(os.environ.get("IDEACANVAS_DB_TIMEOUT", "5"))
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("IDEACANVAS_LOG_LEVEL", "INFO").upper()
    )

    # ------------------------------------------------------------------
    # HTTP layer
    # ------------------------------------------------------------------
    identity_header: str = field(
        default_factory=lambda: os.environ.get("IDEACANVAS_IDENTITY_HEADER", "X-User-Id")
    )
    cors_origins: list[str] = field(
        default_factory=lambda: _split_csv(os.environ.get("IDEACANVAS_CORS_ORIGINS", "*"))
    )

    # ------------------------------------------------------------------
    # CLI
    # ------------------------------------------------------------------
    cli_config_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("IDEACANVAS_CLI_DIR", Path.home() / ".ideacanvas_cli")
        )
    )

    def ensure_workspace(self) -> None:
        """Create the workspace directory if it does not exist."""
        self.workspace_dir.mkdir(parents=True, exist_ok=True)


# Module-level singleton, import this everywhere:
#   from ideacanvas.config import settings
settings = Settings()
