"""Centralised settings for MyNotes.

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


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Workspace / storage
    # ------------------------------------------------------------------
    workspace_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("MYNOTES_WORKSPACE", Path.home() / ".mynotes")
        )
    )

    @property
    def db_path(self) -> Path:
        """Absolute path to the SQLite database file."""
        return self.workspace_dir / "mynotes.db"

    @property
    def schema_path(self) -> Path:
        """Absolute path to the schema SQL file bundled with the package."""
        return Path(__file__).resolve().parent / "db" / "schema.sql"

    # ------------------------------------------------------------------
    # CLI state (active category, editor drafts)
    # ------------------------------------------------------------------
    cli_config_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("MYNOTES_CLI_DIR", Path.home() / ".mynotes_cli")
        )
    )

    # ------------------------------------------------------------------
    # Editing session
    # ------------------------------------------------------------------
    autosave_interval: float = field(
        default_factory=lambda: float(os.environ.get("MYNOTES_AUTOSAVE_SECONDS", "30"))
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("MYNOTES_LOG_LEVEL", "WARNING")
    )


# Module-level settings instance, import this everywhere:
#   from mynotes.config import settings
settings = Settings()
