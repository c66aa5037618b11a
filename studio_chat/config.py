"""Studio settings with environment defaults and JSON persistence.

Settings are loaded once at startup, migrated from older saved shapes, and
written back after every change.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://127.0.0.1:8001/api/v1/chat"
DEFAULT_MODEL = "openai/gpt-4o-mini"

# Retired model ids and their replacements.
MODEL_MIGRATIONS = {
    "llama3-70b-8192": "meta-llama/llama-3.3-70b-instruct:free",
}

SETTINGS_FILE = "settings.json"
HISTORY_FILE = "chat_history.json"


def get_data_dir() -> Path:
    """Directory holding persisted settings and chat history."""
    return Path(os.getenv("STUDIO_DATA_DIR", "data"))


class StudioSettings(BaseModel):
    """User-facing settings for the studio chat client.

    Attributes:
        api_url: Orchestrator chat endpoint.
        stream: Request a streamed reply instead of a single JSON document.
        show_thoughts: Display reasoning layers under agent messages.
        user_alias: Name sent to the orchestrator as ``user_alias``.
        theme: UI color theme.
        llm_model: Model identifier forwarded to the orchestrator.
        llm_temperature: Sampling temperature (0.0 - 2.0).
        llm_max_tokens: Maximum tokens in the generated reply.
        orchestrator_persona: Persona preset name.
        request_timeout: HTTP timeout in seconds.
    """

    api_url: str = Field(
        default_factory=lambda: os.getenv("STUDIO_API_URL", DEFAULT_API_URL),
        description="Orchestrator chat endpoint",
    )
    stream: bool = True
    show_thoughts: bool = True
    user_alias: str = "User"
    theme: Literal["dark", "light"] = "dark"
    llm_model: str = Field(
        default_factory=lambda: os.getenv("STUDIO_LLM_MODEL", DEFAULT_MODEL),
        description="Model forwarded to the orchestrator",
    )
    llm_temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    llm_max_tokens: int = Field(default=8192, ge=1)
    orchestrator_persona: str = "general_assistant"
    request_timeout: float = Field(default=120.0, gt=0)

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        """Require an http(s) endpoint."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("api_url must be an http:// or https:// URL")
        return v

    @field_validator("user_alias", mode="before")
    @classmethod
    def default_user_alias(cls, v: Any) -> Any:
        """Fall back to "User" for missing or blank aliases."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return "User"
        return v

    @field_validator("llm_model")
    @classmethod
    def migrate_model(cls, v: str) -> str:
        """Replace retired model ids."""
        return MODEL_MIGRATIONS.get(v, v)


class SettingsStore:
    """Loads and saves StudioSettings as a JSON file."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or get_data_dir() / SETTINGS_FILE
        self.settings = self._load()

    def _load(self) -> StudioSettings:
        if not self.path.exists():
            return StudioSettings()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return StudioSettings.model_validate(data)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load settings from {self.path}, using defaults: {e}")
            return StudioSettings()

    def save(self) -> None:
        """Write the current settings to disk."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(self.settings.model_dump_json(indent=2), encoding="utf-8")

    def update(self, **changes: Any) -> StudioSettings:
        """Apply changes, validate them, and persist.

        Raises:
            ValidationError: If a changed value is invalid; nothing is saved.
        """
        merged = self.settings.model_dump() | changes
        self.settings = StudioSettings.model_validate(merged)
        self.save()
        return self.settings


def get_settings() -> StudioSettings:
    """Load persisted settings, falling back to environment defaults."""
    return SettingsStore().settings
