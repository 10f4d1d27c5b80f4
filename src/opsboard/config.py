"""Application configuration and settings management."""

from pathlib import Path
from typing import Annotated, Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults.

    Upstream variables keep their deployment names (``GASOGES_API_URL``,
    ``PROVIDER_API_TOKEN`` ...), so no env prefix is applied.
    """

    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Operations Dashboard API"
    api_prefix: str = "/api"
    log_level: str = Field(default="INFO", description="Root logging level.")
    upstream_timeout_seconds: float = Field(default=10.0, gt=0.0)

    # Gasoges (fuel telemetry), Basic Auth
    gasoges_api_url: Optional[str] = Field(
        default=None,
        description="Base URL of the Gasoges REST API (e.g., https://api.gasoges.es/v1).",
    )
    gasoges_api_user: Optional[str] = None
    gasoges_api_pass: Optional[str] = None

    # MundoSMS (call center / PBX), Bearer token
    mundosms_api_url: str = Field(
        default="https://api.mundosms.es/APIV3",
        description="Base URL used for call listings.",
    )
    provider_api_base: Optional[str] = Field(
        default=None,
        description="Base URL of the provider endpoints used to assign PBX flows.",
    )
    provider_api_token: Optional[str] = None
    pbx_ids: Annotated[tuple[str, ...], NoDecode] = Field(default=(), description="PBX lines toggled by the flow switch.")
    flow_id_day: Optional[str] = None
    flow_id_night: Optional[str] = None

    # Contacts and phonebook exports
    phonebook_file: Path = Field(
        default=Path("public/phonebookEUROSURlogos2.xml"),
        description="Static phonebook served verbatim by /phonebook.xml.",
    )
    firebase_key_base64: Optional[str] = Field(
        default=None,
        description="Base64-encoded Firebase service account JSON.",
    )
    firebase_app_id: str = "default-app-id"

    # Dashboard KPI policy
    low_level_threshold: float = Field(default=400.0, ge=0.0)
    critical_level_threshold: float = Field(default=200.0, ge=0.0)
    calls_window_seconds: int = Field(default=60, ge=1)
    agent_active_minutes: int = Field(default=10, ge=1)
    depot_capacities: Annotated[dict[str, float], NoDecode] = Field(default_factory=dict)
    depot_initial_stock: Annotated[dict[str, float], NoDecode] = Field(default_factory=dict)
    depot_entries: Annotated[dict[str, float], NoDecode] = Field(default_factory=dict)

    frontend_allowed_origins: Annotated[tuple[str, ...], NoDecode] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @property
    def gasoges_configured(self) -> bool:
        return bool(self.gasoges_api_url and self.gasoges_api_user and self.gasoges_api_pass)

    @property
    def contacts_collection_path(self) -> str:
        return f"artifacts/{self.firebase_app_id}/public/data/contacts"

    def pbx_targets(self, single: str | None = None) -> tuple[str, ...]:
        """PBX lines a flow switch applies to: the requested one, or all configured."""
        if single and single.strip():
            return (single.strip(),)
        return self.pbx_ids

    @field_validator("phonebook_file", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser()

    @field_validator("frontend_allowed_origins", "pbx_ids", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item).strip() for item in value if str(item).strip())
        if isinstance(value, str):
            # Try JSON first
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item).strip() for item in parsed if str(item).strip())
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()

    @field_validator("depot_capacities", "depot_initial_stock", "depot_entries", mode="before")
    @classmethod
    def _parse_depot_mapping(cls, value: Any) -> dict[str, float]:
        """Parse ``{"<depot id>": liters}`` from a JSON object; bad input yields an empty map."""
        if value is None or value == "":
            return {}
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except json.JSONDecodeError:
                return {}
        if not isinstance(value, dict):
            return {}
        parsed: dict[str, float] = {}
        for key, amount in value.items():
            try:
                parsed[str(key)] = float(amount)
            except (TypeError, ValueError):
                continue
        return parsed


settings = Settings()


def get_settings() -> Settings:
    """FastAPI dependency returning the process settings; override in tests."""
    return settings
