"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="NC_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Nearest Centers API"
    api_prefix: str = "/api"
    log_level: str = Field(default="INFO", description="Root logging level.")
    centers_file: Path = Field(
        default=Path("data/centers.xlsx"),
        description="Center catalog workbook used when the database is not configured.",
    )

    geocoder_base_url: str = Field(
        default="https://nominatim.openstreetmap.org",
        description="Base URL of the Nominatim-compatible search service.",
    )
    geocoder_country_codes: str = Field(default="in", description="Country filter passed to the geocoder.")
    user_agent: str = Field(
        default="NearestCentersApp/1.0 (support@nearestcentersapi.com)",
        description="User-Agent header sent to external services.",
    )
    waiting_time_url: str = Field(
        default="http://localhost:8000/api/centers/wait",
        description="Endpoint returning the current patient count for a site.",
    )
    http_timeout_seconds: float = Field(default=30.0, gt=0.0)
    rate_limit_max_concurrent: int = Field(default=1, ge=1)
    rate_limit_cooldown_seconds: float = Field(default=1.0, ge=0.0)

    search_radius_km: float = Field(default=15.0, gt=0.0)
    max_results: int = Field(default=2, ge=1)
    travel_speed_kmh: float = Field(default=20.0, gt=0.0)
    traffic_factor: float = Field(default=1.3, ge=1.0)
    flagship_wait_minutes: float = Field(default=10.0, ge=0.0)
    minutes_per_patient: float = Field(default=60.0, ge=0.0)
    default_patient_count: int = Field(default=1, ge=0)

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key for backend operations.",
    )

    @field_validator("centers_file", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()

    @field_validator("geocoder_base_url", "waiting_time_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


settings = Settings()
