from __future__ import annotations

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings

from fleetview.models.time_range import TimeRange

BASE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    # --- app ---
    app_name: str = "System Monitor Dashboard"
    debug: bool = False
    log_level: str = "INFO"

    # --- api ---
    api_base_url: str = "http://localhost:8000/api"
    request_timeout: float = 5.0  # httpx default

    # --- polling (seconds) ---
    dashboard_interval: float = 5.0
    host_detail_interval: float = 3.0
    history_interval: float = 30.0

    # --- history ---
    default_time_range: int = int(TimeRange.DAY)

    model_config = {"env_file": ".env", "env_prefix": "FLEETVIEW_"}

    @field_validator("default_time_range")
    @classmethod
    def _check_time_range(cls, value: int) -> int:
        return int(TimeRange.parse(value))


settings = Settings()
