from functools import lru_cache
import os
from typing import List, Optional

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debug: bool = False
    project_name: str = "Load Journey Engine"
    environment: str = "development"
    log_level: str = "INFO"

    # Raw CORS origins string - read from env
    cors_origins_raw: Optional[str] = Field(
        default=None,
        alias="CORS_ORIGINS"
    )

    @computed_field
    @property
    def backend_cors_origins(self) -> List[str]:
        """Parse CORS_ORIGINS from environment variable (comma-separated string)."""
        raw = self.cors_origins_raw
        if not raw:
            raw = os.environ.get("CORS_ORIGINS") or os.environ.get("BACKEND_CORS_ORIGINS") or ""

        if not raw or not raw.strip():
            return []

        origins = []
        for origin in raw.split(","):
            origin = origin.strip()
            if origin:
                # Normalize protocol to lowercase (Https -> https, Http -> http)
                if origin.lower().startswith("https://"):
                    origin = "https://" + origin[8:]
                elif origin.lower().startswith("http://"):
                    origin = "http://" + origin[7:]
                origins.append(origin)
        return origins

    # ===== STREET TURN MATCHING =====
    # Additive weights, the three together make a perfect match of 100
    street_turn_city_weight: float = 55.0  # Empty sits in the city the export needs it
    street_turn_size_weight: float = 25.0  # Same container size
    street_turn_empty_ready_weight: float = 20.0  # Customer confirmed the empty is ready

    # Savings shown per match (USD) - avoided empty return to the terminal
    street_turn_base_savings: float = 150.00
    street_turn_same_terminal_bonus: float = 50.00

    # ===== LAST FREE DAY =====
    lfd_warning_days: int = 3
    lfd_urgent_days: int = 1


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
