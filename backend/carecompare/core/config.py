import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_BACKEND_ROOT = Path(__file__).resolve().parents[2]

logger = logging.getLogger(__name__)

# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = _BACKEND_ROOT / ".env"
    logger.debug("[CONFIG] Looking for .env at: %s (exists=%s)", env_path, env_path.exists())
    load_dotenv(env_path)


GEOCODING_PROVIDERS = {"google", "mapbox", "mock"}


class Settings(BaseSettings):
    environment: str = Field(default="development", description="Deployment environment name")

    # Read-only catalog / price store
    database_url: str = Field(
        default=f"sqlite:///{_BACKEND_ROOT / 'carecompare.db'}",
        description="SQLAlchemy URL of the catalog and price store",
    )
    database_echo: bool = Field(default=False, description="Echo SQL statements to the log")

    # Geocoding/Maps providers
    geocoding_provider: str = Field(
        default="google", description="Geocoding provider: google|mapbox|mock"
    )
    google_maps_api_key: str = Field(default="", description="Google Maps API key for geocoding")
    mapbox_access_token: str = Field(default="", description="Mapbox access token for geocoding")
    geocoding_timeout_seconds: float = Field(
        default=3.0,
        gt=0,
        le=10,
        description="Upper bound on a single upstream geocoding request",
    )

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("geocoding_provider", mode="before")
    @classmethod
    def _normalize_provider(cls, value: object) -> str:
        name = str(value or "google").strip().lower()
        if name not in GEOCODING_PROVIDERS:
            logger.warning("Unknown GEOCODING_PROVIDER=%s; defaulting to google", name)
            return "google"
        return name


settings = Settings()
