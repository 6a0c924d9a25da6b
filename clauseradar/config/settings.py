from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from clauseradar.risk.models import Persona


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    analysis_provider: str = "http"
    api_base_url: str = "http://localhost:8000/api"

    upload_timeout_seconds: int = Field(default=30, gt=0)
    counter_offer_timeout_seconds: int = Field(default=15, gt=0)
    request_timeout_seconds: int = Field(default=10, gt=0)
    upload_poll_interval_seconds: float = Field(default=2.0, ge=0)
    max_upload_size_bytes: int = Field(default=10 * 1024 * 1024, gt=0)

    progress_interval_seconds: float = Field(default=0.2, gt=0)
    progress_ceiling: float = Field(default=90.0, gt=0, lt=100)
    progress_step_fraction: float = Field(default=0.15, gt=0, le=1)
    handoff_delay_seconds: float = Field(default=2.0, ge=0)

    default_persona: Persona = Persona.TENANT
    example_latency_seconds: float = Field(default=0.0, ge=0)
