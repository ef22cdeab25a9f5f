"""Client configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from gemina.models.schemas import PollPolicy


class Settings(BaseSettings):
    """Credentials, endpoints and polling limits loaded from environment variables / .env file."""

    model_config = SettingsConfigDict(
        env_prefix="GEMINA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # --- Credentials ---
    api_key: str = ""
    client_id: str = ""

    # --- Endpoints ---
    api_url: str = "https://api.gemina.co.il/v1"
    upload_path: str = "/uploads"
    web_upload_path: str = "/uploads/web"
    business_documents_path: str = "/business_documents"
    request_timeout: float = Field(default=30.0, gt=0)

    # --- Extraction ---
    use_llm: bool = True
    max_file_size_mb: int = Field(default=20, ge=1)

    # --- Polling ---
    poll_interval: float = Field(default=1.0, ge=0)
    poll_max_attempts: int | None = Field(default=None, ge=1)
    poll_timeout: float | None = Field(default=None, gt=0)

    # --- Logging ---
    debug: bool = False
    log_dir: str = "logs"

    @property
    def poll_policy(self) -> PollPolicy:
        return PollPolicy(
            interval=self.poll_interval,
            max_attempts=self.poll_max_attempts,
            timeout=self.poll_timeout,
        )

    def has_credentials(self) -> bool:
        return bool(self.api_key and self.client_id)


@lru_cache
def get_settings() -> Settings:
    """Cached settings singleton."""
    return Settings()
