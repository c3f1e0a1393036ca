from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    pdf_engine: str = "pdfplumber"

    # Max concurrent classification calls per batch of consecutive pages.
    chunk_size: int = Field(default=3, ge=1)

    classifier_provider: str = "gemini"
    classifier_api_key: str = ""
    classifier_model_name: str = "gemini-2.5-flash"
    classifier_base_url: str | None = None
    classifier_timeout_seconds: int = 30
    classifier_temperature: float = 0.1
