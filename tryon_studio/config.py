"""Configuration management for the Virtual Try-On studio."""

from pydantic import AliasChoices, BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GeminiConfig(BaseModel):
    """Generation endpoint settings."""
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    model: str = "gemini-2.5-flash-image"
    timeout: float = 300.0  # 5 min for generation
    temperature: float | None = None


class IntakeConfig(BaseModel):
    """Upload limits."""
    max_bytes: int = 10 * 1024 * 1024


class ServerConfig(BaseModel):
    """Local web server settings."""
    host: str = "127.0.0.1"
    port: int = 8000

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"


class AppConfig(BaseSettings):
    """Main application configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Sub-configs
    gemini: GeminiConfig = Field(default_factory=GeminiConfig)
    intake: IntakeConfig = Field(default_factory=IntakeConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    # Opaque credential for the generation endpoint (loaded from .env)
    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "API_KEY"),
    )

    log_level: str = "INFO"


def load_config() -> AppConfig:
    """Load configuration from environment and defaults."""
    return AppConfig()
