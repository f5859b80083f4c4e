"""Application settings using Pydantic Settings for environment variable management."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env.local",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
    )

    # GitHub Configuration
    # GitHub Actions doesn't allow env var names starting with GITHUB_,
    # so the token and secret are read from GH_TOKEN / WEBHOOK_SECRET
    github_token: str | None = Field(
        default=None,
        validation_alias="GH_TOKEN",
        description="Token used to read commits and post review comments",
    )
    github_webhook_secret: str | None = Field(
        default=None,
        validation_alias="WEBHOOK_SECRET",
        description="GitHub webhook secret for signature verification",
    )
    github_api_url: str = Field(
        default="https://api.github.com", description="GitHub REST API base URL"
    )
    user_agent: str = Field(
        default="compatbot",
        description="User-Agent sent with every GitHub and raw-content request",
    )
    http_timeout: float = Field(
        default=30.0, description="Timeout in seconds for outbound HTTP calls"
    )

    # Compatibility check configuration
    config_filename: str = Field(
        default=".doiuse",
        description="Per-repository file listing the browsers to check against",
    )
    default_browsers: list[str] = Field(
        default_factory=lambda: ["last 2 versions"],
        description="Browser targets used when a repository has no config file",
    )
    doiuse_command: list[str] = Field(
        default_factory=lambda: ["doiuse"],
        description="Command used to run the doiuse CLI",
    )
    stylus_command: list[str] = Field(
        default_factory=lambda: ["stylus"],
        description="Command used to compile Stylus sources to CSS",
    )
    max_concurrent_files: int = Field(
        default=8,
        ge=1,
        description="Files analyzed at once per pull request (each may start subprocesses)",
    )

    # Observability
    logfire_token: str | None = Field(
        default=None, description="Pydantic Logfire token for observability"
    )

    # Application Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    environment: Literal["development", "staging", "production"] = Field(
        default="development", description="Application environment"
    )

    # Server Configuration
    # Use a localhost default to avoid binding to all interfaces.
    # Override via env (e.g., HOST=0.0.0.0) only when needed (containers/proxies).
    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=8000, description="Server port")

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


# Global settings instance
settings = Settings()

# Validate required secrets in production to avoid silent failures
if settings.is_production:
    missing = []
    if not settings.github_token:
        missing.append("GH_TOKEN")
    if not settings.github_webhook_secret:
        missing.append("WEBHOOK_SECRET")
    if missing:
        raise RuntimeError(
            "Missing required environment variables for production: "
            + ", ".join(missing)
        )
