"""Configuration settings for the Jira test readiness server."""

import threading
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

# Env vars that must be set before the server starts
REQUIRED_SETTINGS = {
    "JIRA_URL": "jira_url",
    "JIRA_EMAIL": "jira_email",
    "JIRA_API_TOKEN": "jira_api_token",
    "JIRA_PROJECT_KEY": "jira_project_key",
    "GEMINI_API_KEY": "gemini_api_key",
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables (and .env)."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    # Jira settings
    jira_url: str | None = Field(
        default=None, description="Base URL of the Jira site, e.g. https://acme.atlassian.net"
    )
    jira_email: str | None = Field(default=None, description="Account email for Basic auth")
    jira_api_token: SecretStr | None = Field(default=None, description="Jira API token")
    jira_project_key: str | None = Field(
        default=None, description="Project key used to expand bare ticket numbers"
    )
    jira_timeout: float = Field(
        default=30.0,
        gt=0,
        le=300,
        description="Timeout in seconds for Jira API calls (1-300)",
    )

    # Gemini settings
    gemini_api_key: SecretStr | None = Field(default=None, description="Google AI API key")
    gemini_model: str = Field(
        default="gemini-1.5-flash-latest", description="Gemini model identifier"
    )
    gemini_temperature: float | None = Field(
        default=None,
        ge=0,
        le=2,
        description="Sampling temperature; provider default when unset",
    )
    gemini_timeout: float = Field(
        default=120.0,
        gt=0,
        le=600,
        description="Timeout in seconds for Gemini API calls (1-600)",
    )

    # MCP settings
    protocol_version: str = Field(
        default="1.0",
        validation_alias="MCP_PROTOCOL_VERSION",
        description="Protocol version stamped on every envelope",
    )
    transport: Literal["stdio", "http"] = Field(
        default="stdio", validation_alias="MCP_TRANSPORT", description="MCP transport"
    )
    port: int = Field(default=3000, ge=1, le=65535, description="Port for the http transport")

    # Logging settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    log_format: Literal["json", "text"] = Field(
        default="json", description="Log format: json or text"
    )

    def missing_required(self) -> list[str]:
        """Return the env var names of required settings that are unset or empty."""
        missing = []
        for env_name, field_name in REQUIRED_SETTINGS.items():
            value = getattr(self, field_name)
            if isinstance(value, SecretStr):
                value = value.get_secret_value()
            if not value:
                missing.append(env_name)
        return missing


# Singleton for convenience (thread-safe with double-checked locking)
_settings: Settings | None = None
_settings_lock = threading.Lock()


def get_settings() -> Settings:
    """Get or create Settings instance."""
    global _settings
    if _settings is None:
        with _settings_lock:
            if _settings is None:
                _settings = Settings()
    return _settings
