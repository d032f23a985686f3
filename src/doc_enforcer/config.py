"""Service configuration using pydantic-settings.

This module defines the EnforcerSettings class that reads configuration
from environment variables with the DOC_ENFORCER_ prefix. The two tokens
must be set for the service to start; everything else has a default.

The settings object is frozen and handed to the receiver and reopener
constructors, so nothing reads the environment after startup.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DOCS_HAS_IMPACT = "docs/has-impact"
DOCS_NO_IMPACT = "docs/no-impact"

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class EnforcerSettings(BaseSettings):
    """Docs label enforcer configuration from environment variables.

    All environment variables are prefixed with DOC_ENFORCER_
    (e.g., DOC_ENFORCER_SECRET_TOKEN).

    Required fields (must be set via environment variables):
    - secret_token: Shared secret GitHub signs webhook deliveries with
    - github_access_token: Token for the account that posts the reminders
    """

    model_config = SettingsConfigDict(
        env_prefix="DOC_ENFORCER_",
        case_sensitive=False,
        frozen=True,
    )

    # -------------------------------------------------------------------------
    # GitHub Configuration
    # -------------------------------------------------------------------------
    # Secret for validating webhook signatures
    secret_token: str

    # Bearer token for comment and issue edit calls
    github_access_token: str

    # Base URL for GitHub API (supports GitHub Enterprise)
    github_base_url: str = "https://api.github.com"

    # -------------------------------------------------------------------------
    # Label Policy
    # -------------------------------------------------------------------------
    has_impact_label: str = DOCS_HAS_IMPACT
    no_impact_label: str = DOCS_NO_IMPACT

    # -------------------------------------------------------------------------
    # Target Repository
    # -------------------------------------------------------------------------
    # https://github.com/{repo_owner}/{repo_name}
    repo_owner: str = "vmware"
    repo_name: str = "vic"

    # -------------------------------------------------------------------------
    # Timeouts
    # -------------------------------------------------------------------------
    # Per-request timeout for outbound GitHub calls
    request_timeout_seconds: float = 30.0

    # Upper bound for the whole comment + reopen sequence
    reopen_timeout_seconds: float = 60.0

    # -------------------------------------------------------------------------
    # Server Configuration
    # -------------------------------------------------------------------------
    host: str = "0.0.0.0"
    port: int = 9399
    log_level: str = "INFO"

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------
    @field_validator("secret_token")
    @classmethod
    def validate_secret_token(cls, v: str) -> str:
        """Validate that the webhook secret is not empty."""
        if not v or not v.strip():
            raise ValueError("secret_token cannot be empty")
        return v

    @field_validator("github_access_token")
    @classmethod
    def validate_github_access_token(cls, v: str) -> str:
        """Validate that the GitHub token is not empty."""
        if not v or not v.strip():
            raise ValueError("github_access_token cannot be empty")
        return v

    @field_validator("has_impact_label", "no_impact_label", "repo_owner", "repo_name")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("value cannot be empty")
        return v.strip()

    @field_validator("github_base_url")
    @classmethod
    def validate_github_base_url(cls, v: str) -> str:
        """Validate that the API base URL is an http(s) URL."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("github_base_url must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("request_timeout_seconds", "reopen_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeouts must be positive")
        return v

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate that port is in valid range."""
        if not 1 <= v <= 65535:
            raise ValueError("port must be between 1 and 65535")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown log level: {v}")
        return level

    @property
    def required_labels(self) -> tuple[str, str]:
        """The label names that allow an issue to stay closed."""
        return (self.has_impact_label, self.no_impact_label)

    @property
    def full_repository(self) -> str:
        return f"{self.repo_owner}/{self.repo_name}"


def get_settings() -> EnforcerSettings:
    """Create and return EnforcerSettings instance.

    Reads configuration from environment variables. It will raise a
    validation error if required fields are missing or invalid.

    Returns:
        EnforcerSettings: Configured settings instance.

    Raises:
        pydantic.ValidationError: If required fields are missing or invalid.
    """
    return EnforcerSettings()
