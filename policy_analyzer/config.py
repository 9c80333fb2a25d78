"""
Configuration management using Pydantic Settings.
Loads environment variables from .env file with validation.
"""

from pathlib import Path
from functools import lru_cache
from typing import List, Optional
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=Path(__file__).parent.parent / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # OpenAI Configuration
    openai_api_key: str = Field(
        default="",
        description="OpenAI API key used as the bearer token"
    )
    openai_model: str = Field(
        default="gpt-4.1-mini",
        description="Chat completion model used for policy analysis"
    )
    openai_temperature: float = Field(default=0.1, ge=0.0, le=2.0)
    openai_max_tokens: int = Field(default=2000, gt=0)
    openai_base_url: str = Field(default="https://api.openai.com/v1")

    # Retry / timeout budget
    openai_timeout_seconds: float = Field(
        default=25.0,
        gt=0,
        description="Per-attempt network timeout for the OpenAI call"
    )
    openai_max_retries: int = Field(
        default=2,
        ge=0,
        description="Retries after the first attempt (2 means 3 attempts)"
    )
    openai_retry_delay_seconds: float = Field(default=0.15, ge=0)
    invocation_deadline_seconds: float = Field(
        default=29.0,
        gt=0,
        description="Deadline imposed by the hosting environment per invocation"
    )

    # Rate limiting
    rate_limit_max_requests: int = Field(default=5, gt=0)
    rate_limit_window_seconds: int = Field(default=60, gt=0)
    trusted_proxies: str = Field(
        default="",
        description="Comma-separated peer addresses allowed to set X-Forwarded-For"
    )

    # Demo access gate
    demo_password: Optional[str] = Field(
        default=None,
        description="Shared secret expected in X-Demo-Password; unset disables the gate"
    )
    demo_contact_email: str = Field(default="access@policy-analyzer.dev")
    demo_contact_url: str = Field(default="https://policy-analyzer.dev/contact")

    # API Configuration
    app_env: str = Field(default="prod")
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000)

    # Logging
    log_level: str = Field(default="INFO")

    @model_validator(mode="after")
    def check_timeout_budget(self) -> "Settings":
        """The per-call timeout must stay below the invocation deadline."""
        if self.openai_timeout_seconds >= self.invocation_deadline_seconds:
            raise ValueError(
                f"openai_timeout_seconds ({self.openai_timeout_seconds}) must be "
                f"shorter than invocation_deadline_seconds ({self.invocation_deadline_seconds})"
            )
        return self

    @property
    def trusted_proxy_list(self) -> List[str]:
        """Parsed list of trusted proxy addresses."""
        return [p.strip() for p in self.trusted_proxies.split(",") if p.strip()]

    @property
    def worst_case_llm_seconds(self) -> float:
        """Upper bound on time spent in the LLM client, all attempts included."""
        attempts = self.openai_max_retries + 1
        return attempts * self.openai_timeout_seconds + self.openai_max_retries * self.openai_retry_delay_seconds

    @property
    def llm_budget_exceeds_deadline(self) -> bool:
        """True when all attempts together can outlast the invocation deadline."""
        return self.worst_case_llm_seconds >= self.invocation_deadline_seconds

    @property
    def rate_limiting_enabled(self) -> bool:
        return self.app_env != "test"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
