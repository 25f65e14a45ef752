"""Configuration for TaskZen.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

The server is able to start without any credentials configured. Operations
that need the task API, the identity provider or the language model validate
their settings at request time.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TaskZenSettings(BaseSettings):
    """Process-wide settings.

    Environment variables:
    - TASKZEN_API_BASE_URL          (task storage API)
    - TASKZEN_HTTP_TIMEOUT_SECONDS  (optional)
    - AUTH0_ISSUER_BASE_URL / AUTH0_CLIENT_ID / AUTH0_CLIENT_SECRET / AUTH0_AUDIENCE
    - TASKZEN_BASE_URL              (public URL used for auth redirects)
    - TASKZEN_SESSION_SECRET
    - OPENAI_API_KEY / TASKZEN_LLM_MODEL / TASKZEN_LLM_TEMPERATURE
    - LOG_LEVEL                     (optional)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `TaskZenSettings(_env_file=path_to_env)`.
    """

    api_base_url: str = Field(
        default="",
        validation_alias="TASKZEN_API_BASE_URL",
        description="Base URL of the remote task storage API",
    )
    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        validation_alias="TASKZEN_HTTP_TIMEOUT_SECONDS",
        description="Timeout applied to every task API request",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    base_url: str = Field(
        default="http://localhost:8000",
        validation_alias="TASKZEN_BASE_URL",
        description="Public URL of this application, used to build auth redirects",
    )
    session_secret: str = Field(
        default="change-me",
        validation_alias="TASKZEN_SESSION_SECRET",
        description="Secret used to sign the session cookie",
    )

    auth0_issuer_base_url: str = Field(default="", validation_alias="AUTH0_ISSUER_BASE_URL")
    auth0_client_id: str = Field(default="", validation_alias="AUTH0_CLIENT_ID")
    auth0_client_secret: str = Field(default="", validation_alias="AUTH0_CLIENT_SECRET")
    auth0_audience: str = Field(
        default="",
        validation_alias="AUTH0_AUDIENCE",
        description="API audience requested so the access token is accepted by the task API",
    )
    auth0_scope: str = Field(default="openid profile email", validation_alias="AUTH0_SCOPE")

    openai_api_key: str | None = Field(default=None, validation_alias="OPENAI_API_KEY")
    llm_model: str = Field(default="gpt-4o-mini", validation_alias="TASKZEN_LLM_MODEL")
    llm_temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        validation_alias="TASKZEN_LLM_TEMPERATURE",
    )
    llm_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        validation_alias="TASKZEN_LLM_TIMEOUT_SECONDS",
    )

    cors_origins: str = Field(
        default="http://localhost:3000,http://127.0.0.1:3000",
        validation_alias="TASKZEN_CORS_ORIGINS",
        description="Comma-separated list of allowed CORS origins.",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    def parsed_cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def auth_configured(self) -> bool:
        """True when enough identity provider settings exist to run the login flow."""

        return bool(self.auth0_issuer_base_url.strip() and self.auth0_client_id.strip())

    @property
    def issuer_url(self) -> str:
        return self.auth0_issuer_base_url.strip().rstrip("/")

    @property
    def callback_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/api/auth/callback"
