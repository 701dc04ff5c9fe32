"""
Client configuration.

Defaults come from the environment (read once through pydantic-settings) and
are then overridden by explicit keyword arguments.  The result is an
immutable :class:`ClientConfig`.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import AuthenticationError

VERSION = "0.1.0"

DEFAULT_BASE_URL = "http://localhost:23373"
DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_RETRIES = 2
DEFAULT_USER_AGENT = f"beeper-desktop-api-python/{VERSION}"


class ClientSettings(BaseSettings):
    """Environment defaults (``BEEPER_ACCESS_TOKEN``, ``BEEPER_DESKTOP_BASE_URL``)."""

    model_config = SettingsConfigDict(env_prefix="BEEPER_", env_ignore_empty=True, extra="ignore")

    access_token: str = Field(default="", description="Bearer token for the local API")
    desktop_base_url: str = Field(default=DEFAULT_BASE_URL, description="Local API base URL")


class ClientConfig(BaseModel):
    """Resolved, immutable client configuration."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    access_token: str = Field(min_length=1, repr=False)
    base_url: str = DEFAULT_BASE_URL
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    max_retries: int = Field(default=DEFAULT_MAX_RETRIES, ge=0)
    user_agent: str = DEFAULT_USER_AGENT
    # httpx.BaseTransport / AsyncBaseTransport used to build the owned client
    transport: Any = None
    # Pre-built httpx.Client / AsyncClient; never closed by the SDK
    http_client: Any = None

    @field_validator("base_url")
    @classmethod
    def ensure_trailing_slash(cls, v: str) -> str:
        """Normalise the base URL so paths can be appended directly."""
        return v if v.endswith("/") else v + "/"


def resolve_config(
    *,
    access_token: str | None = None,
    base_url: str | None = None,
    timeout: float | None = None,
    max_retries: int | None = None,
    user_agent: str | None = None,
    transport: Any = None,
    http_client: Any = None,
) -> ClientConfig:
    """Merge environment defaults with explicit overrides.

    ``None`` means "not overridden".  An explicitly empty access token is an
    override like any other and still fails validation.

    Raises:
        AuthenticationError: The final access token is empty.  Raised before
            any transport is created.
    """
    settings = ClientSettings()

    token = settings.access_token if access_token is None else access_token
    if not token:
        raise AuthenticationError("access token is required", status=401)

    values: dict[str, Any] = {
        "access_token": token,
        "base_url": settings.desktop_base_url if base_url is None else base_url,
        "transport": transport,
        "http_client": http_client,
    }
    if timeout is not None:
        values["timeout"] = timeout
    if max_retries is not None:
        values["max_retries"] = max_retries
    if user_agent is not None:
        values["user_agent"] = user_agent
    return ClientConfig(**values)
