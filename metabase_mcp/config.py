"""Configuration loading for the Metabase MCP server.

Reads the Metabase URL and credentials from the environment and validates
them once, up front. Exactly one of these credential forms must be usable:

  * METABASE_API_KEY
  * METABASE_SESSION_TOKEN
  * METABASE_USERNAME and METABASE_PASSWORD
"""

import os
from typing import Mapping, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .errors import ConfigurationError

ENV_URL = "METABASE_URL"
ENV_API_KEY = "METABASE_API_KEY"
ENV_SESSION_TOKEN = "METABASE_SESSION_TOKEN"
ENV_USERNAME = "METABASE_USERNAME"
ENV_PASSWORD = "METABASE_PASSWORD"

MISSING_CREDENTIALS_MESSAGE = (
    "Either API key, session token, or username/password combination is required"
)


class MetabaseConfig(BaseModel):
    """Validated, immutable connection settings for one Metabase instance."""
    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    url: str = Field(..., description="Base URL of the Metabase instance, e.g. 'https://metabase.example.com'")
    api_key: Optional[str] = Field(default=None, repr=False)
    session_token: Optional[str] = Field(default=None, repr=False)
    username: Optional[str] = Field(default=None)
    password: Optional[str] = Field(default=None, repr=False)

    @field_validator("api_key", "session_token", "username", "password", mode="before")
    @classmethod
    def _blank_is_absent(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("url")
    @classmethod
    def _validate_url(cls, v: str) -> str:
        parsed = urlparse(v)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError("Invalid Metabase URL format")
        return v.rstrip("/")

    @model_validator(mode="after")
    def _require_credentials(self) -> "MetabaseConfig":
        if not has_credentials(self):
            raise ValueError(MISSING_CREDENTIALS_MESSAGE)
        return self

    @property
    def auth_method(self) -> str:
        """Name of the authentication mode the client will pick."""
        if self.api_key:
            return "api_key"
        if self.session_token:
            return "session_token"
        return "password"


def has_credentials(config: MetabaseConfig) -> bool:
    return bool(
        config.api_key
        or config.session_token
        or (config.username and config.password)
    )


def _format_validation_error(exc: ValidationError) -> str:
    messages = []
    for err in exc.errors():
        original = (err.get("ctx") or {}).get("error")
        messages.append(str(original) if original else err["msg"])
    return "; ".join(messages)


def load_config(environ: Optional[Mapping[str, str]] = None) -> MetabaseConfig:
    """Build a MetabaseConfig from environment variables.

    Args:
        environ: Mapping to read from. Defaults to os.environ.

    Returns:
        MetabaseConfig: The validated configuration.

    Raises:
        ConfigurationError: If the URL is missing or malformed, or no usable
            credential combination is present.
    """
    env = os.environ if environ is None else environ

    url = env.get(ENV_URL, "").strip()
    if not url:
        raise ConfigurationError(f"{ENV_URL} environment variable is required")

    try:
        return MetabaseConfig(
            url=url,
            api_key=env.get(ENV_API_KEY),
            session_token=env.get(ENV_SESSION_TOKEN),
            username=env.get(ENV_USERNAME),
            password=env.get(ENV_PASSWORD),
        )
    except ValidationError as e:
        raise ConfigurationError(_format_validation_error(e)) from e
