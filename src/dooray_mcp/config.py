"""Process configuration for the Dooray MCP server.

The credential is read once at startup and handed to ``DoorayClient``;
nothing else in the package reads the environment.
"""
import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from .errors import AuthenticationError

DEFAULT_BASE_URL = "https://api.dooray.com"
DEFAULT_LOG_LEVEL = "INFO"

# Seconds
REQUEST_TIMEOUT = 30.0
TRANSFER_TIMEOUT = 60.0

TOKEN_ENV_VAR = "DOORAY_API_TOKEN"
BASE_URL_ENV_VAR = "DOORAY_API_BASE_URL"
LOG_LEVEL_ENV_VAR = "DOORAY_LOG_LEVEL"


class Credential(BaseModel):
    """Bearer token plus optional base endpoint override."""

    model_config = ConfigDict(frozen=True)

    api_token: SecretStr
    base_url: str = Field(DEFAULT_BASE_URL, min_length=1)

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def authorization(self) -> str:
        """Value for the ``Authorization`` header."""
        return f"dooray-api {self.api_token.get_secret_value()}"


def load_credential(environ: Optional[Mapping[str, str]] = None) -> Credential:
    """Build the process credential from environment variables.

    Raises:
        AuthenticationError: if DOORAY_API_TOKEN is missing or blank.
    """
    env = os.environ if environ is None else environ
    token = (env.get(TOKEN_ENV_VAR) or "").strip()
    if not token:
        raise AuthenticationError(f"{TOKEN_ENV_VAR} is required as environment variable")

    base_url = (env.get(BASE_URL_ENV_VAR) or "").strip() or DEFAULT_BASE_URL
    return Credential(api_token=token, base_url=base_url)


def get_log_level(environ: Optional[Mapping[str, str]] = None) -> str:
    env = os.environ if environ is None else environ
    return (env.get(LOG_LEVEL_ENV_VAR) or DEFAULT_LOG_LEVEL).upper()
