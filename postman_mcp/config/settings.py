"""
Runtime configuration for the Postman MCP server.

All settings come from environment variables so the server can be launched
by any MCP host without extra files.

Environment Variables:
    POSTMAN_API_KEY=<key>          - Postman API key (required)
    POSTMAN_API_BASE_URL=<url>     - API base address
                                     (default: https://api.getpostman.com)
    POSTMAN_API_TIMEOUT=<seconds>  - Per-request timeout (default: 30)
    POSTMAN_MCP_LOG_LEVEL=<level>  - DEBUG, INFO, WARNING, ERROR (default: INFO)

Usage:
    from postman_mcp.config.settings import load_settings

    settings = load_settings()
    client = PostmanClient(settings.api_key, settings.base_url, settings.timeout)

The API key is never logged; ``Settings.__repr__`` masks it.
"""

import logging
import os
import sys
from typing import Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from ..core.errors import ConfigurationError

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

ENV_API_KEY = "POSTMAN_API_KEY"
ENV_BASE_URL = "POSTMAN_API_BASE_URL"
ENV_TIMEOUT = "POSTMAN_API_TIMEOUT"
ENV_LOG_LEVEL = "POSTMAN_MCP_LOG_LEVEL"


class Settings(BaseModel):
    """Validated server settings."""
    api_key: str = Field(..., min_length=1, repr=False)
    base_url: str = "https://api.getpostman.com"
    timeout: float = 30.0
    log_level: str = "INFO"

    @field_validator("base_url")
    def validate_base_url(cls, v):
        """Require an http(s) URL and strip any trailing slash."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"base_url must be an http(s) URL, got '{v}'")
        return v.rstrip("/")

    @field_validator("timeout")
    def validate_timeout(cls, v):
        if v <= 0:
            raise ValueError("timeout must be positive")
        return v

    @field_validator("log_level")
    def validate_log_level(cls, v):
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from environment variables.

    Args:
        environ: Mapping to read from (defaults to ``os.environ``)

    Returns:
        Validated Settings

    Raises:
        ConfigurationError: If the API key is missing or a value is invalid
    """
    env = os.environ if environ is None else environ

    api_key = env.get(ENV_API_KEY, "").strip()
    if not api_key:
        raise ConfigurationError(f"{ENV_API_KEY} environment variable is required")

    values = {"api_key": api_key}
    if env.get(ENV_BASE_URL):
        values["base_url"] = env[ENV_BASE_URL]
    if env.get(ENV_TIMEOUT):
        values["timeout"] = env[ENV_TIMEOUT]
    if env.get(ENV_LOG_LEVEL):
        values["log_level"] = env[ENV_LOG_LEVEL]

    try:
        return Settings(**values)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigurationError(f"Invalid configuration: {problems}") from e


def configure_logging(level: str = "INFO") -> None:
    """Send log records to stderr; stdout carries the MCP stdio channel."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
