"""Tests for environment-driven configuration."""

import pytest

from postman_mcp.config.settings import Settings, load_settings
from postman_mcp.core.errors import ConfigurationError


class TestLoadSettings:

    def test_defaults(self):
        settings = load_settings({"POSTMAN_API_KEY": "PMAK-abc"})
        assert settings.api_key == "PMAK-abc"
        assert settings.base_url == "https://api.getpostman.com"
        assert settings.timeout == 30.0
        assert settings.log_level == "INFO"

    def test_overrides(self):
        settings = load_settings({
            "POSTMAN_API_KEY": "PMAK-abc",
            "POSTMAN_API_BASE_URL": "https://proxy.example.com/postman/",
            "POSTMAN_API_TIMEOUT": "12.5",
            "POSTMAN_MCP_LOG_LEVEL": "debug",
        })
        assert settings.base_url == "https://proxy.example.com/postman"
        assert settings.timeout == 12.5
        assert settings.log_level == "DEBUG"

    @pytest.mark.parametrize("environ", [{}, {"POSTMAN_API_KEY": "   "}])
    def test_missing_api_key(self, environ):
        with pytest.raises(ConfigurationError, match="POSTMAN_API_KEY"):
            load_settings(environ)

    @pytest.mark.parametrize("name,value", [
        ("POSTMAN_API_TIMEOUT", "0"),
        ("POSTMAN_API_TIMEOUT", "soon"),
        ("POSTMAN_API_BASE_URL", "ftp://example.com"),
        ("POSTMAN_MCP_LOG_LEVEL", "LOUD"),
    ])
    def test_invalid_values(self, name, value):
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            load_settings({"POSTMAN_API_KEY": "PMAK-abc", name: value})

    def test_api_key_not_in_repr(self):
        settings = Settings(api_key="PMAK-secret")
        assert "PMAK-secret" not in repr(settings)
