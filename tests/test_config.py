"""Tests for client configuration."""

from __future__ import annotations

import os
from unittest import mock

import pytest

from instantdb import ClientConfig, ConfigError, InstantClient


class TestClientConfig:
    def test_from_env(self):
        config = ClientConfig.from_env({"INSTANT_APP_ID": "app", "INSTANT_ADMIN_TOKEN": "secret"})
        assert config == ClientConfig(app_id="app", secret="secret")
        assert config.base_url == "https://api.instantdb.com"
        assert config.timeout is None

    def test_fallback_names(self):
        """APP_ID and SECRET are accepted as fallbacks."""
        config = ClientConfig.from_env({"APP_ID": "app", "SECRET": "secret"})
        assert (config.app_id, config.secret) == ("app", "secret")

    def test_base_url_override(self):
        config = ClientConfig.from_env({"APP_ID": "app", "SECRET": "s", "INSTANT_BASE_URL": "http://localhost:8888"})
        assert config.base_url == "http://localhost:8888"

    def test_missing_app_id(self):
        with pytest.raises(ConfigError):
            ClientConfig.from_env({"SECRET": "secret"})

    def test_missing_secret(self):
        with pytest.raises(ConfigError):
            ClientConfig.from_env({"APP_ID": "app"})

    def test_client_from_env(self):
        with mock.patch.dict(os.environ, {"INSTANT_APP_ID": "app", "INSTANT_ADMIN_TOKEN": "secret"}, clear=True):
            with InstantClient.from_env() as client:
                assert client.app_id == "app"
                assert client.base_url == "https://api.instantdb.com"
