"""Tests for ClientConfig."""

import pytest
from pydantic import ValidationError

from meiliclient.config import ClientConfig


class TestClientConfig:
    """Tests for ClientConfig."""

    def test_defaults(self):
        """Test default configuration."""
        config = ClientConfig()
        assert config.host == "http://localhost:7700"
        assert config.api_key is None
        assert config.task_timeout_ms == 5000
        assert config.task_interval_ms == 50

    def test_frozen(self):
        """Test that the configuration cannot be changed after construction."""
        config = ClientConfig(host="http://h")
        with pytest.raises(ValidationError):
            config.host = "http://other"

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch):
        """Test reading host and key from the environment."""
        monkeypatch.setenv("MEILI_URL", "http://search:7700")
        monkeypatch.setenv("MEILI_MASTER_KEY", "secret")
        config = ClientConfig.from_env()
        assert config.host == "http://search:7700"
        assert config.api_key == "secret"

    def test_from_env_overrides(self, monkeypatch: pytest.MonkeyPatch):
        """Test that explicit values win over the environment."""
        monkeypatch.setenv("MEILI_URL", "http://search:7700")
        monkeypatch.delenv("MEILI_MASTER_KEY", raising=False)
        config = ClientConfig.from_env(host="http://other", task_timeout_ms=100)
        assert config.host == "http://other"
        assert config.api_key is None
        assert config.task_timeout_ms == 100
