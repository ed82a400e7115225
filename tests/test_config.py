"""Test client configuration."""
from __future__ import annotations

import pytest

from tradfri.config import ClientConfig
from tradfri.const import DEFAULT_LIST_DELAY, DEFAULT_PORT, REQUEST_TIMEOUT
from tradfri.exceptions import ValidationError

BASE = {"host": "192.168.1.20", "key": "SECURITYCODE1234", "identity": "client-42"}


class TestClientConfig:
    """Test ClientConfig validation."""

    def test_defaults(self):
        """Test optional settings get their defaults."""
        config = ClientConfig.from_dict(BASE)

        assert config.host == "192.168.1.20"
        assert config.psk is None
        assert config.port == DEFAULT_PORT
        assert config.list_delay == DEFAULT_LIST_DELAY
        assert config.request_timeout == REQUEST_TIMEOUT

    def test_coercion(self):
        """Test numeric strings are coerced and text stripped."""
        config = ClientConfig.from_dict(
            {**BASE, "host": " gw.local ", "port": "5685", "list_delay": "0"}
        )

        assert config.host == "gw.local"
        assert config.port == 5685
        assert config.list_delay == 0.0

    def test_timeout_can_be_disabled(self):
        """Test a None timeout is accepted."""
        config = ClientConfig.from_dict({**BASE, "request_timeout": None})

        assert config.request_timeout is None

    @pytest.mark.parametrize(
        "override",
        [
            {"host": ""},
            {"key": "   "},
            {"identity": None},
            {"port": 0},
            {"port": 70000},
            {"port": "abc"},
            {"list_delay": -0.1},
            {"request_timeout": 0},
            {"unknown": 1},
        ],
    )
    def test_invalid(self, override):
        """Test invalid settings raise ValidationError."""
        with pytest.raises(ValidationError, match="Invalid configuration"):
            ClientConfig.from_dict({**BASE, **override})

    @pytest.mark.parametrize("missing", ["host", "key", "identity"])
    def test_required(self, missing):
        """Test required settings."""
        data = {k: v for k, v in BASE.items() if k != missing}

        with pytest.raises(ValidationError):
            ClientConfig.from_dict(data)

    def test_as_dict_redacts_secrets(self):
        """Test secrets are hidden unless asked for."""
        config = ClientConfig.from_dict({**BASE, "psk": "s3cr3tPsk"})

        redacted = config.as_dict()
        assert redacted["key"] == "**REDACTED**"
        assert redacted["psk"] == "**REDACTED**"
        assert redacted["identity"] == "client-42"

        assert config.as_dict(redact=False)["psk"] == "s3cr3tPsk"

    def test_as_dict_keeps_missing_psk(self):
        """Test an unset key stays None."""
        assert ClientConfig.from_dict(BASE).as_dict()["psk"] is None

    def test_frozen(self):
        """Test configurations are immutable."""
        config = ClientConfig.from_dict(BASE)

        with pytest.raises(AttributeError):
            config.port = 1
