"""
Unit tests for configuration loading.
"""

from pathlib import Path

import pytest

from audit_engine.config import AuditConfig, load_config
from audit_engine.errors import ConfigError


class TestLoadConfig:
    """Tests for load_config."""

    def test_minimal_environment(self):
        config = load_config(env={"TARGET_URL": "https://example.com"})

        assert config.target_url == "https://example.com"
        assert config.business_name == "audit"
        assert config.reports_dir == Path("reports")
        assert config.api_key is None
        assert config.pagespeed_enabled is False
        assert config.headless is True
        assert config.navigation_timeout_ms == 60000
        assert config.probe_images is True

    def test_missing_target_url_is_fatal(self):
        with pytest.raises(ConfigError, match="TARGET_URL"):
            load_config(env={"BUSINESS_NAME": "acme"})

    def test_blank_target_url_is_fatal(self):
        with pytest.raises(ConfigError, match="TARGET_URL"):
            load_config(env={"TARGET_URL": "   "})

    def test_invalid_target_url(self):
        with pytest.raises(ConfigError, match="http:// or https://"):
            load_config(env={"TARGET_URL": "example.com"})

    def test_api_key_enables_pagespeed(self):
        config = load_config(
            env={"TARGET_URL": "https://example.com", "GOOGLE_API_KEY": "secret"}
        )
        assert config.api_key == "secret"
        assert config.pagespeed_enabled is True

    def test_pagespeed_can_be_disabled_with_key(self):
        config = load_config(
            env={"TARGET_URL": "https://example.com", "GOOGLE_API_KEY": "secret"},
            pagespeed_enabled=False,
        )
        assert config.pagespeed_enabled is False

    def test_pagespeed_requested_without_key(self):
        with pytest.raises(ConfigError, match="GOOGLE_API_KEY"):
            load_config(env={"TARGET_URL": "https://example.com"}, pagespeed_enabled=True)

    def test_environment_values(self):
        config = load_config(
            env={
                "TARGET_URL": "https://example.com",
                "BUSINESS_NAME": "acme",
                "REPORTS_DIR": "/tmp/audits",
                "HEADLESS": "false",
                "NAVIGATION_TIMEOUT_MS": "30000",
                "AXE_SCRIPT_PATH": "assets/axe.min.js",
                "LOG_LEVEL": "debug",
            }
        )

        assert config.business_name == "acme"
        assert config.reports_dir == Path("/tmp/audits")
        assert config.headless is False
        assert config.navigation_timeout_ms == 30000
        assert config.axe_script_path == Path("assets/axe.min.js")
        assert config.log_level == "DEBUG"

    def test_overrides_win_over_environment(self):
        config = load_config(
            env={"TARGET_URL": "https://example.com", "BUSINESS_NAME": "acme"},
            target_url="https://other.example.com",
            business_name="globex",
            reports_dir="out",
            device_names=["iPhone 12"],
        )

        assert config.target_url == "https://other.example.com"
        assert config.business_name == "globex"
        assert config.reports_dir == Path("out")
        assert config.device_names == ("iPhone 12",)

    def test_none_overrides_are_ignored(self):
        config = load_config(
            env={"TARGET_URL": "https://example.com", "BUSINESS_NAME": "acme"},
            business_name=None,
            headless=None,
        )
        assert config.business_name == "acme"
        assert config.headless is True

    def test_invalid_boolean(self):
        with pytest.raises(ConfigError, match="HEADLESS"):
            load_config(env={"TARGET_URL": "https://example.com", "HEADLESS": "maybe"})

    def test_invalid_timeout(self):
        with pytest.raises(ConfigError, match="NAVIGATION_TIMEOUT_MS"):
            load_config(
                env={"TARGET_URL": "https://example.com", "NAVIGATION_TIMEOUT_MS": "soon"}
            )

    def test_unknown_override(self):
        with pytest.raises(ConfigError, match="Unknown configuration option"):
            load_config(env={"TARGET_URL": "https://example.com"}, colour="blue")

    def test_reads_os_environ_without_dotenv(self, monkeypatch):
        monkeypatch.setenv("TARGET_URL", "https://env.example.com")
        monkeypatch.delenv("GOOGLE_API_KEY", raising=False)

        config = load_config(use_dotenv=False)

        assert config.target_url == "https://env.example.com"


class TestAuditConfig:
    """Tests for AuditConfig validation."""

    def test_rejects_empty_business_name(self):
        with pytest.raises(ConfigError, match="Business name"):
            AuditConfig(target_url="https://example.com", business_name="")

    def test_rejects_non_positive_timeout(self):
        with pytest.raises(ConfigError, match="timeout"):
            AuditConfig(target_url="https://example.com", navigation_timeout_ms=0)
