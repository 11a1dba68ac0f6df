"""
Run configuration.

Settings are read once at startup from the environment (and a ``.env`` file,
if present) into an explicit AuditConfig that is passed to the runner.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from dotenv import load_dotenv

from .errors import ConfigError
from .models import URLInput

DEFAULT_BUSINESS_NAME = "audit"
DEFAULT_REPORTS_DIR = "reports"
DEFAULT_NAVIGATION_TIMEOUT_MS = 60000

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class AuditConfig:
    """
    Configuration for a single audit run.

    Frozen to ensure immutability once created.
    """

    target_url: str
    business_name: str = DEFAULT_BUSINESS_NAME
    api_key: str | None = None
    reports_dir: Path = Path(DEFAULT_REPORTS_DIR)
    pagespeed_enabled: bool = False
    probe_images: bool = True
    headless: bool = True
    navigation_timeout_ms: int = DEFAULT_NAVIGATION_TIMEOUT_MS
    axe_script_path: Path | None = None
    device_names: tuple[str, ...] | None = None
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate settings."""
        try:
            URLInput(self.target_url)
        except ValueError as e:
            raise ConfigError(str(e)) from e

        if not self.business_name:
            raise ConfigError("Business name must be a non-empty string")

        if self.pagespeed_enabled and not self.api_key:
            raise ConfigError("GOOGLE_API_KEY is required when PageSpeed Insights is enabled")

        if self.navigation_timeout_ms <= 0:
            raise ConfigError(
                f"Navigation timeout must be positive: {self.navigation_timeout_ms}"
            )


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean (true/false): {value}")


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer: {value}") from e


def load_config(
    env: Mapping[str, str] | None = None,
    use_dotenv: bool = True,
    **overrides,
) -> AuditConfig:
    """
    Build an AuditConfig from environment variables.

    Recognised variables: TARGET_URL (required), BUSINESS_NAME, GOOGLE_API_KEY,
    REPORTS_DIR, HEADLESS, NAVIGATION_TIMEOUT_MS, AXE_SCRIPT_PATH, LOG_LEVEL.

    Args:
        env: Mapping to read instead of os.environ (optional)
        use_dotenv: Whether to load a .env file into os.environ first
        **overrides: Explicit values (e.g. from CLI flags); None values are ignored

    Returns:
        Validated AuditConfig

    Raises:
        ConfigError: If required settings are missing or invalid
    """
    if env is None:
        if use_dotenv:
            load_dotenv()
        env = os.environ

    overrides = {key: value for key, value in overrides.items() if value is not None}

    target_url = overrides.pop("target_url", None) or env.get("TARGET_URL", "").strip()
    if not target_url:
        raise ConfigError("TARGET_URL not specified in environment or .env file.")

    api_key = overrides.pop("api_key", None) or env.get("GOOGLE_API_KEY") or None

    settings = {
        "target_url": target_url,
        "api_key": api_key,
        "business_name": env.get("BUSINESS_NAME") or DEFAULT_BUSINESS_NAME,
        "reports_dir": Path(env.get("REPORTS_DIR") or DEFAULT_REPORTS_DIR),
        # PageSpeed runs whenever a key is available unless told otherwise
        "pagespeed_enabled": api_key is not None,
        "log_level": (env.get("LOG_LEVEL") or "INFO").upper(),
    }

    if env.get("HEADLESS"):
        settings["headless"] = _parse_bool("HEADLESS", env["HEADLESS"])
    if env.get("NAVIGATION_TIMEOUT_MS"):
        settings["navigation_timeout_ms"] = _parse_int(
            "NAVIGATION_TIMEOUT_MS", env["NAVIGATION_TIMEOUT_MS"]
        )
    if env.get("AXE_SCRIPT_PATH"):
        settings["axe_script_path"] = Path(env["AXE_SCRIPT_PATH"])

    if "reports_dir" in overrides:
        overrides["reports_dir"] = Path(overrides["reports_dir"])
    if "device_names" in overrides:
        overrides["device_names"] = tuple(overrides["device_names"])

    settings.update(overrides)

    try:
        return AuditConfig(**settings)
    except TypeError as e:
        raise ConfigError(f"Unknown configuration option: {e}") from e
