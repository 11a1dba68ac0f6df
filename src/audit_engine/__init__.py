"""
Multi-Device Site Audit Engine.

Renders a single URL across a static catalog of device profiles, capturing
screenshots, SEO metadata and accessibility violations, optionally scores it
with PageSpeed Insights, and packages everything into a zipped text report.
Designed to be reusable by the CLI and future API implementations.
"""

# Configuration
from .config import AuditConfig, load_config
from .devices import DEVICES, get_devices
from .errors import AuditError, ConfigError

# Core models
from .models import (
    AccessibilityViolation,
    AuditRun,
    DeviceDescriptor,
    DeviceOutcome,
    ImageRecord,
    LinkRecord,
    PageAuditResult,
    PerformanceSnapshot,
    SeoData,
    Viewport,
)

# Main orchestrator
from .runner import AuditRunner

__all__ = [
    # Configuration
    "AuditConfig",
    "load_config",
    "DEVICES",
    "get_devices",
    "AuditError",
    "ConfigError",
    # Models
    "AccessibilityViolation",
    "AuditRun",
    "DeviceDescriptor",
    "DeviceOutcome",
    "ImageRecord",
    "LinkRecord",
    "PageAuditResult",
    "PerformanceSnapshot",
    "SeoData",
    "Viewport",
    # Main entry point
    "AuditRunner",
]
