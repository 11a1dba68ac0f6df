"""
Core data models for the multi-device site audit engine.

All models are pure data structures that can be consumed by the report
assembler, the CLI, and future API implementations.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Mapping

# Sentinel stored in ImageRecord.file_size when the image could not be fetched
FILE_SIZE_UNAVAILABLE = "N/A"

STRATEGIES = ("mobile", "desktop")


@dataclass(frozen=True)
class URLInput:
    """
    Wrapper for a URL input with validation.

    Frozen to ensure immutability once created.
    """

    url: str

    def __post_init__(self):
        """Validate URL format."""
        if not self.url or not isinstance(self.url, str):
            raise ValueError(f"URL must be a non-empty string: {self.url}")

        # Basic validation - http/https scheme required
        url_lower = self.url.lower().strip()
        if not url_lower.startswith(("http://", "https://")):
            raise ValueError(f"URL must start with http:// or https://: {self.url}")


@dataclass(frozen=True)
class Viewport:
    """Emulated screen geometry for a device."""

    width: int
    height: int
    device_scale_factor: float = 1
    is_mobile: bool = False
    has_touch: bool = False

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Viewport dimensions must be positive: {self.width}x{self.height}")

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass(frozen=True)
class DeviceDescriptor:
    """
    A device emulation profile.

    Defined once at import time and never mutated.
    """

    name: str
    viewport: Viewport
    user_agent: str

    @property
    def slug(self) -> str:
        """Device name with whitespace replaced by underscores, safe for file names."""
        return re.sub(r"\s", "_", self.name)


@dataclass(frozen=True)
class Opportunity:
    """A PageSpeed improvement opportunity."""

    title: str
    description: str
    savings_ms: float | None = None


@dataclass(frozen=True)
class Diagnostic:
    """A PageSpeed diagnostic entry."""

    title: str
    description: str
    value: str | float | None = None


@dataclass(frozen=True)
class PerformanceSnapshot:
    """
    PageSpeed Insights results for one strategy.

    Created once per strategy per run. Absent entirely if the API call fails.
    """

    strategy: str
    score: float
    metrics: Mapping[str, str]
    opportunities: tuple[Opportunity, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()

    def __post_init__(self):
        if self.strategy not in STRATEGIES:
            raise ValueError(f"Strategy must be one of {STRATEGIES}: {self.strategy}")
        if not 0 <= self.score <= 100:
            raise ValueError(f"Performance score must be between 0 and 100: {self.score}")


@dataclass
class ImageRecord:
    """An <img> element discovered on the page."""

    src: str
    alt: str
    width: float
    height: float
    # Bytes, FILE_SIZE_UNAVAILABLE on probe failure, None when not probed
    file_size: int | str | None = None

    @property
    def size_available(self) -> bool:
        """Check if the image byte size was measured."""
        return isinstance(self.file_size, int)


@dataclass
class LinkRecord:
    """An <a> element discovered on the page."""

    href: str
    text: str


@dataclass
class SeoData:
    """
    On-page SEO signals extracted from the rendered DOM.

    Missing elements are represented by empty strings and empty lists.
    """

    title: str = ""
    description: str = ""
    keywords: str = ""
    h1: str = ""
    h2: list[str] = field(default_factory=list)
    h3: list[str] = field(default_factory=list)
    images: list[ImageRecord] = field(default_factory=list)
    links: list[LinkRecord] = field(default_factory=list)


@dataclass
class AccessibilityViolation:
    """A single axe-core rule violation."""

    rule_id: str
    description: str
    impact: str | None
    nodes: list[str] = field(default_factory=list)  # Outer HTML of offending elements

    @property
    def node_count(self) -> int:
        """Number of elements affected by this violation."""
        return len(self.nodes)


@dataclass
class PageAuditResult:
    """
    Complete audit of the target page on a single device.

    Created once per device and consumed by the report assembler.
    """

    device_name: str
    user_agent: str
    viewport: Viewport
    load_time_ms: int
    screenshot_path: Path
    seo: SeoData
    violations: list[AccessibilityViolation] = field(default_factory=list)

    @property
    def violation_count(self) -> int:
        """Total number of accessibility violations."""
        return len(self.violations)


@dataclass
class DeviceOutcome:
    """
    Tagged result of auditing one device.

    Exactly one of ``result`` and ``error`` is set.
    """

    device: DeviceDescriptor
    result: PageAuditResult | None = None
    error: str | None = None

    def __post_init__(self):
        if (self.result is None) == (self.error is None):
            raise ValueError("DeviceOutcome requires exactly one of result or error")

    @property
    def success(self) -> bool:
        """Check if the device was audited successfully."""
        return self.result is not None


@dataclass
class AuditRun:
    """
    Complete results for one audit run.

    Represents the full output of the orchestrator.
    """

    url: str
    started_at: datetime
    finished_at: datetime | None
    output_dir: Path
    report_path: Path | None = None
    archive_path: Path | None = None
    snapshots: list[PerformanceSnapshot] = field(default_factory=list)
    outcomes: list[DeviceOutcome] = field(default_factory=list)

    @property
    def devices_audited(self) -> int:
        return len(self.outcomes)

    @property
    def devices_succeeded(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.success)

    @property
    def devices_failed(self) -> int:
        return self.devices_audited - self.devices_succeeded

    @property
    def success_rate(self) -> float:
        """Percentage of devices audited successfully."""
        if self.devices_audited == 0:
            return 0.0
        return round((self.devices_succeeded / self.devices_audited) * 100, 2)

    def get_failed_outcomes(self) -> list[DeviceOutcome]:
        """Get all device outcomes that failed."""
        return [outcome for outcome in self.outcomes if not outcome.success]
