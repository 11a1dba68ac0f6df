"""
Text report assembly.

Handles all report layout - no I/O, just formatting into an append-only buffer.
"""

from datetime import datetime

from .insights import METRIC_AUDITS, METRIC_NAMES
from .models import DeviceOutcome, PageAuditResult, PerformanceSnapshot

DELIMITER = "=" * 31


def format_timestamp(moment: datetime) -> str:
    """Format a datetime as '<ISO date>_<HH-MM-SS>', used in file and folder names."""
    return moment.strftime("%Y-%m-%d_%H-%M-%S")


class ReportAssembler:
    """
    Accumulates audit results into a single human-readable text document.

    Sections are appended in call order; nothing is ever removed or rewritten.
    """

    def __init__(self, url: str, generated_at: datetime):
        self.url = url
        self.generated_at = generated_at
        self._lines: list[str] = []
        self._append(*self.header())

    def header(self) -> list[str]:
        """Title and timestamp lines."""
        return [
            f"Comprehensive Audit Report for {self.url}",
            f"Generated: {format_timestamp(self.generated_at)}",
            "",
        ]

    def append_performance(self, snapshot: PerformanceSnapshot) -> None:
        """Append the PageSpeed Insights block for one strategy."""
        label = snapshot.strategy.capitalize()

        self._append(
            f"---- PageSpeed Insights ({label}) ----",
            "",
            f"{label} Performance Score: {snapshot.score:g}",
            f"{label} Metrics:",
        )
        for key, _audit_id in METRIC_AUDITS:
            value = snapshot.metrics.get(key, "N/A")
            self._append(f"  - {METRIC_NAMES[key]} ({key}): {value}")

        self._append("", f"{label} Opportunities:")
        if snapshot.opportunities:
            for op in snapshot.opportunities:
                savings = "N/A" if op.savings_ms is None else f"{op.savings_ms:g}ms"
                self._append(f"  * {op.title}: {op.description} (Potential Savings: {savings})")
        else:
            self._append("  None")

        self._append("", f"{label} Diagnostics:")
        if snapshot.diagnostics:
            for diag in snapshot.diagnostics:
                value = "N/A" if diag.value is None else diag.value
                self._append(f"  * {diag.title}: {diag.description} (Value: {value})")
        else:
            self._append("  None")

        self._append("")

    def append_device(self, result: PageAuditResult) -> None:
        """Append the delimited block for one audited device."""
        seo = result.seo

        self._append(
            DELIMITER,
            f"Device: {result.device_name}",
            f"User-Agent: {result.user_agent}",
            f"Viewport: {result.viewport}",
            f"Load Time: {result.load_time_ms}ms",
            f"Screenshot: {result.screenshot_path}",
            "---- SEO Metadata ----",
            f"Title: {seo.title}",
            f"Description: {seo.description}",
            f"Keywords: {seo.keywords}",
            f"H1 Tag: {seo.h1}",
            f"H2 Tags: {', '.join(seo.h2)}",
            f"H3 Tags: {', '.join(seo.h3)}",
            f"Images ({len(seo.images)}):",
        )

        for image in seo.images:
            if image.size_available:
                size = f"{image.file_size} bytes"
            else:
                size = image.file_size or "not measured"
            self._append(
                f"  SRC: {image.src}, ALT: {image.alt}, Width: {image.width:g}px, "
                f"Height: {image.height:g}px, File Size: {size}"
            )

        self._append(f"Links ({len(seo.links)}):")
        for link in seo.links:
            self._append(f"  HREF: {link.href}, Text: {link.text}")

        self._append(
            "---- Accessibility Violations ----",
            f"Total Violations: {result.violation_count}",
        )
        for violation in result.violations:
            self._append(
                f"  Description: {violation.description}",
                f"  Impact: {violation.impact or 'unknown'}",
                f"  Nodes: {violation.node_count}",
                "  Elements:",
            )
            for html in violation.nodes:
                self._append(f"    - HTML: {html}")

        self._append(DELIMITER, "")

    def append_error(self, device_name: str, message: str) -> None:
        """Append the placeholder line for a device that could not be audited."""
        self._append(f"Error on device {device_name}: {message}")

    def append_outcome(self, outcome: DeviceOutcome) -> None:
        """Append a device block or an error line, depending on the outcome."""
        if outcome.success:
            self.append_device(outcome.result)
        else:
            self.append_error(outcome.device.name, outcome.error)

    def render(self) -> str:
        """Return the full report text."""
        return "\n".join(self._lines) + "\n"

    def _append(self, *lines: str) -> None:
        self._lines.extend(lines)
