"""
Accessibility scanning with axe-core.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from .errors import AccessibilityScanError
from .models import AccessibilityViolation

AXE_CDN_URL = "https://cdnjs.cloudflare.com/ajax/libs/axe-core/4.9.1/axe.min.js"

AXE_RUN_SCRIPT = """
async () => {
    if (!window.axe || !window.axe.run) {
        return { error: 'axe not loaded' };
    }
    const results = await window.axe.run(document);
    return {
        violations: results.violations.map((v) => ({
            id: v.id,
            description: v.description,
            impact: v.impact,
            nodes: v.nodes.map((n) => n.html),
        })),
    };
}
"""


class AccessibilityScanner(ABC):
    """Abstract interface for accessibility scanners."""

    @abstractmethod
    async def scan(self, page: Page) -> list[AccessibilityViolation]:
        """
        Scan the current state of a page.

        Args:
            page: Playwright Page, already navigated

        Returns:
            List of violations, in the order the scanner reports them

        Raises:
            AccessibilityScanError: If the scan cannot be performed
        """
        pass


class AxeScanner(AccessibilityScanner):
    """
    Injects axe-core into the page and runs it against the whole document.

    Loads axe from a local file when one is configured, otherwise from the CDN.
    """

    def __init__(self, script_path: Path | None = None, script_url: str = AXE_CDN_URL):
        self.script_path = script_path
        self.script_url = script_url

    async def scan(self, page: Page) -> list[AccessibilityViolation]:
        try:
            if self.script_path:
                await page.add_script_tag(path=str(self.script_path))
            else:
                await page.add_script_tag(url=self.script_url)

            result = await page.evaluate(AXE_RUN_SCRIPT)
        except PlaywrightError as e:
            raise AccessibilityScanError(f"axe-core scan failed: {e.message}") from e

        if not isinstance(result, dict) or "error" in result:
            error = result.get("error") if isinstance(result, dict) else "unexpected axe result"
            raise AccessibilityScanError(f"axe-core scan failed: {error}")

        return parse_violations(result.get("violations") or [])


def parse_violations(raw_violations: list[dict[str, Any]]) -> list[AccessibilityViolation]:
    """Convert axe violation dictionaries into AccessibilityViolation records."""
    return [
        AccessibilityViolation(
            rule_id=violation.get("id", ""),
            description=violation.get("description", ""),
            impact=violation.get("impact"),
            nodes=[str(html) for html in violation.get("nodes") or []],
        )
        for violation in raw_violations
    ]
