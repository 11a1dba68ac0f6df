"""
Page inspector implementations.

Renders the target page for one device profile and collects load time, a
screenshot, SEO signals, image sizes and accessibility violations.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from pathlib import Path

from playwright.async_api import Browser, BrowserContext, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from .accessibility import AccessibilityScanner, AxeScanner
from .config import DEFAULT_NAVIGATION_TIMEOUT_MS
from .errors import InspectionError
from .extractor import SEO_EXTRACTION_SCRIPT, SeoExtractor
from .image_probe import ImageSizeProbe
from .models import DeviceDescriptor, PageAuditResult

logger = logging.getLogger(__name__)


def screenshot_filename(device: DeviceDescriptor) -> str:
    """File name of the screenshot captured for a device."""
    return f"screenshot_{device.slug}.png"


class PageInspector(ABC):
    """
    Abstract base class for page inspectors.

    Inspectors are async context managers: resources shared across devices
    (such as a browser) live between __aenter__ and __aexit__.
    """

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def close(self) -> None:
        """Release shared resources. No-op by default."""
        pass

    @abstractmethod
    async def inspect(
        self, device: DeviceDescriptor, url: str, output_dir: Path
    ) -> PageAuditResult:
        """
        Audit a URL as seen by one device.

        Args:
            device: Device profile to emulate
            url: The URL to audit
            output_dir: Directory the screenshot is written to

        Returns:
            PageAuditResult for the device

        Raises:
            InspectionError: If navigation, extraction or scanning fails
        """
        pass


class PlaywrightPageInspector(PageInspector):
    """
    Inspects pages with a headless Chromium browser.

    One browser per run; one isolated browser context per device, always closed
    before inspect() returns.
    """

    def __init__(
        self,
        headless: bool = True,
        navigation_timeout_ms: int = DEFAULT_NAVIGATION_TIMEOUT_MS,
        probe_images: bool = True,
        scanner: AccessibilityScanner | None = None,
        extractor: SeoExtractor | None = None,
    ):
        """
        Initialize the inspector.

        Args:
            headless: Whether to run the browser in headless mode
            navigation_timeout_ms: Upper bound for page navigation
            probe_images: Whether to fetch every image to measure its byte size
            scanner: Accessibility scanner (defaults to AxeScanner)
            extractor: SEO payload normalizer (defaults to SeoExtractor)
        """
        self.headless = headless
        self.navigation_timeout_ms = navigation_timeout_ms
        self.probe_images = probe_images
        self.scanner = scanner or AxeScanner()
        self.extractor = extractor or SeoExtractor()

        self._playwright: Playwright | None = None
        self._browser: Browser | None = None

    async def __aenter__(self):
        await self.start()
        return self

    async def start(self) -> None:
        """Launch the browser session."""
        if self._browser is not None:
            return

        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(
                headless=self.headless,
                args=["--disable-setuid-sandbox"],
            )
        except Exception:
            await self._playwright.stop()
            self._playwright = None
            raise

    async def close(self) -> None:
        """Close the browser session."""
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None

    async def inspect(
        self, device: DeviceDescriptor, url: str, output_dir: Path
    ) -> PageAuditResult:
        if self._browser is None:
            raise InspectionError("Browser session not started")

        context = await self._new_context(device)

        try:
            return await self._inspect_in_context(context, device, url, output_dir)
        except PlaywrightError as e:
            raise InspectionError(e.message) from e
        finally:
            await context.close()

    async def _new_context(self, device: DeviceDescriptor) -> BrowserContext:
        viewport = device.viewport
        return await self._browser.new_context(
            viewport={"width": viewport.width, "height": viewport.height},
            device_scale_factor=viewport.device_scale_factor,
            is_mobile=viewport.is_mobile,
            has_touch=viewport.has_touch,
            user_agent=device.user_agent,
            ignore_https_errors=True,
        )

    async def _inspect_in_context(
        self,
        context: BrowserContext,
        device: DeviceDescriptor,
        url: str,
        output_dir: Path,
    ) -> PageAuditResult:
        page = await context.new_page()

        start_time = asyncio.get_event_loop().time()
        try:
            await page.goto(url, wait_until="networkidle", timeout=self.navigation_timeout_ms)
        except PlaywrightTimeoutError as e:
            raise InspectionError(f"Navigation timeout after {self.navigation_timeout_ms}ms") from e
        load_time_ms = int((asyncio.get_event_loop().time() - start_time) * 1000)

        logger.debug("Loaded %s on %s in %dms", url, device.name, load_time_ms)

        screenshot_path = Path(output_dir) / screenshot_filename(device)
        await page.screenshot(path=str(screenshot_path), full_page=True)

        payload = await page.evaluate(SEO_EXTRACTION_SCRIPT)
        seo = self.extractor.parse(payload)

        if self.probe_images:
            probe = ImageSizeProbe(user_agent=device.user_agent)
            await probe.probe_all(seo.images)

        violations = await self.scanner.scan(page)

        return PageAuditResult(
            device_name=device.name,
            user_agent=device.user_agent,
            viewport=device.viewport,
            load_time_ms=load_time_ms,
            screenshot_path=screenshot_path,
            seo=seo,
            violations=violations,
        )
