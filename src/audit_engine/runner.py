"""
Audit runner for orchestrating the full multi-device pipeline.

Manages PageSpeed scoring, per-device inspection, report assembly and
archiving for a single URL.
"""

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Sequence

from .accessibility import AxeScanner
from .archive import ArchiveWriter
from .config import AuditConfig
from .devices import get_devices
from .insights import InsightsProvider, PageSpeedInsightsClient
from .inspector import PageInspector, PlaywrightPageInspector
from .models import STRATEGIES, AuditRun, DeviceDescriptor, DeviceOutcome, PerformanceSnapshot
from .report import ReportAssembler
from .storage import RunStorage

logger = logging.getLogger(__name__)


class AuditRunner:
    """
    Orchestrates one audit run against a static list of devices.

    Collaborators are injectable so that tests can substitute fakes for the
    browser and the remote scoring service.
    """

    def __init__(
        self,
        config: AuditConfig,
        devices: Sequence[DeviceDescriptor] | None = None,
        insights: InsightsProvider | None = None,
        inspector: PageInspector | None = None,
        storage: RunStorage | None = None,
        archiver: ArchiveWriter | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize the audit runner.

        Args:
            config: Validated run configuration
            devices: Devices to audit (defaults to the catalog, filtered by config)
            insights: Performance scoring provider (defaults to PageSpeed when enabled)
            inspector: Page inspector (defaults to Playwright)
            storage: Run storage (defaults to the configured reports directory)
            archiver: Archive writer
            clock: Source of the current time
        """
        self.config = config
        self.devices = tuple(devices) if devices is not None else get_devices(config.device_names)
        self.clock = clock

        if insights is None and config.pagespeed_enabled:
            insights = PageSpeedInsightsClient(api_key=config.api_key)
        self.insights = insights

        self.inspector = inspector or PlaywrightPageInspector(
            headless=config.headless,
            navigation_timeout_ms=config.navigation_timeout_ms,
            probe_images=config.probe_images,
            scanner=AxeScanner(script_path=config.axe_script_path),
        )
        self.storage = storage or RunStorage(config.reports_dir, config.business_name)
        self.archiver = archiver or ArchiveWriter()

    async def run_async(self) -> AuditRun:
        """
        Run the audit asynchronously.

        Returns:
            AuditRun describing everything that was produced
        """
        url = self.config.target_url
        started_at = self.clock()

        run_dir = self.storage.create_run_dir(started_at)
        logger.info("Writing audit output to %s", run_dir)

        run = AuditRun(url=url, started_at=started_at, finished_at=None, output_dir=run_dir)
        report = ReportAssembler(url, generated_at=started_at)

        # Scoring completes before any device is inspected
        run.snapshots = await self._fetch_snapshots(url)
        for snapshot in run.snapshots:
            report.append_performance(snapshot)

        async with self.inspector:
            for device in self.devices:
                outcome = await self._audit_device(device, url, run_dir)
                run.outcomes.append(outcome)
                report.append_outcome(outcome)

            run.report_path = self.storage.write_report(run_dir, report.render(), started_at)
            run.archive_path = self.archiver.archive(run_dir)

        run.finished_at = self.clock()
        logger.debug("Archived run to %s", run.archive_path)

        return run

    def run(self) -> AuditRun:
        """
        Run the audit synchronously.

        Convenience method that wraps run_async.
        """
        return asyncio.run(self.run_async())

    async def _fetch_snapshots(self, url: str) -> list[PerformanceSnapshot]:
        if self.insights is None:
            return []

        snapshots: list[PerformanceSnapshot] = []
        for strategy in STRATEGIES:
            snapshot = await self.insights.fetch_insights(url, strategy)
            if snapshot is None:
                logger.warning("No PageSpeed Insights section for %s", strategy)
                continue
            snapshots.append(snapshot)

        return snapshots

    async def _audit_device(
        self, device: DeviceDescriptor, url: str, run_dir: Path
    ) -> DeviceOutcome:
        logger.info("Auditing %s on %s", url, device.name)

        try:
            result = await self.inspector.inspect(device, url, run_dir)
        except Exception as e:
            message = str(e) or type(e).__name__
            logger.error("Error on device %s: %s", device.name, message)
            return DeviceOutcome(device=device, error=message)

        return DeviceOutcome(device=device, result=result)
