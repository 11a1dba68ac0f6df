"""
Unit tests for the audit runner.

The browser and the PageSpeed service are replaced with in-memory fakes.
"""

import logging
import zipfile
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from audit_engine.config import AuditConfig
from audit_engine.errors import InspectionError
from audit_engine.insights import InsightsProvider
from audit_engine.inspector import PageInspector, screenshot_filename
from audit_engine.models import (
    DeviceDescriptor,
    PageAuditResult,
    PerformanceSnapshot,
    SeoData,
    Viewport,
)
from audit_engine.runner import AuditRunner

DEVICE_A = DeviceDescriptor("DeviceA", Viewport(400, 800, 2, True, True), "AgentA/1.0")
DEVICE_B = DeviceDescriptor("DeviceB", Viewport(1920, 1080), "AgentB/1.0")
DEVICE_C = DeviceDescriptor("Device C", Viewport(1280, 1024), "AgentC/1.0")


class FakeInspector(PageInspector):
    """Writes a fake screenshot and returns canned results."""

    def __init__(self, failures: dict[str, Exception] | None = None):
        self.failures = failures or {}
        self.calls: list[str] = []
        self.active = False
        self.max_active = 0
        self.entered = 0
        self.closed = 0

    async def __aenter__(self):
        self.entered += 1
        return self

    async def close(self) -> None:
        self.closed += 1

    async def inspect(self, device, url, output_dir) -> PageAuditResult:
        assert not self.active, "devices must be inspected one at a time"
        self.active = True
        self.calls.append(device.name)
        try:
            if device.name in self.failures:
                raise self.failures[device.name]

            screenshot_path = Path(output_dir) / screenshot_filename(device)
            screenshot_path.write_bytes(b"\x89PNG fake")
            return PageAuditResult(
                device_name=device.name,
                user_agent=device.user_agent,
                viewport=device.viewport,
                load_time_ms=100 + len(self.calls),
                screenshot_path=screenshot_path,
                seo=SeoData(title="Fake", h1="Hello"),
            )
        finally:
            self.active = False


class FakeInsights(InsightsProvider):
    def __init__(self, fail: tuple[str, ...] = ()):
        self.fail = fail
        self.calls: list[str] = []

    async def fetch_insights(self, url, strategy):
        self.calls.append(strategy)
        if strategy in self.fail:
            return None
        return PerformanceSnapshot(strategy=strategy, score=75.0, metrics={"FCP": "1.0 s"})


class StepClock:
    """Deterministic clock advancing one second per call."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(seconds=1)
        return current


def make_runner(tmp_path, devices=(DEVICE_A, DEVICE_B), inspector=None, insights=None, **config):
    config = AuditConfig(
        target_url="https://example.com",
        business_name="acme",
        reports_dir=tmp_path / "reports",
        **config,
    )
    return AuditRunner(
        config,
        devices=devices,
        insights=insights,
        inspector=inspector or FakeInspector(),
        clock=StepClock(datetime(2024, 3, 5, 9, 7, 2)),
    )


class TestAuditRunner:
    """Tests for AuditRunner class."""

    @pytest.mark.asyncio
    async def test_run_produces_directory_report_and_archive(self, tmp_path):
        runner = make_runner(tmp_path)

        run = await runner.run_async()

        assert run.output_dir == tmp_path / "reports" / "acme_2024-03-05_09-07-02"
        assert run.output_dir.is_dir()
        assert run.report_path == run.output_dir / "audit_report_2024-03-05_09-07-02.txt"
        assert run.report_path.exists()
        assert run.archive_path == tmp_path / "reports" / "acme_2024-03-05_09-07-02.zip"
        assert run.archive_path.stat().st_size > 0
        assert run.finished_at > run.started_at

    @pytest.mark.asyncio
    async def test_final_message_is_left_to_the_caller(self, tmp_path, caplog):
        runner = make_runner(tmp_path)

        with caplog.at_level(logging.INFO):
            await runner.run_async()

        assert "Comprehensive audit report saved as" not in caplog.text

    @pytest.mark.asyncio
    async def test_one_section_per_device_in_catalog_order(self, tmp_path):
        inspector = FakeInspector()
        runner = make_runner(tmp_path, devices=(DEVICE_A, DEVICE_B, DEVICE_C), inspector=inspector)

        run = await runner.run_async()
        text = run.report_path.read_text(encoding="utf-8")

        assert inspector.calls == ["DeviceA", "DeviceB", "Device C"]
        assert [o.device.name for o in run.outcomes] == ["DeviceA", "DeviceB", "Device C"]
        assert text.count("Device: ") == 3
        assert text.index("Device: DeviceA") < text.index("Device: DeviceB") < text.index(
            "Device: Device C"
        )
        assert (run.output_dir / "screenshot_Device_C.png").exists()

    @pytest.mark.asyncio
    async def test_device_failure_is_contained(self, tmp_path):
        inspector = FakeInspector(failures={"DeviceA": InspectionError("net::ERR_NAME_NOT_RESOLVED")})
        runner = make_runner(tmp_path, inspector=inspector)

        run = await runner.run_async()
        text = run.report_path.read_text(encoding="utf-8")

        assert inspector.calls == ["DeviceA", "DeviceB"]
        assert "Error on device DeviceA: net::ERR_NAME_NOT_RESOLVED" in text
        assert "Device: DeviceB" in text
        assert run.devices_failed == 1
        assert run.devices_succeeded == 1
        assert run.archive_path.exists()

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_contained(self, tmp_path):
        inspector = FakeInspector(failures={"DeviceB": RuntimeError()})
        runner = make_runner(tmp_path, inspector=inspector)

        run = await runner.run_async()
        text = run.report_path.read_text(encoding="utf-8")

        # Exceptions without a message are reported by type name
        assert "Error on device DeviceB: RuntimeError" in text

    @pytest.mark.asyncio
    async def test_inspector_session_is_released(self, tmp_path):
        inspector = FakeInspector(failures={"DeviceA": InspectionError("boom")})
        runner = make_runner(tmp_path, inspector=inspector)

        await runner.run_async()

        assert inspector.entered == 1
        assert inspector.closed == 1

    @pytest.mark.asyncio
    async def test_performance_sections_come_first(self, tmp_path):
        insights = FakeInsights()
        runner = make_runner(tmp_path, insights=insights)

        run = await runner.run_async()
        text = run.report_path.read_text(encoding="utf-8")

        assert insights.calls == ["mobile", "desktop"]
        assert [s.strategy for s in run.snapshots] == ["mobile", "desktop"]
        assert text.index("(Mobile)") < text.index("(Desktop)") < text.index("Device: DeviceA")

    @pytest.mark.asyncio
    async def test_failed_strategy_is_omitted(self, tmp_path):
        runner = make_runner(tmp_path, insights=FakeInsights(fail=("mobile",)))

        run = await runner.run_async()
        text = run.report_path.read_text(encoding="utf-8")

        assert "(Mobile)" not in text
        assert "(Desktop)" in text
        assert text.count("Device: ") == 2
        assert run.archive_path.exists()

    @pytest.mark.asyncio
    async def test_no_insights_without_provider(self, tmp_path):
        runner = make_runner(tmp_path)

        run = await runner.run_async()

        assert runner.insights is None
        assert run.snapshots == []
        assert "PageSpeed" not in run.report_path.read_text(encoding="utf-8")

    @pytest.mark.asyncio
    async def test_archive_matches_output_directory(self, tmp_path):
        runner = make_runner(tmp_path)

        run = await runner.run_async()

        with zipfile.ZipFile(run.archive_path) as zf:
            names = sorted(zf.namelist())

        assert names == sorted(p.name for p in run.output_dir.iterdir())
        assert names == [
            "audit_report_2024-03-05_09-07-02.txt",
            "screenshot_DeviceA.png",
            "screenshot_DeviceB.png",
        ]

    def test_default_devices_come_from_config(self, tmp_path):
        config = AuditConfig(
            target_url="https://example.com",
            reports_dir=tmp_path,
            device_names=("Pixel 5", "iPhone 12"),
        )
        runner = AuditRunner(config, inspector=FakeInspector())

        assert [d.name for d in runner.devices] == ["iPhone 12", "Pixel 5"]

    def test_default_insights_when_enabled(self, tmp_path):
        config = AuditConfig(
            target_url="https://example.com",
            reports_dir=tmp_path,
            api_key="secret",
            pagespeed_enabled=True,
        )
        runner = AuditRunner(config, inspector=FakeInspector())

        assert runner.insights is not None
        assert runner.insights.api_key == "secret"

    def test_sync_run(self, tmp_path):
        run = make_runner(tmp_path).run()
        assert run.devices_succeeded == 2
