"""
Terminal output formatter for CLI.

Handles all display logic - no business logic, just presentation.
"""

from typing import Sequence

from audit_engine.models import AuditRun, DeviceDescriptor, DeviceOutcome


def print_device_catalog(devices: Sequence[DeviceDescriptor]) -> None:
    """
    Print the device catalog, one device per line.

    Args:
        devices: Devices in catalog order
    """
    for device in devices:
        kind = "mobile" if device.viewport.is_mobile else "desktop"
        print(f"{device.name:<26} {str(device.viewport):>10}  {kind}")


def print_run_summary(run: AuditRun) -> None:
    """
    Print a human-readable summary of an audit run to terminal.

    Shows overall statistics, per-device load times and failed devices.

    Args:
        run: AuditRun returned by the runner
    """
    print("\n" + "=" * 80)
    print("MULTI-DEVICE AUDIT SUMMARY")
    print("=" * 80)
    print(f"\nURL:               {run.url}")
    print(f"Devices Audited:   {run.devices_audited}")
    print(f"Devices Succeeded: {run.devices_succeeded}")
    print(f"Devices Failed:    {run.devices_failed}")
    print(f"Success Rate:      {run.success_rate}%")

    if run.finished_at:
        duration = (run.finished_at - run.started_at).total_seconds()
        print(f"Duration:          {duration:.1f} seconds")

    if run.snapshots:
        print(f"\n{'=' * 80}")
        print("PageSpeed Insights")
        print(f"{'=' * 80}\n")
        for snapshot in run.snapshots:
            print(f"  {snapshot.strategy.capitalize():<8} score: {snapshot.score:g}")

    print(f"\n{'=' * 80}")
    print("Devices")
    print(f"{'=' * 80}\n")

    for i, outcome in enumerate(run.outcomes, 1):
        _print_outcome(i, outcome)

    failed_outcomes = run.get_failed_outcomes()
    if failed_outcomes:
        print(f"\n{'=' * 80}")
        print(f"FAILED DEVICES ({len(failed_outcomes)})")
        print(f"{'=' * 80}\n")

        for i, outcome in enumerate(failed_outcomes, 1):
            print(f"[{i}] {outcome.device.name}")
            print(f"    • {outcome.error}")

    print(f"\nReport:  {run.report_path}")
    print(f"Archive: {run.archive_path}\n")


def _print_outcome(index: int, outcome: DeviceOutcome) -> None:
    """
    Print a one-line status for a device.

    Args:
        index: 1-based position in the run
        outcome: DeviceOutcome to print
    """
    if not outcome.success:
        print(f"[{index}] ✗ {outcome.device.name}")
        return

    result = outcome.result
    print(
        f"[{index}] ✓ {result.device_name}: {result.load_time_ms}ms, "
        f"{len(result.seo.images)} images, {result.violation_count} accessibility violations"
    )
