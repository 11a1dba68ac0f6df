"""
CLI main entry point for the Multi-Device Site Audit tool.

Thin wrapper around the core engine - no business logic here.
"""

import argparse
import logging
import sys

from audit_engine import AuditRunner, load_config
from audit_engine.devices import DEVICES, get_devices
from audit_engine.errors import AuditError, ConfigError

from .output import print_device_catalog, print_run_summary


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Every option falls back to the matching environment variable (or .env entry).

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        description="Audit a web page across a catalog of emulated devices: screenshots, "
        "SEO metadata, accessibility violations and PageSpeed Insights.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
  TARGET_URL, BUSINESS_NAME, GOOGLE_API_KEY, REPORTS_DIR, HEADLESS,
  NAVIGATION_TIMEOUT_MS, AXE_SCRIPT_PATH, LOG_LEVEL

Examples:
  %(prog)s --url https://example.com
  %(prog)s --url https://example.com --business-name acme --no-pagespeed
  %(prog)s --device "iPhone 12" --device "Desktop 1920x1080"
        """,
    )

    parser.add_argument(
        "-u",
        "--url",
        type=str,
        default=None,
        help="URL to audit (default: $TARGET_URL)",
    )

    parser.add_argument(
        "-n",
        "--business-name",
        type=str,
        default=None,
        help="Prefix for the output folder (default: $BUSINESS_NAME or 'audit')",
    )

    parser.add_argument(
        "-o",
        "--reports-dir",
        type=str,
        default=None,
        help="Directory that receives run folders (default: $REPORTS_DIR or 'reports')",
    )

    parser.add_argument(
        "--api-key",
        type=str,
        default=None,
        help="Google PageSpeed Insights API key (default: $GOOGLE_API_KEY)",
    )

    parser.add_argument(
        "--pagespeed",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Query PageSpeed Insights (default: enabled when an API key is set)",
    )

    parser.add_argument(
        "--no-image-sizes",
        action="store_true",
        help="Skip fetching each image to measure its file size",
    )

    parser.add_argument(
        "-d",
        "--device",
        dest="devices",
        action="append",
        default=None,
        metavar="NAME",
        help="Audit only this device (repeatable, default: all devices)",
    )

    parser.add_argument(
        "-t",
        "--timeout",
        type=int,
        default=None,
        help="Navigation timeout in seconds (default: 60)",
    )

    parser.add_argument(
        "--headed",
        action="store_true",
        help="Show the browser window instead of running headless",
    )

    parser.add_argument(
        "--list-devices",
        action="store_true",
        help="Print the device catalog and exit",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    return parser.parse_args(argv)


def configure_logging(level: str) -> None:
    """Configure root logging for the run."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def main(argv: list[str] | None = None) -> None:
    """
    Main CLI entry point.

    Orchestrates the entire CLI workflow:
    1. Parse arguments
    2. Load and validate configuration
    3. Run the audit
    4. Display results
    """
    args = parse_arguments(argv)

    if args.list_devices:
        print_device_catalog(DEVICES)
        return

    try:
        config = load_config(
            target_url=args.url,
            business_name=args.business_name,
            reports_dir=args.reports_dir,
            api_key=args.api_key,
            pagespeed_enabled=args.pagespeed,
            probe_images=False if args.no_image_sizes else None,
            headless=False if args.headed else None,
            navigation_timeout_ms=args.timeout * 1000 if args.timeout is not None else None,
            device_names=args.devices,
        )
        get_devices(config.device_names)
    except (ConfigError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    configure_logging("DEBUG" if args.verbose else config.log_level)

    runner = AuditRunner(config)

    print(f"Auditing {config.target_url} on {len(runner.devices)} devices...")
    if config.pagespeed_enabled:
        print("PageSpeed Insights: enabled (mobile, desktop)")

    try:
        run = runner.run()
    except AuditError as e:
        print(f"✗ Audit failed: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"✗ Audit failed: unexpected error: {e}", file=sys.stderr)
        sys.exit(1)

    print_run_summary(run)
    print(f"Comprehensive audit report saved as {run.archive_path}")


if __name__ == "__main__":
    main()
