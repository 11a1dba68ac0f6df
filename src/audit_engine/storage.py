"""
Storage layer for audit output.

Owns the layout of a run on disk: the timestamped run directory under the
reports directory, and the text report written into it.
"""

from datetime import datetime
from pathlib import Path

from .errors import StorageError
from .report import format_timestamp


class RunStorage:
    """
    File-based storage for a single audit run.

    Layout::

        <reports_dir>/<business_name>_<YYYY-MM-DD>_<HH-MM-SS>/
            screenshot_<device>.png
            audit_report_<YYYY-MM-DD>_<HH-MM-SS>.txt
    """

    def __init__(self, reports_dir: str | Path, business_name: str):
        """
        Initialize run storage.

        Args:
            reports_dir: Parent directory for all runs
            business_name: Prefix for the run directory name
        """
        self.reports_dir = Path(reports_dir)
        self.business_name = business_name

    def run_dir_name(self, started_at: datetime) -> str:
        """Name of the run directory for a run started at the given time."""
        return f"{self.business_name}_{format_timestamp(started_at)}"

    def create_run_dir(self, started_at: datetime) -> Path:
        """
        Create the run directory (and the reports directory if needed).

        Args:
            started_at: Run start time

        Returns:
            Path to the run directory

        Raises:
            StorageError: If the directory cannot be created
        """
        run_dir = self.reports_dir / self.run_dir_name(started_at)

        try:
            run_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to create output directory {run_dir}: {str(e)}")

        return run_dir

    def write_report(self, run_dir: Path, text: str, generated_at: datetime) -> Path:
        """
        Write the report text into the run directory.

        Args:
            run_dir: Directory returned by create_run_dir
            text: Full report text
            generated_at: Timestamp used in the report file name

        Returns:
            Path to the written report

        Raises:
            StorageError: If the report cannot be written
        """
        report_path = Path(run_dir) / f"audit_report_{format_timestamp(generated_at)}.txt"

        try:
            report_path.write_text(text, encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to save report: {str(e)}")

        return report_path
