"""
Zip packaging of a run directory.
"""

import logging
import zipfile
from pathlib import Path

from .errors import ArchiveError

logger = logging.getLogger(__name__)


class ArchiveWriter:
    """
    Packages a directory into a sibling ``<dir>.zip``.

    Entries are stored relative to the directory itself, so extracting the
    archive yields the files directly, with no parent folder.
    """

    def __init__(self, compresslevel: int = 9):
        self.compresslevel = compresslevel

    def archive(self, source_dir: str | Path) -> Path:
        """
        Create ``<source_dir>.zip`` containing every file under source_dir.

        Returns once the archive is fully written and closed.

        Args:
            source_dir: Directory to package

        Returns:
            Path to the archive

        Raises:
            ArchiveError: If source_dir is missing or the archive cannot be written
        """
        source = Path(source_dir)
        if not source.is_dir():
            raise ArchiveError(f"Cannot archive missing directory: {source}")

        archive_path = source.with_name(f"{source.name}.zip")

        try:
            with zipfile.ZipFile(
                archive_path,
                "w",
                compression=zipfile.ZIP_DEFLATED,
                compresslevel=self.compresslevel,
            ) as zf:
                for path in sorted(source.rglob("*")):
                    if path.is_file():
                        zf.write(path, arcname=path.relative_to(source).as_posix())
        except OSError as e:
            raise ArchiveError(f"Failed to write archive {archive_path}: {str(e)}")

        logger.debug("Wrote archive %s (%d bytes)", archive_path, archive_path.stat().st_size)
        return archive_path
