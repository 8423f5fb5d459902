"""
File operation utilities for Aria Labels.
"""

import os
import shutil
import zipfile
from pathlib import Path
from typing import Optional
import tempfile

from . import constants
from .logger import get_logger

logger = get_logger(__name__)


class FileOperations:
    """Utility class for file operations."""

    @staticmethod
    def get_temp_path(prefix: str = "aria_", suffix: str = "") -> Path:
        """
        Get a temporary file path.

        Args:
            prefix: Filename prefix
            suffix: Filename suffix

        Returns:
            Path to temporary file
        """
        constants.ensure_directories()
        fd, path = tempfile.mkstemp(prefix=prefix, suffix=suffix, dir=constants.TEMP_DIR)
        os.close(fd)
        return Path(path)

    @staticmethod
    def safe_delete(file_path: Path) -> bool:
        """
        Safely delete a file.

        Args:
            file_path: Path to delete

        Returns:
            True if successful
        """
        try:
            if file_path.exists():
                file_path.unlink()
                logger.debug(f"Deleted: {file_path}")
            return True
        except Exception as e:
            logger.error(f"Delete failed: {e}")
            return False

    @staticmethod
    def move_directory(src: Path, dst: Path, overwrite: bool = True) -> bool:
        """
        Move a directory to a new location, replacing what is there.

        Args:
            src: Directory to move
            dst: Destination path (the directory itself, not its parent)
            overwrite: Whether to remove an existing destination first

        Returns:
            True if successful
        """
        if not src.is_dir():
            logger.error(f"Cannot move, not a directory: {src}")
            return False

        if src.resolve() == dst.resolve():
            return True

        try:
            if dst.exists():
                if not overwrite:
                    logger.warning(f"Destination exists, skipping: {dst}")
                    return False
                if dst.is_dir():
                    shutil.rmtree(dst)
                else:
                    dst.unlink()

            shutil.move(str(src), str(dst))
            logger.debug(f"Moved: {src} -> {dst}")
            return True
        except OSError as e:
            logger.error(f"Move failed: {e}")
            return False

    @staticmethod
    def extract_zip(archive: Path, target_dir: Path) -> Optional[Path]:
        """
        Extract a release archive.

        Release archives hold a single top-level directory; that directory
        is returned. Members that would land outside ``target_dir`` are
        rejected.

        Args:
            archive: Path to the zip archive
            target_dir: Directory to extract into

        Returns:
            Path of the extracted top-level directory, or None if failed
        """
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            root = target_dir.resolve()

            with zipfile.ZipFile(archive) as zf:
                names = zf.namelist()
                for name in names:
                    member = (root / name).resolve()
                    if member != root and root not in member.parents:
                        logger.error(f"Unsafe path in archive: {name}")
                        return None

                top_level = {name.split("/", 1)[0] for name in names if name}
                if len(top_level) != 1:
                    logger.error(
                        f"Expected one top-level directory in {archive.name}, "
                        f"found {len(top_level)}"
                    )
                    return None

                zf.extractall(target_dir)

            extracted = target_dir / top_level.pop()
            if not extracted.is_dir():
                logger.error(f"Archive root is not a directory: {extracted}")
                return None

            logger.debug(f"Extracted {archive.name} -> {extracted}")
            return extracted
        except (zipfile.BadZipFile, OSError) as e:
            logger.error(f"Extraction failed: {e}")
            return None
