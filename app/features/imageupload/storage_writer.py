"""
Storage Writer Module

This module places validated image bytes under the upload root.

Features:
- On-demand directory creation
- Atomic placement (temp file + rename)
- Upload root confinement

Data Model:
- Upload root
- Sanitized relative path
- Generated filename

Security:
- Resolved target must stay inside the upload root
- No partially written file is ever visible under its final name

Dependencies:
- os and tempfile for atomic writes
- pathlib for path handling
- logging for tracking

Author: Snapped Development Team
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Union

from app.shared.errors import DirectoryCreateError, MoveFailedError

logger = logging.getLogger(__name__)

TEMP_PREFIX = ".upload-"
TEMP_SUFFIX = ".part"
# mkstemp creates 0600 files; stored images must be readable by the static file server
FILE_MODE = 0o644


class StorageWriter:
    """
    Filesystem writer confined to an upload root.

    Attributes:
        upload_root (Path): Base directory for all stored files
        file_mode (int): Permission bits given to stored files
    """

    def __init__(self, upload_root: Union[str, Path], file_mode: int = FILE_MODE):
        self.upload_root = Path(upload_root)
        self.file_mode = file_mode

    def ensure_directory(self, relative_path: str) -> Path:
        """
        Create the target directory and any missing parents.

        Args:
            relative_path (str): Sanitized path below the upload root

        Returns:
            Path: Resolved target directory

        Raises:
            DirectoryCreateError: If the directory cannot be created or
                resolves outside the upload root

        Notes:
            - An existing directory is success, so concurrent requests
              for the same new path both proceed
        """
        target_dir = self.upload_root / relative_path
        root = self.upload_root.resolve()

        # Checked before and after mkdir: a symlink under the root must not
        # lead creation or the write outside of it
        self._check_confined(target_dir.resolve(), root)
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            resolved = target_dir.resolve(strict=True)
        except OSError as e:
            logger.error(f"Could not create directory {target_dir}: {str(e)}", exc_info=True)
            raise DirectoryCreateError() from e
        self._check_confined(resolved, root)

        return resolved

    @staticmethod
    def _check_confined(resolved: Path, root: Path):
        if resolved != root and root not in resolved.parents:
            logger.error(f"Directory {resolved} lies outside upload root {root}")
            raise DirectoryCreateError()

    def write_atomic(self, target_dir: Path, filename: str, data: bytes) -> Path:
        """
        Write bytes to target_dir/filename via a temp file and rename.

        Args:
            target_dir (Path): Existing directory
            filename (str): Final file name
            data (bytes): File content

        Returns:
            Path: Final file path

        Raises:
            MoveFailedError: If writing or renaming fails; the temp file is
                removed
        """
        destination = target_dir / filename
        temp_path = None
        try:
            # Temp file lives in the target directory so the rename stays on one filesystem
            fd, temp_path = tempfile.mkstemp(prefix=TEMP_PREFIX, suffix=TEMP_SUFFIX, dir=target_dir)
            with os.fdopen(fd, "wb") as temp_file:
                temp_file.write(data)
                temp_file.flush()
                os.fsync(temp_file.fileno())
            os.chmod(temp_path, self.file_mode)
            os.replace(temp_path, destination)
        except OSError as e:
            logger.error(f"Could not place file at {destination}: {str(e)}", exc_info=True)
            if temp_path is not None:
                self._discard(temp_path)
            raise MoveFailedError() from e

        return destination

    def place(self, relative_path: str, filename: str, data: bytes) -> Path:
        """
        Store data at upload_root/relative_path/filename.

        Args:
            relative_path (str): Sanitized path below the upload root
            filename (str): Generated filename
            data (bytes): Validated file content

        Returns:
            Path: Absolute path of the stored file

        Raises:
            DirectoryCreateError: For directory failures
            MoveFailedError: For write/rename failures
        """
        target_dir = self.ensure_directory(relative_path)
        destination = self.write_atomic(target_dir, filename, data)
        logger.info(f"Stored {len(data)} bytes at {destination}")
        return destination

    @staticmethod
    def _discard(temp_path: str):
        try:
            os.unlink(temp_path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not remove temp file {temp_path}: {str(e)}")
