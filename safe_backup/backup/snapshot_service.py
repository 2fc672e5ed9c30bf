"""File copy primitives for backups.

Backups are written next to the original as ``<name>.<timestamp>.bak``.
Every copy goes to a hidden temporary file in the destination directory
first and is moved into place with ``os.replace``, so a failed copy never
leaves a half-written backup or a clobbered original behind.
"""

import hashlib
import logging
import os
import shutil
import tempfile
from datetime import datetime, timedelta
from pathlib import Path

from safe_backup.backup.backup_config import TIMESTAMP_UNIX
from safe_backup.backup.backup_selector import (
    format_timestamp,
    plain_name,
    timestamped_name,
)

logger = logging.getLogger(__name__)


def file_sha256(path: str) -> str | None:
    """Return hex SHA-256 digest of a file, or None if unreadable."""
    h = hashlib.sha256()
    try:
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(65536), b""):
                h.update(chunk)
        return h.hexdigest()
    except OSError:
        return None


class IntegrityError(OSError):
    """Copied bytes do not match the source."""


def atomic_copy(src: Path, dest: Path, verify: bool = False) -> str | None:
    """Copy ``src`` over ``dest`` through a temp file and atomic rename.

    With ``verify`` the temp copy is hashed against the source before it
    replaces ``dest``. Returns the SHA-256 of the copy when verified.
    Raises OSError (IntegrityError on hash mismatch); ``dest`` is left
    untouched in that case.
    """
    fd, tmp = tempfile.mkstemp(prefix=f".{dest.name}.", suffix=".tmp",
                               dir=str(dest.parent))
    os.close(fd)
    try:
        shutil.copy2(str(src), tmp)
        digest = None
        if verify:
            digest = file_sha256(tmp)
            expected = file_sha256(str(src))
            if digest is None or digest != expected:
                raise IntegrityError(f"Integrity check failed copying {src}")
        os.replace(tmp, str(dest))
    except BaseException:
        try:
            os.remove(tmp)
        except OSError:
            pass
        raise
    return digest


class SnapshotService:
    """Creates timestamped backups beside the original file."""

    def __init__(self, timestamp_style: str = TIMESTAMP_UNIX,
                 keep_plain_copy: bool = False):
        self.timestamp_style = timestamp_style
        self.keep_plain_copy = keep_plain_copy

    def _free_backup_path(self, original: Path, when: datetime) -> Path:
        # Two backups in the same second: move forward until the name is free
        step = timedelta(seconds=1)
        while True:
            stamp = format_timestamp(when, self.timestamp_style)
            dest = original.parent / timestamped_name(original.name, stamp)
            if not dest.exists():
                return dest
            when += step

    def create_snapshot(self, original: Path,
                        timestamp: datetime | None = None) -> Path:
        """Copy ``original`` to a new timestamped backup and return its path.

        Raises FileNotFoundError if the original is not a file, OSError on
        copy failure.
        """
        if not original.is_file():
            raise FileNotFoundError(f"source file does not exist: {original}")

        dest = self._free_backup_path(original, timestamp or datetime.now())
        atomic_copy(original, dest)
        logger.info("Backed up %s -> %s", original, dest.name)

        if self.keep_plain_copy:
            plain = original.parent / plain_name(original.name)
            atomic_copy(original, plain)
            logger.debug("Refreshed plain backup %s", plain.name)

        return dest
