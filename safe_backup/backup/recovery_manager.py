"""Restoration of files from their backups.

Supports:
- Restoring the newest backup of an original file
- Restoring from an explicitly named backup file
- Integrity verification via SHA-256 before the original is replaced
"""

import logging
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from safe_backup.backup.backup_config import BACKUP_SUFFIX
from safe_backup.backup.backup_selector import select_latest, split_backup_name
from safe_backup.backup.errors import (
    IO_ERROR,
    NO_BACKUP_FOUND,
    PROTECTED_FILE,
    SOURCE_NOT_FOUND,
)
from safe_backup.backup.snapshot_service import IntegrityError, atomic_copy

logger = logging.getLogger(__name__)


@dataclass
class RestoreResult:
    original_path: str
    backup_path: str
    success: bool
    integrity_ok: bool | None  # None when not verified
    error: str | None = None
    message: str | None = None


class RecoveryManager:
    """Copies backups back over their originals inside ``workdir``."""

    def __init__(self, workdir: str = ".", verify: bool = True,
                 protected: tuple = ()):
        self.workdir = Path(workdir)
        self.verify = verify
        # Files a restore must never overwrite, e.g. the action log
        self.protected = {Path(p).resolve() for p in protected}

    def is_backup_name(self, name: str) -> bool:
        """True when ``name`` names a ``.bak`` file to restore from."""
        return name.endswith(BACKUP_SUFFIX)

    def restore_latest(self, name: str) -> RestoreResult:
        """Restore the newest backup of ``name`` over ``name``."""
        original = self.workdir / name
        directory = original.parent
        try:
            listing = os.listdir(directory)
        except FileNotFoundError:
            listing = []
        except OSError as exc:
            return RestoreResult(
                original_path=str(original), backup_path="",
                success=False, integrity_ok=None,
                error=IO_ERROR, message=str(exc),
            )

        candidate = select_latest(original.name, listing)
        if candidate is None:
            return RestoreResult(
                original_path=str(original), backup_path="",
                success=False, integrity_ok=None,
                error=NO_BACKUP_FOUND, message="no backup file found",
            )
        return self._do_restore(directory / candidate.filename, original)

    def restore_from_backup(self, name: str) -> RestoreResult:
        """Restore from the backup file ``name`` itself.

        ``<orig>.<ts>.bak`` goes back to ``<orig>``; any other ``.bak`` file
        is copied to ``<stem>.restored.<now>`` so nothing is overwritten.
        """
        backup = self.workdir / name
        if not backup.is_file():
            return RestoreResult(
                original_path="", backup_path=str(backup),
                success=False, integrity_ok=None,
                error=SOURCE_NOT_FOUND, message="backup file not found",
            )

        parsed = split_backup_name(backup.name)
        if parsed:
            target = backup.parent / parsed[0]
        else:
            stem = backup.name[: -len(BACKUP_SUFFIX)] or "restored"
            now = int(datetime.now().timestamp())
            target = backup.parent / f"{stem}.restored.{now}"
        return self._do_restore(backup, target)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _do_restore(self, backup: Path, original: Path) -> RestoreResult:
        if original.resolve() in self.protected:
            return RestoreResult(
                original_path=str(original), backup_path=str(backup),
                success=False, integrity_ok=None,
                error=PROTECTED_FILE, message="refusing to overwrite protected file",
            )

        try:
            digest = atomic_copy(backup, original, verify=self.verify)
        except OSError as exc:
            logger.error("Failed to restore %s from %s: %s",
                         original, backup.name, exc)
            return RestoreResult(
                original_path=str(original), backup_path=str(backup),
                success=False,
                integrity_ok=False if isinstance(exc, IntegrityError) else None,
                error=IO_ERROR, message=str(exc),
            )

        logger.info("Restored %s from %s", original, backup.name)
        return RestoreResult(
            original_path=str(original), backup_path=str(backup),
            success=True, integrity_ok=(digest is not None) if self.verify else None,
        )
