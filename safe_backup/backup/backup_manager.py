"""Command dispatch for backup, restore and delete.

Each command validates the filename, performs its file operation inside
the working directory, and appends exactly one entry to the action log,
whatever the outcome.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from safe_backup.backup.backup_config import DEFAULTS, TIMESTAMP_UNIX
from safe_backup.backup.errors import (
    IO_ERROR,
    PROTECTED_FILE,
    SOURCE_NOT_FOUND,
    UNKNOWN_COMMAND,
)
from safe_backup.backup.recovery_manager import RecoveryManager, RestoreResult
from safe_backup.backup.snapshot_service import SnapshotService
from safe_backup.database.action_logger import OUTCOME_OK, ActionLogger
from safe_backup.validation.filename_validator import validate

logger = logging.getLogger(__name__)

CMD_BACKUP = "backup"
CMD_RESTORE = "restore"
CMD_DELETE = "delete"
COMMANDS = (CMD_BACKUP, CMD_RESTORE, CMD_DELETE)


@dataclass
class CommandResult:
    """Outcome of one command."""
    command: str
    filename: str
    success: bool
    path: str | None = None  # backup created / file restored / file deleted
    error: str | None = None
    message: str | None = None

    @property
    def outcome(self) -> str:
        return OUTCOME_OK if self.success else self.error


class BackupManager:
    """Runs file commands against a working directory.

    Usage::

        mgr = BackupManager(workdir=".", action_logger=ActionLogger("logfile.txt"))
        mgr.backup("test.txt")
        mgr.restore("test.txt")
        mgr.delete("test.txt")
    """

    def __init__(
        self,
        action_logger: ActionLogger,
        workdir: str = ".",
        config: dict | None = None,
    ):
        settings = (config or DEFAULTS)["backup"]
        self.workdir = Path(workdir)
        self.action_logger = action_logger
        self.snapshot = SnapshotService(
            timestamp_style=settings.get("timestamp_style", TIMESTAMP_UNIX),
            keep_plain_copy=settings.get("keep_plain_copy", False),
        )
        self.recovery = RecoveryManager(
            workdir=str(self.workdir),
            verify=settings.get("verify_restore", True),
            protected=(action_logger.log_path,),
        )

    def run(self, command: str, filename: str) -> CommandResult:
        """Dispatch ``command`` by name."""
        handlers = {
            CMD_BACKUP: self.backup,
            CMD_RESTORE: self.restore,
            CMD_DELETE: self.delete,
        }
        handler = handlers.get(command.strip().lower())
        if handler is None:
            result = CommandResult(
                command=command, filename=filename, success=False,
                error=UNKNOWN_COMMAND, message=f"unknown command: {command}",
            )
            return self._finish(result)
        return handler(filename)

    def backup(self, filename: str) -> CommandResult:
        """Copy ``filename`` to a new ``<name>.<timestamp>.bak``."""
        checked = self._validate(CMD_BACKUP, filename)
        if isinstance(checked, CommandResult):
            return self._finish(checked)

        try:
            dest = self.snapshot.create_snapshot(checked)
        except FileNotFoundError:
            result = CommandResult(
                command=CMD_BACKUP, filename=filename, success=False,
                error=SOURCE_NOT_FOUND, message="source file does not exist",
            )
        except OSError as exc:
            result = CommandResult(
                command=CMD_BACKUP, filename=filename, success=False,
                error=IO_ERROR, message=str(exc),
            )
        else:
            result = CommandResult(
                command=CMD_BACKUP, filename=filename, success=True,
                path=str(dest),
            )
        return self._finish(result)

    def restore(self, filename: str) -> CommandResult:
        """Restore the newest backup over ``filename``.

        When ``filename`` is itself a ``.bak`` name, restore from that
        backup instead.
        """
        checked = self._validate(CMD_RESTORE, filename)
        if isinstance(checked, CommandResult):
            return self._finish(checked)

        if self.recovery.is_backup_name(filename):
            restored = self.recovery.restore_from_backup(filename)
        else:
            restored = self.recovery.restore_latest(filename)
        return self._finish(self._from_restore(filename, restored))

    def delete(self, filename: str) -> CommandResult:
        """Remove ``filename``."""
        checked = self._validate(CMD_DELETE, filename)
        if isinstance(checked, CommandResult):
            return self._finish(checked)

        if checked.resolve() == self.action_logger.log_path.resolve():
            result = CommandResult(
                command=CMD_DELETE, filename=filename, success=False,
                error=PROTECTED_FILE, message="refusing to delete the action log",
            )
            return self._finish(result)

        if not checked.is_file():
            result = CommandResult(
                command=CMD_DELETE, filename=filename, success=False,
                error=SOURCE_NOT_FOUND, message="file does not exist",
            )
            return self._finish(result)

        try:
            os.remove(checked)
        except OSError as exc:
            result = CommandResult(
                command=CMD_DELETE, filename=filename, success=False,
                error=IO_ERROR, message=str(exc),
            )
        else:
            logger.info("Deleted %s", checked)
            result = CommandResult(
                command=CMD_DELETE, filename=filename, success=True,
                path=str(checked),
            )
        return self._finish(result)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _validate(self, command: str, filename: str) -> Path | CommandResult:
        validation = validate(filename)
        if not validation.success:
            logger.warning("Rejected %s %r: %s", command, filename, validation.message)
            return CommandResult(
                command=command, filename=filename, success=False,
                error=validation.error, message=validation.message,
            )
        return self.workdir / validation.name

    @staticmethod
    def _from_restore(filename: str, restored: RestoreResult) -> CommandResult:
        if restored.success:
            return CommandResult(
                command=CMD_RESTORE, filename=filename, success=True,
                path=restored.original_path,
            )
        return CommandResult(
            command=CMD_RESTORE, filename=filename, success=False,
            error=restored.error, message=restored.message,
        )

    def _finish(self, result: CommandResult) -> CommandResult:
        self.action_logger.log_action(result.command, result.filename, result.outcome)
        if not result.success:
            logger.info("%s %s failed: %s", result.command, result.filename, result.error)
        return result
