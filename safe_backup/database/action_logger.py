"""Append-only action log stored as JSON lines."""

import getpass
import json
import logging
from datetime import datetime
from pathlib import Path

import psutil

logger = logging.getLogger(__name__)

OUTCOME_OK = "ok"


def current_user() -> str:
    """Username owning this process, via psutil with a getpass fallback."""
    try:
        return psutil.Process().username()
    except (psutil.NoSuchProcess, psutil.AccessDenied, KeyError):
        pass
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "unknown"


class ActionLogger:
    """Writes one JSON object per line to the action log.

    The file is opened in append mode for a single write and closed
    straight away; entries are never rewritten.
    """

    def __init__(self, log_path: str, user: str | None = None):
        self.log_path = Path(log_path)
        self.user = user or current_user()

    def log_action(self, command: str, filename: str, outcome: str) -> dict:
        """Append an entry and return it.

        Failures to write are logged, not raised, so a broken log never
        changes the outcome of the command being recorded.
        """
        entry = {
            "timestamp": datetime.now().isoformat(),
            "user": self.user,
            "command": command,
            "filename": filename,
            "outcome": outcome,
        }
        line = json.dumps(entry) + "\n"
        try:
            with open(self.log_path, "a", encoding="utf-8") as f:
                f.write(line)
        except (OSError, UnicodeError) as exc:
            logger.error("Could not write action log %s: %s", self.log_path, exc)
            return entry

        logger.debug("Logged %s %s -> %s", command, filename, outcome)
        return entry

    def get_entries(
        self,
        command: str | None = None,
        filename: str | None = None,
        limit: int | None = None,
    ) -> list[dict]:
        """Read entries back, newest first, with optional filters.

        Lines that are not valid JSON are skipped.
        """
        if not self.log_path.exists():
            return []

        entries = []
        with open(self.log_path, encoding="utf-8") as f:
            for lineno, raw in enumerate(f, start=1):
                raw = raw.strip()
                if not raw:
                    continue
                try:
                    entry = json.loads(raw)
                except json.JSONDecodeError:
                    logger.warning("Skipping malformed log line %d in %s",
                                   lineno, self.log_path)
                    continue
                if command and entry.get("command") != command:
                    continue
                if filename and entry.get("filename") != filename:
                    continue
                entries.append(entry)

        entries.reverse()
        if limit is not None:
            entries = entries[:limit]
        return entries
