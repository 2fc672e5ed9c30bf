"""Backup candidate discovery and selection.

Backups live beside the original file:

    report.txt
    report.txt.1700000000.bak        <- unix timestamp
    report.txt.2025-02-01_14-30-00.bak  <- formatted timestamp
    report.txt.bak                   <- fixed fallback
    report.bak                       <- legacy stem fallback

Timestamped candidates always win over the fixed fallbacks. Among
timestamped candidates the newest wins; equal timestamps are broken by
file name in lexical order.
"""

import logging
import os
from dataclasses import dataclass
from datetime import datetime

from safe_backup.backup.backup_config import (
    BACKUP_SUFFIX,
    TIMESTAMP_FORMAT,
    TIMESTAMP_FORMATTED,
)

logger = logging.getLogger(__name__)

# Priority of the fixed fallbacks, lower sorts first
_PLAIN_PRIORITY = 0
_STEM_PRIORITY = 1


@dataclass(frozen=True)
class BackupCandidate:
    filename: str
    timestamp: float | None  # None for the fixed fallbacks
    fallback: bool = False


def parse_timestamp(segment: str) -> float | None:
    """Parse the timestamp segment of a backup name.

    Accepts unix seconds or TIMESTAMP_FORMAT; returns epoch seconds or None.
    """
    if segment.isascii() and segment.isdigit():
        return float(segment)
    try:
        return datetime.strptime(segment, TIMESTAMP_FORMAT).timestamp()
    except (ValueError, OverflowError, OSError):
        return None


def format_timestamp(when: datetime, style: str) -> str:
    if style == TIMESTAMP_FORMATTED:
        return when.strftime(TIMESTAMP_FORMAT)
    return str(int(when.timestamp()))


def timestamped_name(base: str, stamp: str) -> str:
    return f"{base}.{stamp}{BACKUP_SUFFIX}"


def plain_name(base: str) -> str:
    return f"{base}{BACKUP_SUFFIX}"


def stem_name(base: str) -> str | None:
    """Legacy ``<stem>.bak`` name, or None when it equals ``<base>.bak``."""
    stem, ext = os.path.splitext(base)
    if not ext or not stem:
        return None
    return f"{stem}{BACKUP_SUFFIX}"


def split_backup_name(filename: str) -> tuple[str, float] | None:
    """Split ``<base>.<timestamp>.bak`` into (base, timestamp).

    Returns None when the name does not carry a parseable timestamp.
    """
    if not filename.endswith(BACKUP_SUFFIX):
        return None
    body = filename[: -len(BACKUP_SUFFIX)]
    base, sep, segment = body.rpartition(".")
    if not sep or not base:
        return None
    ts = parse_timestamp(segment)
    if ts is None:
        return None
    return base, ts


def _timestamped(base: str, filename: str) -> BackupCandidate | None:
    prefix = base + "."
    if not (filename.startswith(prefix) and filename.endswith(BACKUP_SUFFIX)):
        return None
    segment = filename[len(prefix): -len(BACKUP_SUFFIX)]
    if not segment or "." in segment:
        return None
    ts = parse_timestamp(segment)
    if ts is None:
        logger.debug("Ignoring backup with unparsable timestamp: %s", filename)
        return None
    return BackupCandidate(filename=filename, timestamp=ts)


def list_candidates(base: str, directory_listing) -> list[BackupCandidate]:
    """Return every backup of ``base`` in the listing, best first."""
    base = os.path.basename(base)
    plain = plain_name(base)
    stem = stem_name(base)

    stamped: list[BackupCandidate] = []
    fallbacks: list[tuple[int, BackupCandidate]] = []
    for filename in directory_listing:
        if filename == plain:
            fallbacks.append(
                (_PLAIN_PRIORITY, BackupCandidate(filename, None, fallback=True))
            )
            continue
        if stem and filename == stem:
            fallbacks.append(
                (_STEM_PRIORITY, BackupCandidate(filename, None, fallback=True))
            )
            continue
        candidate = _timestamped(base, filename)
        if candidate:
            stamped.append(candidate)

    stamped.sort(key=lambda c: (-c.timestamp, c.filename))
    fallbacks.sort(key=lambda pair: pair[0])
    return stamped + [c for _, c in fallbacks]


def select_latest(base: str, directory_listing) -> BackupCandidate | None:
    """Pick the backup to restore for ``base``, or None if there is none."""
    candidates = list_candidates(base, directory_listing)
    return candidates[0] if candidates else None
