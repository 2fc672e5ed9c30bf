"""Tests for backup candidate discovery and selection."""

from datetime import datetime

import pytest

from safe_backup.backup.backup_config import TIMESTAMP_FORMATTED, TIMESTAMP_UNIX
from safe_backup.backup.backup_selector import (
    BackupCandidate,
    format_timestamp,
    list_candidates,
    parse_timestamp,
    select_latest,
    split_backup_name,
    stem_name,
)


class TestParseTimestamp:
    def test_unix_seconds(self):
        assert parse_timestamp("1700000000") == 1700000000.0

    def test_formatted(self):
        expected = datetime(2025, 2, 1, 14, 30, 0).timestamp()
        assert parse_timestamp("2025-02-01_14-30-00") == expected

    @pytest.mark.parametrize("segment", ["", "abc", "12a", "-5", "1.5", "²", "2025-13-01_00-00-00"])
    def test_unparsable(self, segment):
        assert parse_timestamp(segment) is None

    def test_format_roundtrip_styles(self):
        when = datetime(2025, 2, 1, 14, 30, 0)
        assert format_timestamp(when, TIMESTAMP_FORMATTED) == "2025-02-01_14-30-00"
        assert format_timestamp(when, TIMESTAMP_UNIX) == str(int(when.timestamp()))


class TestSelectLatest:
    def test_newest_timestamp_wins(self):
        listing = ["test.txt.100.bak", "test.txt.200.bak", "test.bak"]
        chosen = select_latest("test.txt", listing)
        assert chosen == BackupCandidate("test.txt.200.bak", 200.0)

    def test_no_candidates(self):
        assert select_latest("test.txt", []) is None
        assert select_latest("test.txt", ["other.txt.100.bak", "test.txt", "logfile.txt"]) is None

    def test_plain_fallback_only_when_no_timestamped(self):
        chosen = select_latest("test.txt", ["test.txt.bak", "test.txt"])
        assert chosen.filename == "test.txt.bak"
        assert chosen.fallback
        assert chosen.timestamp is None

    def test_plain_loses_to_timestamped(self):
        chosen = select_latest("test.txt", ["test.txt.bak", "test.txt.5.bak"])
        assert chosen.filename == "test.txt.5.bak"

    def test_legacy_stem_fallback(self):
        assert select_latest("test.txt", ["test.bak"]).filename == "test.bak"

    def test_plain_preferred_over_stem(self):
        chosen = select_latest("test.txt", ["test.bak", "test.txt.bak"])
        assert chosen.filename == "test.txt.bak"

    def test_unparsable_timestamps_ignored(self):
        listing = ["test.txt.abc.bak", "test.txt.old.100.bak", "test.txt.50.bak"]
        assert select_latest("test.txt", listing).filename == "test.txt.50.bak"

    def test_only_unparsable_gives_fallback_or_none(self):
        assert select_latest("test.txt", ["test.txt.abc.bak"]) is None
        chosen = select_latest("test.txt", ["test.txt.abc.bak", "test.bak"])
        assert chosen.filename == "test.bak"

    def test_other_base_not_matched(self):
        # "test" must not pick up backups of "test.txt"
        assert select_latest("test", ["test.txt.100.bak"]) is None

    def test_mixed_formats_compare_by_time(self):
        older = "test.txt.2001-01-01_00-00-00.bak"
        newer = f"test.txt.{int(datetime(2030, 1, 1).timestamp())}.bak"
        assert select_latest("test.txt", [newer, older]).filename == newer
        assert select_latest("test.txt", [older, newer]).filename == newer

    def test_tie_broken_lexically(self):
        listing = ["test.txt.100.bak", "test.txt.0100.bak"]
        assert select_latest("test.txt", listing).filename == "test.txt.0100.bak"
        assert select_latest("test.txt", list(reversed(listing))).filename == "test.txt.0100.bak"

    def test_base_with_directory_uses_final_component(self):
        assert select_latest("docs/test.txt", ["test.txt.7.bak"]).filename == "test.txt.7.bak"


class TestListCandidates:
    def test_order(self):
        listing = ["test.bak", "test.txt.1.bak", "test.txt.bak", "test.txt.3.bak", "x"]
        names = [c.filename for c in list_candidates("test.txt", listing)]
        assert names == ["test.txt.3.bak", "test.txt.1.bak", "test.txt.bak", "test.bak"]


class TestNames:
    def test_stem_name(self):
        assert stem_name("test.txt") == "test.bak"
        assert stem_name("noext") is None
        assert stem_name(".bashrc") is None

    def test_split_backup_name(self):
        assert split_backup_name("test.txt.100.bak") == ("test.txt", 100.0)
        assert split_backup_name("test.txt.bak") is None
        assert split_backup_name("test.txt") is None
        assert split_backup_name(".100.bak") is None
