# Author: PB and Claude
# Date: 2026-10-19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ---
# test/test_paths.py

"""Tests for remote path helpers."""

import pytest

from cloud_files.paths import ancestors, basename, parent, sanitize


class TestSanitize:
    def test_space_escaped(self):
        assert sanitize("/a b/c") == "/a%20b/c"

    def test_separators_kept(self):
        assert sanitize("/a/b/c") == "/a/b/c"

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("/q?&=#", "/q%3F%26%3D%23"),
            ("/it's (1)!", "/it's%20(1)!"),
            ("/x/ä.txt", "/x/%C3%A4.txt"),
            ("/100%", "/100%25"),
            ("/a+b/c:d", "/a%2Bb/c%3Ad"),
            ("/keep-_.~", "/keep-_.~"),
        ],
    )
    def test_reserved_characters(self, raw, expected):
        assert sanitize(raw) == expected

    def test_each_segment_escaped_independently(self):
        assert sanitize("/a b/c d/e f") == "/a%20b/c%20d/e%20f"

    def test_root(self):
        assert sanitize("/") == "/"

    def test_not_idempotent(self):
        assert sanitize(sanitize("/a b")) == "/a%2520b"


class TestAncestors:
    def test_multi_segment(self):
        assert ancestors("/a/b/c") == ["/a", "/a/b", "/a/b/c"]

    def test_single_segment(self):
        assert ancestors("/a") == ["/a"]

    def test_root(self):
        assert ancestors("/") == ["/"]

    def test_escaped_segments_stay_whole(self):
        assert ancestors("/my%20docs/x%2Fy") == ["/my%20docs", "/my%20docs/x%2Fy"]


class TestParentBasename:
    def test_parent(self):
        assert parent("/a/b/old.txt") == "/a/b/"
        assert parent("/old.txt") == "/"

    def test_basename(self):
        assert basename("/a/b%20c.txt") == "b c.txt"
        assert basename("/a/folder/") == "folder"
