"""Tests for batch splitting."""

from __future__ import annotations

from redis_console.services.splitter import split_commands


class TestSplitCommands:
    def test_comment_dropped(self):
        assert split_commands("GET foo\n# comment\nDBSIZE") == ["GET foo", "DBSIZE"]

    def test_slash_comment_dropped(self):
        assert split_commands("// setup\nSET a 1") == ["SET a 1"]

    def test_indented_comment_dropped(self):
        assert split_commands("   # note\n\t// other\nPING") == ["PING"]

    def test_lines_trimmed(self):
        assert split_commands("  GET foo  \n\tDBSIZE\t") == ["GET foo", "DBSIZE"]

    def test_whitespace_only_lines_dropped(self):
        assert split_commands("PING\n   \n\t\nPING") == ["PING", "PING"]

    def test_duplicates_kept_in_order(self):
        assert split_commands("INCR n\nINCR n\nGET n") == ["INCR n", "INCR n", "GET n"]

    def test_crlf_line_endings(self):
        assert split_commands("SET a 1\r\nGET a\r\n") == ["SET a 1", "GET a"]

    def test_only_blank_and_comments(self):
        assert split_commands("\n# one\n  // two\n   \n") == []

    def test_empty_string(self):
        assert split_commands("") == []

    def test_hash_inside_command_kept(self):
        assert split_commands('SET tag "#1"') == ['SET tag "#1"']
