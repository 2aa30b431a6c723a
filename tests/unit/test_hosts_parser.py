"""Tests for the hosts file tokenizer.

Tests:
  - tokenize_line(): separators, comment tokens, literal '#' inside hostnames
  - parse_hosts(): duplicates collapse, comment-only input
  - read_hosts_file(): missing file, unreadable file, merged lines
"""

from __future__ import annotations

import pytest

from membership.hosts.parser import parse_hosts, read_hosts_file, tokenize_line

# ─── tokenize_line ─────────────────────────────────────────────────────────────


class TestTokenizeLine:
    def test_single_host(self) -> None:
        assert list(tokenize_line("somehost1\n")) == ["somehost1"]

    def test_multiple_hosts_on_one_line(self) -> None:
        assert list(tokenize_line("somehost4 somehost5\n")) == ["somehost4", "somehost5"]

    def test_trailing_comment_is_dropped(self) -> None:
        """'somehost3 # host3' yields only somehost3, never host3 or #host3."""
        assert list(tokenize_line("somehost3 # host3\n")) == ["somehost3"]

    def test_comment_swallows_rest_of_line(self) -> None:
        assert list(tokenize_line("a b #c d e")) == ["a", "b"]

    def test_comment_only_line(self) -> None:
        assert list(tokenize_line("#This-is-comment\n")) == []

    def test_comment_glued_to_token(self) -> None:
        assert list(tokenize_line("host1 #host2 host3")) == ["host1"]

    def test_hash_inside_hostname_is_literal(self) -> None:
        """Only a token that *starts* with '#' opens a comment."""
        assert list(tokenize_line("host#tag other")) == ["host#tag", "other"]

    def test_blank_and_whitespace_lines(self) -> None:
        assert list(tokenize_line("")) == []
        assert list(tokenize_line("     \n")) == []
        assert list(tokenize_line("\t\f\r\n")) == []

    def test_mixed_separators(self) -> None:
        assert list(tokenize_line("   somehost \t  somehost2 \f somehost3\r\n")) == [
            "somehost",
            "somehost2",
            "somehost3",
        ]

    def test_hostnames_are_not_case_folded(self) -> None:
        assert list(tokenize_line("Host.Example.COM host.example.com")) == [
            "Host.Example.COM",
            "host.example.com",
        ]

    def test_vertical_tab_is_not_a_separator(self) -> None:
        # Only space, tab, newline, form-feed and carriage return separate hosts.
        assert list(tokenize_line("a\x0bb")) == ["a\x0bb"]


# ─── parse_hosts ──────────────────────────────────────────────────────────────


class TestParseHosts:
    def test_duplicates_collapse(self) -> None:
        hosts = parse_hosts(["somehost4 # host4\n", "somehost4 somehost5\n"])
        assert hosts == frozenset({"somehost4", "somehost5"})

    def test_comment_and_blank_lines_only(self) -> None:
        assert parse_hosts(["#DFS-Hosts-excluded\n", "\n", "   \n", "# more\n"]) == frozenset()

    def test_returns_frozenset(self) -> None:
        assert isinstance(parse_hosts(["a b"]), frozenset)

    def test_size_is_distinct_non_comment_tokens(self) -> None:
        lines = [
            "#Hosts-in-DFS\n",
            "somehost1\n",
            "somehost2\n",
            "somehost3\n",
            "#This-is-comment\n",
            "somehost4 # host4\n",
            "somehost4 somehost5\n",
        ]
        hosts = parse_hosts(lines)
        assert len(hosts) == 5
        assert "host4" not in hosts


# ─── read_hosts_file ──────────────────────────────────────────────────────────


class TestReadHostsFile:
    def test_missing_file_returns_none(self, tmp_path) -> None:
        assert read_hosts_file(str(tmp_path / "absent.include")) is None

    def test_path_under_regular_file_returns_none(self, write_file, tmp_path) -> None:
        write_file("afile", "host1\n")
        assert read_hosts_file(str(tmp_path / "afile" / "absent.include")) is None

    def test_empty_file_returns_empty_set(self, write_file) -> None:
        assert read_hosts_file(write_file("empty.include")) == frozenset()

    def test_chunks_without_newline_form_one_line(self, write_file) -> None:
        """Writes with no separating newline tokenize as one merged line."""
        path = write_file(
            "spaces.include",
            "#Hosts-in-DFS\n",
            "   somehost somehost2",
            "   somehost3 # somehost4",
        )
        assert read_hosts_file(path) == frozenset({"somehost", "somehost2", "somehost3"})

    def test_tabs_and_embedded_newlines(self, write_file) -> None:
        path = write_file(
            "tabs.include",
            "#Hosts-in-DFS\n",
            "     \n",
            "   somehost \t  somehost2 \n somehost4",
            "   somehost3 \t # somehost5",
        )
        hosts = read_hosts_file(path)
        assert hosts == frozenset({"somehost", "somehost2", "somehost4", "somehost3"})

    def test_crlf_line_endings(self, write_file) -> None:
        path = write_file("crlf.include", "a # x\r\nb\r\n")
        assert read_hosts_file(path) == frozenset({"a", "b"})

    def test_directory_path_raises_oserror(self, tmp_path) -> None:
        with pytest.raises(OSError):
            read_hosts_file(str(tmp_path))

    def test_undecodable_bytes_raise(self, tmp_path) -> None:
        path = tmp_path / "binary.include"
        path.write_bytes(b"host1\n\xff\xfe\xfa\n")
        with pytest.raises(UnicodeDecodeError):
            read_hosts_file(str(path))
