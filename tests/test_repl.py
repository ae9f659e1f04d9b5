"""Tests for the GQL REPL."""

from pathlib import Path

import pytest

from query_groups.executor import StatementExecutor
from query_groups.repl import _parse_identifier_entry, _split_statements, execute_text, main, run_file


class TestHelperFunctions:
    """Tests for REPL helper functions."""

    def test_split_statements(self):
        assert _split_statements("group a = 0; eval @a;") == ["group a = 0", "eval @a"]

    def test_split_keeps_semicolon_in_string(self):
        assert _split_statements('group "a;b" = 0; eval @"a;b"') == ['group "a;b" = 0', 'eval @"a;b"']

    def test_split_drops_comments(self):
        content = """
-- setup
map 0 -> 0; -- trailing; comment
eval 0
"""
        assert _split_statements(content) == ["map 0 -> 0", "eval 0"]

    def test_split_keeps_comment_marker_in_backticks(self):
        assert _split_statements("group `a--b` = 0; eval @`a;b`") == ["group `a--b` = 0", "eval @`a;b`"]

    def test_parse_identifier_entry(self):
        assert _parse_identifier_entry("16=1") == (16, 1)
        assert _parse_identifier_entry("0x20 = 2") == (32, 2)

    def test_parse_identifier_entry_invalid(self):
        import argparse

        with pytest.raises(argparse.ArgumentTypeError):
            _parse_identifier_entry("16")
        with pytest.raises(argparse.ArgumentTypeError):
            _parse_identifier_entry("a=b")


class TestExecuteText:
    """Tests for executing statement text."""

    def test_scenario_output(self, capsys):
        executor = StatementExecutor({0: 0, 16: 1, 32: 2, 64: 3})
        result = execute_text("group otto = 0; count 0..32; eval [@otto, @otto, 16, 32, 64];", executor)

        assert result == 0
        out = capsys.readouterr().out
        assert "Created group 'otto'" in out
        assert "(4 indices)" in out

    def test_stops_at_first_error(self, capsys):
        executor = StatementExecutor()
        result = execute_text("map 1 -> 1; eval @missing; map 2 -> 2", executor)

        assert result == 1
        assert executor.identifiers == {1: 1}
        assert "Group 'missing' not found" in capsys.readouterr().err

    def test_syntax_error(self, capsys):
        result = execute_text("group = 1", StatementExecutor())

        assert result == 1
        assert "Syntax error" in capsys.readouterr().err

    def test_verbose_echo(self, capsys):
        execute_text("map 1 -> 1", StatementExecutor(), verbose=True)

        assert ">>> map 1 -> 1" in capsys.readouterr().out


class TestRunFile:
    """Tests for file execution."""

    def test_run_file(self, tmp_path: Path, capsys):
        script = tmp_path / "parcels.gq"
        script.write_text("""
-- Identifier database
map 0 -> 0, 16 -> 1, 32 -> 2, 64 -> 3;

group otto = 0;
count 0..32;
count [@otto, @otto, 16, 32, 64];
""")

        result = run_file(script)

        assert result == 0
        out = capsys.readouterr().out
        assert "count\n-----\n3" in out
        assert "count\n-----\n4" in out

    def test_run_file_shares_executor(self, tmp_path: Path):
        script = tmp_path / "groups.gq"
        script.write_text("group otto = 0..16;")
        executor = StatementExecutor({0: 0, 16: 1})

        assert run_file(script, executor) == 0
        assert "otto" in executor.groups

    def test_run_file_empty(self, tmp_path: Path, capsys):
        script = tmp_path / "empty.gq"
        script.write_text("-- nothing here\n")

        assert run_file(script) == 1
        assert "No statements found" in capsys.readouterr().err

    def test_run_file_missing(self, tmp_path: Path, capsys):
        assert run_file(tmp_path / "absent.gq") == 1
        assert "Error reading file" in capsys.readouterr().err


class TestMain:
    """Tests for the command-line entry point."""

    def test_command_with_identifiers(self, capsys):
        result = main(["-i", "0=0", "-i", "16=1", "-i", "32=2", "-c", "count 0..32"])

        assert result == 0
        assert "3" in capsys.readouterr().out

    def test_command_missing_identifier(self, capsys):
        result = main(["-c", "eval 0"])

        assert result == 1
        assert "Identifier 0 not found" in capsys.readouterr().err

    def test_conflicting_identifiers(self, capsys):
        result = main(["-i", "1=1", "-i", "1=2", "-c", "eval 1"])

        assert result == 1
        assert "mapped twice" in capsys.readouterr().err

    def test_file(self, tmp_path: Path):
        script = tmp_path / "script.gq"
        script.write_text("group a = 1; eval @a")

        assert main(["-i", "1=10", "-f", str(script)]) == 0

    def test_file_not_found(self, tmp_path: Path, capsys):
        assert main(["-f", str(tmp_path / "nope.gq")]) == 1
        assert "File not found" in capsys.readouterr().err
