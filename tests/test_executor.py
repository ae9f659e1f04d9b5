"""Tests for the GQL statement executor."""

import pytest

from query_groups.errors import GroupCycleError, KeyNotFoundError, UnknownGroupError
from query_groups.executor import DropResult, EvalResult, GroupResult, MapResult, StatementExecutor
from query_groups.parsing.query_parser import QueryParser
from query_groups.types import SingleLookup


@pytest.fixture
def executor():
    return StatementExecutor({0: 0, 16: 1, 32: 2, 64: 3})


def run(executor, text):
    return executor.execute(QueryParser().parse(text))


class TestMap:
    """Tests for MAP statements."""

    def test_map_adds_entries(self):
        executor = StatementExecutor()
        result = run(executor, "map 0 -> 0, 16 -> 1")

        assert isinstance(result, MapResult)
        assert result.mapped_count == 2
        assert result.message == "Mapped 2 identifiers"
        assert executor.identifiers == {0: 0, 16: 1}

    def test_map_same_entry_again_is_noop(self, executor):
        result = run(executor, "map 16 -> 1")

        assert result.mapped_count == 0
        assert executor.identifiers[16] == 1

    def test_remap_rejected(self, executor):
        with pytest.raises(ValueError, match="already mapped"):
            run(executor, "map 128 -> 4, 16 -> 9")

        # Nothing from the rejected statement was applied
        assert 128 not in executor.identifiers
        assert executor.identifiers[16] == 1

    def test_conflict_within_statement(self):
        executor = StatementExecutor()
        with pytest.raises(ValueError):
            run(executor, "map 1 -> 1, 1 -> 2")
        assert executor.identifiers == {}

    def test_uses_caller_databases(self):
        identifiers = {}
        groups = {}
        executor = StatementExecutor(identifiers, groups)

        run(executor, "map 5 -> 50")
        run(executor, "group g = 5")

        assert identifiers == {5: 50}
        assert groups == {"g": SingleLookup(5)}


class TestGroups:
    """Tests for GROUP, DESCRIBE and DROP statements."""

    def test_create_and_replace(self, executor):
        created = run(executor, "group otto = 0")
        replaced = run(executor, "group otto = 64")

        assert isinstance(created, GroupResult)
        assert not created.replaced
        assert created.message == "Created group 'otto'"
        assert replaced.replaced
        assert replaced.message == "Replaced group 'otto'"

    def test_late_binding_across_statements(self, executor):
        run(executor, "group all = [@otto, 16]")
        with pytest.raises(UnknownGroupError):
            run(executor, "eval @all")

        run(executor, "group otto = 0")
        assert run(executor, "eval @all").indices == {0, 1}

        run(executor, "group otto = 64")
        assert run(executor, "eval @all").indices == {1, 3}

    def test_describe(self, executor):
        run(executor, "group otto = [0, 16..32]")
        result = run(executor, "describe otto")

        assert result.rows == [{"group": "otto", "query": "[0, 16..32]"}]

    def test_describe_unknown(self, executor):
        with pytest.raises(UnknownGroupError):
            run(executor, "describe nobody")

    def test_drop(self, executor):
        run(executor, "group otto = 0")
        result = run(executor, "drop otto")

        assert isinstance(result, DropResult)
        assert "otto" not in executor.groups

    def test_drop_unknown(self, executor):
        with pytest.raises(UnknownGroupError):
            run(executor, "drop otto")

    def test_cycle(self, executor):
        run(executor, "group a = @b")
        run(executor, "group b = [16, @a]")

        with pytest.raises(GroupCycleError):
            run(executor, "eval @a")


class TestEval:
    """Tests for EVAL and COUNT statements."""

    def test_range_count(self, executor):
        result = run(executor, "count 0..32")

        assert isinstance(result, EvalResult)
        assert result.rows == [{"count": 3}]

    def test_list_scenario(self, executor):
        run(executor, "group otto = 0")
        result = run(executor, "eval [@otto, @otto, 16, 32, 64]")

        assert result.indices == {0, 1, 2, 3}
        assert result.rows == [{"index": 0}, {"index": 1}, {"index": 2}, {"index": 3}]

    def test_missing_identifier(self, executor):
        with pytest.raises(KeyNotFoundError):
            run(executor, "eval 7")

    def test_empty_list(self, executor):
        result = run(executor, "[]")

        assert result.indices == set()
        assert result.rows == []


class TestShow:
    """Tests for SHOW statements."""

    def test_show_identifiers_sorted(self):
        executor = StatementExecutor({32: 2, 0: 0})
        result = run(executor, "show identifiers")

        assert result.columns == ["identifier", "index"]
        assert result.rows == [{"identifier": 0, "index": 0}, {"identifier": 32, "index": 2}]

    def test_show_groups(self, executor):
        run(executor, "group zed = 0..64 except 16")
        run(executor, "group alpha = @zed")
        result = run(executor, "show groups")

        assert result.rows == [
            {"group": "alpha", "query": "@zed"},
            {"group": "zed", "query": "0..64 except 16"},
        ]


class TestNonAsciiLabels:
    """Groups registered from Python under non-ASCII labels are reachable from GQL."""

    def test_eval_quoted_label(self):
        executor = StatementExecutor({0: 0}, {"müller": SingleLookup(0)})

        assert run(executor, 'eval @"müller"').indices == {0}

    def test_describe_and_drop(self):
        executor = StatementExecutor({0: 0})
        run(executor, 'group "straße" = 0')

        assert run(executor, 'describe "straße"').rows == [{"group": "straße", "query": "0"}]
        run(executor, 'drop "straße"')
        assert executor.groups == {}
