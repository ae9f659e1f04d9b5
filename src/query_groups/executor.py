"""Statement executor for GQL statements."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from query_groups.context import QueryContext
from query_groups.errors import UnknownGroupError
from query_groups.format import format_query
from query_groups.parsing.query_parser import (
    CountStatement,
    DescribeStatement,
    DropStatement,
    EvalStatement,
    GroupStatement,
    MapStatement,
    ShowStatement,
    Statement,
)
from query_groups.types import GroupDatabase, Query


@dataclass
class QueryResult:
    """Result of a statement execution."""

    columns: list[str]
    rows: list[dict[str, Any]]
    message: str | None = None


@dataclass
class MapResult(QueryResult):
    """Result of a MAP statement."""

    mapped_count: int = 0


@dataclass
class GroupResult(QueryResult):
    """Result of a GROUP statement."""

    label: str = ""
    replaced: bool = False


@dataclass
class EvalResult(QueryResult):
    """Result of an EVAL or COUNT statement."""

    indices: set[int] = field(default_factory=set)


@dataclass
class DropResult(QueryResult):
    """Result of a DROP statement."""

    label: str = ""


class StatementExecutor:
    """Executes parsed statements against an identifier and a group database.

    The executor owns neither mapping; callers may pass their own and keep
    mutating the group database between statements.
    """

    def __init__(self, identifiers: dict[int, int] | None = None, groups: GroupDatabase | None = None) -> None:
        self.identifiers: dict[int, int] = identifiers if identifiers is not None else {}
        self.groups: GroupDatabase = groups if groups is not None else {}
        self.context = QueryContext(self.identifiers, self.groups)

    def execute(self, statement: Statement) -> QueryResult:
        """Execute a statement and return its result."""
        if isinstance(statement, MapStatement):
            return self._execute_map(statement)
        elif isinstance(statement, GroupStatement):
            return self._execute_group(statement)
        elif isinstance(statement, EvalStatement):
            return self._execute_eval(statement.query)
        elif isinstance(statement, CountStatement):
            return self._execute_count(statement.query)
        elif isinstance(statement, ShowStatement):
            return self._execute_show(statement)
        elif isinstance(statement, DescribeStatement):
            return self._execute_describe(statement)
        elif isinstance(statement, DropStatement):
            return self._execute_drop(statement)
        else:
            raise ValueError(f"Unknown statement type: {type(statement)}")

    def _execute_map(self, statement: MapStatement) -> MapResult:
        # Validate everything first so a rejected statement maps nothing
        pending: dict[int, int] = {}
        for identifier, index in statement.entries:
            existing = pending.get(identifier, self.identifiers.get(identifier))
            if existing is not None and existing != index:
                raise ValueError(f"Identifier {identifier} is already mapped to index {existing}")
            pending[identifier] = index

        added = 0
        for identifier, index in pending.items():
            if identifier not in self.identifiers:
                self.identifiers[identifier] = index
                added += 1

        noun = "identifier" if added == 1 else "identifiers"
        return MapResult(columns=[], rows=[], message=f"Mapped {added} {noun}", mapped_count=added)

    def _execute_group(self, statement: GroupStatement) -> GroupResult:
        replaced = statement.label in self.groups
        self.groups[statement.label] = statement.query
        verb = "Replaced" if replaced else "Created"
        return GroupResult(
            columns=[],
            rows=[],
            message=f"{verb} group '{statement.label}'",
            label=statement.label,
            replaced=replaced,
        )

    def _execute_eval(self, query: Query) -> EvalResult:
        indices = self.context.invoke(query)
        rows = [{"index": index} for index in sorted(indices)]
        return EvalResult(columns=["index"], rows=rows, indices=indices)

    def _execute_count(self, query: Query) -> EvalResult:
        indices = self.context.invoke(query)
        return EvalResult(columns=["count"], rows=[{"count": len(indices)}], indices=indices)

    def _execute_show(self, statement: ShowStatement) -> QueryResult:
        if statement.what == "groups":
            rows = [{"group": label, "query": format_query(self.groups[label])} for label in sorted(self.groups)]
            return QueryResult(columns=["group", "query"], rows=rows)
        rows = [{"identifier": ident, "index": self.identifiers[ident]} for ident in sorted(self.identifiers)]
        return QueryResult(columns=["identifier", "index"], rows=rows)

    def _execute_describe(self, statement: DescribeStatement) -> QueryResult:
        if statement.label not in self.groups:
            raise UnknownGroupError(statement.label)
        query = self.groups[statement.label]
        return QueryResult(
            columns=["group", "query"],
            rows=[{"group": statement.label, "query": format_query(query)}],
        )

    def _execute_drop(self, statement: DropStatement) -> DropResult:
        if statement.label not in self.groups:
            raise UnknownGroupError(statement.label)
        del self.groups[statement.label]
        return DropResult(columns=[], rows=[], message=f"Dropped group '{statement.label}'", label=statement.label)
