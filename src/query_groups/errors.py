"""Exceptions raised while invoking queries."""

from __future__ import annotations


class QueryError(Exception):
    """Base class for failures raised when a query is invoked."""


class KeyNotFoundError(QueryError, KeyError):
    """An identifier is not present in the identifier database."""

    def __init__(self, identifier: int) -> None:
        super().__init__(identifier)
        self.identifier = identifier

    def __str__(self) -> str:
        return f"Identifier {self.identifier} not found"


class UnknownGroupError(QueryError, KeyError):
    """A group label is not registered in the group database."""

    def __init__(self, label: str) -> None:
        super().__init__(label)
        self.label = label

    def __str__(self) -> str:
        return f"Group '{self.label}' not found"


class InvalidRangeError(QueryError, ValueError):
    """A range lookup resolved to a first index greater than its last index."""

    def __init__(self, first: int, last: int, first_index: int, last_index: int) -> None:
        super().__init__(first, last, first_index, last_index)
        self.first = first
        self.last = last
        self.first_index = first_index
        self.last_index = last_index

    def __str__(self) -> str:
        return (
            f"Invalid range {self.first}..{self.last}: "
            f"index {self.first_index} is greater than index {self.last_index}"
        )


class GroupCycleError(QueryError, RecursionError):
    """A group reference resolves back to itself."""

    def __init__(self, cycle: list[str]) -> None:
        super().__init__(cycle)
        self.cycle = cycle

    def __str__(self) -> str:
        return "Group cycle: " + " -> ".join(self.cycle)


class QueryDepthError(QueryError):
    """A query nests too deeply to evaluate."""

    def __str__(self) -> str:
        return "Query nesting exceeds the maximum evaluation depth"
