"""Query construction and evaluation.

Queries are plain values. A :class:`QueryContext` builds them and evaluates
them against the identifier and group databases it was created over. The
databases are held by reference, so a group registered after a reference to
it was built is still found when that reference is invoked.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from query_groups.errors import (
    GroupCycleError,
    InvalidRangeError,
    KeyNotFoundError,
    QueryDepthError,
    UnknownGroupError,
)
from query_groups.types import (
    Difference,
    GroupReference,
    IndexSet,
    Intersection,
    ListCombination,
    Query,
    RangeLookup,
    SingleLookup,
    is_query,
    make_index_set,
)


def _check_identifier(value: object) -> int:
    # bool is an int subclass but never a meaningful identifier
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"Identifier must be an integer, got {type(value).__name__}")
    return value


def _check_query(value: object) -> Query:
    if not is_query(value):
        raise TypeError(f"Expected a query, got {type(value).__name__}")
    return value  # type: ignore[return-value]


class _Evaluator:
    """Evaluates one query tree against a pair of databases."""

    def __init__(self, identifiers: Mapping[int, int], groups: Mapping[str, Query]) -> None:
        self.identifiers = identifiers
        self.groups = groups
        # Labels currently being resolved, outermost first
        self._resolving: list[str] = []

    def evaluate(self, query: Query) -> IndexSet:
        if isinstance(query, SingleLookup):
            return make_index_set(self._resolve(query.identifier))
        elif isinstance(query, RangeLookup):
            return self._evaluate_range(query)
        elif isinstance(query, GroupReference):
            return self._evaluate_group(query)
        elif isinstance(query, ListCombination):
            result: IndexSet = set()
            for member in query.queries:
                result |= self.evaluate(member)
            return result
        elif isinstance(query, Intersection):
            return self.evaluate(query.left) & self.evaluate(query.right)
        elif isinstance(query, Difference):
            return self.evaluate(query.left) - self.evaluate(query.right)
        else:
            raise TypeError(f"Unknown query type: {type(query)}")

    def _resolve(self, identifier: int) -> int:
        if identifier not in self.identifiers:
            raise KeyNotFoundError(identifier)
        return self.identifiers[identifier]

    def _evaluate_range(self, query: RangeLookup) -> IndexSet:
        first_index = self._resolve(query.first)
        last_index = self._resolve(query.last)
        if first_index > last_index:
            raise InvalidRangeError(query.first, query.last, first_index, last_index)
        return make_index_set(first_index, last_index)

    def _evaluate_group(self, query: GroupReference) -> IndexSet:
        label = query.label
        if label in self._resolving:
            start = self._resolving.index(label)
            raise GroupCycleError(self._resolving[start:] + [label])
        if label not in self.groups:
            raise UnknownGroupError(label)

        self._resolving.append(label)
        try:
            return self.evaluate(self.groups[label])
        finally:
            self._resolving.pop()


def invoke(query: Query, identifiers: Mapping[int, int], groups: Mapping[str, Query]) -> IndexSet:
    """Evaluate ``query`` and return a fresh set of indices.

    Args:
        query: The query to evaluate
        identifiers: Identifier to index mapping
        groups: Group label to query mapping, consulted at call time

    Raises:
        KeyNotFoundError: An identifier is missing from ``identifiers``
        UnknownGroupError: A referenced label is missing from ``groups``
        InvalidRangeError: A range resolves to a first index above its last
        GroupCycleError: A group refers back to itself
        QueryDepthError: Nesting exceeds the interpreter recursion limit
    """
    try:
        return _Evaluator(identifiers, groups).evaluate(query)
    except GroupCycleError:
        raise
    except RecursionError:
        raise QueryDepthError() from None


@dataclass(frozen=True)
class BoundQuery:
    """A query paired with the context that evaluates it.

    Calling the bound query with no arguments invokes it.
    """

    query: Query
    context: QueryContext

    def __call__(self) -> IndexSet:
        return self.context.invoke(self.query)


class QueryContext:
    """Factory for queries over an identifier database and a group database.

    The context keeps references to both mappings and never writes to them.
    The caller owns the group database and may register, replace or remove
    groups at any time.
    """

    def __init__(self, identifiers: Mapping[int, int], groups: Mapping[str, Query]) -> None:
        self._identifiers = identifiers
        self._groups = groups

    @property
    def identifiers(self) -> Mapping[int, int]:
        return self._identifiers

    @property
    def groups(self) -> Mapping[str, Query]:
        return self._groups

    def single_lookup(self, identifier: int) -> SingleLookup:
        """Query for the index of a single identifier."""
        return SingleLookup(_check_identifier(identifier))

    def range_lookup(self, first: int, last: int) -> RangeLookup:
        """Query for every index between the indices of two identifiers."""
        return RangeLookup(_check_identifier(first), _check_identifier(last))

    def group_reference(self, label: str) -> GroupReference:
        """Query that defers to the group registered under ``label``."""
        if not isinstance(label, str):
            raise TypeError(f"Group label must be a string, got {type(label).__name__}")
        return GroupReference(label)

    def list_combination(self, queries: Iterable[Query]) -> ListCombination:
        """Query for the union of all ``queries``."""
        return ListCombination(tuple(_check_query(q) for q in queries))

    def intersection(self, left: Query, right: Query) -> Intersection:
        return Intersection(_check_query(left), _check_query(right))

    def difference(self, left: Query, right: Query) -> Difference:
        return Difference(_check_query(left), _check_query(right))

    def invoke(self, query: Query) -> IndexSet:
        """Evaluate ``query`` against this context's databases."""
        return invoke(query, self._identifiers, self._groups)

    def bind(self, query: Query) -> BoundQuery:
        """Wrap ``query`` as a zero-argument callable."""
        return BoundQuery(_check_query(query), self)
