"""Query values and database types for the query_groups library."""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass, field
from typing import Union

Index = int
Identifier = int
GroupLabel = str
IndexSet = set[int]

IdentifierDatabase = Mapping[Identifier, Index]


def make_index_set(first: Index, last: Index | None = None) -> IndexSet:
    """Build a fresh index set.

    With only ``first`` the set holds that single index; with ``last`` it
    holds every index of the inclusive range ``[first, last]``.
    """
    if last is None:
        return {first}
    return set(range(first, last + 1))


@dataclass(frozen=True)
class SingleLookup:
    """Resolves one identifier to its index."""

    identifier: Identifier


@dataclass(frozen=True)
class RangeLookup:
    """Resolves two identifiers and spans every index between them."""

    first: Identifier
    last: Identifier


@dataclass(frozen=True)
class GroupReference:
    """Refers to whatever query is registered under ``label`` when invoked."""

    label: GroupLabel


@dataclass(frozen=True)
class ListCombination:
    """Union of the results of every member query."""

    queries: tuple[Query, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Intersection:
    """Indices produced by both ``left`` and ``right``."""

    left: Query
    right: Query


@dataclass(frozen=True)
class Difference:
    """Indices produced by ``left`` but not by ``right``."""

    left: Query
    right: Query


Query = Union[SingleLookup, RangeLookup, GroupReference, ListCombination, Intersection, Difference]

QUERY_TYPES = (SingleLookup, RangeLookup, GroupReference, ListCombination, Intersection, Difference)

GroupDatabase = MutableMapping[GroupLabel, Query]


def is_query(value: object) -> bool:
    """Return True if ``value`` is one of the query variants."""
    return isinstance(value, QUERY_TYPES)
