"""Render query values back to GQL text."""

from __future__ import annotations

import re

from query_groups.parsing.query_lexer import escape_if_keyword
from query_groups.types import (
    Difference,
    GroupReference,
    Intersection,
    ListCombination,
    Query,
    RangeLookup,
    SingleLookup,
)

_PLAIN_LABEL = re.compile(r"[a-zA-Z_][a-zA-Z0-9_]*\Z")


def _escape_string(s: str) -> str:
    """Escape a string for GQL double-quoted literals."""
    return s.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n").replace("\r", "\\r").replace("\t", "\\t")


def format_label(label: str) -> str:
    """Format a group label so that it lexes back to the same label."""
    if _PLAIN_LABEL.match(label):
        return escape_if_keyword(label)
    return f'"{_escape_string(label)}"'


def format_query(query: Query) -> str:
    """Format a query as a GQL expression.

    The output parses back to an equal query.
    """
    if isinstance(query, SingleLookup):
        return str(query.identifier)
    elif isinstance(query, RangeLookup):
        return f"{query.first}..{query.last}"
    elif isinstance(query, GroupReference):
        return f"@{format_label(query.label)}"
    elif isinstance(query, ListCombination):
        return "[" + ", ".join(format_query(q) for q in query.queries) + "]"
    elif isinstance(query, (Intersection, Difference)):
        operator = "intersect" if isinstance(query, Intersection) else "except"
        right = format_query(query.right)
        # Operators are left-associative, so a compound right side needs parens
        if isinstance(query.right, (Intersection, Difference)):
            right = f"({right})"
        return f"{format_query(query.left)} {operator} {right}"
    else:
        raise TypeError(f"Unknown query type: {type(query)}")
