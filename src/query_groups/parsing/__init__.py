"""Parsing module for the GQL statement language."""

from query_groups.parsing.query_parser import (
    CountStatement,
    DescribeStatement,
    DropStatement,
    EvalStatement,
    GroupStatement,
    MapStatement,
    QueryParser,
    ShowStatement,
    Statement,
)

__all__ = [
    "CountStatement",
    "DescribeStatement",
    "DropStatement",
    "EvalStatement",
    "GroupStatement",
    "MapStatement",
    "QueryParser",
    "ShowStatement",
    "Statement",
]
