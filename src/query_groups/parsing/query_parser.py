"""Parser for the GQL (Group Query Language).

Expressions parse directly into the query values of :mod:`query_groups.types`,
so a parsed expression can be handed to a :class:`QueryContext` unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import ply.yacc as yacc

from query_groups.parsing.query_lexer import QueryLexer
from query_groups.types import (
    Difference,
    GroupReference,
    Intersection,
    ListCombination,
    Query,
    RangeLookup,
    SingleLookup,
)


@dataclass
class MapStatement:
    """A MAP statement adding identifier -> index entries."""

    entries: list[tuple[int, int]] = field(default_factory=list)


@dataclass
class GroupStatement:
    """A GROUP statement registering a query under a label."""

    label: str
    query: Query


@dataclass
class EvalStatement:
    """Invoke a query and list its indices."""

    query: Query


@dataclass
class CountStatement:
    """Invoke a query and report only the number of indices."""

    query: Query


@dataclass
class ShowStatement:
    """A SHOW statement."""

    what: str  # "groups" or "identifiers"


@dataclass
class DescribeStatement:
    """A DESCRIBE statement for one group."""

    label: str


@dataclass
class DropStatement:
    """A DROP statement removing one group."""

    label: str


Statement = MapStatement | GroupStatement | EvalStatement | CountStatement | ShowStatement | DescribeStatement | DropStatement


class QueryParser:
    """Parser for GQL statements."""

    tokens = QueryLexer.tokens

    def __init__(self) -> None:
        self.lexer = QueryLexer()
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore

    def p_statement(self, p: yacc.YaccProduction) -> None:
        """statement : command SEMICOLON
                     | command"""
        p[0] = p[1]

    def p_command_map(self, p: yacc.YaccProduction) -> None:
        """command : MAP mapping_list"""
        p[0] = MapStatement(entries=p[2])

    def p_mapping_list_single(self, p: yacc.YaccProduction) -> None:
        """mapping_list : mapping"""
        p[0] = [p[1]]

    def p_mapping_list_multiple(self, p: yacc.YaccProduction) -> None:
        """mapping_list : mapping_list COMMA mapping"""
        p[0] = p[1] + [p[3]]

    def p_mapping(self, p: yacc.YaccProduction) -> None:
        """mapping : INTEGER ARROW INTEGER"""
        p[0] = (p[1], p[3])

    def p_command_group(self, p: yacc.YaccProduction) -> None:
        """command : GROUP label EQ expr"""
        p[0] = GroupStatement(label=p[2], query=p[4])

    def p_command_eval(self, p: yacc.YaccProduction) -> None:
        """command : EVAL expr
                   | expr"""
        p[0] = EvalStatement(query=p[len(p) - 1])

    def p_command_count(self, p: yacc.YaccProduction) -> None:
        """command : COUNT expr"""
        p[0] = CountStatement(query=p[2])

    def p_command_show(self, p: yacc.YaccProduction) -> None:
        """command : SHOW GROUPS
                   | SHOW IDENTIFIERS"""
        p[0] = ShowStatement(what=p[2].lower())

    def p_command_describe(self, p: yacc.YaccProduction) -> None:
        """command : DESCRIBE label"""
        p[0] = DescribeStatement(label=p[2])

    def p_command_drop(self, p: yacc.YaccProduction) -> None:
        """command : DROP label"""
        p[0] = DropStatement(label=p[2])

    def p_label(self, p: yacc.YaccProduction) -> None:
        """label : IDENTIFIER
                 | STRING"""
        p[0] = p[1]

    # --- Expressions ---

    def p_expr_intersect(self, p: yacc.YaccProduction) -> None:
        """expr : expr INTERSECT term"""
        p[0] = Intersection(p[1], p[3])

    def p_expr_except(self, p: yacc.YaccProduction) -> None:
        """expr : expr EXCEPT term"""
        p[0] = Difference(p[1], p[3])

    def p_expr_term(self, p: yacc.YaccProduction) -> None:
        """expr : term"""
        p[0] = p[1]

    def p_term_single(self, p: yacc.YaccProduction) -> None:
        """term : INTEGER"""
        p[0] = SingleLookup(p[1])

    def p_term_range(self, p: yacc.YaccProduction) -> None:
        """term : INTEGER DOTDOT INTEGER"""
        p[0] = RangeLookup(p[1], p[3])

    def p_term_group(self, p: yacc.YaccProduction) -> None:
        """term : AT label"""
        p[0] = GroupReference(p[2])

    def p_term_list_empty(self, p: yacc.YaccProduction) -> None:
        """term : LBRACKET RBRACKET"""
        p[0] = ListCombination(())

    def p_term_list(self, p: yacc.YaccProduction) -> None:
        """term : LBRACKET expr_list RBRACKET"""
        p[0] = ListCombination(tuple(p[2]))

    def p_term_paren(self, p: yacc.YaccProduction) -> None:
        """term : LPAREN expr RPAREN"""
        p[0] = p[2]

    def p_expr_list_single(self, p: yacc.YaccProduction) -> None:
        """expr_list : expr"""
        p[0] = [p[1]]

    def p_expr_list_multiple(self, p: yacc.YaccProduction) -> None:
        """expr_list : expr_list COMMA expr"""
        p[0] = p[1] + [p[3]]

    def p_error(self, p: yacc.YaccProduction) -> None:
        if p:
            raise SyntaxError(f"Syntax error at '{p.value}' (position {p.lexpos})")
        else:
            raise SyntaxError("Syntax error at end of input")

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        self.parser = yacc.yacc(module=self, start="statement", **kwargs)

    def parse(self, data: str) -> Statement:
        """Parse a single statement."""
        if self.parser is None:
            self.build(debug=False, write_tables=False)

        return self.parser.parse(data, lexer=self.lexer.lexer)

    def parse_expression(self, data: str) -> Query:
        """Parse a bare query expression such as ``[@otto, 16, 32..64]``."""
        statement = self.parse(f"eval {data}")
        return statement.query
