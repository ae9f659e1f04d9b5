"""Lexer for the GQL (Group Query Language)."""

import re

import ply.lex as lex

_ESCAPES = {"n": "\n", "r": "\r", "t": "\t"}
_ESCAPE_RE = re.compile(r"\\(.)", re.DOTALL)


def _unescape(s: str) -> str:
    """Resolve backslash escapes in a string literal body, leaving other text untouched."""
    return _ESCAPE_RE.sub(lambda m: _ESCAPES.get(m.group(1), m.group(1)), s)


class QueryLexer:
    """Lexer for tokenizing GQL statements."""

    # Reserved keywords
    reserved = {
        "map": "MAP",
        "group": "GROUP",
        "groups": "GROUPS",
        "identifiers": "IDENTIFIERS",
        "eval": "EVAL",
        "count": "COUNT",
        "show": "SHOW",
        "describe": "DESCRIBE",
        "drop": "DROP",
        "intersect": "INTERSECT",
        "except": "EXCEPT",
    }

    # Token list
    tokens = [
        "IDENTIFIER",
        "INTEGER",
        "STRING",
        "AT",
        "ARROW",
        "DOTDOT",
        "COMMA",
        "EQ",
        "LPAREN",
        "RPAREN",
        "LBRACKET",
        "RBRACKET",
        "SEMICOLON",
    ] + list(reserved.values())

    # Simple tokens
    t_AT = r"@"
    t_ARROW = r"->"
    t_DOTDOT = r"\.\."
    t_COMMA = r","
    t_EQ = r"="
    t_LPAREN = r"\("
    t_RPAREN = r"\)"
    t_LBRACKET = r"\["
    t_RBRACKET = r"\]"
    t_SEMICOLON = r";"

    t_ignore = " \t"

    def __init__(self) -> None:
        self.lexer: lex.Lexer = None  # type: ignore

    # Function tokens match in definition order: "--" must win over a negative INTEGER
    def t_COMMENT(self, t: lex.LexToken) -> None:
        r"--[^\n]*"
        pass  # Ignore comments

    def t_INTEGER(self, t: lex.LexToken) -> lex.LexToken:
        r"-?(?:0[xX][0-9a-fA-F]+|0[bB][01]+|\d+)"
        negative = t.value.startswith("-")
        digits = t.value.lstrip("-")
        if digits[:2].lower() in ("0x", "0b"):
            value = int(digits, 0)
        else:
            value = int(digits)  # int(..., 0) rejects leading zeros
        t.value = -value if negative else value
        return t

    def t_STRING(self, t: lex.LexToken) -> lex.LexToken:
        r'"([^"\\]|\\.)*"'
        # Remove quotes and handle escapes
        t.value = _unescape(t.value[1:-1])
        return t

    def t_BACKTICK_IDENTIFIER(self, t: lex.LexToken) -> lex.LexToken:
        r"`[^`]+`"
        # Strip backticks; always produces IDENTIFIER, bypassing keyword lookup
        t.value = t.value[1:-1]
        t.type = "IDENTIFIER"
        return t

    def t_IDENTIFIER(self, t: lex.LexToken) -> lex.LexToken:
        r"[a-zA-Z_][a-zA-Z0-9_]*"
        # Check if it's a reserved word (case-insensitive)
        t.type = self.reserved.get(t.value.lower(), "IDENTIFIER")
        return t

    def t_NEWLINE(self, t: lex.LexToken) -> None:
        r"\n+"
        t.lexer.lineno += len(t.value)

    def t_error(self, t: lex.LexToken) -> None:
        raise SyntaxError(f"Illegal character '{t.value[0]}' at position {t.lexpos}")

    # --- Lexer methods ---

    def build(self, **kwargs) -> None:  # type: ignore
        """Build the lexer."""
        self.lexer = lex.lex(module=self, **kwargs)

    def input(self, data: str) -> None:
        """Set the input string to tokenize."""
        self.lexer.input(data)

    def token(self) -> lex.LexToken | None:
        """Return the next token."""
        return self.lexer.token()

    def tokenize(self, data: str) -> list[lex.LexToken]:
        """Tokenize the input and return all tokens."""
        self.input(data)
        tokens = []
        while True:
            tok = self.token()
            if tok is None:
                break
            tokens.append(tok)
        return tokens


# Module-level set of reserved keywords (lowercase) for use by other modules
RESERVED_KEYWORDS: frozenset[str] = frozenset(QueryLexer.reserved.keys())


def escape_if_keyword(name: str) -> str:
    """Wrap a name in backticks if it clashes with a reserved keyword."""
    if name.lower() in RESERVED_KEYWORDS:
        return f"`{name}`"
    return name
