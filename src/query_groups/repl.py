"""Interactive REPL for GQL (Group Query Language)."""

from __future__ import annotations

import argparse
import readline  # noqa: F401 - enables line editing in input()
import sys
from pathlib import Path
from typing import Any

from query_groups.errors import QueryError
from query_groups.executor import DropResult, EvalResult, GroupResult, MapResult, QueryResult, StatementExecutor
from query_groups.parsing.query_parser import QueryParser


def _split_statements(content: str) -> list[str]:
    """Split content into statements on semicolons.

    Semicolons inside string literals or backtick identifiers do not end a
    statement, and neither does anything after a ``--`` comment marker.
    """
    statements = []
    current = []
    in_string = False
    in_backtick = False
    escape_next = False
    i = 0

    while i < len(content):
        ch = content[i]

        if escape_next:
            current.append(ch)
            escape_next = False
            i += 1
            continue

        if ch == '\\' and in_string:
            current.append(ch)
            escape_next = True
            i += 1
            continue

        if ch == '"' and not in_backtick:
            in_string = not in_string
            current.append(ch)
            i += 1
            continue

        # Backtick identifiers have no escapes and may contain "--" or ";"
        if ch == '`' and not in_string:
            in_backtick = not in_backtick
            current.append(ch)
            i += 1
            continue

        if in_string or in_backtick:
            current.append(ch)
            i += 1
            continue

        if content.startswith("--", i):
            # Skip the comment up to (not including) the newline
            end = content.find("\n", i)
            i = len(content) if end == -1 else end
            continue

        if ch == ';':
            stmt = ''.join(current).strip()
            if stmt:
                statements.append(stmt)
            current = []
        else:
            current.append(ch)
        i += 1

    # Handle any remaining content
    stmt = ''.join(current).strip()
    if stmt:
        statements.append(stmt)

    return statements


def _parse_identifier_entry(text: str) -> tuple[int, int]:
    """Parse an ``ID=INDEX`` command-line entry."""
    identifier, sep, index = text.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(f"Expected ID=INDEX, got '{text}'")
    try:
        return int(identifier.strip(), 0), int(index.strip(), 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected integers in ID=INDEX, got '{text}'") from None


def format_value(value: Any, max_width: int = 40) -> str:
    """Format a value for display."""
    if value is None:
        return "NULL"
    elif isinstance(value, int):
        return str(value)
    s = str(value)
    if len(s) > max_width:
        return s[:max_width - 3] + "..."
    return s


def print_result(result: QueryResult) -> None:
    """Print statement results in a formatted table."""
    if isinstance(result, (MapResult, GroupResult, DropResult)):
        if result.message:
            print(result.message)
        if not result.rows:
            return

    if not result.rows:
        print("(no results)")
        return

    # Calculate column widths
    col_widths = {}
    for col in result.columns:
        col_widths[col] = len(col)

    for row in result.rows:
        for col in result.columns:
            val = format_value(row.get(col))
            col_widths[col] = max(col_widths[col], len(val))

    # Print header
    header = " | ".join(col.ljust(col_widths[col]) for col in result.columns)
    print(header)
    print("-" * len(header))

    for row in result.rows:
        print(" | ".join(format_value(row.get(col)).ljust(col_widths[col]) for col in result.columns))

    if isinstance(result, EvalResult):
        count = len(result.indices)
        print(f"\n({count} {'index' if count == 1 else 'indices'})")
    else:
        print(f"\n({len(result.rows)} row{'s' if len(result.rows) != 1 else ''})")


def print_help() -> None:
    """Print help information."""
    print("""
GQL - Group Query Language

IDENTIFIERS:
  map 0 -> 0, 16 -> 1      Map identifiers to indices
  show identifiers         List all mapped identifiers

GROUPS:
  group otto = <expr>      Register (or replace) a named group
  show groups              List all groups with their queries
  describe otto            Show the query stored under a group
  drop otto                Remove a group

QUERIES:
  eval <expr>              Invoke a query and list its indices
  <expr>                   Same as eval
  count <expr>             Invoke a query and show only the size

EXPRESSIONS:
  16                       Index of identifier 16
  0..32                    Every index from index(0) to index(32)
  @otto                    Whatever group 'otto' holds when invoked
  @"label with spaces"     Quoted group label
  [e1, e2, ...]            Union of all listed expressions
  e1 intersect e2          Indices in both
  e1 except e2             Indices in e1 but not in e2
  ( e )                    Grouping

EXAMPLES:
  map 0 -> 0, 16 -> 1, 32 -> 2, 64 -> 3;
  group otto = 0;
  count 0..32;
  eval [@otto, @otto, 16, 32, 64];

OTHER:
  help                     Show this help
  exit, quit               Exit the REPL
  clear                    Clear the screen
  execute <file>           Execute statements from a file
  -- comment               Ignored up to end of line

Statements can span multiple lines. End with semicolon or press Enter on empty line.
""")


def execute_text(content: str, executor: StatementExecutor, verbose: bool = False) -> int:
    """Execute every statement in ``content`` in order.

    Stops at the first failing statement.

    Returns:
        0 on success, 1 on error
    """
    parser = QueryParser()

    for statement_text in _split_statements(content):
        if verbose:
            for i, line in enumerate(statement_text.split("\n")):
                prefix = ">>> " if i == 0 else "... "
                print(f"{prefix}{line}")

        try:
            statement = parser.parse(statement_text)
            result = executor.execute(statement)
            print_result(result)
        except SyntaxError as e:
            print(f"Syntax error: {e}", file=sys.stderr)
            return 1
        except (QueryError, ValueError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    return 0


def run_file(file_path: Path, executor: StatementExecutor | None = None, verbose: bool = False) -> int:
    """Execute statements from a file.

    Args:
        file_path: Path to the file containing statements
        executor: Session to run in; a fresh one is created if omitted
        verbose: If True, print each statement before executing

    Returns:
        0 on success, 1 on error
    """
    try:
        content = file_path.read_text()
    except OSError as e:
        print(f"Error reading file: {e}", file=sys.stderr)
        return 1

    if not _split_statements(content):
        print("No statements found in file", file=sys.stderr)
        return 1

    if executor is None:
        executor = StatementExecutor()
    return execute_text(content, executor, verbose)


def run_repl(executor: StatementExecutor) -> int:
    """Run the interactive REPL."""
    print("GQL REPL - Group Query Language")
    print(f"{len(executor.identifiers)} identifiers mapped.")
    print("Type 'help' for commands, 'exit' to quit.\n")

    parser = QueryParser()

    # Command history
    history_file = Path.home() / ".gq_history"
    try:
        readline.read_history_file(history_file)
    except FileNotFoundError:
        pass

    def has_balanced_brackets(text: str) -> bool:
        """Check if brackets and parentheses are balanced outside strings."""
        depth = 0
        in_string = False
        escape = False
        for char in text:
            if escape:
                escape = False
                continue
            if char == "\\":
                escape = True
                continue
            if char == '"':
                in_string = not in_string
                continue
            if in_string:
                continue
            if char in "([":
                depth += 1
            elif char in ")]":
                depth -= 1
        return depth <= 0

    try:
        while True:
            try:
                line = input("gq> ").strip()
            except EOFError:
                print()
                break

            if not line:
                continue

            # Handle special commands
            lower = line.lower().rstrip(";")
            if lower == "exit" or lower == "quit":
                break
            elif lower == "help":
                print_help()
                continue
            elif lower == "clear":
                print("\033[2J\033[H", end="")
                continue
            elif lower.startswith("execute "):
                script_path = Path(line[8:].strip().rstrip(";").strip().strip('"').strip("'"))
                if not script_path.exists():
                    print(f"Error: File not found: {script_path}")
                    print()
                    continue

                print(f"Executing {script_path}...")
                if run_file(script_path, executor, verbose=True) != 0:
                    print("Script execution failed with errors.")
                else:
                    print("Script execution completed.")
                print()
                continue

            # Collect continuation lines until the statement is terminated
            query_lines = [line]
            while not line.endswith(";") or not has_balanced_brackets("\n".join(query_lines)):
                try:
                    line = input("... ").strip()
                except EOFError:
                    break
                if not line:
                    break
                query_lines.append(line)

            query_text = "\n".join(query_lines)

            for statement_text in _split_statements(query_text):
                try:
                    statement = parser.parse(statement_text)
                    result = executor.execute(statement)
                    print_result(result)
                except SyntaxError as e:
                    print(f"Syntax error: {e}")
                except (QueryError, ValueError) as e:
                    print(f"Error: {e}")

            print()

    except KeyboardInterrupt:
        print("\nInterrupted.")
    finally:
        try:
            readline.write_history_file(history_file)
        except OSError:
            pass

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the REPL."""
    arg_parser = argparse.ArgumentParser(
        description="Interactive REPL for GQL (Group Query Language)"
    )
    arg_parser.add_argument(
        "-i", "--identifier",
        dest="identifiers",
        type=_parse_identifier_entry,
        action="append",
        default=[],
        metavar="ID=INDEX",
        help="Map an identifier to an index before running (repeatable)",
    )
    arg_parser.add_argument(
        "-c", "--command",
        type=str,
        help="Execute statements and exit",
    )
    arg_parser.add_argument(
        "-f", "--file",
        type=Path,
        help="Execute statements from a file and exit",
    )
    arg_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Print each statement before executing (for -f/--file and -c/--command)",
    )

    args = arg_parser.parse_args(argv)

    identifiers: dict[int, int] = {}
    for identifier, index in args.identifiers:
        if identifiers.get(identifier, index) != index:
            print(f"Error: Identifier {identifier} is mapped twice", file=sys.stderr)
            return 1
        identifiers[identifier] = index
    executor = StatementExecutor(identifiers)

    if args.file:
        if not args.file.exists():
            print(f"Error: File not found: {args.file}", file=sys.stderr)
            return 1
        return run_file(args.file, executor, args.verbose)

    if args.command:
        return execute_text(args.command, executor, args.verbose)

    return run_repl(executor)


if __name__ == "__main__":
    sys.exit(main())
