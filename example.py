"""Example usage of the query_groups library."""

from query_groups import QueryContext

# Identifier -> index database, populated once up front
identifiers = {0: 0, 16: 1, 32: 2, 64: 3}

# Group label -> query database, filled in as we go
groups = {}

context = QueryContext(identifiers, groups)

# Register a single lookup under a name, then refer to it by that name
groups["otto"] = context.single_lookup(0)
otto = context.group_reference("otto")

range_query = context.range_lookup(0, 32)
print(len(context.invoke(range_query)))

list_query = context.bind(
    context.list_combination([
        otto,
        otto,
        context.single_lookup(16),
        context.single_lookup(32),
        context.single_lookup(64),
    ])
)
print(len(list_query()))

print("\nThe same session in the GQL REPL:")
print("  gq -i 0=0 -i 16=1 -i 32=2 -i 64=3")
print("\nExample statements:")
print("  group otto = 0;")
print("  count 0..32;")
print("  count [@otto, @otto, 16, 32, 64];")
print("  eval 0..64 except @otto;")
