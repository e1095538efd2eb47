#!/usr/bin/env python3
"""
Example: Parse a token stream and print its rhythm trees.

Usage:
    python examples/print_rhythm_trees.py [stream-name]

This example shows:
1. Loading a named token stream from the packaged library
2. Parsing it into a ScoreModel
3. Walking each normalized tree with absolute offsets and durations
4. Reading the diagnostics the parse collected
"""

import sys

from chuk_mcp_rhythm import parse
from chuk_mcp_rhythm.streams import TokenStreamLoader


def main(name: str) -> int:
    loader = TokenStreamLoader()
    stream = loader.get_stream(name)
    if stream is None:
        available = ", ".join(s.name for s in loader.list_streams())
        print(f"No stream named {name!r}. Available: {available}")
        return 1

    score = parse(stream.tokens)
    print(
        f"{score.title or stream.name}: {len(score.measures)} measures, "
        f"{score.total_duration} whole notes"
    )

    for measure in score.measures:
        print(f"  measure {measure.number}: offset {measure.offset}, duration {measure.duration}")

    for index, root in enumerate(score.duration_nodes):
        print(f"\nTree {index} ({root.span})")
        for node in root.iter_nodes():
            indent = "  " * (node.depth + 1)
            kinds = ", ".join(c.kind for c in node.components)
            suffix = f"  [{kinds}]" if kinds else ""
            print(f"{indent}{node.beats} -> {node.duration} @ {node.offset}{suffix}")

    if score.diagnostics.issues:
        print(f"\n{score.diagnostics}")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1] if len(sys.argv) > 1 else "nested-triplet"))
