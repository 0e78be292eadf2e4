#!/usr/bin/env python3
"""
Walkthrough of both tree engines on the same sample tree.

This example demonstrates:
- Loading the sample tree into each encoding
- Splice-out removal and the node-only move
- Ancestor, descendant and sibling queries
- Detecting a corrupted store with the integrity check
"""

import logging
import sys
from pathlib import Path

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from hierlib import MaterializedPathEngine, ParentPointerEngine, render_tree
from hierlib.testing import build_sample_tree


def demo_parent_pointer() -> None:
    print("=== Parent-pointer engine ===")
    engine = build_sample_tree(ParentPointerEngine())
    print(render_tree(engine))

    engine.remove(6)
    engine.move(8, 2)
    print("\nAfter remove(6) and move(8, 2):")
    print(render_tree(engine))

    print("\nsubtree(3):", [(n.node_id, d) for n, d in engine.subtree(3)])
    print("descendants_at_depth(3, 2):", [n.node_id for n in engine.descendants_at_depth(3, 2)])
    print("parent(3):", engine.parent(3))
    print("ancestors(7):", [(n.node_id, d) for n, d in engine.ancestors(7)])
    print("ancestor_at_distance(7, 2):", engine.ancestor_at_distance(7, 2).node_id)
    print("siblings(4):", [n.node_id for n in engine.siblings(4)])

    print("integrity_check():", engine.integrity_check())
    engine.insert(9, 9, 13)
    print("after insert(9, 9, 13):", engine.integrity_check())


def demo_materialized_path() -> None:
    print("\n=== Materialized-path engine ===")
    engine = build_sample_tree(MaterializedPathEngine())
    print(render_tree(engine))

    engine.remove("1/3/6")
    engine.move("1/3/8", "1/2/8")
    print("\nAfter remove('1/3/6') and move('1/3/8', '1/2/8'):")
    print(render_tree(engine))

    fmt = engine.format
    print("\ndescendants('1/3'):", [fmt(n.path) for n, _ in engine.descendants("1/3")])
    print("descendants_at_distance('1/3', 2):", [fmt(n.path) for n in engine.descendants_at_distance("1/3", 2)])
    print("parent('1/3/6'):", fmt(engine.parent("1/3/6")))
    print("ancestors('1/3/6'):", [(fmt(n.path), d) for n, d in engine.ancestors("1/3/6")])
    print("siblings('1/3/6'):", [fmt(n.path) for n in engine.siblings("1/3/6")])

    print("integrity_check():", engine.integrity_check())
    engine.push("1/100/23", 107)
    print("after push('1/100/23'):", engine.integrity_check())


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(name)s - %(levelname)s - %(message)s")
    demo_parent_pointer()
    demo_materialized_path()
