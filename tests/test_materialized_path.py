"""Unit tests for the materialized-path engine.

Covers path handling, prefix-based descendants, key rewriting on removal,
both move policies and transactional rollback of failed rewrites.
"""

import sys
import unittest
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from hierlib import (
    AmbiguousRootRemoval,
    CycleDetected,
    DuplicateIdentity,
    EngineConfig,
    InvalidPathError,
    MaterializedPathEngine,
    MovePolicy,
    NodeNotFound,
    PathNode,
)
from hierlib.testing import build_sample_tree


def paths_of(items):
    """Textual paths of nodes or (node, distance) pairs, as a set."""
    result = set()
    for item in items:
        node = item[0] if isinstance(item, tuple) else item
        result.add("/".join(node.path))
    return result


class TestSampleWalkthrough(unittest.TestCase):
    """The documented walkthrough: remove 1/3/6, move 1/3/8, then query."""

    def setUp(self):
        self.engine = build_sample_tree(MaterializedPathEngine())

    def test_keys_are_segment_tuples(self):
        self.assertIn(("1", "3", "5", "7"), self.engine)
        self.assertIn("1/3/5/7", self.engine)
        self.assertEqual(self.engine.get("1/3/5/7"), PathNode(("1", "3", "5", "7"), 55))

    def test_remove_rewrites_descendants(self):
        rewritten = self.engine.remove("1/3/6")

        self.assertEqual(rewritten, [("1", "3", "8")])
        self.assertNotIn("1/3/6", self.engine)
        self.assertNotIn("1/3/6/8", self.engine)
        self.assertEqual(self.engine.get("1/3/8").value, 66)
        self.assertEqual(paths_of(self.engine.descendants_at_distance("1/3", 2)), {"1/3/5/7"})

    def test_distance_zero_has_no_descendants(self):
        self.assertEqual(self.engine.descendants_at_distance("1/3", 0), [])
        self.assertEqual(paths_of(self.engine.descendants_at_distance("1/3", 1)), {"1/3/4", "1/3/5", "1/3/6"})

    def test_walkthrough_queries(self):
        self.engine.remove("1/3/6")
        self.engine.move("1/3/8", "1/2/8")

        self.assertEqual(paths_of(self.engine.descendants("1/3")), {"1/3/4", "1/3/5", "1/3/5/7"})
        self.assertEqual(paths_of(self.engine.descendants_at_distance("1/3", 2)), {"1/3/5/7"})
        # Queries are path algebra and work on paths that are no longer stored
        self.assertEqual(self.engine.parent("1/3/6"), ("1", "3"))
        self.assertEqual(
            [("/".join(node.path), distance) for node, distance in self.engine.ancestors("1/3/6")],
            [("1/3", 1), ("1", 2)],
        )
        self.assertEqual(self.engine.ancestor_at_distance("1/3/6", 2).path, ("1",))
        self.assertEqual(paths_of(self.engine.siblings("1/3/6")), {"1/3/4", "1/3/5", "1/2/8"})
        self.assertTrue(self.engine.integrity_check())

    def test_siblings_are_exclusive(self):
        self.assertEqual(paths_of(self.engine.siblings("1/3/4")), {"1/3/5", "1/3/6"})
        self.assertEqual(self.engine.siblings("1"), [])

    def test_depth_from_segments(self):
        self.assertEqual(self.engine.depth("1"), 0)
        self.assertEqual(self.engine.depth("1/3/6/8"), 3)
        self.assertEqual(self.engine.depth("9/9/9/9/9"), 4)
        self.assertTrue(self.engine.stores_depth())
        self.assertTrue(self.engine.cycle_free_by_construction())

    def test_root_parent(self):
        self.assertIsNone(self.engine.parent("1"))
        self.assertEqual(self.engine.root(), ("1",))


class TestPrefixMatching(unittest.TestCase):

    def test_prefix_is_segment_aligned(self):
        engine = MaterializedPathEngine()
        for path in ("1", "1/3", "1/30", "1/3/4", "1/30/5"):
            engine.push(path)

        self.assertEqual(paths_of(engine.descendants("1/3")), {"1/3/4"})
        self.assertEqual(paths_of(engine.descendants("1/30")), {"1/30/5"})

    def test_descendants_of_unstored_path(self):
        engine = MaterializedPathEngine()
        engine.push("1")
        engine.push("1/100/23", 107)

        self.assertEqual(paths_of(engine.descendants("1/100")), {"1/100/23"})
        self.assertEqual(engine.subtree("1/100")[0][1], 1)


class TestPushAndRemove(unittest.TestCase):

    def setUp(self):
        self.engine = build_sample_tree(MaterializedPathEngine())

    def test_push_without_parent_is_accepted(self):
        node = self.engine.push("1/100/23", 107)
        self.assertEqual(node.parent_path, ("1", "100"))
        # The chain stops at the first ancestor that is not stored
        self.assertEqual(self.engine.ancestors("1/100/23"), [])
        self.assertEqual(self.engine.depth("1/100/23"), 2)

    def test_duplicate_path(self):
        with self.assertRaises(DuplicateIdentity) as ctx:
            self.engine.push(("1", "3"), 0)
        self.assertEqual(ctx.exception.identity, ("1", "3"))

    def test_sequence_segments_are_text(self):
        with self.assertRaises(DuplicateIdentity):
            self.engine.push((1, 3), 0)
        node = self.engine.push((1, 2, 9), 99)
        self.assertEqual(node.path, ("1", "2", "9"))
        self.assertIn("1/2/9", self.engine)

    def test_insert_alias(self):
        self.engine.insert("1/2/9", 99)
        self.assertEqual(self.engine.get(("1", "2", "9")).value, 99)

    def test_invalid_paths(self):
        with self.assertRaises(InvalidPathError):
            self.engine.push("")
        with self.assertRaises(InvalidPathError):
            self.engine.push("1//2")
        with self.assertRaises(ValueError):
            self.engine.push(())

    def test_remove_unknown(self):
        with self.assertRaises(NodeNotFound):
            self.engine.remove("1/42")

    def test_remove_root_with_many_children(self):
        with self.assertRaises(AmbiguousRootRemoval):
            self.engine.remove("1")
        self.assertEqual(len(self.engine), 8)

    def test_remove_root_with_one_child_strips_prefix(self):
        self.engine.remove("1/2")
        self.engine.remove("1")

        self.assertEqual(self.engine.root(), ("3",))
        self.assertIn("3/5/7", self.engine)
        self.assertTrue(self.engine.integrity_check())

    def test_colliding_rewrite_rolls_back(self):
        engine = MaterializedPathEngine()
        for path in ("1", "1/3", "1/3/4", "1/4"):
            engine.push(path)

        with self.assertRaises(DuplicateIdentity):
            engine.remove("1/3")
        self.assertEqual(set(engine.store.keys()), {("1",), ("1", "3"), ("1", "3", "4"), ("1", "4")})

    def test_nested_descendant_rewrites_do_not_collide(self):
        engine = MaterializedPathEngine()
        for path in ("1", "1/3", "1/3/3", "1/3/3/3"):
            engine.push(path)

        engine.remove("1/3")
        self.assertEqual(set(engine.store.keys()), {("1",), ("1", "3"), ("1", "3", "3")})


class TestMovePolicies(unittest.TestCase):

    def test_node_only_move(self):
        engine = build_sample_tree(MaterializedPathEngine())
        engine.move("1/3", "1/2/3")

        self.assertEqual(
            set(engine.store.keys()),
            {("1",), ("1", "2"), ("1", "2", "3"), ("1", "4"), ("1", "5"), ("1", "6"),
             ("1", "5", "7"), ("1", "6", "8")},
        )
        self.assertEqual(engine.get("1/2/3").value, 7)

    def test_node_only_move_to_taken_path_rolls_back(self):
        engine = build_sample_tree(MaterializedPathEngine())
        before = set(engine.store.keys())

        with self.assertRaises(DuplicateIdentity):
            engine.move("1/3/5/7", "1/2")
        self.assertEqual(set(engine.store.keys()), before)

    def test_subtree_move(self):
        engine = build_sample_tree(MaterializedPathEngine(config=EngineConfig(move_policy=MovePolicy.WITH_SUBTREE)))
        engine.move("1/3", "1/2/3")

        self.assertNotIn("1/3", engine)
        self.assertEqual(
            paths_of(engine.descendants("1/2/3")),
            {"1/2/3/4", "1/2/3/5", "1/2/3/6", "1/2/3/5/7", "1/2/3/6/8"},
        )
        self.assertEqual(engine.get("1/2/3/6/8").value, 66)
        self.assertTrue(engine.integrity_check())

    def test_subtree_move_below_itself(self):
        engine = build_sample_tree(MaterializedPathEngine(config=EngineConfig(move_policy=MovePolicy.WITH_SUBTREE)))

        with self.assertRaises(CycleDetected):
            engine.move("1/3", "1/3/4/3")
        self.assertIn("1/3/4", engine)

    def test_custom_separator(self):
        engine = MaterializedPathEngine(config=EngineConfig(separator="."))
        engine.push("a")
        engine.push("a.b")
        engine.push("a.b.c")

        self.assertEqual(engine.parent("a.b.c"), ("a", "b"))
        self.assertEqual(engine.format(("a", "b", "c")), "a.b.c")
        self.assertEqual(engine.depth("a.b.c"), 2)


if __name__ == "__main__":
    unittest.main()
