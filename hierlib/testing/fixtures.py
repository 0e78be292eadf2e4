"""Test fixtures for HierLib consumers.

These fixtures provide a standard sample tree and controlled access to store
state for testing purposes, without making store internals part of the
engine API.
"""

from typing import Any, Dict, Hashable, Iterable, List, Optional, Set, Tuple

from ..api import build_tree
from ..core.engine import TreeEngine
from ..core.node import TreeNode

#        1:0
#      /    \
#   2:6      3:7
#          /  |   \
#       4:3  5:33  6:333
#             |     |
#           7:55   8:66
SAMPLE_EDGES: List[Tuple[int, Optional[int], int]] = [
    (1, None, 0),
    (2, 1, 6),
    (3, 1, 7),
    (4, 3, 3),
    (5, 3, 33),
    (6, 3, 333),
    (7, 5, 55),
    (8, 6, 66),
]


def build_sample_tree(engine: TreeEngine) -> TreeEngine:
    """Load the eight-node sample tree into engine and return it.

    On a materialized-path engine the nodes land under textual paths such as
    ``"1/3/5/7"``.
    """
    build_tree(engine, SAMPLE_EDGES)
    return engine


class StoreTestHelper:
    """Public test fixture for verifying engine state.

    Identities are reduced to the node's own id (the last path segment on a
    materialized-path engine, converted back to int when possible), so the
    same assertions work against both encodings.

    Example:
        engine = build_sample_tree(ParentPointerEngine())
        helper = StoreTestHelper(engine)
        assert helper.ids(engine.siblings(4)) == {4, 5, 6}
    """

    def __init__(self, engine: TreeEngine):
        """Initialize with the engine under test.

        Args:
            engine: Any TreeEngine
        """
        self._engine = engine

    @staticmethod
    def node_id(node: TreeNode) -> Any:
        """Return the short id of a node, as an int when it looks like one."""
        short = node.metadata()['id']
        if isinstance(short, str) and short.lstrip('-').isdigit():
            return int(short)
        return short

    def ids(self, nodes: Iterable[Any]) -> Set[Any]:
        """Short ids of nodes, or of ``(node, distance)`` pairs."""
        return {self.node_id(item[0] if isinstance(item, tuple) else item) for item in nodes}

    def ordered_ids(self, nodes: Iterable[Any]) -> List[Any]:
        return [self.node_id(item[0] if isinstance(item, tuple) else item) for item in nodes]

    def with_distance(self, pairs: Iterable[Tuple[TreeNode, int]]) -> Dict[Any, int]:
        """Map short id to distance for ``(node, distance)`` results."""
        return {self.node_id(node): distance for node, distance in pairs}

    def parent_map(self) -> Dict[Any, Any]:
        """Short id of every stored node mapped to its parent's short id.

        For a materialized-path engine the parent is read from the path, so
        an orphan still reports the parent its path implies.
        """
        result = {}
        for node in self._engine.nodes():
            parent = self._engine.parent(node.identifier())
            if isinstance(parent, tuple):
                parent = parent[-1]
                if isinstance(parent, str) and parent.lstrip('-').isdigit():
                    parent = int(parent)
            result[self.node_id(node)] = parent
        return result

    def values(self) -> Dict[Any, Any]:
        """Short id of every stored node mapped to its value."""
        return {self.node_id(node): node.value for node in self._engine.nodes()}

    def get_summary(self) -> Dict[str, Any]:
        """Returns high-level store state for testing.

        Returns:
            Dictionary containing:
            - node_count: Number of stored nodes
            - identities: Set of raw store keys
            - store: The store's access statistics
        """
        keys: List[Hashable] = list(self._engine.store.keys())
        return {
            'node_count': len(keys),
            'identities': set(keys),
            'store': self._engine.store.stats(),
        }
