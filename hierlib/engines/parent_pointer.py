"""Parent-pointer (adjacency list) engine for HierLib.

Every node stores the identifier of its parent. Writes are cheap (one record
per insert, direct children only on remove) while structural queries walk
relationships: subtrees are expanded breadth-first over an adjacency map and
depth is derived by walking up the parent chain.
"""

import logging
from collections import defaultdict
from typing import Any, Dict, Hashable, List, Mapping, Optional, Tuple

from .._common.config import MovePolicy, SiblingPolicy
from ..core.engine import IntegrityReport, TreeEngine
from ..core.node import AdjacencyNode
from ..core.traverser import LevelOrderTraverser, create_traverser
from ..errors import (
    AmbiguousRootRemoval,
    CycleDetected,
    DuplicateIdentity,
    RootError,
    TreeError,
)

logger = logging.getLogger(__name__)


class ParentPointerEngine(TreeEngine):
    """Tree engine over the parent-pointer encoding.

    ``siblings`` is inclusive by default: the queried node is part of its own
    sibling set.

    Example:
        engine = ParentPointerEngine()
        engine.insert(1, None, 0)
        engine.insert(2, 1, 6)
        engine.ancestors(2)  # [(AdjacencyNode(node_id=1, ...), 1)]
    """

    default_sibling_policy = SiblingPolicy.INCLUSIVE

    def _children_index(self, records: Mapping[Hashable, AdjacencyNode]) -> Dict[Hashable, List[Hashable]]:
        """Build the parent -> children adjacency map in store order."""
        index: Dict[Hashable, List[Hashable]] = defaultdict(list)
        for node_id, node in records.items():
            if node.parent_id is not None:
                index[node.parent_id].append(node_id)
        return index

    def _root_keys(self, records: Mapping[Hashable, AdjacencyNode]) -> List[Hashable]:
        return [node_id for node_id, node in records.items() if node.parent_id is None]

    # Mutations

    def insert(self, node_id: Hashable, parent_id: Optional[Hashable] = None, value: Any = None) -> AdjacencyNode:
        """Add a node under parent_id.

        The parent is not required to exist. A dangling reference is stored
        as given and only reported by the integrity check.

        Raises:
            DuplicateIdentity: If node_id is already stored
        """
        if node_id is None:
            raise TreeError("Node id cannot be None")

        with self.store.transaction():
            if node_id in self.store:
                raise DuplicateIdentity(node_id)
            node = AdjacencyNode(node_id, parent_id, value)
            self.store.put(node_id, node)

        logger.debug("Inserted node %r under %r", node_id, parent_id)
        return node

    def remove(self, node_id: Hashable) -> List[Hashable]:
        """Splice node_id out of the tree.

        Direct children are reparented to node_id's former parent, then the
        node itself is deleted. A root may only be removed while it has at
        most one child, which then becomes the new root.

        Returns:
            Identifiers of the reparented children
        """
        with self.store.transaction():
            node = self.get(node_id)
            children = [
                child for child in self.store.values()
                if child.parent_id == node_id and child.node_id != node_id
            ]
            if node.parent_id is None and len(children) > 1:
                raise AmbiguousRootRemoval(node_id, len(children))

            for child in children:
                self.store.put(child.node_id, child.with_parent(node.parent_id))
            self.store.delete(node_id)

        logger.debug("Removed node %r, promoted %d child(ren) to %r",
                     node_id, len(children), node.parent_id)
        return [child.node_id for child in children]

    def move(self, node_id: Hashable, new_parent_id: Optional[Hashable]) -> None:
        """Attach node_id to new_parent_id.

        With MovePolicy.NODE_ONLY the move is a remove followed by an insert
        with the same value. The remove promotes the node's children first,
        so they stay at the old location one level up and only the bare node
        relocates. With MovePolicy.WITH_SUBTREE only the parent pointer is
        rewritten and the whole subtree follows.

        Raises:
            CycleDetected: WITH_SUBTREE move into the node's own subtree
        """
        with self.store.transaction():
            node = self.get(node_id)

            if self.move_policy is MovePolicy.WITH_SUBTREE:
                subtree_ids = {member.node_id for member, _ in self.subtree(node_id)}
                if new_parent_id in subtree_ids:
                    raise CycleDetected(new_parent_id, origin=node_id)
                self.store.put(node_id, node.with_parent(new_parent_id))
            else:
                self.remove(node_id)
                self.insert(node_id, new_parent_id, node.value)

        logger.debug("Moved node %r to %r (%s)", node_id, new_parent_id, self.move_policy.value)

    # Queries

    def subtree(self, node_id: Hashable) -> List[Tuple[AdjacencyNode, int]]:
        """Expand every descendant of node_id breadth-first.

        The adjacency map is built once per call. On a corrupted store where
        node_id sits on a cycle, the traversal raises CycleDetected instead
        of diverging.
        """
        with self.store.snapshot() as records:
            self._lookup(records, node_id)
            children = self._children_index(records)
            traverser = create_traverser('bfs', lambda identity: children.get(identity, ()))
            return [(records[identity], depth) for identity, depth in traverser.traverse(node_id)]

    def parent(self, node_id: Hashable) -> Optional[Hashable]:
        return self.get(node_id).parent_id

    def ancestors(self, node_id: Hashable) -> List[Tuple[AdjacencyNode, int]]:
        """Walk the parent chain from node_id's parent up to the root.

        The walk stops at the first parent that is not stored, so a dangling
        reference yields a truncated chain.
        """
        with self.store.snapshot() as records:
            node = self._lookup(records, node_id)
            chain: List[Tuple[AdjacencyNode, int]] = []
            seen = {node_id}
            current = node.parent_id
            distance = 1

            while current is not None and current in records:
                if current in seen:
                    raise CycleDetected(current, origin=node_id)
                seen.add(current)
                ancestor = records[current]
                chain.append((ancestor, distance))
                current = ancestor.parent_id
                distance += 1

            return chain

    def depth(self, node_id: Hashable) -> int:
        """Depth derived by counting stored ancestors."""
        return len(self.ancestors(node_id))

    def siblings(self, node_id: Hashable) -> List[AdjacencyNode]:
        """Return every node, reached from the tree's root, at node_id's depth.

        Raises:
            RootError: If the store has no unique root
        """
        with self.store.snapshot():
            own_depth = self.depth(node_id)
            root_id = self.root()
            if root_id is None:
                raise RootError("Store has no root")
            peers = [node for node, depth in self.subtree(root_id) if depth == own_depth]
        return self._apply_sibling_policy(node_id, peers)

    # Verification

    def integrity_report(self) -> IntegrityReport:
        """Breadth-first audit from the root.

        Every frontier is expanded in full. Each non-root node contributes
        exactly one parent edge, so n nodes always carry n - 1 edges and
        reaching every node from the root also proves there is no cycle.
        """
        with self.store.snapshot() as records:
            roots = self._root_keys(records)
            visited = set()

            if len(roots) == 1:
                children = self._children_index(records)
                traverser = LevelOrderTraverser(lambda identity: children.get(identity, ()))
                for _, frontier in traverser.levels(roots[0]):
                    visited.update(frontier)

            unreachable = [node_id for node_id in records if node_id not in visited]
            passed = len(roots) <= 1 and not unreachable
            return IntegrityReport(
                passed=passed,
                node_count=len(records),
                root_count=len(roots),
                unreachable=unreachable,
                cycle_detected=self._has_cycle(unreachable),
            )

    def _has_cycle(self, candidates: List[Hashable]) -> bool:
        """Check whether any parent chain starting at candidates loops.

        A disconnected store may or may not contain a cycle, so the nodes
        the audit could not reach are walked individually.
        """
        for node_id in candidates:
            try:
                self.ancestors(node_id)
            except CycleDetected:
                return True
        return False
