"""Tree traversal strategies for HierLib.

Traversers walk a tree described by a ``children_of`` function, usually a
lookup into an adjacency map that the engine builds once per query. They
never recurse, so deep trees cannot exhaust the interpreter stack, and they
keep a visited set so a corrupted (cyclic) store fails with CycleDetected
instead of looping forever.
"""

import logging
from abc import ABC, abstractmethod
from collections import deque
from typing import Callable, Deque, Hashable, Iterable, Iterator, List, Optional, Set, Tuple

from ..errors import CycleDetected

logger = logging.getLogger(__name__)

ChildrenOf = Callable[[Hashable], Iterable[Hashable]]


class TreeTraverser(ABC):
    """Abstract base class for traversal strategies.

    Traversers are independent of the node encoding: they only see
    identities and the ``children_of`` function supplied by the engine.
    """

    def __init__(self, children_of: ChildrenOf):
        """Initialize traverser.

        Args:
            children_of: Function returning the child identities of a node
        """
        self.children_of = children_of

    @abstractmethod
    def traverse(self,
                 root: Hashable,
                 max_depth: Optional[int] = None) -> Iterator[Tuple[Hashable, int]]:
        """Traverse the tree starting from root.

        Args:
            root: Starting identity
            max_depth: Maximum depth to traverse (None = unlimited)

        Yields:
            Tuples of (identity, depth) where depth is relative to root

        Raises:
            CycleDetected: If an identity is reached a second time
        """
        pass

    def _should_explore(self, depth: int, max_depth: Optional[int]) -> bool:
        if max_depth is None:
            return True
        return depth < max_depth

    def _visit(self, visited: Set[Hashable], identity: Hashable, root: Hashable) -> None:
        # In a parent-pointer tree each node has one parent, so a second
        # arrival can only come from a cycle.
        if identity in visited:
            logger.warning("Traversal from %r reached %r twice", root, identity)
            raise CycleDetected(identity, origin=root)
        visited.add(identity)


class BreadthFirstTraverser(TreeTraverser):
    """Breadth-first traversal strategy.

    Visits all nodes at depth N before visiting nodes at depth N+1, using an
    explicit queue.
    """

    def traverse(self,
                 root: Hashable,
                 max_depth: Optional[int] = None) -> Iterator[Tuple[Hashable, int]]:
        queue: Deque[Tuple[Hashable, int]] = deque([(root, 0)])
        visited: Set[Hashable] = set()

        while queue:
            identity, depth = queue.popleft()
            self._visit(visited, identity, root)
            yield (identity, depth)

            if self._should_explore(depth, max_depth):
                for child in self.children_of(identity):
                    queue.append((child, depth + 1))


class LevelOrderTraverser(TreeTraverser):
    """Level-order traversal, one complete frontier at a time.

    Every round expands the whole frontier; there is no cap on how many
    nodes may be admitted to the next one.
    """

    def levels(self,
               root: Hashable,
               max_depth: Optional[int] = None) -> Iterator[Tuple[int, List[Hashable]]]:
        """Yield ``(depth, frontier)`` pairs until the frontier empties."""
        frontier: List[Hashable] = [root]
        depth = 0
        visited: Set[Hashable] = set()

        while frontier:
            for identity in frontier:
                self._visit(visited, identity, root)
            yield (depth, frontier)

            if not self._should_explore(depth, max_depth):
                break
            frontier = [child for identity in frontier for child in self.children_of(identity)]
            depth += 1

    def traverse(self,
                 root: Hashable,
                 max_depth: Optional[int] = None) -> Iterator[Tuple[Hashable, int]]:
        for depth, frontier in self.levels(root, max_depth):
            for identity in frontier:
                yield (identity, depth)


def create_traverser(strategy: str, children_of: ChildrenOf) -> TreeTraverser:
    """Create a traverser instance by strategy name.

    Args:
        strategy: Name of traversal strategy (bfs, level)
        children_of: Child lookup for the tree being walked

    Returns:
        TreeTraverser instance

    Raises:
        ValueError: If strategy name is not recognized
    """
    strategies = {
        'bfs': BreadthFirstTraverser,
        'breadth_first': BreadthFirstTraverser,
        'level': LevelOrderTraverser,
        'level_order': LevelOrderTraverser,
    }

    strategy_lower = strategy.lower()
    if strategy_lower not in strategies:
        raise ValueError(
            f"Unknown traversal strategy: {strategy}. "
            f"Choose from: {', '.join(strategies.keys())}"
        )

    return strategies[strategy_lower](children_of)
