"""TreeNode abstraction for HierLib.

A TreeNode is a stored record: an identity, an opaque value and whatever the
encoding needs to express the parent relationship. Nodes never navigate on
their own. Navigation belongs to the TreeEngine that owns the store, which is
what lets the two encodings answer the same queries.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Hashable, Optional, Tuple


class TreeNode(ABC):
    """Abstract base class for stored tree nodes.

    Nodes are immutable value objects. Mutations (move, splice-out removal)
    replace the stored record with a new node instead of editing it in place,
    which keeps store snapshots and transaction rollbacks trivially correct.
    """

    __slots__ = ("value",)

    def __init__(self, value: Any = None):
        self.value = value

    @abstractmethod
    def identifier(self) -> Hashable:
        """Return the unique, stable key of this node within its store.

        Examples:
        - Parent-pointer encoding: the node id (``7``)
        - Materialized-path encoding: the path tuple (``('1', '3', '5', '7')``)

        Returns:
            Hashable identity usable as a store key
        """
        pass

    @abstractmethod
    def metadata(self) -> Dict[str, Any]:
        """Return a plain dictionary describing this node.

        Used for printing and test assertions. Must not touch the store.
        """
        pass

    def __str__(self) -> str:
        """String representation defaults to identifier."""
        return str(self.identifier())

    def __repr__(self) -> str:
        """Detailed representation for debugging."""
        return f"{self.__class__.__name__}(id={self.identifier()!r}, value={self.value!r})"

    def __eq__(self, other: object) -> bool:
        """Nodes are equal if they have the same class, identity and value."""
        if not isinstance(other, TreeNode):
            return NotImplemented
        return (
            type(self) is type(other)
            and self.identifier() == other.identifier()
            and self.value == other.value
        )

    def __hash__(self) -> int:
        """Hash based on identifier for use in sets and dicts."""
        return hash(self.identifier())


class AdjacencyNode(TreeNode):
    """Node of the parent-pointer encoding.

    ``parent_id`` is None for the root. It is not required to resolve to a
    stored node; dangling references only show up in integrity checks.
    """

    __slots__ = ("node_id", "parent_id")

    def __init__(self, node_id: Hashable, parent_id: Optional[Hashable] = None, value: Any = None):
        super().__init__(value)
        self.node_id = node_id
        self.parent_id = parent_id

    def identifier(self) -> Hashable:
        return self.node_id

    def is_root(self) -> bool:
        return self.parent_id is None

    def with_parent(self, parent_id: Optional[Hashable]) -> "AdjacencyNode":
        """Return a copy of this node attached to another parent."""
        return AdjacencyNode(self.node_id, parent_id, self.value)

    def metadata(self) -> Dict[str, Any]:
        return {
            'id': self.node_id,
            'parent_id': self.parent_id,
            'value': self.value,
        }

    def __repr__(self) -> str:
        return (
            f"AdjacencyNode(node_id={self.node_id!r}, "
            f"parent_id={self.parent_id!r}, value={self.value!r})"
        )


class PathNode(TreeNode):
    """Node of the materialized-path encoding.

    The path is the root-first tuple of segments. The parent is implied by
    all but the last segment and the depth by the segment count.
    """

    __slots__ = ("path",)

    def __init__(self, path: Tuple[Hashable, ...], value: Any = None):
        super().__init__(value)
        self.path = tuple(path)

    def identifier(self) -> Tuple[Hashable, ...]:
        return self.path

    @property
    def segment(self) -> Hashable:
        """Last path segment, i.e. this node's own id."""
        return self.path[-1]

    @property
    def parent_path(self) -> Optional[Tuple[Hashable, ...]]:
        if len(self.path) <= 1:
            return None
        return self.path[:-1]

    @property
    def depth(self) -> int:
        return len(self.path) - 1

    def with_path(self, path: Tuple[Hashable, ...]) -> "PathNode":
        """Return a copy of this node stored under another path."""
        return PathNode(path, self.value)

    def metadata(self) -> Dict[str, Any]:
        return {
            'id': self.segment,
            'path': self.path,
            'depth': self.depth,
            'value': self.value,
        }

    def __repr__(self) -> str:
        return f"PathNode(path={self.path!r}, value={self.value!r})"
