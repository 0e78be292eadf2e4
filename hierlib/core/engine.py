"""TreeEngine abstraction for HierLib.

A TreeEngine owns a NodeStore and knows how one particular encoding expresses
the parent relationship. The two engines shipped with HierLib answer the same
questions (subtree, ancestors, siblings, integrity) through completely
different algorithms, so callers can pick an encoding purely on its cost
profile.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Hashable, Iterator, List, Mapping, Optional, Tuple

from .._common.config import EngineConfig, MovePolicy, SiblingPolicy
from ..errors import ConfigurationError, NodeNotFound, RootError
from .node import TreeNode
from .store import NodeStore

logger = logging.getLogger(__name__)


@dataclass
class IntegrityReport:
    """Outcome of an integrity check.

    ``unreachable`` lists the identities that prevent the store from being a
    single connected tree: nodes the traversal never reached (parent-pointer)
    or nodes whose stored ancestor chain is shorter than their depth
    (materialized path).
    """

    passed: bool
    node_count: int
    root_count: int
    unreachable: List[Hashable] = field(default_factory=list)
    cycle_detected: bool = False

    def __bool__(self) -> bool:
        return self.passed


class TreeEngine(ABC):
    """Abstract engine over one node encoding.

    Subclasses provide the navigation primitives; filters over them
    (descendants at a depth, ancestor at a distance) and the boolean
    integrity check are shared.

    Every public query runs under ``store.snapshot()`` and every composite
    mutation under ``store.transaction()``, so readers never observe a node
    deleted while its children still point at it.
    """

    default_sibling_policy: SiblingPolicy = SiblingPolicy.INCLUSIVE

    def __init__(self, store: Optional[NodeStore] = None, config: Optional[EngineConfig] = None):
        """Initialize engine.

        Args:
            store: NodeStore to operate on (a fresh one if omitted)
            config: Engine configuration (defaults if omitted)

        Raises:
            ConfigurationError: If the configuration does not validate
        """
        self.config = config if config is not None else EngineConfig()
        config_errors = self.config.validate()
        if config_errors:
            raise ConfigurationError(f"Invalid configuration: {'; '.join(config_errors)}")

        self.store = store if store is not None else NodeStore()
        self.sibling_policy = self.config.resolve_sibling_policy(self.default_sibling_policy)
        self.move_policy: MovePolicy = self.config.move_policy

    # Identity handling

    def _key(self, identity: Any) -> Hashable:
        """Normalize a caller-supplied identity into a store key."""
        return identity

    def _lookup(self, records: Mapping[Hashable, TreeNode], key: Hashable) -> TreeNode:
        node = records.get(key)
        if node is None:
            raise NodeNotFound(key)
        return node

    def get(self, identity: Any) -> TreeNode:
        """Return the stored node for identity.

        Raises:
            NodeNotFound: If nothing is stored under identity
        """
        with self.store.snapshot() as records:
            return self._lookup(records, self._key(identity))

    def nodes(self) -> List[TreeNode]:
        """Return every stored node in store order."""
        with self.store.snapshot() as records:
            return list(records.values())

    def __contains__(self, identity: Any) -> bool:
        key = self._key(identity)
        with self.store.snapshot() as records:
            return key in records

    def __len__(self) -> int:
        with self.store.snapshot() as records:
            return len(records)

    # Navigation primitives

    @abstractmethod
    def remove(self, identity: Any) -> List[Hashable]:
        """Splice a node out of the tree, promoting its descendants one level.

        Returns:
            Identities that were rewritten or reparented by the removal

        Raises:
            NodeNotFound: If identity is not stored
            AmbiguousRootRemoval: If identity is a root with several children
        """
        pass

    @abstractmethod
    def move(self, identity: Any, target: Any) -> None:
        """Relocate a node according to the engine's MovePolicy."""
        pass

    @abstractmethod
    def subtree(self, identity: Any) -> List[Tuple[TreeNode, int]]:
        """Return the node and all its descendants tagged with their distance.

        The node itself comes first at distance 0.
        """
        pass

    @abstractmethod
    def parent(self, identity: Any) -> Optional[Hashable]:
        """Return the parent identity, or None for a root."""
        pass

    @abstractmethod
    def ancestors(self, identity: Any) -> List[Tuple[TreeNode, int]]:
        """Return stored ancestors, nearest first, tagged with distance (parent = 1)."""
        pass

    @abstractmethod
    def depth(self, identity: Any) -> int:
        """Return the depth of a node (root = 0)."""
        pass

    @abstractmethod
    def siblings(self, identity: Any) -> List[TreeNode]:
        """Return nodes at the same depth, honoring the SiblingPolicy."""
        pass

    @abstractmethod
    def integrity_report(self) -> IntegrityReport:
        """Verify the store forms one connected, acyclic tree."""
        pass

    @abstractmethod
    def _root_keys(self, records: Mapping[Hashable, TreeNode]) -> List[Hashable]:
        """Return the keys of every node that qualifies as a root."""
        pass

    # Shared queries

    def root(self) -> Optional[Hashable]:
        """Return the identity of the unique root, or None for an empty store.

        Raises:
            RootError: If more than one node qualifies as root
        """
        with self.store.snapshot() as records:
            roots = self._root_keys(records)
        if len(roots) > 1:
            raise RootError(f"Store has {len(roots)} roots: {roots!r}")
        return roots[0] if roots else None

    def descendants(self, identity: Any) -> List[Tuple[TreeNode, int]]:
        """Return every node below identity, tagged with relative depth."""
        return [(node, distance) for node, distance in self.subtree(identity) if distance > 0]

    def descendants_at_depth(self, identity: Any, depth: int) -> List[TreeNode]:
        """Return the descendants exactly ``depth`` levels below identity.

        Example:
            >>> engine.descendants_at_depth(3, 2)  # grandchildren of node 3
        """
        return [node for node, distance in self.descendants(identity) if distance == depth]

    def ancestor_at_distance(self, identity: Any, distance: int) -> Optional[TreeNode]:
        """Return the ancestor ``distance`` levels up (1 = parent), or None.

        The whole node is returned; call ``identifier()`` on it for the key.
        """
        for node, node_distance in self.ancestors(identity):
            if node_distance == distance:
                return node
        return None

    def integrity_check(self) -> bool:
        """Return True if the store passes the engine's integrity check."""
        report = self.integrity_report()
        if not report.passed and self.config.log_integrity_failures:
            logger.warning(
                "%s integrity check failed: %d node(s), %d root(s), %d unreachable%s",
                self.__class__.__name__,
                report.node_count,
                report.root_count,
                len(report.unreachable),
                ", cycle present" if report.cycle_detected else "",
            )
        return report.passed

    def _apply_sibling_policy(self, key: Hashable, peers: List[TreeNode]) -> List[TreeNode]:
        if self.sibling_policy is SiblingPolicy.EXCLUSIVE:
            return [node for node in peers if node.identifier() != key]
        return peers

    # Capability flags

    def supports_modification(self) -> bool:
        return True

    def stores_depth(self) -> bool:
        """Check if depth is encoded in the identity rather than walked."""
        return False

    def cycle_free_by_construction(self) -> bool:
        """Check if the encoding makes cycles unrepresentable."""
        return False

    # Lifecycle

    def close(self) -> None:
        self.store.close()

    def __enter__(self) -> "TreeEngine":
        self.store.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __iter__(self) -> Iterator[TreeNode]:
        return iter(self.nodes())

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({len(self.store)} nodes)"
