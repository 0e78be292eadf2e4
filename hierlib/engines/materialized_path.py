"""Materialized-path (path enumeration) engine for HierLib.

Every node is keyed by its full root-first path. Reads become path algebra:
the parent is the path minus its last segment, the depth is the segment
count, and descendants are the stored paths that extend a prefix. Writes that
change structure pay for it by rewriting every affected key.
"""

import logging
from typing import Any, Hashable, List, Mapping, Optional, Tuple

from .._common import paths
from .._common.config import MovePolicy, SiblingPolicy
from .._common.paths import Path, PathLike
from ..core.engine import IntegrityReport, TreeEngine
from ..core.node import PathNode
from ..errors import AmbiguousRootRemoval, CycleDetected, DuplicateIdentity

logger = logging.getLogger(__name__)


class MaterializedPathEngine(TreeEngine):
    """Tree engine over the materialized-path encoding.

    Paths may be passed as text (``"1/3/5"``, split on the configured
    separator) or as any sequence of segments. Keys are always tuples.

    ``siblings`` is exclusive by default: the queried path is left out of
    its own sibling set.

    Queries are pure path algebra and accept paths that are not stored;
    ``ancestors("1/100/23")`` simply reports the stored part of the chain.
    """

    default_sibling_policy = SiblingPolicy.EXCLUSIVE

    def _key(self, identity: PathLike) -> Path:
        return paths.parse_path(identity, self.config.separator)

    def format(self, path: Path) -> str:
        """Render a key in the configured textual form."""
        return paths.format_path(path, self.config.separator)

    def _root_keys(self, records: Mapping[Path, PathNode]) -> List[Path]:
        return [path for path in records if paths.depth(path) == 0]

    def _descendant_keys(self, records: Mapping[Path, PathNode], prefix: Path) -> List[Path]:
        """Stored paths strictly below prefix, shallowest first."""
        found = [path for path in records if paths.is_strict_prefix(prefix, path)]
        return sorted(found, key=len)

    def _rewrite(self, keys: List[Path], old_prefix: Path, new_prefix: Path) -> List[Path]:
        """Move the records under keys from old_prefix to new_prefix.

        All old keys are dropped before any new key is written, so paths
        inside the rewritten set can never collide with each other. A
        collision with a record outside the set raises DuplicateIdentity and
        the enclosing transaction rolls everything back.
        """
        records = [(key, self.store.get(key)) for key in keys]
        for key in keys:
            self.store.delete(key)

        rewritten = []
        for key, node in records:
            new_key = paths.rebase(key, old_prefix, new_prefix)
            if new_key in self.store:
                raise DuplicateIdentity(new_key)
            self.store.put(new_key, node.with_path(new_key))
            rewritten.append(new_key)
        return rewritten

    # Mutations

    def push(self, path: PathLike, value: Any = None) -> PathNode:
        """Store a node under its full path.

        The implied parent path is not required to exist.

        Raises:
            DuplicateIdentity: If path is already stored
            InvalidPathError: If path is empty or has an empty segment
        """
        key = self._key(path)
        with self.store.transaction():
            if key in self.store:
                raise DuplicateIdentity(key)
            node = PathNode(key, value)
            self.store.put(key, node)

        logger.debug("Pushed node %s", self.format(key))
        return node

    insert = push

    def remove(self, path: PathLike) -> List[Path]:
        """Delete the node at path and promote all its descendants one level.

        Every descendant key has the removed path prefix replaced by the
        parent's path. Removing a root with a single child strips the root
        segment, making that child the new root.

        Returns:
            The rewritten descendant paths
        """
        key = self._key(path)
        with self.store.transaction():
            self.get(key)
            descendants = self._descendant_keys(self.store, key)
            parent_path = paths.parent(key)

            if parent_path is None:
                children = [d for d in descendants if paths.relative_depth(key, d) == 1]
                if len(children) > 1:
                    raise AmbiguousRootRemoval(key, len(children))

            self.store.delete(key)
            rewritten = self._rewrite(descendants, key, parent_path or ())

        logger.debug("Removed %s, rewrote %d descendant path(s)", self.format(key), len(rewritten))
        return rewritten

    def move(self, path: PathLike, new_path: PathLike) -> None:
        """Relocate the node at path to new_path.

        With MovePolicy.NODE_ONLY this is remove followed by push with the
        same value: the removal promotes the node's descendants first, so
        only the bare node arrives at new_path. With MovePolicy.WITH_SUBTREE
        every descendant is rebased onto new_path as well.

        Raises:
            CycleDetected: WITH_SUBTREE move below the node's own path
        """
        key = self._key(path)
        new_key = self._key(new_path)

        with self.store.transaction():
            node = self.get(key)

            if self.move_policy is MovePolicy.WITH_SUBTREE:
                if paths.is_strict_prefix(key, new_key):
                    raise CycleDetected(new_key, origin=key)
                if new_key != key:
                    moved = [key] + self._descendant_keys(self.store, key)
                    self._rewrite(moved, key, new_key)
            else:
                self.remove(key)
                self.push(new_key, node.value)

        logger.debug("Moved %s to %s (%s)", self.format(key), self.format(new_key), self.move_policy.value)

    # Queries

    def depth(self, path: PathLike) -> int:
        """Number of separators between the root and path."""
        return paths.depth(self._key(path))

    def subtree(self, path: PathLike) -> List[Tuple[PathNode, int]]:
        """Return path (when stored) followed by its descendants.

        Descendants are stored paths having path as a strict,
        segment-aligned prefix, tagged with their relative depth.
        """
        key = self._key(path)
        with self.store.snapshot() as records:
            result = []
            if key in records:
                result.append((records[key], 0))
            for descendant in self._descendant_keys(records, key):
                result.append((records[descendant], paths.relative_depth(key, descendant)))
            return result

    def descendants_at_distance(self, path: PathLike, distance: int) -> List[PathNode]:
        return self.descendants_at_depth(path, distance)

    def parent(self, path: PathLike) -> Optional[Path]:
        return paths.parent(self._key(path))

    def ancestors(self, path: PathLike) -> List[Tuple[PathNode, int]]:
        """Walk parent(parent(...)) from path while each ancestor is stored."""
        key = self._key(path)
        with self.store.snapshot() as records:
            chain: List[Tuple[PathNode, int]] = []
            current = paths.parent(key)
            distance = 1
            while current is not None and current in records:
                chain.append((records[current], distance))
                current = paths.parent(current)
                distance += 1
            return chain

    def siblings(self, path: PathLike) -> List[PathNode]:
        """Return stored nodes at the same depth as path."""
        key = self._key(path)
        own_depth = paths.depth(key)
        with self.store.snapshot() as records:
            peers = [node for candidate, node in records.items() if paths.depth(candidate) == own_depth]
        return self._apply_sibling_policy(key, peers)

    # Verification

    def integrity_report(self) -> IntegrityReport:
        """Derived-invariant check, no traversal needed.

        Passes iff exactly one path has depth 0 and every stored path has
        exactly depth(path) stored ancestors. A path is a finite chain, so
        this encoding cannot express a cycle.
        """
        with self.store.snapshot() as records:
            roots = self._root_keys(records)
            if len(roots) != 1:
                return IntegrityReport(
                    passed=False,
                    node_count=len(records),
                    root_count=len(roots),
                )

            inconsistent = [
                path for path in records
                if len(self.ancestors(path)) != paths.depth(path)
            ]
            return IntegrityReport(
                passed=not inconsistent,
                node_count=len(records),
                root_count=1,
                unreachable=inconsistent,
            )

    # Capability flags

    def stores_depth(self) -> bool:
        return True

    def cycle_free_by_construction(self) -> bool:
        return True
