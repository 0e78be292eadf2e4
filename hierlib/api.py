"""High-level API for HierLib.

This module provides simple, functional interfaces for common tasks around
the engines: picking an encoding, bulk loading a tree, and summarizing or
printing what a store holds. They wrap the object-oriented API for ease of
use in scripts and tests.
"""

import logging
from collections import defaultdict
from typing import Any, Dict, Hashable, Iterable, List, Optional, Tuple, Type

from ._common.config import EngineConfig
from .core.engine import TreeEngine
from .core.store import NodeStore
from .engines.materialized_path import MaterializedPathEngine
from .engines.parent_pointer import ParentPointerEngine
from .errors import NodeNotFound

logger = logging.getLogger(__name__)

Edge = Tuple[Hashable, Optional[Hashable], Any]

_ENGINES: Dict[str, Type[TreeEngine]] = {
    'parent_pointer': ParentPointerEngine,
    'adjacency': ParentPointerEngine,
    'materialized_path': MaterializedPathEngine,
    'path': MaterializedPathEngine,
}


def create_engine(kind: str,
                  store: Optional[NodeStore] = None,
                  config: Optional[EngineConfig] = None) -> TreeEngine:
    """Create an engine by encoding name.

    Args:
        kind: Encoding name (parent_pointer, adjacency, materialized_path, path)
        store: Optional store to operate on
        config: Optional engine configuration

    Returns:
        TreeEngine instance

    Raises:
        ValueError: If the encoding name is not recognized

    Example:
        >>> engine = create_engine("path", config=EngineConfig(separator="."))
    """
    kind_lower = kind.lower()
    if kind_lower not in _ENGINES:
        raise ValueError(
            f"Unknown engine kind: {kind}. "
            f"Choose from: {', '.join(_ENGINES.keys())}"
        )
    return _ENGINES[kind_lower](store=store, config=config)


def build_tree(engine: TreeEngine, edges: Iterable[Edge]) -> int:
    """Bulk-load ``(node_id, parent_id, value)`` triples in one transaction.

    A parent-pointer engine stores the triples as given. A materialized-path
    engine needs every parent listed before its children; the path of each
    node is derived from its parent's path with ``str(node_id)`` appended,
    so the result can be queried with textual paths such as ``"1/3/5"``.

    Returns:
        Number of nodes loaded

    Raises:
        NodeNotFound: Path engine only, when a parent was not loaded first
    """
    count = 0
    with engine.store.transaction():
        if isinstance(engine, MaterializedPathEngine):
            built: Dict[Hashable, Tuple[str, ...]] = {}
            for node_id, parent_id, value in edges:
                if parent_id is None:
                    path = (str(node_id),)
                elif parent_id in built:
                    path = built[parent_id] + (str(node_id),)
                else:
                    raise NodeNotFound(parent_id)
                engine.push(path, value)
                built[node_id] = path
                count += 1
        else:
            for node_id, parent_id, value in edges:
                engine.insert(node_id, parent_id, value)
                count += 1

    logger.debug("Loaded %d node(s) into %r", count, engine)
    return count


def count_nodes(engine: TreeEngine) -> int:
    """Count the nodes held by an engine's store."""
    return len(engine)


def get_tree_stats(engine: TreeEngine) -> Dict[str, Any]:
    """Summarize the shape of the stored tree.

    Returns:
        Dictionary with node_count, root, max_depth, leaf_count and
        integrity (result of ``integrity_check``)

    Raises:
        CycleDetected: Parent-pointer engine on a store containing a cycle
    """
    nodes = engine.nodes()
    identities = [node.identifier() for node in nodes]
    parents = {engine.parent(identity) for identity in identities}
    integrity = engine.integrity_check()

    return {
        'node_count': len(nodes),
        'root': engine.root() if integrity else None,
        'max_depth': max((engine.depth(identity) for identity in identities), default=0),
        'leaf_count': sum(1 for identity in identities if identity not in parents),
        'integrity': integrity,
    }


def render_tree(engine: TreeEngine, root: Optional[Any] = None, indent: str = "  ") -> str:
    """Render a subtree as indented ``id:value`` lines, parents before children.

    Args:
        engine: Engine to read from
        root: Identity to start from (the tree's root if omitted)
        indent: Indentation added per level

    Returns:
        Multi-line string, empty for an empty store
    """
    if root is None:
        root = engine.root()
        if root is None:
            return ""

    members = engine.subtree(root)
    if not members or members[0][1] != 0:
        return ""

    children: Dict[Hashable, List[Any]] = defaultdict(list)
    for node, _ in members[1:]:
        children[engine.parent(node.identifier())].append(node)

    lines = []
    stack: List[Tuple[Any, int]] = [(members[0][0], 0)]
    while stack:
        node, level = stack.pop()
        info = node.metadata()
        lines.append(f"{indent * level}{info['id']}:{info['value']}")
        for child in reversed(children.get(node.identifier(), [])):
            stack.append((child, level + 1))

    return "\n".join(lines)
