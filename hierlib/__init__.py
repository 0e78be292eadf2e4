"""HierLib - Rooted tree storage in two encodings.

HierLib stores a single rooted tree of valued nodes and answers structural
queries (ancestors, descendants, siblings, depth-bounded lookups) and
mutations (insert, splice-out remove, move) over it, plus an integrity check
that detects disconnection and cycles.

Choose your encoding:
━━━━━━━━━━━━━━━━━━━━━━━━━━
Parent pointers (cheap writes, walked reads):
    from hierlib import ParentPointerEngine

Materialized paths (cheap reads, rewritten keys on structural writes):
    from hierlib import MaterializedPathEngine
━━━━━━━━━━━━━━━━━━━━━━━━━━

Both engines implement the same TreeEngine interface. Pick the one whose
cost profile fits your workload.
"""

__version__ = "0.1.0"

from .errors import (
    TreeError,
    DuplicateIdentity,
    AmbiguousRootRemoval,
    CycleDetected,
    NodeNotFound,
    RootError,
    InvalidPathError,
    StoreClosedError,
    ConfigurationError,
)
from ._common.config import EngineConfig, SiblingPolicy, MovePolicy
from .core import (
    TreeNode,
    AdjacencyNode,
    PathNode,
    NodeStore,
    TreeEngine,
    IntegrityReport,
)
from .engines import ParentPointerEngine, MaterializedPathEngine
from .api import (
    create_engine,
    build_tree,
    count_nodes,
    get_tree_stats,
    render_tree,
)

__all__ = [
    "__version__",
    # Errors
    "TreeError",
    "DuplicateIdentity",
    "AmbiguousRootRemoval",
    "CycleDetected",
    "NodeNotFound",
    "RootError",
    "InvalidPathError",
    "StoreClosedError",
    "ConfigurationError",
    # Config
    "EngineConfig",
    "SiblingPolicy",
    "MovePolicy",
    # Core
    "TreeNode",
    "AdjacencyNode",
    "PathNode",
    "NodeStore",
    "TreeEngine",
    "IntegrityReport",
    # Engines
    "ParentPointerEngine",
    "MaterializedPathEngine",
    # API
    "create_engine",
    "build_tree",
    "count_nodes",
    "get_tree_stats",
    "render_tree",
]
