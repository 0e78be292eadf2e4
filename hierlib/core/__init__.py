"""Core abstractions for HierLib.

This module contains the node records, the node store and the abstract
engine that both tree encodings implement.
"""

from .node import TreeNode, AdjacencyNode, PathNode
from .store import NodeStore
from .traverser import (
    TreeTraverser,
    BreadthFirstTraverser,
    LevelOrderTraverser,
    create_traverser,
)
from .engine import TreeEngine, IntegrityReport

__all__ = [
    "TreeNode",
    "AdjacencyNode",
    "PathNode",
    "NodeStore",
    "TreeTraverser",
    "BreadthFirstTraverser",
    "LevelOrderTraverser",
    "create_traverser",
    "TreeEngine",
    "IntegrityReport",
]
