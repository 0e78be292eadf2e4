"""Exception hierarchy for HierLib.

Writes are permissive: a dangling parent reference is never rejected when a
node is inserted. These exceptions cover the failures an operation cannot
recover from on its own. Structural corruption is reported by the engines'
integrity checks instead of being raised.
"""

from typing import Any, Optional


class TreeError(Exception):
    """Base class for all HierLib errors."""

    def __init__(self, message: str, identity: Any = None):
        super().__init__(message)
        self.identity = identity


class DuplicateIdentity(TreeError):
    """Raised when inserting a node whose identity is already stored."""

    def __init__(self, identity: Any):
        super().__init__(f"Node {identity!r} already exists", identity)


class AmbiguousRootRemoval(TreeError):
    """Raised when removing a root that has more than one direct child.

    Splice-out removal promotes the children of the removed node. A root
    with several children leaves no unique candidate for the new root.
    """

    def __init__(self, identity: Any, child_count: int):
        super().__init__(
            f"Cannot remove root {identity!r}: it has {child_count} children",
            identity,
        )
        self.child_count = child_count


class CycleDetected(TreeError):
    """Raised by a traversal guard when a node is reached twice."""

    def __init__(self, identity: Any, origin: Optional[Any] = None):
        message = f"Cycle detected at node {identity!r}"
        if origin is not None:
            message += f" while traversing from {origin!r}"
        super().__init__(message, identity)
        self.origin = origin


class NodeNotFound(TreeError, KeyError):
    """Raised when an operation targets an identity that is not stored."""

    def __init__(self, identity: Any):
        TreeError.__init__(self, f"Node {identity!r} not found", identity)

    def __str__(self) -> str:
        # KeyError would otherwise quote the whole message
        return self.args[0]


class RootError(TreeError):
    """Raised when an operation needs the unique root and there is none."""


class InvalidPathError(TreeError, ValueError):
    """Raised for malformed materialized paths (empty path or segment)."""


class StoreClosedError(TreeError):
    """Raised when a closed NodeStore is accessed."""


class ConfigurationError(TreeError):
    """Raised when an EngineConfig fails validation."""
