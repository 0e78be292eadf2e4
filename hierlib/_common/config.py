"""Configuration system for HierLib.

This module defines how users select the behavioral policies of an engine:
the path separator, which sibling convention applies, and what ``move`` does
with the children of the relocated node.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class SiblingPolicy(Enum):
    """Whether ``siblings(n)`` reports ``n`` itself.

    The parent-pointer engine defaults to INCLUSIVE, the materialized-path
    engine to EXCLUSIVE. Both can be overridden per engine.
    """
    INCLUSIVE = "inclusive"     # Every node at n's depth, n included
    EXCLUSIVE = "exclusive"     # Every other node at n's depth


class MovePolicy(Enum):
    """What happens to the children of a moved node."""
    NODE_ONLY = "node_only"         # Remove then re-insert; children stay behind
    WITH_SUBTREE = "with_subtree"   # Children travel with the node


@dataclass
class EngineConfig:
    """Complete configuration for a tree engine.

    ``sibling_policy`` left as None means "use the engine's own default".
    """

    # Materialized-path textual form
    separator: str = "/"

    # Query conventions
    sibling_policy: Optional[SiblingPolicy] = None

    # Mutation conventions
    move_policy: MovePolicy = MovePolicy.NODE_ONLY

    # Diagnostics
    log_integrity_failures: bool = True

    # Convenience constructors for the two encodings

    @classmethod
    def parent_pointer(cls, **overrides) -> 'EngineConfig':
        """Create config matching the parent-pointer conventions.

        Returns:
            EngineConfig with inclusive siblings
        """
        overrides.setdefault('sibling_policy', SiblingPolicy.INCLUSIVE)
        return cls(**overrides)

    @classmethod
    def materialized_path(cls, separator: str = "/", **overrides) -> 'EngineConfig':
        """Create config matching the materialized-path conventions.

        Args:
            separator: Separator used when paths are given as strings

        Returns:
            EngineConfig with exclusive siblings
        """
        overrides.setdefault('sibling_policy', SiblingPolicy.EXCLUSIVE)
        return cls(separator=separator, **overrides)

    def resolve_sibling_policy(self, default: SiblingPolicy) -> SiblingPolicy:
        return self.sibling_policy if self.sibling_policy is not None else default

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if not isinstance(self.separator, str) or not self.separator:
            errors.append("separator must be a non-empty string")
        elif self.separator.strip() != self.separator:
            errors.append("separator cannot contain leading or trailing whitespace")

        if self.sibling_policy is not None and not isinstance(self.sibling_policy, SiblingPolicy):
            errors.append(f"sibling_policy must be a SiblingPolicy, got {self.sibling_policy!r}")

        if not isinstance(self.move_policy, MovePolicy):
            errors.append(f"move_policy must be a MovePolicy, got {self.move_policy!r}")

        return errors
