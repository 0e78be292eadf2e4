"""Common components shared by both engines.

This internal package contains non-store code that is identical for the
parent-pointer and materialized-path encodings. It should NOT be imported
directly by users.

Components here include:
- Configuration classes (EngineConfig and its policy enums)
- Path algebra for materialized paths (pure computation, no store access)

Important: This package must NEVER import from core or engines to avoid
circular dependencies.
"""

from .config import (
    EngineConfig,
    SiblingPolicy,
    MovePolicy,
)
from . import paths

__all__ = [
    'EngineConfig',
    'SiblingPolicy',
    'MovePolicy',
    'paths',
]
