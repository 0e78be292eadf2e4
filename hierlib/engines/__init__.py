"""Tree engines for specific node encodings.

Engines implement the TreeEngine interface over one way of storing the
parent relationship.
"""

from .parent_pointer import ParentPointerEngine
from .materialized_path import MaterializedPathEngine

__all__ = [
    "ParentPointerEngine",
    "MaterializedPathEngine",
]
