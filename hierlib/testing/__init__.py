"""Testing utilities for HierLib consumers."""

from .fixtures import SAMPLE_EDGES, build_sample_tree, StoreTestHelper

__all__ = ['SAMPLE_EDGES', 'build_sample_tree', 'StoreTestHelper']
