"""
Index management.

Single ascending-field index creation with uniqueness and sparseness flags.
"""

from .manager import IndexManager, create_index

__all__ = ["IndexManager", "create_index"]
