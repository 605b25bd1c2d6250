"""
Database connection layer.

Provides the connection manager that owns the Motor client and resolves
collection handles.
"""

from .connection import ConnectionManager, connect, connect_or_exit

__all__ = [
    "ConnectionManager",
    "connect",
    "connect_or_exit",
]
