"""Adapters: backing stores and dispatchers driven by the benchmark engine."""

from .base import BaseStore, BaseDispatcher, ExecutionResult
from .sqlite_adapter import SQLiteStore
from .dispatcher import RuntimeDispatcher, DispatchError, BadOrigin, ensure_root, ensure_signed

__all__ = [
    "BaseStore",
    "BaseDispatcher",
    "ExecutionResult",
    "SQLiteStore",
    "RuntimeDispatcher",
    "DispatchError",
    "BadOrigin",
    "ensure_root",
    "ensure_signed",
]
