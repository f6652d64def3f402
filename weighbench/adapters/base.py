# weighbench/adapters/base.py
"""
Weighbench Adapter Base Module

This module defines the interfaces the benchmark engine drives: the backing store
that is reset between timed runs, and the dispatcher that executes an invocation.
Concrete implementations (such as the SQLite store) should inherit from these bases.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterator, Optional
from dataclasses import dataclass
from weighbench.core.models import Invocation


@dataclass
class ExecutionResult:
    """
    Operation Execution Result

    Used to uniformly represent dispatch results, including success status, data, and error messages.
    """
    success: bool  # Whether operation succeeded
    data: Optional[Any] = None  # Data returned by operation
    error: Optional[str] = None  # Error message
    meta: Optional[Dict[str, Any]] = None  # Metadata (call name, origin, etc.)

    def __bool__(self) -> bool:
        """Allow direct use in conditional expressions to check if operation succeeded"""
        return self.success


class BaseStore(ABC):
    """
    Backing Store Base Class

    A key/value state with two isolation primitives used by the benchmark engine:
    ``commit`` flushes pending writes and drops read caches, ``wipe_to_baseline``
    restores the fixed starting (genesis) state.
    """

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Read a value, or ``default`` when the key is absent"""

    @abstractmethod
    def put(self, key: str, value: Any) -> None:
        """Write a value"""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key; removing an absent key is not an error"""

    @abstractmethod
    def keys(self, prefix: str = "") -> Iterator[str]:
        """Iterate over live keys starting with ``prefix``, in sorted order"""

    @abstractmethod
    def commit(self) -> None:
        """Flush pending writes and drop read caches"""

    @abstractmethod
    def wipe_to_baseline(self) -> None:
        """Discard all state and restore the baseline"""

    def contains(self, key: str) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    def close(self) -> None:
        """
        Close store connection

        Default implementation is empty, specific stores can override as needed.
        """
        pass


class BaseDispatcher(ABC):
    """
    Dispatcher Base Class

    Executes an invocation's call under its origin. Execution must be synchronous:
    the engine times exactly this call.
    """

    @abstractmethod
    def execute(self, invocation: Invocation) -> ExecutionResult:
        """
        Execute an invocation

        Args:
            invocation: Call and origin to execute

        Returns:
            ExecutionResult: Operation execution result
        """
        pass


_MISSING = object()
