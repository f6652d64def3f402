# weighbench/adapters/dispatcher.py
from __future__ import annotations
import logging
from typing import Any, Callable, Dict, List, Mapping
from weighbench.adapters.base import BaseDispatcher, BaseStore, ExecutionResult
from weighbench.core.models import Invocation, Origin

logger = logging.getLogger(__name__)

# handler(state, origin, *args) -> data
CallHandler = Callable[..., Any]


class DispatchError(Exception):
    """Raised by call handlers to reject a call."""


class BadOrigin(DispatchError, PermissionError):
    """The call was made under an origin it does not accept."""


def ensure_signed(origin: Origin) -> str:
    if origin.kind != "signed":
        raise BadOrigin(f"Expected a signed origin, got {origin}")
    return origin.account


def ensure_root(origin: Origin) -> None:
    if origin.kind != "root":
        raise BadOrigin(f"Expected root origin, got {origin}")


class RuntimeDispatcher(BaseDispatcher):
    """Executes calls by name against a backing store."""

    def __init__(self, state: BaseStore, calls: Mapping[str, CallHandler] | None = None):
        self.state = state
        self._calls: Dict[str, CallHandler] = {}
        for name, handler in (calls or {}).items():
            self.register(name, handler)

    def register(self, name: str, handler: CallHandler) -> None:
        if name in self._calls:
            raise ValueError(f"Call '{name}' is already registered")
        self._calls[name] = handler

    def register_all(self, calls: Mapping[str, CallHandler]) -> None:
        for name, handler in calls.items():
            self.register(name, handler)

    def call_names(self) -> List[str]:
        return sorted(self._calls)

    # ---------- main dispatch ----------
    def execute(self, invocation: Invocation) -> ExecutionResult:
        call = invocation.call
        meta = {"call": call.name, "origin": str(invocation.origin)}
        handler = self._calls.get(call.name)
        if handler is None:
            return ExecutionResult(success=False, error=f"Unknown call: {call.name}", meta=meta)
        try:
            data = handler(self.state, invocation.origin, *call.args)
        except Exception as e:
            logger.debug(f"Call {call.name} failed: {e}")
            return ExecutionResult(success=False, error=str(e) or e.__class__.__name__, meta=meta)
        return ExecutionResult(success=True, data=data, meta=meta)
