"""
Benchmark case (core/case.py)

A case couples one benchmarked call with its parameter space. ``instance``
turns a concrete assignment into an Invocation by running, in order:

1. the pre-block ``setup(ctx)``
2. each parameter's instancer in declaration order
3. the build step ``build(ctx) -> Invocation``

All three share one SetupContext, so locals stored by the pre-block are visible
to instancers and to the build step.
"""
from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Tuple, Union

from .errors import MissingComponentError, SetupFailure
from .models import Assignment, Component, Invocation
from .params import CommonParams, ParamDecl, Parameter, resolve_all

logger = logging.getLogger(__name__)

# Seed handed to account derivation during set-up.
BENCHMARK_SEED = 0

SetupFn = Callable[["SetupContext"], Any]
BuildFn = Callable[["SetupContext"], Invocation]
AssignmentLike = Union[Assignment, Sequence[Tuple[str, int]], Mapping[str, int]]


class SetupContext:
    """State shared by the pre-block, the instancers and the build step of one instance."""

    def __init__(self, params: Mapping[str, int], state: Any = None, seed: int = BENCHMARK_SEED):
        self.params = MappingProxyType(dict(params))
        self.state = state
        self.seed = seed
        self._locals: Dict[str, Any] = {}

    def __getitem__(self, key: str) -> Any:
        try:
            return self._locals[key]
        except KeyError:
            raise KeyError(f"Setup local '{key}' was never assigned") from None

    def __setitem__(self, key: str, value: Any) -> None:
        self._locals[key] = value

    def __contains__(self, key: object) -> bool:
        return key in self._locals

    def get(self, key: str, default: Any = None) -> Any:
        return self._locals.get(key, default)


def _reason(exc: BaseException) -> str:
    if isinstance(exc, SetupFailure):
        return exc.reason
    return str(exc) or exc.__class__.__name__


class BenchmarkCase:
    """One named benchmark: its parameters, pre-block and build step."""

    def __init__(
        self,
        name: str,
        params: Sequence[ParamDecl],
        build: BuildFn,
        setup: Optional[SetupFn] = None,
        common: Optional[CommonParams] = None,
    ):
        if not name.isidentifier():
            raise ValueError(f"Benchmark name must be an identifier, got '{name}'")
        self.name = name
        self._parameters: Tuple[Parameter, ...] = tuple(resolve_all(params, common))
        self._components: Tuple[Component, ...] = tuple(p.component for p in self._parameters)
        self._build = build
        self._setup = setup

    def __repr__(self) -> str:
        names = ", ".join(c.name for c in self._components)
        return f"BenchmarkCase({self.name!r}, [{names}])"

    @property
    def parameters(self) -> Tuple[Parameter, ...]:
        return self._parameters

    def components(self) -> Tuple[Component, ...]:
        """Declared parameter space, in declaration order."""
        return self._components

    def _check_assignment(self, assignment: AssignmentLike) -> Dict[str, int]:
        pairs = assignment.items() if isinstance(assignment, Mapping) else assignment
        values: Dict[str, int] = {}
        for name, value in pairs:
            if name in values:
                raise MissingComponentError(f"Benchmark '{self.name}': parameter '{name}' assigned twice")
            values[name] = value

        declared = {c.name for c in self._components}
        missing = [c.name for c in self._components if c.name not in values]
        if missing:
            raise MissingComponentError(f"Benchmark '{self.name}': assignment is missing {missing}")
        unknown = sorted(set(values) - declared)
        if unknown:
            raise MissingComponentError(f"Benchmark '{self.name}': assignment has undeclared parameters {unknown}")

        for component in self._components:
            if not component.contains(values[component.name]):
                raise ValueError(
                    f"Benchmark '{self.name}': value {values[component.name]} for '{component.name}' "
                    f"is outside [{component.low}, {component.high}]"
                )
        return values

    def instance(self, assignment: AssignmentLike, state: Any = None) -> Invocation:
        """Prepare an Invocation for one concrete assignment.

        Raises:
            MissingComponentError: the assignment does not cover the declared components
            SetupFailure: the pre-block, an instancer or the build step failed
        """
        values = self._check_assignment(assignment)
        ctx = SetupContext(values, state=state)

        if self._setup is not None:
            try:
                self._setup(ctx)
            except Exception as e:
                logger.debug(f"Pre-block of {self.name} failed: {e}")
                raise SetupFailure(_reason(e)) from e

        for parameter in self._parameters:
            value = values[parameter.name]
            try:
                parameter.instancer(ctx, value)
            except Exception as e:
                logger.debug(f"Instancer for {self.name}.{parameter.name}={value} failed: {e}")
                raise SetupFailure(_reason(e)) from e

        try:
            invocation = self._build(ctx)
        except Exception as e:
            logger.debug(f"Build step of {self.name} failed: {e}")
            raise SetupFailure(_reason(e)) from e
        if not isinstance(invocation, Invocation):
            raise SetupFailure(
                f"build step of '{self.name}' returned {type(invocation).__name__}, expected Invocation"
            )
        return invocation
