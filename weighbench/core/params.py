"""
Complexity parameter declarations (core/params.py)

A benchmark case declares its parameters in one of four forms:

    param("x", 0, 10)                      # own range, no instancer
    param("y", 0, 10, instancer=setup_y)   # own range and instancer
    common("l")                            # range and instancer from the common pool
    common("l", instancer=setup_l)         # range from the pool, own instancer

Declaring ``param("l", ...)`` for a name that also lives in the common pool fully
overrides the pool's definition. Declarations are resolved against the pool once,
when the case is built; only resolved parameters ever have their instancer run.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, Iterator, Optional

from .models import Component

if TYPE_CHECKING:
    from .case import SetupContext

Instancer = Callable[["SetupContext", int], Any]


def noop_instancer(ctx: "SetupContext", value: int) -> None:
    return None


class _Inherit:
    def __repr__(self) -> str:
        return "INHERIT"


# Marker: take the instancer from the common pool.
INHERIT: Any = _Inherit()


@dataclass(frozen=True)
class ParamDecl:
    """An unresolved parameter declaration."""
    name: str
    low: Optional[int] = None
    high: Optional[int] = None
    instancer: Any = None
    from_common: bool = False

    def resolve(self, pool: Optional["CommonParams"]) -> "Parameter":
        if not self.from_common:
            return Parameter(
                component=Component(name=self.name, low=self.low, high=self.high),
                instancer=self.instancer or noop_instancer,
                source="own",
            )
        if pool is None:
            raise KeyError(f"Parameter '{self.name}' refers to the common pool, but no common parameters were declared")
        shared = pool.get(self.name)
        if self.instancer is INHERIT:
            return Parameter(component=shared.component, instancer=shared.instancer, source="common")
        return Parameter(
            component=shared.component,
            instancer=self.instancer or noop_instancer,
            source="common-range",
        )


@dataclass(frozen=True)
class Parameter:
    """A resolved parameter: its component and the instancer bound to it."""
    component: Component
    instancer: Instancer
    source: str = "own"

    @property
    def name(self) -> str:
        return self.component.name


def param(name: str, low: int, high: int, instancer: Optional[Instancer] = None) -> ParamDecl:
    """Declare a parameter with its own range ``[low, high)``."""
    return ParamDecl(name=name, low=low, high=high, instancer=instancer)


def common(name: str, instancer: Any = INHERIT) -> ParamDecl:
    """Declare a parameter drawn from the common pool.

    Without ``instancer`` both the range and the default instancer are inherited.
    Passing ``instancer`` (``None`` for a no-op) keeps only the range.
    """
    return ParamDecl(name=name, instancer=instancer, from_common=True)


class CommonParams:
    """Parameters shared across the cases of one registry."""

    def __init__(self, *decls: ParamDecl):
        self._params: Dict[str, Parameter] = {}
        for decl in decls:
            if decl.from_common:
                raise ValueError(f"Common parameter '{decl.name}' cannot itself refer to the common pool")
            if decl.name in self._params:
                raise ValueError(f"Duplicate common parameter '{decl.name}'")
            resolved = decl.resolve(None)
            self._params[decl.name] = Parameter(
                component=resolved.component,
                instancer=resolved.instancer,
                source="common",
            )

    def get(self, name: str) -> Parameter:
        try:
            return self._params[name]
        except KeyError:
            raise KeyError(f"Unknown common parameter '{name}'") from None

    def names(self) -> list[str]:
        return list(self._params)

    def __contains__(self, name: object) -> bool:
        return name in self._params

    def __iter__(self) -> Iterator[Parameter]:
        return iter(self._params.values())

    def __len__(self) -> int:
        return len(self._params)


def resolve_all(decls: Iterable[ParamDecl], pool: Optional[CommonParams]) -> list[Parameter]:
    resolved = []
    seen = set()
    for decl in decls:
        if decl.name in seen:
            raise ValueError(f"Parameter '{decl.name}' is declared more than once")
        seen.add(decl.name)
        resolved.append(decl.resolve(pool))
    return resolved
