"""
Benchmark registry (core/registry.py)

A BenchmarkRegistry maps benchmark names to cases for one pallet. Registries are
populated once, at import time, and frozen before any sweep runs; the
process-wide catalog maps pallet names to their registries.

Typical declaration:

    registry = benchmarks(
        "identity",
        common=CommonParams(param("r", 1, 16, instancer=add_registrars)),
        cases=[
            case("add_registrar", [common("r")], build=build_add_registrar),
            case("set_identity", [common("r"), param("x", 1, 32)], build=build_set_identity, setup=make_caller),
        ],
    )
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence

from .case import BenchmarkCase, BuildFn, SetupFn
from .errors import RegistryFrozenError, UnknownBenchmark
from .params import CommonParams, ParamDecl

logger = logging.getLogger(__name__)


class BenchmarkRegistry:
    """Write-once table of benchmark cases for one pallet."""

    def __init__(self, pallet: str):
        self.pallet = pallet
        self._cases: Dict[str, BenchmarkCase] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, bench: BenchmarkCase) -> BenchmarkCase:
        if self._frozen:
            raise RegistryFrozenError(f"Registry '{self.pallet}' is frozen; cannot register '{bench.name}'")
        if bench.name in self._cases:
            raise ValueError(f"Benchmark '{bench.name}' is already registered in '{self.pallet}'")
        self._cases[bench.name] = bench
        logger.debug(f"Registered benchmark {self.pallet}.{bench.name}")
        return bench

    def freeze(self) -> None:
        self._frozen = True

    def get(self, name: str) -> BenchmarkCase:
        try:
            return self._cases[name]
        except KeyError:
            raise UnknownBenchmark(name) from None

    def names(self) -> List[str]:
        return list(self._cases)

    def __contains__(self, name: object) -> bool:
        return name in self._cases

    def __iter__(self) -> Iterator[BenchmarkCase]:
        return iter(self._cases.values())

    def __len__(self) -> int:
        return len(self._cases)


@dataclass(frozen=True)
class CaseDecl:
    """A case waiting for its registry's common pool."""
    name: str
    params: Sequence[ParamDecl]
    build: BuildFn
    setup: Optional[SetupFn] = None

    def bind(self, pool: Optional[CommonParams]) -> BenchmarkCase:
        return BenchmarkCase(self.name, self.params, build=self.build, setup=self.setup, common=pool)


def case(name: str, params: Sequence[ParamDecl], build: BuildFn, setup: Optional[SetupFn] = None) -> CaseDecl:
    return CaseDecl(name=name, params=tuple(params), build=build, setup=setup)


_REGISTRIES: Dict[str, BenchmarkRegistry] = {}


def register_registry(registry: BenchmarkRegistry) -> BenchmarkRegistry:
    if registry.pallet in _REGISTRIES:
        raise ValueError(f"Pallet '{registry.pallet}' already has a benchmark registry")
    _REGISTRIES[registry.pallet] = registry
    return registry


def unregister_registry(pallet: str) -> None:
    _REGISTRIES.pop(pallet, None)


def get_registry(pallet: str) -> BenchmarkRegistry:
    try:
        return _REGISTRIES[pallet]
    except KeyError:
        raise UnknownBenchmark(pallet) from None


def list_pallets() -> List[str]:
    return sorted(_REGISTRIES)


def benchmarks(
    pallet: str,
    cases: Sequence[CaseDecl],
    common: Optional[CommonParams] = None,
    register: bool = True,
) -> BenchmarkRegistry:
    """Build, freeze and (by default) globally register a pallet's benchmarks."""
    registry = BenchmarkRegistry(pallet)
    for decl in cases:
        registry.register(decl.bind(common))
    registry.freeze()
    if register:
        register_registry(registry)
    logger.debug(f"Pallet {pallet}: {len(registry)} benchmarks registered")
    return registry
