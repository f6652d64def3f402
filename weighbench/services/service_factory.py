"""Service factory: wire a store, a dispatcher and a registry into a BenchmarkEngine.

Goals
- Centralize config resolution so the CLI and library callers build engines the same way.
- The store is seeded with the runtime's genesis state, which becomes the baseline
  every timed run is wiped back to.

Public API
- create_store(config: Optional[WeighbenchConfig] = None) -> SQLiteStore
- create_engine(pallet: str, config: Optional[WeighbenchConfig] = None) -> BenchmarkEngine
- run_benchmark(pallet, extrinsic, steps=None, repeat=None, config=None) -> list[BenchmarkResult]
"""
from __future__ import annotations
import logging
from typing import List, Optional

from weighbench.adapters.dispatcher import RuntimeDispatcher
from weighbench.adapters.sqlite_adapter import SQLiteStore
from weighbench.core.config import WeighbenchConfig
from weighbench.core.engine import BenchmarkEngine
from weighbench.core.models import BenchmarkResult
from weighbench.core.registry import get_registry

logger = logging.getLogger("weighbench.service_factory")


def _resolve_config(config: Optional[WeighbenchConfig]) -> WeighbenchConfig:
    return config if config is not None else WeighbenchConfig.from_env()


def create_store(config: Optional[WeighbenchConfig] = None) -> SQLiteStore:
    from weighbench.pallets import genesis

    cfg = _resolve_config(config)
    return SQLiteStore(cfg.database.path, genesis=genesis(), timeout=cfg.database.timeout)


def create_engine(pallet: str, config: Optional[WeighbenchConfig] = None) -> BenchmarkEngine:
    from weighbench.pallets import RUNTIME_CALLS

    cfg = _resolve_config(config)
    registry = get_registry(pallet)
    store = create_store(cfg)
    dispatcher = RuntimeDispatcher(store, RUNTIME_CALLS)
    logger.info(f"🔧 Creating BenchmarkEngine via service_factory: pallet={pallet}, db={cfg.database.path}")
    return BenchmarkEngine(registry, store, dispatcher, config=cfg.engine)


def run_benchmark(
    pallet: str,
    extrinsic: str,
    steps: Optional[int] = None,
    repeat: Optional[int] = None,
    config: Optional[WeighbenchConfig] = None,
) -> List[BenchmarkResult]:
    engine = create_engine(pallet, config)
    try:
        return engine.run(extrinsic, steps=steps, repeat=repeat)
    finally:
        engine.store.close()
