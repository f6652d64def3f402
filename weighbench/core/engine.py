"""
Weighbench Core Engine (core/engine.py)

Runs parameter sweeps: for every component of a benchmark case, step that
component across its range while every other component sits at its midpoint,
timing each dispatch against a freshly reset backing store.
"""
from typing import Callable, Iterator, List, Optional, Sequence
import logging
import threading
import time

from .config import EngineConfig
from .errors import DispatchFailure, SetupFailure
from .models import Assignment, BenchmarkResult, Component
from .registry import BenchmarkRegistry
from weighbench.adapters.base import BaseDispatcher, BaseStore

# Configure logging
logger = logging.getLogger("weighbench.engine")


def step_size(component: Component, steps: int) -> int:
    return max(1, component.width // steps)


def num_steps(component: Component, steps: int, clamp_zero_width: bool = False) -> int:
    count = component.width // step_size(component, steps)
    if clamp_zero_width:
        return max(count, 1)
    return count


def sweep_assignments(
    components: Sequence[Component],
    steps: int,
    clamp_zero_width: bool = False,
) -> Iterator[Assignment]:
    """Yield the assignments of a sweep in execution order (one per step, before repeats)."""
    for target in components:
        size = step_size(target, steps)
        for s in range(num_steps(target, steps, clamp_zero_width)):
            value = target.low + size * s
            yield tuple(
                (c.name, value if c.name == target.name else c.mid)
                for c in components
            )


class BenchmarkEngine:
    """Weighbench Core Engine"""

    def __init__(
        self,
        registry: BenchmarkRegistry,
        store: BaseStore,
        dispatcher: BaseDispatcher,
        config: Optional[EngineConfig] = None,
        clock: Callable[[], int] = time.perf_counter_ns,
    ):
        self.registry = registry
        self.store = store
        self.dispatcher = dispatcher
        self.config = config or EngineConfig()
        self.clock = clock
        self._lock = threading.Lock()

        self.logger = logging.getLogger("weighbench.engine")
        self.logger.info(
            f"Engine initialized - Pallet: {registry.pallet}, "
            f"Store: {store.__class__.__name__}, "
            f"Dispatcher: {dispatcher.__class__.__name__}"
        )

    def plan(self, name: str, steps: Optional[int] = None) -> List[Assignment]:
        """Assignments a sweep of ``name`` would execute, without running anything."""
        bench = self.registry.get(name)
        steps = self.config.steps if steps is None else steps
        if steps <= 0:
            raise ValueError(f"steps must be positive, got {steps}")
        return list(sweep_assignments(bench.components(), steps, self.config.clamp_zero_width))

    def run(self, name: str, steps: Optional[int] = None, repeat: Optional[int] = None) -> List[BenchmarkResult]:
        """Sweep benchmark ``name`` and return one result per timed run, in execution order.

        Raises:
            UnknownBenchmark: no case registered under ``name``
            SetupFailure: an instancer or build step failed; the sweep is discarded
            DispatchFailure: the call failed during timed execution; the sweep is discarded
        """
        steps = self.config.steps if steps is None else steps
        repeat = self.config.repeat if repeat is None else repeat
        if steps <= 0:
            raise ValueError(f"steps must be positive, got {steps}")
        if repeat <= 0:
            raise ValueError(f"repeat must be positive, got {repeat}")

        if not self._lock.acquire(blocking=False):
            raise RuntimeError("A sweep is already running on this engine")
        try:
            bench = self.registry.get(name)
            self.registry.freeze()

            # Warm up the store
            self.store.commit()
            self.store.wipe_to_baseline()

            self.logger.info(f"Benchmarking {self.registry.pallet}.{name}: steps={steps}, repeat={repeat}")
            try:
                results = self._sweep(bench, steps, repeat)
            except BaseException:
                # KeyboardInterrupt included: no half-built state may outlive the sweep
                self.store.wipe_to_baseline()
                raise
            self.logger.info(f"Benchmark {self.registry.pallet}.{name} finished: {len(results)} runs")
            return results
        finally:
            self._lock.release()

    def _sweep(self, bench, steps: int, repeat: int) -> List[BenchmarkResult]:
        results: List[BenchmarkResult] = []
        for assignment in sweep_assignments(bench.components(), steps, self.config.clamp_zero_width):
            for _ in range(repeat):
                try:
                    invocation = bench.instance(assignment, state=self.store)
                except SetupFailure as e:
                    self.logger.error(f"Setup of {bench.name} failed at {dict(assignment)}: {e.reason}")
                    raise

                # Flush the overlay and caches so the run pays cold reads
                self.store.commit()

                start = self.clock()
                try:
                    outcome = self.dispatcher.execute(invocation)
                except Exception as e:
                    self.logger.error(f"Dispatch of {bench.name} raised at {dict(assignment)}: {e}")
                    raise DispatchFailure(str(e) or e.__class__.__name__) from e
                finish = self.clock()

                if not outcome:
                    reason = outcome.error or f"{invocation.call.name} failed"
                    self.logger.error(f"Dispatch of {bench.name} failed at {dict(assignment)}: {reason}")
                    raise DispatchFailure(reason)

                elapsed = finish - start
                results.append(BenchmarkResult(assignment=assignment, elapsed_ns=elapsed))
                self.logger.debug(f"{bench.name} {dict(assignment)}: {elapsed}ns")

                # Wipe the store back to the baseline
                self.store.wipe_to_baseline()
        return results
