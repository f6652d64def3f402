"""
Weighbench: Parameterized Benchmark Sweeps for Runtime Calls

Measures how the execution time of a call grows with each of its complexity
parameters, sweeping one parameter at a time against a freshly reset store.
"""

__version__ = "0.1.0"

# Public API re-exports from subpackages
from .core.models import (
    Assignment,
    BenchmarkResult,
    Call,
    Component,
    Invocation,
    Origin,
)

from .core.errors import (
    BenchmarkError,
    UnknownBenchmark,
    SetupFailure,
    DispatchFailure,
    MissingComponentError,
)

from .core.config import (
    DatabaseConfig,
    EngineConfig,
    WeighbenchConfig,
)

from .core.params import CommonParams, param, common
from .core.case import BenchmarkCase, SetupContext
from .core.registry import BenchmarkRegistry, benchmarks, case, get_registry, list_pallets
from .core.engine import BenchmarkEngine
from .core.account import account
from .adapters.sqlite_adapter import SQLiteStore
from .adapters.dispatcher import RuntimeDispatcher
from .adapters.base import ExecutionResult, BaseStore, BaseDispatcher
from .services.service_factory import create_engine, run_benchmark
