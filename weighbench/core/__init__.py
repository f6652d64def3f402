"""Core subpackage: models, parameters, cases, registry, engine, config, validate."""

from .models import *  # re-export data models
from .errors import (
    BenchmarkError,
    UnknownBenchmark,
    SetupFailure,
    DispatchFailure,
    RegistryFrozenError,
    MissingComponentError,
)
from .params import CommonParams, Parameter, param, common
from .case import BenchmarkCase, SetupContext
from .registry import BenchmarkRegistry, benchmarks, get_registry, list_pallets
from .engine import BenchmarkEngine
from .validate import PlanValidator, validate_plan, load_plan, ValidationResult
from .config import DatabaseConfig, EngineConfig, WeighbenchConfig

__all__ = [
    "BenchmarkError",
    "UnknownBenchmark",
    "SetupFailure",
    "DispatchFailure",
    "RegistryFrozenError",
    "MissingComponentError",
    "CommonParams",
    "Parameter",
    "param",
    "common",
    "BenchmarkCase",
    "SetupContext",
    "BenchmarkRegistry",
    "benchmarks",
    "get_registry",
    "list_pallets",
    "BenchmarkEngine",
    "PlanValidator",
    "validate_plan",
    "load_plan",
    "ValidationResult",
    "DatabaseConfig",
    "EngineConfig",
    "WeighbenchConfig",
]
