"""
Weighbench error taxonomy (core/errors.py)

Every failure a sweep can report to its caller derives from BenchmarkError.
MissingComponentError is deliberately outside that hierarchy: it signals a
broken benchmark declaration, not a recoverable run failure.
"""
from __future__ import annotations


class BenchmarkError(Exception):
    """Base class for errors returned by a benchmark run."""


class UnknownBenchmark(BenchmarkError):
    """No benchmark case is registered under the requested name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Could not find benchmark: {name!r}")


class SetupFailure(BenchmarkError):
    """A pre-block, instancer or build step failed while preparing an invocation."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Benchmark setup failed: {reason}")


class DispatchFailure(BenchmarkError):
    """The benchmarked operation failed during timed execution."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Benchmark dispatch failed: {reason}")


class RegistryFrozenError(BenchmarkError):
    """A registry was modified after it became read-only."""


class MissingComponentError(LookupError):
    """An assignment does not match the declared component set of a case."""
