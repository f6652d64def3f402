"""
Shared pytest configuration for unit tests.
Ensures project root is on sys.path and provides common fixtures.
"""
import itertools
import sys
from pathlib import Path
import pytest

# Add project root
ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from weighbench.adapters.dispatcher import RuntimeDispatcher
from weighbench.adapters.sqlite_adapter import SQLiteStore
from weighbench.core.config import EngineConfig
from weighbench.core.engine import BenchmarkEngine
from weighbench.core.models import Invocation, Origin
from weighbench.core.registry import benchmarks


def _noop_call(state, origin):
    return None


@pytest.fixture()
def store():
    st = SQLiteStore(":memory:")
    yield st
    st.close()


@pytest.fixture()
def clock():
    """Fake clock: every reading advances by 1000ns, so each timed run takes 1000ns."""
    ticks = itertools.count(start=0, step=1000)
    return lambda: next(ticks)


@pytest.fixture()
def dispatcher(store):
    return RuntimeDispatcher(store, {"test.noop": _noop_call})


@pytest.fixture()
def noop_invocation():
    def _build(ctx):
        return Invocation.of("test.noop", origin=Origin.root())
    return _build


@pytest.fixture()
def make_engine(store, dispatcher, clock):
    """Build an engine over an unregistered registry of the given cases."""
    def _make(cases, common=None, calls=None, **config):
        registry = benchmarks("test", cases=cases, common=common, register=False)
        if calls:
            dispatcher.register_all(calls)
        return BenchmarkEngine(registry, store, dispatcher, config=EngineConfig(**config), clock=clock)
    return _make
