import pytest

from weighbench.core.errors import RegistryFrozenError, UnknownBenchmark
from weighbench.core.models import Invocation, Origin
from weighbench.core.params import CommonParams, common, param
from weighbench.core.registry import (
    BenchmarkRegistry,
    benchmarks,
    case,
    get_registry,
    list_pallets,
    unregister_registry,
)


def build_noop(ctx):
    return Invocation.of("test.noop", origin=Origin.root())


@pytest.fixture()
def scratch_pallet():
    name = "scratch_pallet"
    yield name
    unregister_registry(name)


def test_register_and_lookup():
    registry = BenchmarkRegistry("p")
    bench = registry.register(case("one", [param("x", 0, 4)], build=build_noop).bind(None))
    assert registry.get("one") is bench
    assert "one" in registry
    assert registry.names() == ["one"]
    assert len(registry) == 1
    assert list(registry) == [bench]


def test_unknown_name():
    registry = BenchmarkRegistry("p")
    with pytest.raises(UnknownBenchmark) as exc_info:
        registry.get("nope")
    assert exc_info.value.name == "nope"


def test_duplicate_name_rejected():
    registry = BenchmarkRegistry("p")
    decl = case("one", [], build=build_noop)
    registry.register(decl.bind(None))
    with pytest.raises(ValueError, match="already registered"):
        registry.register(decl.bind(None))


def test_frozen_registry_is_read_only():
    registry = BenchmarkRegistry("p")
    registry.freeze()
    assert registry.frozen
    with pytest.raises(RegistryFrozenError):
        registry.register(case("late", [], build=build_noop).bind(None))


def test_benchmarks_binds_common_pool():
    registry = benchmarks(
        "p",
        common=CommonParams(param("l", 2, 8)),
        cases=[
            case("a", [common("l")], build=build_noop),
            case("b", [common("l"), param("m", 0, 3)], build=build_noop),
        ],
        register=False,
    )
    assert registry.frozen
    assert registry.names() == ["a", "b"]
    (l_component,) = registry.get("a").components()
    assert (l_component.low, l_component.high) == (2, 8)


def test_global_catalog(scratch_pallet):
    registry = benchmarks(scratch_pallet, cases=[case("a", [], build=build_noop)])
    assert get_registry(scratch_pallet) is registry
    assert scratch_pallet in list_pallets()
    assert list_pallets() == sorted(list_pallets())
    with pytest.raises(ValueError, match="already has"):
        benchmarks(scratch_pallet, cases=[])


def test_unknown_pallet():
    with pytest.raises(UnknownBenchmark):
        get_registry("no_such_pallet")


def test_builtin_pallets_registered():
    import weighbench.pallets  # noqa: F401
    assert {"balances", "identity"} <= set(list_pallets())
    assert get_registry("identity").names() == [
        "add_registrar", "set_identity", "set_subs", "clear_identity", "request_judgement",
    ]
