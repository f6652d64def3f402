import pytest

from weighbench.adapters.dispatcher import BadOrigin, DispatchError, RuntimeDispatcher, ensure_root, ensure_signed
from weighbench.core.models import Invocation, Origin


def remark(state, origin, text):
    who = ensure_signed(origin)
    state.put(f"remark/{who}", text)
    return len(text)


def test_execute_success(store):
    dispatcher = RuntimeDispatcher(store, {"system.remark": remark})
    result = dispatcher.execute(Invocation.of("system.remark", "hello", origin=Origin.signed("alice")))
    assert result
    assert result.data == 5
    assert result.meta == {"call": "system.remark", "origin": "Signed(alice)"}
    assert store.get("remark/alice") == "hello"


def test_bad_origin_is_failed_result(store):
    dispatcher = RuntimeDispatcher(store, {"system.remark": remark})
    result = dispatcher.execute(Invocation.of("system.remark", "hello", origin=Origin.root()))
    assert not result
    assert "signed origin" in result.error


def test_unknown_call(store):
    dispatcher = RuntimeDispatcher(store)
    result = dispatcher.execute(Invocation.of("system.nothing", origin=Origin.root()))
    assert result.success is False
    assert result.error == "Unknown call: system.nothing"


def test_exception_without_message_uses_class_name(store):
    def broken(state, origin):
        raise DispatchError()

    dispatcher = RuntimeDispatcher(store, {"x.broken": broken})
    result = dispatcher.execute(Invocation.of("x.broken", origin=Origin.root()))
    assert result.error == "DispatchError"


def test_register_rejects_duplicates(store):
    dispatcher = RuntimeDispatcher(store, {"system.remark": remark})
    with pytest.raises(ValueError):
        dispatcher.register("system.remark", remark)
    dispatcher.register_all({"b.one": remark, "a.two": remark})
    assert dispatcher.call_names() == ["a.two", "b.one", "system.remark"]


def test_origin_guards():
    assert ensure_signed(Origin.signed("bob")) == "bob"
    ensure_root(Origin.root())
    with pytest.raises(BadOrigin):
        ensure_root(Origin.signed("bob"))
    with pytest.raises(PermissionError):
        ensure_signed(Origin.none())
