import pytest

from weighbench.adapters.base import BaseDispatcher, BaseStore, ExecutionResult


class DictStore(BaseStore):
    def __init__(self):
        self.data = {}

    def get(self, key, default=None):
        return self.data.get(key, default)

    def put(self, key, value):
        self.data[key] = value

    def delete(self, key):
        self.data.pop(key, None)

    def keys(self, prefix=""):
        return iter(sorted(k for k in self.data if k.startswith(prefix)))

    def commit(self):
        pass

    def wipe_to_baseline(self):
        self.data.clear()


def test_execution_result_bool_truthiness():
    ok = ExecutionResult(success=True, data={"x": 1})
    bad = ExecutionResult(success=False, error="xx")
    assert bool(ok) is True
    assert bool(bad) is False


def test_bases_are_abstract():
    with pytest.raises(TypeError):
        BaseStore()
    with pytest.raises(TypeError):
        BaseDispatcher()


def test_contains_default_distinguishes_none_values():
    st = DictStore()
    st.put("k", None)
    assert st.contains("k")
    assert not st.contains("other")
    st.close()
