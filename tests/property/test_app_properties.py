"""Property-based tests for module resolution, init and stop aggregation."""

import asyncio

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from appmods.app import Application, Module, StopResult
from appmods.app.core.fanout import Outcome, stop_all
from appmods.app.reporter import ErrorReporter, code_prefix
from appmods.log import create_root_lg

module_names = st.from_regex(r"[a-z][a-z0-9_-]{0,12}", fullmatch=True).filter(
    lambda n: n != "app"
)


class Plain(Module):
    pass


def _build(names, configured):
    lg = create_root_lg(False)
    config = {"app": {"name": "prop-app"}}
    for name in configured:
        config[name] = {"id": name}
    app = Application(config, "/nonexistent/modules", lg=lg)
    for name in names:
        app.registry.register(name, Plain)
    return app


@pytest.mark.property
@pytest.mark.unit
class TestRequireInitProperties:
    """Every required module gets exactly its own config slice."""

    @given(names=st.lists(module_names, min_size=1, max_size=8, unique=True))
    @settings(max_examples=50, deadline=None)
    def test_each_instance_gets_own_slice(self, names):
        app = _build(names, names)
        app.require()
        app.init()

        assert set(app.instances) == set(names)
        for name in names:
            assert app.instances[name].config is app.config[name]
            assert app.instances[name].config["id"] == name

    @given(
        configured=st.lists(module_names, min_size=1, max_size=5, unique=True),
        extra=st.lists(module_names, max_size=5, unique=True),
    )
    @settings(max_examples=50, deadline=None)
    def test_require_registers_unknown_names(self, configured, extra):
        extra = [n for n in extra if n not in configured]
        app = _build(configured + extra, configured)

        app.require()
        app.require(extra)

        assert app.modules == configured + extra
        for name in extra:
            assert app.config[name] == {}

    @given(names=st.lists(module_names, min_size=1, max_size=5, unique=True))
    @settings(max_examples=30, deadline=None)
    def test_require_is_idempotent(self, names):
        app = _build(names, names)

        app.require()
        first = {n: app.registry.get(n) for n in names}
        app.require()

        assert {n: app.registry.get(n) for n in names} == first
        assert app.modules == names


@pytest.mark.property
@pytest.mark.unit
class TestErrorCodeProperties:
    """Error codes are always namespaced by the app name."""

    @given(name=module_names, code=st.from_regex(r"[A-Z][A-Z_]{0,20}", fullmatch=True))
    def test_code_is_prefixed(self, name, code):
        prefix = code_prefix(name)
        err = ErrorReporter(prefix).raise_error(code, "x", True)

        assert err.code == f"{prefix}_{code}"
        assert "-" not in prefix
        assert prefix == prefix.upper()


class _Scripted:
    def __init__(self, fail):
        self.fail = fail
        self.stop_timeout_ms = 1000

    async def stop(self):
        await asyncio.sleep(0)
        if self.fail:
            raise RuntimeError("stop failed")
        return "ok"


@pytest.mark.property
@pytest.mark.unit
class TestStopProperties:
    """Stop outcomes are complete, ordered and decide the exit code."""

    @given(plan=st.lists(st.booleans(), max_size=10))
    @settings(max_examples=30, deadline=None)
    def test_exit_code_reflects_failures(self, plan):
        items = [(f"m{i}", _Scripted(fail)) for i, fail in enumerate(plan)]
        lg = create_root_lg(False)

        result = asyncio.run(stop_all(items, ErrorReporter("P"), lg))

        assert [o.name for o in result] == [name for name, _ in items]
        assert [not o.ok for o in result] == plan
        assert result.exit_code == (1 if any(plan) else 0)

    @given(statuses=st.lists(st.booleans(), max_size=10))
    def test_stop_result_ok_iff_all_fulfilled(self, statuses):
        outcomes = tuple(
            Outcome.fulfilled(str(i)) if ok else Outcome.rejected(str(i), ValueError())
            for i, ok in enumerate(statuses)
        )

        assert StopResult(outcomes).ok == all(statuses)
