"""Tests for routeline.middleware — resolution and ordered invocation."""

import pytest

from routeline.di.registry import TypeRegistry
from routeline.middleware.runner import resolve_middleware, run_middlewares

calls: list[str] = []


@pytest.fixture(autouse=True)
def _reset_calls() -> None:
    calls.clear()


class First:
    def __call__(self) -> str:
        calls.append("first")
        return "ignored"


class Second:
    def __call__(self) -> None:
        calls.append("second")


class NotCallable:
    pass


class NeedsArgs:
    def __init__(self, required: str) -> None:
        self.required = required

    def __call__(self) -> None:
        calls.append("needs-args")


def function_middleware() -> None:
    calls.append("function")


class TestResolve:
    def test_class_instantiated(self) -> None:
        mw = resolve_middleware("a", {"a": First}, TypeRegistry())
        assert isinstance(mw, First)

    def test_fresh_instance_each_time(self) -> None:
        registry = {"a": First}
        types = TypeRegistry()
        assert resolve_middleware("a", registry, types) is not resolve_middleware("a", registry, types)

    def test_unregistered_name(self) -> None:
        assert resolve_middleware("missing", {"a": First}, TypeRegistry()) is None

    def test_not_callable(self) -> None:
        assert resolve_middleware("n", {"n": NotCallable}, TypeRegistry()) is None

    def test_identifier(self) -> None:
        types = TypeRegistry()
        types.register(Second, "Second")
        assert isinstance(resolve_middleware("s", {"s": "Second"}, types), Second)

    def test_identifier_naming_no_type(self) -> None:
        assert resolve_middleware("s", {"s": "nowhere.Middleware"}, TypeRegistry()) is None

    def test_callable_instance_used_as_is(self) -> None:
        assert resolve_middleware("f", {"f": function_middleware}, TypeRegistry()) is function_middleware

    def test_no_dependency_injection(self) -> None:
        with pytest.raises(TypeError):
            resolve_middleware("n", {"n": NeedsArgs}, TypeRegistry())


class TestRun:
    def test_declaration_order(self) -> None:
        invoked = run_middlewares(["a", "b"], {"a": First, "b": Second}, TypeRegistry())
        assert calls == ["first", "second"]
        assert invoked == ["a", "b"]

    def test_order_follows_route_not_registry(self) -> None:
        run_middlewares(["b", "a"], {"a": First, "b": Second}, TypeRegistry())
        assert calls == ["second", "first"]

    def test_unregistered_name_skipped(self) -> None:
        invoked = run_middlewares(["a", "c", "b"], {"a": First, "b": Second}, TypeRegistry())
        assert calls == ["first", "second"]
        assert invoked == ["a", "b"]

    def test_non_callable_skipped(self) -> None:
        invoked = run_middlewares(["n", "a"], {"n": NotCallable, "a": First}, TypeRegistry())
        assert calls == ["first"]
        assert invoked == ["a"]

    def test_repeated_name_runs_twice(self) -> None:
        run_middlewares(["a", "a"], {"a": First}, TypeRegistry())
        assert calls == ["first", "first"]

    def test_empty(self) -> None:
        assert run_middlewares([], {"a": First}, TypeRegistry()) == []
        assert calls == []

    def test_function_middleware(self) -> None:
        run_middlewares(["f"], {"f": function_middleware}, TypeRegistry())
        assert calls == ["function"]
