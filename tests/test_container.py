"""Tests for routeline.di.container — recursive constructor injection."""

import sys
from abc import ABC, abstractmethod
from types import ModuleType

import pytest

from routeline.config import DispatchConfig
from routeline.di.container import Container
from routeline.di.descriptors import describe
from routeline.di.registry import TypeRegistry
from routeline.errors import CircularDependencyError, ResolutionError


class Plain:
    pass


class Settings:
    def __init__(self, name: str = "default", retries: int = 3, token: str | None = None) -> None:
        self.name = name
        self.retries = retries
        self.token = token


class Untyped:
    def __init__(self, a, b=5) -> None:
        self.a = a
        self.b = b


class IUserRepository(ABC):
    @abstractmethod
    def find(self, user_id: str) -> str: ...


class UserRepository(IUserRepository):
    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def find(self, user_id: str) -> str:
        return f"user-{user_id}"


class SqlUserRepository(IUserRepository):
    def find(self, user_id: str) -> str:
        return f"sql-{user_id}"


class IPaymentGateway(ABC):
    @abstractmethod
    def charge(self) -> None: ...


class Billing:
    def __init__(self, gateway: IPaymentGateway) -> None:
        self.gateway = gateway


class UserService:
    def __init__(self, repo: IUserRepository, settings: Settings, label: str = "svc") -> None:
        self.repo = repo
        self.settings = settings
        self.label = label


class UserController:
    def __init__(self, service: UserService, *, audit: Plain) -> None:
        self.service = service
        self.audit = audit


class Chicken:
    def __init__(self, egg: "Egg") -> None:
        self.egg = egg


class Egg:
    def __init__(self, chicken: Chicken) -> None:
        self.chicken = chicken


class Narcissus:
    def __init__(self, me: "Narcissus") -> None:
        self.me = me


class Dangling:
    def __init__(self, thing: "DoesNotExist") -> None:  # type: ignore[name-defined]  # noqa: F821
        self.thing = thing


class PositionalOnly:
    def __init__(self, plain: Plain, /, count: int = 2) -> None:
        self.plain = plain
        self.count = count


class TestConcrete:
    def test_zero_argument_constructor(self) -> None:
        instance = Container().make(Plain)
        assert isinstance(instance, Plain)

    def test_new_instance_each_time(self) -> None:
        container = Container()
        assert container.make(Plain) is not container.make(Plain)

    def test_builtin_params_take_defaults(self) -> None:
        settings = Container().make(Settings)
        assert settings.name == "default"
        assert settings.retries == 3
        assert settings.token is None

    def test_untyped_params(self) -> None:
        instance = Container().make(Untyped)
        assert instance.a is None
        assert instance.b == 5

    def test_by_identifier(self) -> None:
        types = TypeRegistry()
        types.register(Plain, "Plain")
        assert isinstance(Container(types).make("Plain"), Plain)

    def test_unknown_identifier(self) -> None:
        with pytest.raises(ResolutionError, match="No type named 'Nope'"):
            Container().make("Nope")

    def test_positional_only(self) -> None:
        instance = Container().make(PositionalOnly)
        assert isinstance(instance.plain, Plain)
        assert instance.count == 2


class TestRecursive:
    def test_nested_graph(self) -> None:
        controller = Container().make(UserController)
        assert isinstance(controller.service, UserService)
        assert isinstance(controller.service.repo, UserRepository)
        assert isinstance(controller.service.repo.settings, Settings)
        assert isinstance(controller.audit, Plain)
        assert controller.service.label == "svc"

    def test_no_sharing_between_branches(self) -> None:
        service = Container().make(UserService)
        assert service.settings is not service.repo.settings


class TestInterfaces:
    def test_naming_convention(self) -> None:
        repo = Container().make(IUserRepository)
        assert type(repo) is UserRepository

    def test_explicit_binding_beats_convention(self) -> None:
        container = Container(bindings={IUserRepository: SqlUserRepository})
        assert type(container.make(IUserRepository)) is SqlUserRepository

    def test_binding_by_identifier(self) -> None:
        types = TypeRegistry()
        types.register(SqlUserRepository, "SqlUserRepository")
        container = Container(types, bindings={"IUserRepository": "SqlUserRepository"})
        assert type(container.make(IUserRepository)) is SqlUserRepository

    def test_unbound_interface_names_it(self) -> None:
        with pytest.raises(ResolutionError) as exc_info:
            Container().make(Billing)
        assert exc_info.value.identifier == f"{__name__}.IPaymentGateway"
        assert "IPaymentGateway" in str(exc_info.value)

    def test_binding_to_missing_type_falls_back_to_convention(self) -> None:
        container = Container(bindings={IUserRepository: "nowhere.Repo"})
        assert type(container.make(IUserRepository)) is UserRepository

    def test_custom_prefixes(self) -> None:
        container = Container(config=DispatchConfig(interface_prefixes=("Abstract",)))
        with pytest.raises(ResolutionError):
            container.make(IUserRepository)

    def test_interface_inside_graph(self) -> None:
        container = Container(bindings={IUserRepository: SqlUserRepository})
        service = container.make(UserService)
        assert type(service.repo) is SqlUserRepository


class TestSetBindings:
    def test_replaces_wholesale(self) -> None:
        container = Container(bindings={IUserRepository: SqlUserRepository})
        container.set_bindings({"unrelated.IThing": "unrelated.Thing"})
        assert f"{__name__}.IUserRepository" not in container.bindings
        assert type(container.make(IUserRepository)) is UserRepository

    def test_bindings_view_is_read_only(self) -> None:
        container = Container(bindings={IUserRepository: SqlUserRepository})
        with pytest.raises(TypeError):
            container.bindings["x"] = "y"  # type: ignore[index]

    def test_class_implementation_registered(self) -> None:
        class LocalRepository(IUserRepository):
            def find(self, user_id: str) -> str:
                return "local"

        container = Container(bindings={IUserRepository: LocalRepository})
        assert type(container.make(IUserRepository)) is LocalRepository


class TestCycles:
    def test_mutual_dependency(self) -> None:
        with pytest.raises(CircularDependencyError) as exc_info:
            Container().make(Chicken)
        chain = exc_info.value.chain
        assert chain[0] == chain[-1] == f"{__name__}.Chicken"
        assert f"{__name__}.Egg" in chain

    def test_self_dependency(self) -> None:
        with pytest.raises(CircularDependencyError, match="Circular dependency"):
            Container().make(Narcissus)

    def test_cycle_is_resolution_error(self) -> None:
        with pytest.raises(ResolutionError):
            Container().make(Egg)


class TestUnresolvableAnnotation:
    def test_dangling_forward_ref(self) -> None:
        with pytest.raises(ResolutionError, match="parameter 'thing'"):
            Container().make(Dangling)


DEFERRED_SOURCE = '''
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from reporting.backends import Exporter


class Clock:
    pass


class Settings:
    def __init__(
        self, name: str = "default", retries: int = 3, exporter: Exporter | None = None
    ) -> None:
        self.name = name
        self.retries = retries
        self.exporter = exporter


class Report:
    def __init__(self, clock: Clock, settings: Settings, title: str | None = None) -> None:
        self.clock = clock
        self.settings = settings
        self.title = title


class Strict:
    def __init__(self, exporter: Exporter) -> None:
        self.exporter = exporter
'''


@pytest.fixture
def deferred(monkeypatch: pytest.MonkeyPatch) -> ModuleType:
    """A module with postponed annotations and a TYPE_CHECKING-only import."""
    mod = ModuleType("_routeline_deferred")
    monkeypatch.setitem(sys.modules, "_routeline_deferred", mod)
    exec(DEFERRED_SOURCE, mod.__dict__)
    return mod


class TestDeferredAnnotations:
    def test_builtin_params_take_defaults(self, deferred: ModuleType) -> None:
        settings = Container().make(deferred.Settings)
        assert settings.name == "default"
        assert settings.retries == 3
        assert settings.exporter is None

    def test_builtin_targets_stay_untyped(self, deferred: ModuleType) -> None:
        deps = {d.name: d for d in describe(deferred.Settings).dependencies}
        assert deps["name"].target is None
        assert deps["retries"].target is None
        assert deps["exporter"].target == "Exporter"

    def test_resolvable_names_still_built(self, deferred: ModuleType) -> None:
        report = Container().make(deferred.Report)
        assert isinstance(report.clock, deferred.Clock)
        assert isinstance(report.settings, deferred.Settings)
        assert report.title is None

    def test_unresolvable_without_default_fails(self, deferred: ModuleType) -> None:
        with pytest.raises(ResolutionError, match="parameter 'exporter'"):
            Container().make(deferred.Strict)
