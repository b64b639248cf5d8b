"""RouteDefinition and RouteMatch frozen dataclasses."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, TypeAlias

from routeline.errors import ConfigurationError

ControllerRef: TypeAlias = str | type


def _as_tuple(value: str | Sequence[str] | None) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(value)


@dataclass(frozen=True, slots=True)
class RouteDefinition:
    """A read-only route definition.

    ``controller`` is a type identifier (``"app.controllers.UserController"``
    or a registered alias) or the class itself. Method names are matched
    case-sensitively, exactly as declared.
    """

    pattern: str
    controller: ControllerRef
    action: str
    methods: frozenset[str] = frozenset({"GET"})
    middlewares: tuple[str, ...] = ()

    @classmethod
    def from_mapping(
        cls,
        pattern: str,
        data: Mapping[str, Any],
        *,
        default_methods: Sequence[str] = ("GET",),
    ) -> "RouteDefinition":
        """Build a definition from the declarative table form::

            {"methods": ["GET", "POST"], "controller": "UserController",
             "method": "show", "middlewares": ["auth"]}

        ``action`` is accepted as an alias of ``method``.
        """
        controller = data.get("controller")
        if not controller:
            msg = f"Route {pattern!r} has no controller."
            raise ConfigurationError(msg)
        action = data.get("action") or data.get("method")
        if not action or not isinstance(action, str):
            msg = f"Route {pattern!r} has no action (expected an 'action' or 'method' key)."
            raise ConfigurationError(msg)
        methods = _as_tuple(data.get("methods")) or tuple(default_methods)
        return cls(
            pattern=pattern,
            controller=controller,
            action=action,
            methods=frozenset(methods),
            middlewares=_as_tuple(data.get("middlewares")),
        )

    @property
    def controller_name(self) -> str:
        if isinstance(self.controller, str):
            return self.controller
        return f"{self.controller.__module__}.{self.controller.__qualname__}"


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route lookup."""

    route: RouteDefinition
    params: dict[str, str]
