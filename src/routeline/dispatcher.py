"""Dispatcher — one synchronous pass from request target to controller action.

Stages, in order::

    START -> NORMALIZED -> ROUTE_RESOLVED -> METHOD_VALIDATED
          -> MIDDLEWARES_RUN -> CONTROLLER_RESOLVED -> ACTION_INVOKED

Any stage may end the pass early with an HTTP-style failure (404, 405,
500, or whatever status a middleware or action raises). Those are returned as a
``DispatchResult``, never raised. ``ResolutionError`` is the exception:
it means the application is mis-wired and propagates to the caller.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from urllib.parse import urlsplit

from routeline.config import DispatchConfig
from routeline.di.bindings import TypeRef
from routeline.di.container import Container
from routeline.errors import ActionMissing, ControllerMissing, HTTPError, MethodNotAllowed, NotFound
from routeline.middleware.protocol import MiddlewareUnit
from routeline.middleware.runner import run_middlewares
from routeline.routing.route import RouteDefinition
from routeline.routing.table import RawRoutes, RouteTable, normalize_path

logger = logging.getLogger("routeline.dispatch")


class Stage(Enum):
    """Last stage a dispatch pass reached."""

    START = "start"
    NORMALIZED = "normalized"
    ROUTE_RESOLVED = "route_resolved"
    METHOD_VALIDATED = "method_validated"
    MIDDLEWARES_RUN = "middlewares_run"
    CONTROLLER_RESOLVED = "controller_resolved"
    ACTION_INVOKED = "action_invoked"


@dataclass(frozen=True, slots=True)
class DispatchResult:
    """Outcome of a dispatch pass.

    On success ``status`` is 200 and ``value`` holds whatever the action
    returned. On failure ``status``/``message`` describe the error and
    ``stage`` is the last stage completed before it.
    """

    status: int
    stage: Stage
    message: str = ""
    uri: str = ""
    route: RouteDefinition | None = None
    params: dict[str, str] = field(default_factory=dict)
    value: Any = None
    headers: tuple[tuple[str, str], ...] = ()
    middlewares_run: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.stage is Stage.ACTION_INVOKED


def normalize_target(target: str) -> str:
    """Reduce a raw request target to a normalized path.

    Drops the query string, fragment, and (for absolute-form targets)
    scheme and host, then strips leading and trailing separators::

        "/users/42/?tab=posts"        -> "users/42"
        "http://example.com/users/"   -> "users"
    """
    if "://" in target:
        path = urlsplit(target).path
    else:
        path = target.split("?", 1)[0].split("#", 1)[0]
    return normalize_path(path)


class Dispatcher:
    """Matches a request against a route table and invokes the controller action.

    Usage::

        dispatcher = Dispatcher(Container(bindings={IUserRepo: SqlUserRepo}))
        result = dispatcher.dispatch(routes, middlewares, "GET", "/users/42")
        if not result.ok:
            respond(result.status, result.message)

    The container (and its binding map) is shared by every dispatch. It
    should be configured before the first request; replacing the binding
    map afterwards still works but is logged as a warning.
    """

    __slots__ = ("_dispatched", "config", "container")

    def __init__(
        self,
        container: Container | None = None,
        *,
        config: DispatchConfig | None = None,
    ) -> None:
        self.config: DispatchConfig = config or DispatchConfig()
        self.container: Container = container or Container(config=self.config)
        self._dispatched: bool = False

    def set_dependency_map(self, bindings: Mapping[TypeRef, TypeRef]) -> None:
        """Replace the interface binding map wholesale."""
        if self._dispatched:
            logger.warning(
                "Dependency map replaced after dispatching started; "
                "concurrent dispatches may observe either map."
            )
        self.container.set_bindings(bindings)

    def build_table(self, routes: RawRoutes | RouteTable) -> RouteTable:
        if isinstance(routes, RouteTable):
            return routes
        return RouteTable.from_raw(routes, default_methods=self.config.default_methods)

    def dispatch(
        self,
        routes: RawRoutes | RouteTable,
        middlewares: Mapping[str, MiddlewareUnit] | None,
        method: str,
        target: str,
    ) -> DispatchResult:
        """Run one request through the pipeline.

        Raises ``ResolutionError`` when the controller's dependencies cannot
        be built. An ``HTTPError`` raised by the action becomes a result at
        ``CONTROLLER_RESOLVED``; any other exception it raises propagates.
        Coroutine actions are called but not awaited; the ASGI handler
        awaits the returned value.
        """
        self._dispatched = True
        table = self.build_table(routes)

        uri = normalize_target(target)
        stage = Stage.NORMALIZED
        logger.debug("%s %r normalized to %r", method, target, uri)

        match = table.resolve(uri)
        if match is None:
            return self._fail(NotFound(), stage, uri)
        route, params = match.route, match.params
        stage = Stage.ROUTE_RESOLVED

        invoked: list[str] = []
        try:
            if method not in route.methods:
                raise MethodNotAllowed(route.methods)
            stage = Stage.METHOD_VALIDATED

            if route.middlewares:
                invoked = run_middlewares(route.middlewares, middlewares or {}, self.container.types)
            stage = Stage.MIDDLEWARES_RUN

            if not self.container.has(route.controller):
                raise ControllerMissing(route.controller_name)
            controller = self.container.make(route.controller)
            stage = Stage.CONTROLLER_RESOLVED

            action = getattr(controller, route.action, None)
            if action is None or not callable(action):
                raise ActionMissing(route.action)
        except HTTPError as exc:
            return self._fail(exc, stage, uri, route=route, params=params, invoked=invoked)

        logger.debug("Invoking %s.%s with %r", route.controller_name, route.action, params)
        try:
            value = action(params) if params else action()
        except HTTPError as exc:
            return self._fail(exc, stage, uri, route=route, params=params, invoked=invoked)
        return DispatchResult(
            status=200,
            stage=Stage.ACTION_INVOKED,
            uri=uri,
            route=route,
            params=params,
            value=value,
            middlewares_run=tuple(invoked),
        )

    def _fail(
        self,
        exc: HTTPError,
        stage: Stage,
        uri: str,
        *,
        route: RouteDefinition | None = None,
        params: dict[str, str] | None = None,
        invoked: list[str] | None = None,
    ) -> DispatchResult:
        logger.info("Dispatch of %r stopped after %s: %s", uri, stage.value, exc)
        return DispatchResult(
            status=exc.status,
            stage=stage,
            message=exc.detail,
            uri=uri,
            route=route,
            params=params or {},
            headers=exc.headers,
            middlewares_run=tuple(invoked or ()),
        )
