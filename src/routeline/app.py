"""Routeline application bundle.

An ``App`` holds one route table, one middleware registry, and one
dispatcher, and exposes them as an ASGI application. The raw route
mapping is compiled on first use.
"""

import threading
from collections.abc import Mapping

from routeline._internal.asgi import Receive, Scope, Send
from routeline.config import DispatchConfig
from routeline.di.bindings import TypeRef
from routeline.di.container import Container
from routeline.dispatcher import DispatchResult, Dispatcher
from routeline.middleware.protocol import MiddlewareUnit
from routeline.routing.table import RawRoutes, RouteTable
from routeline.server.handler import handle_lifespan, handle_request


class App:
    """A route table wired to a dispatcher.

    Usage::

        app = App(
            {"users/{id}": {"controller": "app.controllers.UserController", "method": "show"}},
            {"auth": AuthMiddleware},
            bindings={IUserRepo: SqlUserRepo},
        )
        result = app.dispatch("GET", "/users/42")

    Serve it with any ASGI server (``uvicorn myapp:app``).

    Thread safety:
        The route table is compiled once under a Lock + double-check, so
        concurrent first requests compile it exactly once.
    """

    __slots__ = ("_compile_lock", "_middlewares", "_raw_routes", "_table", "dispatcher")

    def __init__(
        self,
        routes: RawRoutes,
        middlewares: Mapping[str, MiddlewareUnit] | None = None,
        *,
        container: Container | None = None,
        bindings: Mapping[TypeRef, TypeRef] | None = None,
        config: DispatchConfig | None = None,
    ) -> None:
        config = config or DispatchConfig()
        container = container or Container(config=config)
        if bindings is not None:
            container.set_bindings(bindings)
        self.dispatcher: Dispatcher = Dispatcher(container, config=config)
        self._raw_routes: RawRoutes = routes
        self._middlewares: dict[str, MiddlewareUnit] = dict(middlewares or {})
        self._table: RouteTable | None = None
        self._compile_lock = threading.Lock()

    @property
    def config(self) -> DispatchConfig:
        return self.dispatcher.config

    @property
    def container(self) -> Container:
        return self.dispatcher.container

    @property
    def middlewares(self) -> Mapping[str, MiddlewareUnit]:
        return self._middlewares

    @property
    def table(self) -> RouteTable:
        """The compiled route table (compiled on first access)."""
        if self._table is None:
            with self._compile_lock:
                if self._table is None:
                    self._table = self.dispatcher.build_table(self._raw_routes)
        return self._table

    def set_dependency_map(self, bindings: Mapping[TypeRef, TypeRef]) -> None:
        """Replace the interface binding map wholesale."""
        self.dispatcher.set_dependency_map(bindings)

    def dispatch(self, method: str, target: str) -> DispatchResult:
        return self.dispatcher.dispatch(self.table, self._middlewares, method, target)

    def check(self) -> None:
        """Validate the route table and print results.

        Raises ``SystemExit(1)`` if errors are found.
        """
        from routeline.checks import check_routes

        result = check_routes(self)
        print(result.summary())
        if not result.ok:
            raise SystemExit(1)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await handle_lifespan(receive, send)
            return

        await handle_request(
            scope,
            receive,
            send,
            dispatcher=self.dispatcher,
            table=self.table,
            middlewares=self._middlewares,
        )
