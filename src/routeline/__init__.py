"""Routeline — a route-table dispatcher with constructor injection.

Matches a request against a declarative route table, runs the route's
named middleware, builds the controller (and its constructor
dependencies), and calls the action with the extracted path parameters.

Basic usage::

    from routeline import App

    routes = {
        "users/{id}": {
            "methods": ["GET"],
            "controller": "myapp.controllers.UserController",
            "method": "show",
            "middlewares": ["auth"],
        },
    }
    app = App(routes, {"auth": "myapp.middleware.Auth"})

    result = app.dispatch("GET", "/users/42")
    # UserController.show({"id": "42"}) was called
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "ConfigurationError",
    "Container",
    "DispatchConfig",
    "DispatchResult",
    "Dispatcher",
    "HTTPError",
    "MethodNotAllowed",
    "Middleware",
    "NotFound",
    "ResolutionError",
    "RouteDefinition",
    "RouteTable",
    "RoutelineError",
    "TypeRegistry",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import routeline`` fast while providing a clean top-level API.
    """
    if name == "App":
        from routeline.app import App

        return App

    if name == "DispatchConfig":
        from routeline.config import DispatchConfig

        return DispatchConfig

    if name in ("Dispatcher", "DispatchResult"):
        from routeline import dispatcher as _dispatcher

        return getattr(_dispatcher, name)

    if name in ("Container", "TypeRegistry"):
        from routeline import di as _di

        return getattr(_di, name)

    if name == "Middleware":
        from routeline.middleware.protocol import Middleware

        return Middleware

    if name in ("RouteDefinition", "RouteTable"):
        from routeline.routing import route as _route
        from routeline.routing import table as _table

        return getattr(_route if name == "RouteDefinition" else _table, name)

    if name in (
        "ConfigurationError",
        "HTTPError",
        "MethodNotAllowed",
        "NotFound",
        "ResolutionError",
        "RoutelineError",
    ):
        from routeline import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
