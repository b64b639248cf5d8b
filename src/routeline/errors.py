"""Routeline exception hierarchy.

Shared across the route table, container, middleware runner, and
dispatcher so every module raises and catches the same types.

``HTTPError`` subclasses are recovered by the dispatcher into a status and
message. ``ResolutionError`` is not: a controller whose dependencies cannot
be built is a wiring bug, and it propagates out of ``dispatch()``.
"""

from collections.abc import Sequence
from dataclasses import dataclass


class RoutelineError(Exception):
    """Base for all routeline-specific errors."""


class ConfigurationError(RoutelineError):
    """Raised when a route table or pattern is invalid."""


@dataclass(frozen=True, slots=True)
class HTTPError(RoutelineError):
    """An error that maps directly to an HTTP status code.

    Raised by the dispatcher for routing failures, and by middleware that
    wants to reject a request. The dispatcher catches these and turns
    them into a ``DispatchResult``.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — no route matched the request path."""

    def __init__(self, detail: str = "Page not found.") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """405 — route exists but not for this HTTP method.

    Carries an ``Allow`` header listing the methods the route accepts.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "Method not allowed.") -> None:
        allow_value = ", ".join(sorted(allowed))
        super().__init__(
            status=405,
            detail=detail,
            headers=(("Allow", allow_value),),
        )


class ControllerMissing(HTTPError):
    """500 — the route names a controller type that does not exist."""

    def __init__(self, controller: str) -> None:
        super().__init__(status=500, detail=f"Controller {controller} not found.")


class ActionMissing(HTTPError):
    """500 — the controller has no callable attribute named after the action."""

    def __init__(self, action: str) -> None:
        super().__init__(status=500, detail=f"Action {action} not found.")


class ResolutionError(RoutelineError):
    """A type could not be constructed by the container.

    Raised when an interface has neither an explicit binding nor a
    concrete type matching the naming convention.
    """

    def __init__(self, identifier: str, detail: str = "") -> None:
        self.identifier = identifier
        message = detail or f"Cannot resolve {identifier!r}: no binding and no concrete implementation."
        super().__init__(message)


class CircularDependencyError(ResolutionError):
    """The constructor dependency graph loops back on itself."""

    def __init__(self, chain: Sequence[str]) -> None:
        self.chain = tuple(chain)
        super().__init__(
            self.chain[-1],
            "Circular dependency: " + " -> ".join(self.chain),
        )
