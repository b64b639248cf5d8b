"""Middleware protocol.

A middleware is any object callable with no arguments::

    class AuditLog:
        def __call__(self) -> None:
            log.info("request seen")

No base class required. The runner checks the shape, not the lineage.
Return values are ignored. To reject a request, raise an ``HTTPError``::

    class RequireToken:
        def __call__(self) -> None:
            if not current_token():
                raise HTTPError(status=401, detail="Token required.")
"""

from collections.abc import Callable
from typing import Protocol, TypeAlias


class Middleware(Protocol):
    """Protocol for routeline middleware."""

    def __call__(self) -> object: ...


# What a middleware registry maps names to: a class, an identifier, or a ready instance
MiddlewareUnit: TypeAlias = type | str | Callable[[], object]
