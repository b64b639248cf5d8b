"""Middleware — Protocol-based, no inheritance required.

A middleware is any callable matching:
    def mw() -> None

Routes list middleware by name; the registry passed to the dispatcher
maps names to classes, identifiers, or instances.
"""

from routeline.middleware.protocol import Middleware, MiddlewareUnit
from routeline.middleware.runner import resolve_middleware, run_middlewares

__all__ = [
    "Middleware",
    "MiddlewareUnit",
    "resolve_middleware",
    "run_middlewares",
]
