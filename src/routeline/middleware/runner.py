"""Middleware runner — invokes a route's named middlewares in order.

The contract is tolerant: a name missing from the registry,
an identifier that names no type, or an instance that is not callable
resolves to ``None`` and is skipped without error.
"""

import logging
from collections.abc import Mapping, Sequence

from routeline.di.registry import TypeRegistry
from routeline.middleware.protocol import Middleware, MiddlewareUnit

logger = logging.getLogger("routeline.middleware")


def resolve_middleware(
    name: str,
    registry: Mapping[str, MiddlewareUnit],
    types: TypeRegistry,
) -> Middleware | None:
    """Turn a middleware name into a callable instance, or ``None``.

    Classes are instantiated with no constructor arguments; there is no
    dependency injection for middleware.
    """
    unit = registry.get(name)
    if unit is None:
        return None
    if isinstance(unit, str):
        unit = types.lookup(unit)
        if unit is None:
            return None
    instance = unit() if isinstance(unit, type) else unit
    if not callable(instance):
        return None
    return instance


def run_middlewares(
    names: Sequence[str],
    registry: Mapping[str, MiddlewareUnit],
    types: TypeRegistry,
) -> list[str]:
    """Invoke each named middleware in *names* order.

    Returns the names that were actually invoked. Exceptions raised by a
    middleware propagate to the caller.
    """
    invoked: list[str] = []
    for name in names:
        middleware = resolve_middleware(name, registry, types)
        if middleware is None:
            logger.debug("Skipping unresolved middleware %r", name)
            continue
        middleware()
        invoked.append(name)
    return invoked
