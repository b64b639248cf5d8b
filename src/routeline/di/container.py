"""Dependency container — builds controllers and their constructor dependencies.

Resolution walks the cached ``ConstructorSpec`` of each class:

- class-typed parameters are built recursively;
- builtin-typed or untyped parameters get their declared default, else ``None``;
- annotations naming no known type fall back to the declared default;
- interface parameters (ABCs, Protocols) go through the binding map, then
  the naming convention (see ``routeline.di.bindings``).

A cycle in the dependency graph raises ``CircularDependencyError`` instead
of recursing until the interpreter gives up.
"""

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from routeline.config import DispatchConfig
from routeline.di.bindings import (
    TypeRef,
    candidates,
    identifier_of,
    is_interface,
    normalize_bindings,
    qualified_name,
)
from routeline.di.registry import TypeRegistry
from routeline.errors import CircularDependencyError, ResolutionError

logger = logging.getLogger("routeline.di")


class Container:
    """Builds instances from type identifiers.

    Usage::

        container = Container(bindings={IUserRepo: SqlUserRepo})
        controller = container.make("app.controllers.UserController")

    The binding map is replaced wholesale by ``set_bindings()``. It is
    meant to be written once at startup and only read afterwards.
    """

    __slots__ = ("_bindings", "_prefixes", "types")

    def __init__(
        self,
        types: TypeRegistry | None = None,
        bindings: Mapping[TypeRef, TypeRef] | None = None,
        *,
        config: DispatchConfig | None = None,
    ) -> None:
        config = config or DispatchConfig()
        self.types: TypeRegistry = types or TypeRegistry(import_types=config.import_types)
        self._prefixes: tuple[str, ...] = config.interface_prefixes
        self._bindings: dict[str, str] = {}
        self.set_bindings(bindings or {})

    @property
    def bindings(self) -> Mapping[str, str]:
        """Read-only view of the current binding map, by identifier."""
        return MappingProxyType(self._bindings)

    def set_bindings(self, bindings: Mapping[TypeRef, TypeRef]) -> None:
        """Replace the binding map. Previous entries are discarded, not merged.

        Implementations given as classes are registered, so they resolve
        even when their module cannot be imported by name.
        """
        for implementation in bindings.values():
            if isinstance(implementation, type):
                self.types.register(implementation)
        self._bindings = normalize_bindings(bindings)
        logger.debug("Binding map replaced (%d entries)", len(self._bindings))

    def has(self, ref: TypeRef) -> bool:
        return self.types.lookup(ref) is not None

    def make(self, ref: TypeRef) -> Any:
        """Build an instance of the type named by *ref*.

        Raises ``ResolutionError`` if *ref* names no type, if an interface
        in the graph cannot be bound, or (as ``CircularDependencyError``)
        if the graph has a cycle.
        """
        cls = self.types.lookup(ref)
        if cls is None:
            raise ResolutionError(identifier_of(ref), f"No type named {identifier_of(ref)!r}.")
        return self._build(cls, ())

    def concrete(self, cls: type) -> type:
        """Map an interface to its implementation; concrete classes pass through."""
        if not is_interface(cls):
            return cls
        for candidate in candidates(cls, self._bindings, self._prefixes):
            target = self.types.lookup(candidate)
            if target is not None and not is_interface(target):
                logger.debug("Bound %s -> %s", qualified_name(cls), qualified_name(target))
                return target
        raise ResolutionError(qualified_name(cls))

    def _build(self, cls: type, chain: tuple[str, ...]) -> Any:
        cls = self.concrete(cls)
        name = qualified_name(cls)
        if name in chain:
            raise CircularDependencyError((*chain, name))
        chain = (*chain, name)

        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        for dep in self.types.spec(cls).dependencies:
            if dep.target is None:
                value = dep.fallback
            else:
                target = self.types.lookup(dep.target)
                if target is not None:
                    value = self._build(target, chain)
                elif dep.has_default:
                    logger.debug(
                        "Unresolved %r for %s.%s; using its default",
                        identifier_of(dep.target),
                        name,
                        dep.name,
                    )
                    value = dep.default
                else:
                    raise ResolutionError(
                        identifier_of(dep.target),
                        f"Cannot resolve {identifier_of(dep.target)!r} "
                        f"for parameter {dep.name!r} of {name}.",
                    )

            if dep.positional_only:
                args.append(value)
            else:
                kwargs[dep.name] = value

        logger.debug("Constructing %s", name)
        return cls(*args, **kwargs)
