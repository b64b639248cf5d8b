"""Type registry — identifier -> class, plus cached constructor specs.

Controllers, middleware, and services are referred to by identifier in
route tables. The registry maps those identifiers back to classes:

- explicitly registered classes, under ``module.QualName`` and any aliases;
- on demand, importable paths like ``"app.controllers.UserController"``
  or ``"app.controllers:UserController"`` (disable with
  ``DispatchConfig(import_types=False)``).
"""

import importlib
import logging
import threading

from routeline.di.bindings import TypeRef, qualified_name
from routeline.di.descriptors import ConstructorSpec, describe

logger = logging.getLogger("routeline.di")


def _import_type(identifier: str) -> type | None:
    """Import a class from ``pkg.mod.Class``, ``pkg.mod.Outer.Inner`` or ``pkg.mod:Class``.

    Returns ``None`` when no module along the path exists or the final
    object is not a class. Errors raised while executing an existing
    module propagate.
    """
    if ":" in identifier:
        module_path, _, attr_path = identifier.partition(":")
        splits = [(module_path, attr_path.split("."))]
    else:
        parts = identifier.split(".")
        splits = [(".".join(parts[:i]), parts[i:]) for i in range(len(parts) - 1, 0, -1)]

    for module_path, attrs in splits:
        if not module_path or not all(attrs):
            continue
        try:
            obj: object = importlib.import_module(module_path)
        except ModuleNotFoundError as exc:
            # Only "this path is not a module" means try a shorter one
            if exc.name and module_path.startswith(exc.name):
                continue
            raise
        for attr in attrs:
            obj = getattr(obj, attr, None)
            if obj is None:
                break
        if isinstance(obj, type):
            return obj
    return None


class TypeRegistry:
    """Identifier -> class lookup with a constructor spec cache.

    Usage::

        types = TypeRegistry()
        types.register(UserController, "UserController")
        types.lookup("UserController")                  # UserController
        types.lookup("app.controllers.UserController")  # UserController

    Thread safety:
        Registration is expected at startup. Lookups that import a class
        or compute a spec write to the caches under a lock, so concurrent
        dispatches can share one registry.
    """

    __slots__ = ("_aliases", "_import_types", "_lock", "_specs", "_types")

    def __init__(self, *, import_types: bool = True) -> None:
        self._types: dict[str, type] = {}
        self._aliases: dict[str, str] = {}
        self._specs: dict[type, ConstructorSpec] = {}
        self._import_types = import_types
        self._lock = threading.Lock()

    def register(self, cls: type, *aliases: str) -> type:
        """Register *cls* under its qualified name and any *aliases*.

        Returns *cls* so it can also be used as a plain decorator.
        """
        name = qualified_name(cls)
        with self._lock:
            self._types[name] = cls
            for alias in aliases:
                self._aliases[alias] = name
            self._specs[cls] = describe(cls)
        return cls

    def lookup(self, ref: TypeRef) -> type | None:
        """Resolve an identifier (or a class) to a class, or ``None``."""
        if isinstance(ref, type):
            return ref
        cls = self._types.get(ref)
        if cls is not None:
            return cls
        alias_target = self._aliases.get(ref)
        if alias_target is not None:
            return self._types.get(alias_target)
        if not self._import_types or ("." not in ref and ":" not in ref):
            return None

        imported = _import_type(ref)
        if imported is None:
            return None
        logger.debug("Imported type %s for identifier %r", qualified_name(imported), ref)
        with self._lock:
            self._types.setdefault(ref, imported)
            self._types.setdefault(qualified_name(imported), imported)
        return imported

    def spec(self, cls: type) -> ConstructorSpec:
        """Constructor spec for *cls*, computed once."""
        spec = self._specs.get(cls)
        if spec is not None:
            return spec
        with self._lock:
            spec = self._specs.get(cls)
            if spec is None:
                spec = describe(cls)
                self._specs[cls] = spec
        return spec

    @property
    def names(self) -> list[str]:
        """Registered qualified names and aliases, sorted."""
        return sorted({*self._types, *self._aliases})

    def __contains__(self, ref: object) -> bool:
        if not isinstance(ref, (str, type)):
            return False
        return self.lookup(ref) is not None

    def __len__(self) -> int:
        return len(self._types)
