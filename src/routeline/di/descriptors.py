"""Constructor descriptors — what a class needs to be built.

A ``ConstructorSpec`` is computed once per class from its ``__init__``
signature and cached by the ``TypeRegistry``. The container walks these
specs instead of re-inspecting signatures on every request.
"""

import inspect
import types
import typing
from dataclasses import dataclass
from typing import Any, Union, get_args, get_origin

# Parameters annotated with these are filled from defaults, never built
BUILTIN_TYPES: frozenset[type] = frozenset(
    {
        bool,
        bytearray,
        bytes,
        complex,
        dict,
        float,
        frozenset,
        int,
        list,
        object,
        set,
        str,
        tuple,
        type,
        type(None),
    }
)


@dataclass(frozen=True, slots=True)
class Dependency:
    """One constructor parameter.

    ``target`` is the class to build for this parameter, an identifier
    string for an unresolved forward reference, or ``None`` when the
    parameter is builtin-typed or untyped and takes its default.
    """

    name: str
    target: type | str | None
    has_default: bool = False
    default: Any = None
    keyword_only: bool = False
    positional_only: bool = False

    @property
    def fallback(self) -> Any:
        return self.default if self.has_default else None


@dataclass(frozen=True, slots=True)
class ConstructorSpec:
    cls: type
    dependencies: tuple[Dependency, ...] = ()


def target_of(annotation: Any) -> type | str | None:
    """Reduce a parameter annotation to something the container can build.

    ``X | None`` unwraps to ``X``. Builtins, ``Any``, generic aliases and
    multi-member unions yield ``None``.
    """
    if annotation is inspect.Parameter.empty or annotation is Any:
        return None
    if isinstance(annotation, str):
        return annotation
    if isinstance(annotation, typing.ForwardRef):
        return annotation.__forward_arg__
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        members = [a for a in get_args(annotation) if a is not type(None)]
        if len(members) == 1:
            return target_of(members[0])
        return None
    if origin is not None or not isinstance(annotation, type):
        return None
    if annotation in BUILTIN_TYPES or annotation.__module__ == "builtins":
        return None
    return annotation


def _evaluate(annotation: Any, globalns: dict[str, Any], localns: dict[str, Any]) -> Any:
    """Evaluate one string annotation, keeping what cannot be resolved.

    An unresolvable ``X | None`` is narrowed to ``X`` before being kept as
    an identifier string.
    """
    if not isinstance(annotation, str):
        return annotation
    try:
        return eval(annotation, globalns, localns)  # noqa: S307
    except (NameError, AttributeError, TypeError, SyntaxError):
        pass
    members = [m.strip() for m in annotation.split("|") if m.strip() != "None"]
    if len(members) == 1 and members[0] != annotation:
        return _evaluate(members[0], globalns, localns)
    return annotation


def _type_hints(cls: type) -> dict[str, Any]:
    init = cls.__init__
    try:
        return typing.get_type_hints(init)
    except (NameError, AttributeError, TypeError):
        pass
    # One bad name fails get_type_hints for every parameter; evaluate each
    # annotation separately so the others keep their real types.
    globalns = getattr(init, "__globals__", {})
    localns = dict(vars(cls))
    return {
        name: _evaluate(annotation, globalns, localns)
        for name, annotation in (getattr(init, "__annotations__", None) or {}).items()
    }


def describe(cls: type) -> ConstructorSpec:
    """Build the constructor spec for *cls*.

    Classes without their own ``__init__`` (or whose signature cannot be
    read, as with some C extension types) get an empty spec and are
    instantiated with no arguments.
    """
    if cls.__init__ is object.__init__:
        return ConstructorSpec(cls=cls)
    try:
        signature = inspect.signature(cls)
    except (TypeError, ValueError):
        return ConstructorSpec(cls=cls)

    hints = _type_hints(cls)
    deps: list[Dependency] = []
    for param in signature.parameters.values():
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue
        annotation = hints.get(param.name, param.annotation)
        has_default = param.default is not inspect.Parameter.empty
        deps.append(
            Dependency(
                name=param.name,
                target=target_of(annotation),
                has_default=has_default,
                default=param.default if has_default else None,
                keyword_only=param.kind is inspect.Parameter.KEYWORD_ONLY,
                positional_only=param.kind is inspect.Parameter.POSITIONAL_ONLY,
            )
        )
    return ConstructorSpec(cls=cls, dependencies=tuple(deps))
