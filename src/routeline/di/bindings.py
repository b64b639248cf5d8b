"""Interface bindings — pure functions over type identifiers.

Binding an interface to an implementation is a two-tier lookup:

1. the explicit binding map (``{"app.repos.IUserRepo": "app.repos.SqlUserRepo"}``);
2. the naming convention: drop a conventional interface prefix from the
   class name (``IUserRepo`` -> ``UserRepo``, ``AbstractMailer`` -> ``Mailer``).
"""

import inspect
from collections.abc import Mapping
from typing import TypeAlias

TypeRef: TypeAlias = str | type


def qualified_name(cls: type) -> str:
    """Canonical identifier for a class: ``module.QualName``."""
    return f"{cls.__module__}.{cls.__qualname__}"


def identifier_of(ref: TypeRef) -> str:
    if isinstance(ref, str):
        return ref
    return qualified_name(ref)


def is_interface(cls: type) -> bool:
    """True for abstract classes and ``typing.Protocol`` classes."""
    return inspect.isabstract(cls) or bool(getattr(cls, "_is_protocol", False))


def derive_concrete_name(identifier: str, prefixes: tuple[str, ...] = ("I", "Abstract")) -> str | None:
    """Apply the naming convention to an interface identifier.

    Only the final name component is rewritten, and a prefix only counts
    when the next character is uppercase, so ``Item`` stays ``Item``::

        derive_concrete_name("app.repos.IUserRepo")   -> "app.repos.UserRepo"
        derive_concrete_name("AbstractMailer")        -> "Mailer"
        derive_concrete_name("app.Item")              -> None
    """
    cut = max(identifier.rfind("."), identifier.rfind(":"))
    head, name = identifier[: cut + 1], identifier[cut + 1 :]
    for prefix in prefixes:
        rest = name[len(prefix) :]
        if name.startswith(prefix) and rest[:1].isupper():
            return head + rest
    return None


def normalize_bindings(bindings: Mapping[TypeRef, TypeRef]) -> dict[str, str]:
    """Turn a binding map keyed/valued by classes or identifiers into identifiers."""
    return {identifier_of(k): identifier_of(v) for k, v in bindings.items()}


def candidates(
    cls: type,
    bindings: Mapping[str, str],
    prefixes: tuple[str, ...] = ("I", "Abstract"),
) -> list[str]:
    """Concrete identifiers to try for interface *cls*, in priority order.

    The binding map is consulted under the qualified name first, then the
    bare class name. The naming convention is applied to both forms.
    """
    keys = [qualified_name(cls), cls.__qualname__]
    found: list[str] = [bindings[key] for key in keys if key in bindings]
    for key in keys:
        derived = derive_concrete_name(key, prefixes)
        if derived is not None:
            found.append(derived)
    return list(dict.fromkeys(found))
