"""Route table — normalized, insertion-ordered pattern lookup.

Resolution order is part of the public contract:

1. an exact key equal to the normalized URI wins outright;
2. otherwise the first declared pattern that matches wins;
3. otherwise nothing matches.
"""

from collections.abc import Iterator, Mapping
from typing import Any, TypeAlias

from routeline.routing.pattern import PathPattern, compile_pattern
from routeline.routing.route import RouteDefinition, RouteMatch

RawRoutes: TypeAlias = Mapping[str, Mapping[str, Any] | RouteDefinition]


def normalize_path(path: str) -> str:
    """Strip leading and trailing path separators."""
    return path.strip("/")


class RouteTable:
    """Mapping from normalized pattern to ``RouteDefinition``.

    Usage::

        table = RouteTable.from_raw({
            "/users/{id}": {"controller": "UserController", "method": "show"},
        })
        match = table.resolve("users/42")
    """

    __slots__ = ("_entries",)

    def __init__(self) -> None:
        self._entries: dict[str, tuple[RouteDefinition, PathPattern]] = {}

    @classmethod
    def from_raw(
        cls,
        raw: RawRoutes,
        *,
        default_methods: tuple[str, ...] = ("GET",),
    ) -> "RouteTable":
        """Build a table from a raw route mapping.

        Keys that normalize to the same string collapse into one entry:
        the later definition replaces the earlier one in its original slot.
        """
        table = cls()
        for path, data in raw.items():
            key = normalize_path(path)
            if isinstance(data, RouteDefinition):
                route = data
            else:
                route = RouteDefinition.from_mapping(key, data, default_methods=default_methods)
            table.add(key, route)
        return table

    def add(self, key: str, route: RouteDefinition) -> None:
        key = normalize_path(key)
        self._entries[key] = (route, compile_pattern(key))

    def resolve(self, uri: str) -> RouteMatch | None:
        """Find the route for a normalized URI, or ``None``."""
        exact = self._entries.get(uri)
        if exact is not None:
            return RouteMatch(route=exact[0], params={})

        for route, pattern in self._entries.values():
            params = pattern.match(uri)
            if params is not None:
                return RouteMatch(route=route, params=params)
        return None

    def pattern(self, key: str) -> PathPattern:
        return self._entries[key][1]

    @property
    def routes(self) -> list[tuple[str, RouteDefinition]]:
        """All entries as ``(normalized_pattern, route)`` in declaration order."""
        return [(key, route) for key, (route, _) in self._entries.items()]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
