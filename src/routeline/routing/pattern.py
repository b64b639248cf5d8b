"""Path patterns — ``{name}`` placeholders compiled to anchored regexes.

Built-in converters constrain what a placeholder accepts, like
``{id:int}``. Captured values are always returned as strings.
"""

import functools
import logging
import re
from dataclasses import dataclass

from routeline.errors import ConfigurationError

logger = logging.getLogger("routeline.routing")

# regex for each supported converter; none of them may cross a "/"
CONVERTERS: dict[str, str] = {
    "str": r"[^/]+",
    "int": r"\d+",
    "float": r"\d+(?:\.\d+)?",
    "slug": r"[A-Za-z0-9_-]+",
}

_PLACEHOLDER = re.compile(r"\{(\w+)(?::(\w+))?\}")
_FLASK_PLACEHOLDER = re.compile(r"<[^<>/]+>")


@dataclass(frozen=True, slots=True)
class PathPattern:
    """A compiled route pattern.

    ``names`` lists the placeholders in declaration order, duplicates
    included, so that ``match()`` can pair them with regex groups.
    """

    source: str
    regex: re.Pattern[str]
    names: tuple[str, ...]

    @property
    def is_static(self) -> bool:
        return not self.names

    @property
    def duplicate_names(self) -> frozenset[str]:
        seen: set[str] = set()
        dupes: set[str] = set()
        for name in self.names:
            if name in seen:
                dupes.add(name)
            seen.add(name)
        return frozenset(dupes)

    def match(self, path: str) -> dict[str, str] | None:
        """Match a normalized path against the whole pattern.

        Returns the captured parameters, or ``None`` when the path does
        not fit. For a repeated placeholder name, the last capture wins.
        """
        m = self.regex.fullmatch(path)
        if m is None:
            return None
        return dict(zip(self.names, m.groups(), strict=True))


@functools.lru_cache(maxsize=512)
def compile_pattern(pattern: str) -> PathPattern:
    """Compile a normalized route pattern.

    Examples::

        "users"               -> static, matches only "users"
        "users/{id}"          -> matches "users/42" with {"id": "42"}
        "users/{id:int}"      -> matches "users/42", not "users/alice"
        "files/{name}.txt"    -> matches "files/report.txt" with {"name": "report"}

    Raises ``ConfigurationError`` for unknown converters and for
    ``<param>`` placeholders.
    """
    if _FLASK_PLACEHOLDER.search(pattern):
        msg = (
            f"Route pattern {pattern!r} uses <param> syntax. "
            "Routeline expects {param} placeholders, e.g. 'users/{id}'."
        )
        raise ConfigurationError(msg)

    parts: list[str] = []
    names: list[str] = []
    pos = 0
    for m in _PLACEHOLDER.finditer(pattern):
        name, converter = m.group(1), m.group(2) or "str"
        if converter not in CONVERTERS:
            known = ", ".join(sorted(CONVERTERS))
            msg = f"Unknown converter {converter!r} in route pattern {pattern!r}. Known: {known}."
            raise ConfigurationError(msg)
        parts.append(re.escape(pattern[pos : m.start()]))
        parts.append(f"({CONVERTERS[converter]})")
        names.append(name)
        pos = m.end()
    parts.append(re.escape(pattern[pos:]))

    compiled = PathPattern(source=pattern, regex=re.compile("".join(parts)), names=tuple(names))
    if compiled.duplicate_names:
        logger.warning(
            "Route pattern %r repeats placeholder(s) %s; the last segment's value wins.",
            pattern,
            ", ".join(sorted(compiled.duplicate_names)),
        )
    return compiled
