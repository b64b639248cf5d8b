"""Route table checks — static validation of an App's wiring.

Dispatch tolerates some mistakes (unknown middleware names are skipped)
and reports others only when a request hits them (missing controllers,
missing actions, unbindable interfaces). ``check_routes`` finds all of
them up front.

Usage::

    result = check_routes(app)
    print(result.summary())

    # Or via CLI:
    #   routeline check myapp:app
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from routeline.di.bindings import is_interface, qualified_name
from routeline.errors import ResolutionError
from routeline.middleware.runner import resolve_middleware

if TYPE_CHECKING:
    from routeline.app import App
    from routeline.di.container import Container


class Severity(Enum):
    """Severity of a route check issue."""

    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True, slots=True)
class CheckIssue:
    """A single problem found while checking the route table."""

    severity: Severity
    category: str
    message: str
    route: str | None = None


@dataclass(slots=True)
class CheckResult:
    """Result of a route table check."""

    issues: list[CheckIssue] = field(default_factory=list)
    routes_checked: int = 0

    @property
    def errors(self) -> list[CheckIssue]:
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[CheckIssue]:
        return [i for i in self.issues if i.severity == Severity.WARNING]

    @property
    def ok(self) -> bool:
        return not self.errors

    def summary(self) -> str:
        """Human-readable summary."""
        lines = [f"Checked {self.routes_checked} routes."]
        if self.ok and not self.warnings:
            lines.append("No issues found.")
        elif self.ok:
            lines.append(f"No errors. {len(self.warnings)} warning(s).")
        else:
            lines.append(f"{len(self.errors)} error(s), {len(self.warnings)} warning(s).")
        for issue in self.issues:
            prefix = issue.severity.value.upper()
            loc = f" (route {issue.route!r})" if issue.route is not None else ""
            lines.append(f"  [{prefix}] {issue.message}{loc}")
        return "\n".join(lines)


def _dependency_problems(container: Container, cls: type) -> list[str]:
    """Walk the constructor graph of *cls* without instantiating anything."""
    problems: list[str] = []
    seen: set[type] = set()

    def visit(current: type, chain: tuple[str, ...]) -> None:
        try:
            concrete = container.concrete(current)
        except ResolutionError as exc:
            problems.append(str(exc))
            return
        name = qualified_name(concrete)
        if name in chain:
            problems.append("Circular dependency: " + " -> ".join((*chain, name)))
            return
        if concrete in seen:
            return
        seen.add(concrete)
        for dep in container.types.spec(concrete).dependencies:
            if dep.target is None:
                continue
            target = container.types.lookup(dep.target)
            if target is None:
                if dep.has_default:
                    continue
                problems.append(
                    f"Cannot resolve {dep.target!r} for parameter {dep.name!r} of {name}."
                )
                continue
            visit(target, (*chain, name))

    visit(cls, ())
    return problems


def check_routes(app: App) -> CheckResult:
    """Validate every route in *app*.

    Errors (dispatch would fail):
    1. the controller identifier names no type;
    2. the action is not a callable attribute of the controller class;
    3. the controller's dependency graph has an unbindable interface,
       an unresolvable annotation, or a cycle.

    Warnings (dispatch tolerates them):
    4. a middleware name is not registered, or its unit cannot be resolved;
    5. a pattern repeats a placeholder name.
    """
    result = CheckResult()
    container = app.container
    table = app.table

    for key, route in table.routes:
        result.routes_checked += 1

        dupes = table.pattern(key).duplicate_names
        if dupes:
            result.issues.append(
                CheckIssue(
                    severity=Severity.WARNING,
                    category="pattern",
                    message=f"Placeholder(s) {', '.join(sorted(dupes))} repeated; the last value wins.",
                    route=key,
                )
            )

        for name in route.middlewares:
            if name not in app.middlewares:
                message = f"Middleware {name!r} is not registered and will be skipped."
            elif not _middleware_resolves(app, name):
                message = f"Middleware {name!r} does not resolve to a callable and will be skipped."
            else:
                continue
            result.issues.append(
                CheckIssue(severity=Severity.WARNING, category="middleware", message=message, route=key)
            )

        cls = container.types.lookup(route.controller)
        if cls is None:
            result.issues.append(
                CheckIssue(
                    severity=Severity.ERROR,
                    category="controller",
                    message=f"Controller {route.controller_name} not found.",
                    route=key,
                )
            )
            continue

        if not callable(getattr(cls, route.action, None)):
            result.issues.append(
                CheckIssue(
                    severity=Severity.ERROR,
                    category="action",
                    message=f"Action {route.action} not found on {qualified_name(cls)}.",
                    route=key,
                )
            )

        if is_interface(cls) or container.types.spec(cls).dependencies:
            for problem in _dependency_problems(container, cls):
                result.issues.append(
                    CheckIssue(severity=Severity.ERROR, category="dependency", message=problem, route=key)
                )

    return result


def _middleware_resolves(app: App, name: str) -> bool:
    """True if the middleware unit resolves to a callable.

    Resolution instantiates middleware classes, which is cheap by contract
    (no constructor arguments).
    """
    return resolve_middleware(name, app.middlewares, app.container.types) is not None
