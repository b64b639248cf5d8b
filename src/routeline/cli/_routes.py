"""``routeline routes`` — list the route table.

Prints every route in declaration order, which is also the order
patterns are tried in.
"""

import argparse

from routeline.cli._resolve import load_app


def run_routes(args: argparse.Namespace) -> None:
    """Print a table of METHODS, PATH, ACTION, and MIDDLEWARE."""
    app = load_app(args)

    routes = app.table.routes
    if not routes:
        print("No routes registered.")
        return

    rows: list[tuple[str, str, str, str]] = []
    for key, route in routes:
        methods_str = ", ".join(sorted(route.methods))
        action = f"{route.controller_name}@{route.action}"
        rows.append((methods_str, "/" + key, action, ", ".join(route.middlewares)))

    max_methods = max(max(len(r[0]) for r in rows), 7)  # "METHODS" header
    max_path = max(max(len(r[1]) for r in rows), 4)  # "PATH" header
    max_action = max(max(len(r[2]) for r in rows), 6)  # "ACTION" header

    fmt = f"{{:<{max_methods}}}  {{:<{max_path}}}  {{:<{max_action}}}  {{}}"
    print(fmt.format("METHODS", "PATH", "ACTION", "MIDDLEWARE").rstrip())
    print("-" * min(max_methods + max_path + max_action + 16, 80))
    for row in rows:
        print(fmt.format(*row).rstrip())
