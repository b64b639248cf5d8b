"""Routeline CLI — route listing, wiring checks, and one-off dispatches.

Entry point registered as ``routeline`` in ``pyproject.toml``::

    [project.scripts]
    routeline = "routeline.cli:main"
"""

import argparse
import logging
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``routeline`` command."""
    parser = argparse.ArgumentParser(
        prog="routeline",
        description="Routeline — route table dispatch with constructor injection.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["debug", "info", "warning", "error"],
        help="Logging level (default: the app's DispatchConfig.log_level)",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- routeline routes -------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List the route table")
    routes_parser.add_argument("app", help="Import string (e.g. myapp:app)")

    # -- routeline check --------------------------------------------------
    check_parser = subparsers.add_parser("check", help="Validate controllers, actions, and bindings")
    check_parser.add_argument("app", help="Import string (e.g. myapp:app)")

    # -- routeline dispatch -----------------------------------------------
    dispatch_parser = subparsers.add_parser("dispatch", help="Dispatch a single request")
    dispatch_parser.add_argument("app", help="Import string (e.g. myapp:app)")
    dispatch_parser.add_argument("method", help="HTTP method (matched case-sensitively)")
    dispatch_parser.add_argument("target", help="Request target, e.g. /users/42?tab=posts")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.log_level is not None:
        logging.basicConfig(level=args.log_level.upper())

    if args.command == "routes":
        from routeline.cli._routes import run_routes

        run_routes(args)
    elif args.command == "check":
        from routeline.cli._check import run_check

        run_check(args)
    elif args.command == "dispatch":
        from routeline.cli._dispatch import run_dispatch

        run_dispatch(args)
