"""``routeline dispatch`` — run one request through an App from the shell.

Useful for checking which route and controller a target reaches without
starting a server. Exits with code 1 when the dispatch fails.
"""

import argparse
import asyncio
import inspect
import sys

from routeline.cli._resolve import load_app
from routeline.errors import HTTPError, ResolutionError


def run_dispatch(args: argparse.Namespace) -> None:
    """Dispatch ``args.method`` ``args.target`` and print the outcome."""
    app = load_app(args)

    try:
        result = app.dispatch(args.method, args.target)
    except ResolutionError as exc:
        print(f"500 {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    route = result.route
    if not result.ok or route is None:
        print(f"{result.status} {result.message}", file=sys.stderr)
        raise SystemExit(1)

    value = result.value
    if inspect.iscoroutine(value):
        try:
            value = asyncio.run(value)
        except HTTPError as exc:
            print(f"{exc.status} {exc.detail}", file=sys.stderr)
            raise SystemExit(1) from exc

    print(f"{result.status} {route.controller_name}@{route.action} {result.params}")
    if isinstance(value, bytes):
        sys.stdout.buffer.write(value)
    elif value is not None:
        print(value)
