"""Locating the App a ``routeline`` subcommand works on.

Every subcommand takes a ``module:attr`` argument naming either an App
or a zero-argument callable that builds one.
"""

import argparse
import importlib
import logging
import sys

from routeline.app import App


def resolve_app(import_string: str) -> App:
    """Import the module named before ``:`` and return the App after it.

    ``"shop.web"`` means ``"shop.web:app"``. A callable that is not an App
    is treated as a factory and called once with no arguments.

    Import errors from the module and a missing attribute propagate
    unchanged. ``TypeError`` is raised when the factory fails or the
    object found is not an App.
    """
    module_name, _, attr = import_string.partition(":")
    target = getattr(importlib.import_module(module_name), attr or "app")

    if callable(target) and not isinstance(target, App):
        try:
            target = target()
        except Exception as exc:
            raise TypeError(f"App factory {import_string!r} failed: {exc}") from exc

    if not isinstance(target, App):
        raise TypeError(
            f"{import_string!r} is a {type(target).__name__}; expected a routeline App "
            "or a factory returning one"
        )
    return target


def load_app(args: argparse.Namespace) -> App:
    """Resolve ``args.app`` or exit with status 1 and a message on stderr."""
    try:
        app = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if getattr(args, "log_level", None) is None:
        logging.basicConfig(level=app.config.log_level.upper())
    return app
