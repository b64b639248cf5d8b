"""``routeline check`` — route table validation command.

Resolves an import string to an App and runs ``App.check()``, printing
results to stdout.  Exits with code 1 if errors are found.
"""

import argparse

from routeline.cli._resolve import load_app


def run_check(args: argparse.Namespace) -> None:
    app = load_app(args)
    app.check()
