"""CLI package for DocQuery.

Thin command line over the library: list the configured forms and submit
searches against them.
"""

from __future__ import annotations

__all__ = ["CommandRunner", "main"]

from DocQuery.cli.runner import CommandRunner
from DocQuery.cli.ui import cli


def main() -> None:
    """Run DocQuery CLI.

    Entry point referenced by console script in pyproject.toml.
    """
    cli()
