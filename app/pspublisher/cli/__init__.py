"""CLI package for pspublisher.

This package contains the Typer application and its subcommands.
"""

from pspublisher.cli.main import app

__all__ = ["app"]
