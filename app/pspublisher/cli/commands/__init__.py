"""CLI command modules for pspublisher."""

from pspublisher.cli.commands import upload

__all__ = ["upload"]
