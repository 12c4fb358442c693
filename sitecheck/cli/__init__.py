"""sitecheck command line interface."""

from sitecheck.cli.main import cli, main

__all__ = ["cli", "main"]
