"""pubapi command line interface."""

from pubapi.cli.main import cli

__all__ = ["cli"]
