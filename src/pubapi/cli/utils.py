"""CLI utilities."""

from __future__ import annotations

import signal
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from types import FrameType

import click
from rich.console import Console
from rich.text import Text

from pubapi.apidoc.errors import BuildError
from pubapi.core.errors import PubApiError, UsageError
from pubapi.diff.render import ItemFormatter, Line, Writer, colored, plain
from pubapi.git.errors import GitError, RestorationError
from pubapi.registry.errors import RegistryError

EXIT_RESTORATION_FAILED = 3


class RestorationFailed(click.ClickException):
    """The repository may have been left at another commit."""

    exit_code = EXIT_RESTORATION_FAILED


@contextmanager
def translate_errors() -> Iterator[None]:
    """Map domain errors to click exceptions and their exit codes."""
    try:
        yield
    except UsageError as e:
        raise click.UsageError(str(e)) from e
    except RestorationError as e:
        raise RestorationFailed(str(e)) from e
    except (PubApiError, GitError, BuildError, RegistryError) as e:
        raise click.ClickException(str(e)) from e


def _raise_system_exit(signum: int, frame: FrameType | None) -> None:  # noqa: ARG001
    raise SystemExit(128 + signum)


@contextmanager
def sigterm_as_exit() -> Iterator[None]:
    """Turn SIGTERM into SystemExit so cleanup handlers run."""
    previous = signal.signal(signal.SIGTERM, _raise_system_exit)
    try:
        yield
    finally:
        signal.signal(signal.SIGTERM, previous)


def make_output(color: str) -> tuple[Writer, ItemFormatter]:
    """Line writer and item formatter for a --color choice."""
    use_color = color == "always" or (color == "auto" and sys.stdout.isatty())
    if not use_color:
        return click.echo, plain

    console = Console(force_terminal=True, highlight=False, soft_wrap=True)

    def write(line: Line) -> None:
        if isinstance(line, Text):
            console.print(line)
        else:
            console.print(line, markup=False)

    return write, colored
