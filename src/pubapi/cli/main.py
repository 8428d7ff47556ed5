"""pubapi CLI - list or diff the public API of a Python package."""

from __future__ import annotations

from pathlib import Path

import click
import structlog

from pubapi import __version__
from pubapi.apidoc import items_from_file
from pubapi.apidoc.manifest import MANIFEST_NAME
from pubapi.cli.utils import make_output, sigterm_as_exit, translate_errors
from pubapi.collect import ItemCollector
from pubapi.config import load_config
from pubapi.core.errors import UsageError
from pubapi.core.logging import configure_logging, set_run_id
from pubapi.diff import PublicItemsDiff, print_items, print_with_headers
from pubapi.policy import DenyRule, enforce, require_diffing
from pubapi.targets import DiffMode, FromCurrent, resolve

log = structlog.get_logger()


def _selected_mode(
    smart: bool,
    from_files: tuple[str, str] | None,
    from_references: tuple[str, str] | None,
    from_published: str | None,
) -> tuple[DiffMode | None, list[str]]:
    """The requested diff mode and its operands, or (None, []) for list mode."""
    requested: list[tuple[DiffMode, list[str]]] = []
    if smart:
        requested.append((DiffMode.SMART, []))
    if from_files:
        requested.append((DiffMode.FILES, list(from_files)))
    if from_references:
        requested.append((DiffMode.REFERENCES, list(from_references)))
    if from_published:
        requested.append((DiffMode.PUBLISHED, [from_published]))
    if len(requested) > 1:
        raise UsageError.invalid_combination(
            "Only one of --diff, --diff-from-files, --diff-from-references "
            "and --diff-from-published can be used at a time"
        )
    return requested[0] if requested else (None, [])


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="pubapi")
@click.argument("targets", nargs=-1)
@click.option(
    "--manifest-path",
    type=click.Path(path_type=Path),
    default=Path(MANIFEST_NAME),
    show_default=True,
    help="pyproject.toml of the project to analyse",
)
@click.option("-p", "--package", help="Import package name, when it differs from the project name")
@click.option(
    "--api-json",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="List the items of an existing API document instead of building one",
)
@click.option(
    "--diff",
    "smart_diff",
    is_flag=True,
    help="Diff TARGETS. Each is an API document, a git reference or [NAME]@VERSION. "
    "With one target, the other side is the current project.",
)
@click.option("--diff-from-files", nargs=2, metavar="OLD NEW", help="Diff two API documents")
@click.option(
    "--diff-from-references",
    "--diff-git-checkouts",
    "diff_from_references",
    nargs=2,
    metavar="OLD NEW",
    help="Diff two git references (branches, tags, commits, HEAD~N)",
)
@click.option(
    "--diff-from-published",
    "--diff-published",
    "diff_from_published",
    metavar="[NAME]@VERSION",
    help="Diff a published version against the current project",
)
@click.option(
    "--deny",
    multiple=True,
    type=click.Choice([r.value for r in DenyRule]),
    help="Exit with failure if the diff contains items of this kind (repeatable)",
)
@click.option(
    "--force-checkouts",
    "--force-git-checkouts",
    "force_checkouts",
    is_flag=True,
    help="Check out git references even if local changes are lost. Local edits to files "
    "that differ between HEAD and a reference are overwritten. DESTRUCTIVE.",
)
@click.option(
    "--target-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory for generated API documents",
)
@click.option(
    "--color",
    type=click.Choice(["auto", "always", "never"]),
    default=None,
    help="When to color the output  [default: auto]",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def cli(
    targets: tuple[str, ...],
    manifest_path: Path,
    package: str | None,
    api_json: Path | None,
    smart_diff: bool,
    diff_from_files: tuple[str, str] | None,
    diff_from_references: tuple[str, str] | None,
    diff_from_published: str | None,
    deny: tuple[str, ...],
    force_checkouts: bool,
    target_dir: Path | None,
    color: str | None,
    verbose: bool,
) -> None:
    """List the public API of a Python package, or diff it between two versions.

    \b
    Examples:
      pubapi                                  list the current project
      pubapi --diff v1.0.0 v1.1.0             diff two git tags
      pubapi --diff @1.0.0                    diff PyPI 1.0.0 against the working tree
      pubapi --diff old.json new.json --deny all
    """
    configure_logging(level="DEBUG" if verbose else "WARNING")
    set_run_id()

    if manifest_path.is_dir():
        manifest_path = manifest_path / MANIFEST_NAME

    with translate_errors():
        mode, operands = _selected_mode(
            smart_diff, diff_from_files, diff_from_references, diff_from_published
        )
        diffing = mode is not None
        if targets and mode is not DiffMode.SMART:
            raise UsageError.invalid_combination("TARGETS can only be given together with --diff")
        if api_json is not None and diffing:
            raise UsageError.invalid_combination("--api-json cannot be combined with a diff mode")
        require_diffing(deny, diffing)

        overrides: dict[str, dict[str, object]] = {}
        if target_dir is not None:
            overrides["build"] = {"target_dir": str(target_dir.resolve())}
        config = load_config(manifest_path.parent, **overrides)
        if verbose:
            config.logging.level = "DEBUG"
        configure_logging(config=config.logging)

        rules = list(deny) or (list(config.diff.deny) if diffing else [])
        write, fmt = make_output(color or config.diff.color)
        collector = ItemCollector(
            manifest_path=manifest_path,
            config=config,
            force=force_checkouts or config.diff.force_checkouts,
            package=package,
        )

        with sigterm_as_exit():
            if mode is None:
                if api_json is not None:
                    items = items_from_file(api_json)
                else:
                    items = collector.collect(FromCurrent(manifest_path))
                print_items(items, write, fmt)
                return

            if mode is DiffMode.SMART:
                operands = list(targets)
            old, new = resolve(operands, mode, manifest_path)
            old_items, new_items = collector.collect_pair(old, new)

        diff = PublicItemsDiff.between(old_items, new_items)
        log.debug(
            "diff_computed",
            removed=len(diff.removed),
            changed=len(diff.changed),
            added=len(diff.added),
        )
        print_with_headers(diff, write, fmt=fmt)
        enforce(diff, rules)


if __name__ == "__main__":
    cli()
