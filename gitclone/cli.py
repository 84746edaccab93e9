"""CLI entry point for gitclone."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from gitclone import __version__
from gitclone.cloner import GitCloner
from gitclone.errors import GitCloneError, LocationParseError
from gitclone.models.config import CloneConfig

console = Console(highlight=False, emoji=False)
err_console = Console(stderr=True, highlight=False, emoji=False)


class CloneCommand(click.Command):
    """Command whose usage errors exit with status 1 like every other failure."""

    def make_context(self, info_name, args, parent=None, **extra):
        try:
            return super().make_context(info_name, args, parent=parent, **extra)
        except click.UsageError as e:
            e.exit_code = 1
            raise


def setup_logging(verbose: bool) -> None:
    """Send log records to stderr so they never break the progress line."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@click.command(cls=CloneCommand)
@click.argument("location")
@click.option(
    "--root",
    type=click.Path(path_type=Path),
    default=None,
    help="Source root to clone under (default: ~/src)",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="YAML config file (default: ~/.config/gitclone/config.yaml)",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging on stderr")
@click.version_option(__version__, prog_name="gitclone")
@click.pass_context
def main(
    ctx: click.Context,
    location: str,
    root: Path | None,
    config_path: Path | None,
    verbose: bool,
) -> None:
    """Clone LOCATION into <root>/<organization>/<repository>.

    LOCATION is an SSH (git@host:org/repo.git) or HTTP(S)
    (https://host/org/repo.git) git URL.
    """
    setup_logging(verbose)

    try:
        config = CloneConfig.load(config_path)
        cloner = GitCloner(config)
        destination = cloner.prepare(location, root)

        console.print(f"Cloning {escape(location)} into {escape(str(destination))}", soft_wrap=True)
        asyncio.run(cloner.clone(location, destination))
    except LocationParseError:
        # The diagnostic has already been printed.
        ctx.exit(1)
    except GitCloneError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]", soft_wrap=True)
        ctx.exit(1)
    except BrokenPipeError:
        # The reader of stdout went away; git has already been stopped.
        ctx.exit(1)

    console.print(f"[green]Successfully cloned to {escape(str(destination))}[/green]", soft_wrap=True)


if __name__ == "__main__":
    main()
