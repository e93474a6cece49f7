"""Click CLI entry point for a11ylocate."""

from __future__ import annotations

import logging

import click

from a11ylocate._version import __version__


@click.group()
@click.version_option(version=__version__, prog_name="a11ylocate")
@click.option("--verbose", "-v", is_flag=True, help="Log search and verification steps")
def cli(verbose: bool):
    """a11ylocate - find the source file behind an accessibility finding.

    Map scanner findings to repository files and prepare the branch name and
    pull-request description for their fixes.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Import and register subcommands
from a11ylocate.cli.locate_cmd import locate  # noqa: E402
from a11ylocate.cli.change_cmd import branch, describe  # noqa: E402

cli.add_command(locate)
cli.add_command(branch)
cli.add_command(describe)


if __name__ == "__main__":
    cli()
