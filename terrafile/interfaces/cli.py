"""
Command line interface for Terrafile.
"""

import sys
from typing import List, Optional

import click

from .. import __version__
from ..infrastructure.error_handler import ConfigurationError
from ..infrastructure.logger import logger
from ..models import DEFAULT_MODULE_PATH, DEFAULT_TERRAFILE_PATH, RunOptions
from .api import Terrafile


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "-p", "--module-path",
    default=DEFAULT_MODULE_PATH,
    show_default=True,
    help="File path to install generated terraform modules, if not overridden by 'destinations:' field",
)
@click.option(
    "-f", "--terrafile-file", "terrafile_path",
    default=DEFAULT_TERRAFILE_PATH,
    show_default=True,
    help="File path to the Terrafile file",
)
@click.option(
    "-c", "--clean",
    is_flag=True,
    help="Remove everything from destinations and module path upon fetching module(s). "
         "WARNING: removes all files and folders in the destinations including non-modules.",
)
@click.option(
    "-n", "--netrc-file", "netrc_path",
    default=None,
    help="Path to .netrc file, if not specified, will use $HOME/.netrc",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.version_option(__version__, prog_name="terrafile")
@click.pass_context
def cli(
    ctx: click.Context,
    module_path: str,
    terrafile_path: str,
    clean: bool,
    netrc_path: Optional[str],
    verbose: bool,
) -> None:
    """Fetch the modules declared in a Terrafile."""

    click.echo(f"Terrafile: version {__version__}")

    options = RunOptions(
        module_path=module_path,
        terrafile_path=terrafile_path,
        clean=clean,
        netrc_path=netrc_path,
        verbose=verbose,
    )
    app = Terrafile(options)

    try:
        config = app.load_config()
    except ConfigurationError as e:
        logger.critical(str(e))
        ctx.exit(1)

    app.install(config)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the CLI and return the process exit code.

    Flag parsing errors exit with 1 rather than click's usual 2.
    """
    try:
        result = cli.main(args=argv, prog_name="terrafile", standalone_mode=False)
    except click.exceptions.Abort:
        click.echo("Aborted!", err=True)
        return 1
    except click.ClickException as e:
        logger.error(f"failed to parse flags due to: {e.format_message()}")
        e.show()
        return 1

    return result if isinstance(result, int) else 0


if __name__ == "__main__":
    sys.exit(main())
