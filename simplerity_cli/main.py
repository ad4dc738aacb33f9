"""
Simplerity CLI entry point.

Main command group for the Simplerity CLI. The group is also the single
place where operation errors become an error message and exit status.
"""

import logging
from typing import Optional

import click

from simplerity import __version__
from simplerity.config import LOG_LEVELS, SimplerityConfig
from simplerity.exceptions import SimplerityError
from simplerity.logging_setup import setup_logging

logger = logging.getLogger(__name__)


class SimplerityGroup(click.Group):
    """Command group that reports SimplerityError failures and exits 1."""

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except SimplerityError as e:
            logger.debug("Command failed", exc_info=True)
            click.echo(
                click.style("Error: ", fg="red", bold=True) + str(e),
                err=True,
            )
            ctx.exit(1)


@click.group(cls=SimplerityGroup)
@click.version_option(version=__version__, prog_name="simplerity")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to the YAML configuration file.",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Override the configured log level.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[str], log_level: Optional[str]) -> None:
    """
    Simplerity integration for packetbeat.

    Log in, select an agent, then download its packetbeat configuration:

    \b
        simplerity login --login YOUR_LOGIN --password YOUR_PASSWORD
        simplerity select --agent AGENT_ID
        simplerity load --save-to-file packetbeat.yml
    """
    ctx.ensure_object(dict)

    config = SimplerityConfig(config_path=config_path)
    if log_level:
        config.log_level = log_level.upper()
    config.validate()

    setup_logging(config.log_level)
    logger.debug(f"Using API at {config.base_url}")

    ctx.obj["config"] = config


# Import and register subcommands
from simplerity_cli.login import login  # noqa: E402
from simplerity_cli.select_agent import select  # noqa: E402
from simplerity_cli.load import load  # noqa: E402

cli.add_command(login)
cli.add_command(select)
cli.add_command(load)


def main() -> None:
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
