"""
Load CLI command.

Downloads the packetbeat configuration of the selected agent.
"""

import click

from simplerity.workflows import DEFAULT_CONFIG_FILENAME, SimplerityWorkflow
from simplerity_cli.context import build_api_client, build_store


@click.command("load")
@click.option(
    "--save-to-file",
    "output_file",
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(dir_okay=False),
    help="Name of file to save config to.",
)
@click.pass_context
def load(ctx: click.Context, output_file: str) -> None:
    """
    Load packetbeat config.

    Requires a previous 'simplerity login' and 'simplerity select'.

    Example:

        simplerity load --save-to-file packetbeat.yml
    """
    with build_api_client(ctx) as api_client:
        workflow = SimplerityWorkflow(build_store(ctx), api_client)
        path = workflow.load_config(output_file)

    click.echo(click.style("Config downloaded.", fg="green"))
    click.echo(f"Now you can launch packetbeat using `packetbeat -c {path} run`")
