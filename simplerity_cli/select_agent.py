"""
Select CLI command.

Selects the agent whose packetbeat configuration will be downloaded.
"""

import click

from simplerity.workflows import LOAD_COMMAND, SimplerityWorkflow
from simplerity_cli.context import build_api_client, build_store


@click.command("select")
@click.option("--agent", "-a", "agent_id", required=True, help="Agent id printed by login.")
@click.pass_context
def select(ctx: click.Context, agent_id: str) -> None:
    """
    Select agent to use.

    Requires a previous 'simplerity login'.

    Example:

        simplerity select --agent 42
    """
    with build_api_client(ctx) as api_client:
        workflow = SimplerityWorkflow(build_store(ctx), api_client)
        guid = workflow.select_agent(agent_id)

    click.echo(click.style("Agent selected", fg="green") + f" ({guid}).")
    click.echo(f"Now you can download configuration using `{LOAD_COMMAND}`")
