"""
Login CLI command.

Authenticates against Simplerity with the user's credentials and lists
the agents that can be selected next.
"""

import click

from simplerity.workflows import SELECT_COMMAND, SimplerityWorkflow
from simplerity_cli.context import build_api_client, build_store


@click.command("login")
@click.option("--login", "-l", "username", required=True, help="Simplerity login.")
@click.option("--password", "-p", required=True, help="Simplerity password.")
@click.pass_context
def login(ctx: click.Context, username: str, password: str) -> None:
    """
    Login to Simplerity.

    Stores the issued tokens in the session file and prints the agents
    available to this account.

    Example:

        simplerity login --login alice --password secret
    """
    with build_api_client(ctx) as api_client:
        workflow = SimplerityWorkflow(build_store(ctx), api_client)
        result = workflow.login(username, password)

    click.echo(click.style("Authorized.", fg="green") + " Now you should select agent to use:")
    for endpoint in result.endpoints:
        click.echo(f"{endpoint.id}: {endpoint.title}")
    if not result.endpoints:
        click.echo("  (no agents available for this account)")
    click.echo(f"Use `{SELECT_COMMAND}` to select agent")
