"""
Shared helpers for CLI commands.
"""

import click

from simplerity.api_client import SimplerityApiClient
from simplerity.config import SimplerityConfig
from simplerity.credential_store import CredentialStore


def get_config(ctx: click.Context) -> SimplerityConfig:
    """Get the configuration loaded by the command group."""
    return ctx.obj["config"]


def build_store(ctx: click.Context) -> CredentialStore:
    """Create the credential store for the configured file paths."""
    config = get_config(ctx)
    return CredentialStore(
        session_path=config.session_file,
        registration_path=config.registration_file,
    )


def build_api_client(ctx: click.Context) -> SimplerityApiClient:
    """
    Create the API client for the configured base URL.

    An httpx transport placed in ``ctx.obj["transport"]`` replaces the
    network, which is how tests drive the commands end to end.
    """
    config = get_config(ctx)
    return SimplerityApiClient(
        base_url=config.base_url,
        timeout=config.timeout,
        transport=ctx.obj.get("transport"),
    )
