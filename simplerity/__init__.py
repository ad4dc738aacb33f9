"""
Simplerity CLI - Control-plane integration for packetbeat.

This package authenticates a user against the Simplerity control plane,
selects a managed agent, and downloads its packetbeat configuration.

Key modules:
- config: CLI configuration management (base URL, file paths, log level)
- credential_store: JSON persistence for session and registration credentials
- request_signer: HMAC-SHA256 payload signatures
- api_client: Signed HTTP client for the Simplerity REST API
- workflows: Login, agent selection and config download operations
"""

import os
from importlib import metadata

DISTRIBUTION_NAME = "simplerity-cli"


def _get_version() -> str:
    """
    Get version with priority: SIMPLERITY_VERSION env var > package metadata > fallback.
    """
    env_version = os.environ.get('SIMPLERITY_VERSION')
    if env_version:
        return env_version

    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        return '0.0.0-dev+unknown'


__version__ = _get_version()
