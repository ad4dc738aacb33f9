"""
Custom exceptions for the Simplerity CLI.

Operations raise these instead of terminating the process. The CLI layer
is the single place that turns them into an error message and exit code.
"""

from typing import Any, Optional


class SimplerityError(Exception):
    """Base exception for all Simplerity CLI errors."""
    pass


# ============================================================================
# Configuration
# ============================================================================


class ConfigError(SimplerityError):
    """Base exception for configuration errors."""
    pass


class ConfigValidationError(ConfigError):
    """Raised when configuration validation fails."""
    pass


# ============================================================================
# Local Files
# ============================================================================


class CredentialStoreError(SimplerityError):
    """Raised when a credential file cannot be written."""

    def __init__(self, message: str, path: Optional[Any] = None):
        self.path = path
        super().__init__(message)


class RegistrationFileError(CredentialStoreError):
    """Raised when the agent registration file is missing or malformed."""
    pass


class ConfigWriteError(SimplerityError):
    """Raised when the downloaded configuration cannot be written to disk."""

    def __init__(self, message: str, path: Optional[Any] = None):
        self.path = path
        super().__init__(message)


# ============================================================================
# Workflow
# ============================================================================


class PreconditionError(SimplerityError):
    """
    Raised when a required earlier step has not been completed.

    Attributes:
        command: CLI command the user should run first
    """

    def __init__(self, command: str):
        self.command = command
        super().__init__(f"You should run `{command}` first")


class AgentSelectionError(SimplerityError):
    """Raised when the server refuses to select the requested agent."""

    def __init__(self, agent_id: str, response: Any):
        self.agent_id = agent_id
        self.response = response
        super().__init__(f"Unable to select agent {agent_id}: {response}")
