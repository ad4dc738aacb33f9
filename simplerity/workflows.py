"""
Simplerity workflow operations.

The three steps a user runs, one CLI invocation each:

    login  ->  select  ->  load
    (unauthenticated -> authenticated -> agent-selected)

Each operation reloads its state from the credential store, calls the API,
and writes the result back. Failures are raised, never turned into a
process exit here.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Union

from simplerity.api_client import SimplerityApiClient
from simplerity.credential_store import CredentialStore
from simplerity.exceptions import (
    AgentSelectionError,
    ConfigWriteError,
    PreconditionError,
)
from simplerity.models import Endpoint

logger = logging.getLogger(__name__)


# CLI commands named in remediation messages
LOGIN_COMMAND = "simplerity login --login YOUR_LOGIN --password YOUR_PASSWORD"
SELECT_COMMAND = "simplerity select --agent AGENT_ID"
LOAD_COMMAND = "simplerity load"

DEFAULT_CONFIG_FILENAME = "packetbeat.yml"


@dataclass
class LoginResult:
    """Outcome of a successful login."""

    expires_in: int = 0
    endpoints: List[Endpoint] = field(default_factory=list)


class SimplerityWorkflow:
    """
    Runs the login, agent selection and config download operations.

    Attributes:
        store: Credential store holding session and registration
        api_client: Client used for the remote calls
    """

    def __init__(self, store: CredentialStore, api_client: SimplerityApiClient):
        self.store = store
        self.api_client = api_client

    def login(self, username: str, password: str) -> LoginResult:
        """
        Authenticate the user and store the issued tokens.

        The selected agent, if any, is kept.

        Args:
            username: Simplerity login
            password: Simplerity password

        Returns:
            Token lifetime and the endpoints the user can select next

        Raises:
            RegistrationFileError: If the agent registration cannot be loaded
            ApiError: If the remote call fails
            CredentialStoreError: If the session cannot be saved
        """
        registration = self.store.load_agent_registration()
        session = self.store.load_user_session()

        response = self.api_client.request_access_token(registration, username, password)

        session.access_token = response.access_token
        session.expires_in = response.expires_in
        session.refresh_token = response.refresh_token
        self.store.save_user_session(session)

        logger.info(
            f"Logged in, token expires in {response.expires_in}s, "
            f"{len(response.endpoints)} endpoint(s) available"
        )
        return LoginResult(expires_in=response.expires_in, endpoints=response.endpoints)

    def select_agent(self, agent_id: str) -> str:
        """
        Select the agent whose configuration will be downloaded.

        Args:
            agent_id: Endpoint id printed by login

        Returns:
            GUID of the selected agent

        Raises:
            PreconditionError: If the user is not logged in
            RegistrationFileError: If the agent registration cannot be loaded
            AgentSelectionError: If the server does not confirm the selection
            ApiError: If the remote call fails
            CredentialStoreError: If the session cannot be saved
        """
        registration = self.store.load_agent_registration()
        session = self.store.load_user_session()
        if not session.is_authenticated:
            raise PreconditionError(LOGIN_COMMAND)

        response = self.api_client.select_agent(
            session.access_token, agent_id, registration.api_secret
        )
        if not response.ok:
            raise AgentSelectionError(agent_id, response.model_dump())

        session.agent_guid = response.guid
        self.store.save_user_session(session)

        logger.info(f"Selected agent {agent_id} ({response.guid})")
        return response.guid

    def load_config(self, output_file: Union[str, Path] = DEFAULT_CONFIG_FILENAME) -> Path:
        """
        Download the selected agent's packetbeat configuration.

        Args:
            output_file: Where to write the configuration

        Returns:
            Path of the written file

        Raises:
            PreconditionError: If login or agent selection has not been done
            RegistrationFileError: If the agent registration cannot be loaded
            ApiError: If the remote call fails
            ConfigWriteError: If the file cannot be written
        """
        registration = self.store.load_agent_registration()
        session = self.store.load_user_session()
        if not session.is_authenticated:
            raise PreconditionError(LOGIN_COMMAND)
        if not session.has_selected_agent:
            raise PreconditionError(SELECT_COMMAND)

        response = self.api_client.fetch_packetbeat_config(
            session.access_token,
            session.agent_guid,
            registration.build_version,
            registration.api_secret,
        )

        output_path = Path(output_file)
        try:
            with open(output_path, "w", encoding="utf-8", newline="") as f:
                f.write(response.data)
        except OSError as e:
            raise ConfigWriteError(
                f"Unable to save packetbeat config to {output_path}: {e}",
                path=output_path,
            ) from e

        logger.info(f"Wrote {len(response.data)} characters of config to {output_path}")
        return output_path
