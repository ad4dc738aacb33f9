"""
Local credential store for the Simplerity CLI.

Persists two small JSON documents between CLI invocations:

- the user session (tokens issued by the API, plus the selected agent)
- the agent registration (static secrets provisioned out-of-band)

Design:
- A missing or corrupt session file means "not logged in yet" and yields
  an empty session
- A missing or corrupt registration file is an error, since no request
  can be signed without it
- Credential files are written with owner-only permissions
"""

import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import Field, ValidationError

from simplerity.config import DEFAULT_REGISTRATION_FILE, DEFAULT_SESSION_FILE
from simplerity.exceptions import CredentialStoreError, RegistrationFileError
from simplerity.models import Document

logger = logging.getLogger(__name__)


# ============================================================================
# Models
# ============================================================================


class UserSession(Document):
    """
    Session credentials issued by the API for the logged-in user.

    Stored at ``user_credentials.json`` by default. Tokens are set by
    ``login``, the agent GUID by ``select``. Expiry is not enforced
    locally; a stale token is rejected by the API.
    """

    access_token: str = Field("", description="Bearer token sent as the Authorization header")
    expires_in: int = Field(0, description="Token lifetime in seconds, as reported at login")
    refresh_token: str = Field("", description="Refresh token (stored, never used)")
    agent_guid: str = Field("", description="GUID of the selected agent, empty until selection")

    @property
    def is_authenticated(self) -> bool:
        return bool(self.access_token)

    @property
    def has_selected_agent(self) -> bool:
        return bool(self.agent_guid)

    def to_json(self) -> str:
        """Serialize, leaving out agent_guid until an agent is selected."""
        exclude = None if self.agent_guid else {"agent_guid"}
        return self.model_dump_json(indent=2, exclude=exclude)


class AgentRegistration(Document):
    """
    Static registration credentials identifying this installation.

    Stored at ``agent_credentials.json`` by default and provisioned
    out-of-band. Never written by the CLI workflows.
    """

    api_secret: str = Field("", description="HMAC key used to sign every request")
    client_id: str = Field("", description="OAuth client id")
    client_secret: str = Field("", description="OAuth client secret")
    scope: str = Field("", description="Requested OAuth scope")
    pc_name: str = Field("", description="Host label reported to the API")
    build_version: str = Field("", description="Packetbeat build version used to select a config")

    def to_json(self) -> str:
        return self.model_dump_json(indent=2)


# ============================================================================
# CredentialStore Class
# ============================================================================


class CredentialStore:
    """
    JSON file storage for session and registration credentials.

    Usage:
        >>> store = CredentialStore(session_path=Path("user_credentials.json"))
        >>> session = store.load_user_session()
        >>> session.agent_guid = "G-1"
        >>> store.save_user_session(session)
    """

    def __init__(
        self,
        session_path: Optional[Path] = None,
        registration_path: Optional[Path] = None,
    ):
        """
        Initialize credential store.

        Args:
            session_path: User session file (defaults to ./user_credentials.json)
            registration_path: Agent registration file (defaults to ./agent_credentials.json)
        """
        self.session_path = Path(session_path or DEFAULT_SESSION_FILE)
        self.registration_path = Path(registration_path or DEFAULT_REGISTRATION_FILE)

    # -------------------------------------------------------------------------
    # User Session
    # -------------------------------------------------------------------------

    def load_user_session(self) -> UserSession:
        """
        Load the user session.

        Returns:
            Stored session, or an empty session if the file is missing or corrupt
        """
        try:
            raw = self.session_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            logger.warning("Invalid session in %s, using defaults: %s", self.session_path, e)
            return UserSession()
        except OSError as e:
            logger.info("Unable to read %s, using defaults: %s", self.session_path, e)
            return UserSession()

        try:
            return UserSession.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("Invalid session in %s, using defaults: %s", self.session_path, e)
            return UserSession()

    def save_user_session(self, session: UserSession) -> None:
        """
        Overwrite the session file.

        Raises:
            CredentialStoreError: If the session cannot be written
        """
        self._write(self.session_path, session.to_json())
        logger.debug("Saved user session -> %s", self.session_path)

    # -------------------------------------------------------------------------
    # Agent Registration
    # -------------------------------------------------------------------------

    def load_agent_registration(self) -> AgentRegistration:
        """
        Load the agent registration.

        Raises:
            RegistrationFileError: If the file is missing or malformed
        """
        try:
            raw = self.registration_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise RegistrationFileError(
                f"Unable to read {self.registration_path} file: {e}",
                path=self.registration_path,
            ) from e

        try:
            return AgentRegistration.model_validate_json(raw)
        except ValidationError as e:
            raise RegistrationFileError(
                f"Unable to parse agent credentials in {self.registration_path}: {e}",
                path=self.registration_path,
            ) from e

    def save_agent_registration(self, registration: AgentRegistration) -> None:
        """
        Overwrite the registration file.

        Raises:
            CredentialStoreError: If the registration cannot be written
        """
        self._write(self.registration_path, registration.to_json())

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _write(self, path: Path, payload: str) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(payload, encoding="utf-8")
            os.chmod(path, 0o600)
        except OSError as e:
            raise CredentialStoreError(f"Unable to write to {path}: {e}", path=path) from e
