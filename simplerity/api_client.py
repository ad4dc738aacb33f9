"""
Simplerity API client.

Provides a synchronous HTTP client for the Simplerity REST API. Every
request is a form-encoded POST whose body carries an HMAC signature over
the other fields. Each stage of a request (build, transport, body read,
status check, JSON decode) fails with its own exception type.
"""

import logging
from typing import Any, Callable, Dict, Mapping, Optional, TypeVar
from urllib.parse import quote

import httpx

from simplerity import __version__
from simplerity.config import DEFAULT_BASE_URL
from simplerity.credential_store import AgentRegistration
from simplerity.exceptions import SimplerityError
from simplerity.models import (
    AccessTokenResponse,
    PacketbeatConfigResponse,
    SelectAgentResponse,
)
from simplerity.request_signer import RequestSigner, format_value

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ============================================================================
# Constants
# ============================================================================

ACCESS_TOKEN_PATH = "/access_token"
SELECT_AGENT_PATH = "/api/v2/agents/select"
PACKETBEAT_CONFIG_PATH = "/api/v2/{agent_guid}/packetbeat/config"

AGENT_GROUP_FILTER = "ua,office-10"
CONFIG_TIER = "mid"

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
USER_AGENT = f"Simplerity-CLI/{__version__}"


# ============================================================================
# Exceptions
# ============================================================================


class ApiError(SimplerityError):
    """Base exception for API errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RequestBuildError(ApiError):
    """Raised when the HTTP request cannot be constructed."""

    pass


class ConnectionError(ApiError):
    """Raised when the request cannot be delivered to the server."""

    pass


class ResponseReadError(ApiError):
    """Raised when the response body cannot be read."""

    pass


class UnexpectedStatusError(ApiError):
    """Raised when the server answers with a non-2xx status."""

    def __init__(self, status_code: int, body: str):
        super().__init__(
            f"Unexpected status {status_code} from api: {body}",
            status_code=status_code,
        )
        self.body = body


class ResponseDecodeError(ApiError):
    """Raised when the response body is not the expected JSON document."""

    def __init__(self, message: str, body: str = "", status_code: Optional[int] = None):
        super().__init__(message, status_code=status_code)
        self.body = body


# ============================================================================
# SimplerityApiClient Class
# ============================================================================


class SimplerityApiClient:
    """
    HTTP client for the Simplerity API.

    Attributes:
        base_url: Base URL that relative request paths are joined to
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize the API client.

        Args:
            base_url: Base URL of the Simplerity API
            timeout: Request timeout in seconds (None keeps the httpx default)
            transport: Optional httpx transport, used to substitute the network in tests

        Raises:
            ValueError: If base_url is empty
        """
        if not base_url:
            raise ValueError("base_url is required")

        self._base_url = base_url.rstrip("/")

        client_kwargs: Dict[str, Any] = {
            "base_url": self._base_url,
            "headers": {"User-Agent": USER_AGENT},
        }
        if timeout is not None:
            client_kwargs["timeout"] = timeout
        if transport is not None:
            client_kwargs["transport"] = transport

        self._client = httpx.Client(**client_kwargs)

    @property
    def base_url(self) -> str:
        """Get the base URL."""
        return self._base_url

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def __enter__(self) -> "SimplerityApiClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # Generic Signed Request
    # -------------------------------------------------------------------------

    def request(
        self,
        method: str,
        url: str,
        bearer_token: str,
        payload: Mapping[str, Any],
        secret: str,
    ) -> Dict[str, Any]:
        """
        Send a signed, form-encoded request and decode its JSON response.

        Args:
            method: HTTP method (the API only uses POST)
            url: Absolute URL or path relative to base_url
            bearer_token: Authorization header value, sent verbatim ("" when anonymous)
            payload: Form fields; a signature field is added to a copy
            secret: API secret used to sign the payload

        Returns:
            Decoded JSON object

        Raises:
            RequestBuildError: If the request cannot be constructed
            ConnectionError: If the transport fails
            ResponseReadError: If the body cannot be read
            UnexpectedStatusError: If the status is not 2xx
            ResponseDecodeError: If the body is not a JSON object
        """
        signed = RequestSigner(secret).signed(payload)
        form = {key: format_value(signed[key]) for key in sorted(signed)}

        try:
            request = self._client.build_request(
                method,
                url,
                data=form,
                headers={
                    "Authorization": bearer_token,
                    "Content-Type": FORM_CONTENT_TYPE,
                },
            )
        except (httpx.InvalidURL, TypeError, ValueError) as e:
            raise RequestBuildError(f"Unable to create http request: {e}")

        logger.debug(f"{method} {request.url}")

        try:
            response = self._client.send(request, stream=True)
        except httpx.TransportError as e:
            raise ConnectionError(f"Unable to make request to api: {e}")

        try:
            body = response.read()
        except (httpx.TransportError, httpx.StreamError) as e:
            raise ResponseReadError(
                f"Unable to read body of response: {e}",
                status_code=response.status_code,
            )
        finally:
            response.close()

        logger.debug(f"{method} {request.url} -> {response.status_code} ({len(body)} bytes)")

        text = body.decode("utf-8", errors="replace")
        if not response.is_success:
            raise UnexpectedStatusError(response.status_code, text)

        try:
            data = response.json()
        except ValueError as e:
            raise ResponseDecodeError(
                f"Unable to parse response: {e}: {text}",
                body=text,
                status_code=response.status_code,
            )

        if not isinstance(data, dict):
            raise ResponseDecodeError(
                f"Unable to parse response: expected a JSON object: {text}",
                body=text,
                status_code=response.status_code,
            )

        return data

    def _request_as(
        self,
        parse: Callable[[Dict[str, Any]], T],
        url: str,
        bearer_token: str,
        payload: Mapping[str, Any],
        secret: str,
    ) -> T:
        data = self.request("POST", url, bearer_token, payload, secret)
        try:
            return parse(data)
        except (TypeError, ValueError) as e:
            raise ResponseDecodeError(f"Unable to parse response: {e}: {data}", body=str(data))

    # -------------------------------------------------------------------------
    # Endpoints
    # -------------------------------------------------------------------------

    def request_access_token(
        self,
        registration: AgentRegistration,
        username: str,
        password: str,
    ) -> AccessTokenResponse:
        """
        Exchange user credentials for an access token (password grant).

        Args:
            registration: Agent registration providing client credentials and secret
            username: Simplerity login
            password: Simplerity password

        Returns:
            Tokens plus the endpoints (agents) the user can select
        """
        payload = {
            "grant_type": "password",
            "username": username,
            "password": password,
            "client_id": registration.client_id,
            "client_secret": registration.client_secret,
            "scope": registration.scope,
            "pcName": registration.pc_name,
        }
        return self._request_as(
            AccessTokenResponse.model_validate,
            ACCESS_TOKEN_PATH,
            "",
            payload,
            registration.api_secret,
        )

    def select_agent(
        self,
        access_token: str,
        agent_id: str,
        secret: str,
    ) -> SelectAgentResponse:
        """
        Select the agent whose configuration will be downloaded.

        Args:
            access_token: Session access token
            agent_id: Endpoint id returned at login
            secret: API secret used to sign the request

        Returns:
            Selection result with the agent GUID
        """
        payload = {
            "agentId": agent_id,
            "group_name": AGENT_GROUP_FILTER,
        }
        return self._request_as(
            SelectAgentResponse.model_validate,
            SELECT_AGENT_PATH,
            access_token,
            payload,
            secret,
        )

    def fetch_packetbeat_config(
        self,
        access_token: str,
        agent_guid: str,
        build_version: str,
        secret: str,
    ) -> PacketbeatConfigResponse:
        """
        Download the packetbeat configuration for an agent.

        Args:
            access_token: Session access token
            agent_guid: GUID returned by agent selection
            build_version: Packetbeat build version from the registration
            secret: API secret used to sign the request

        Returns:
            Response holding the raw configuration file content
        """
        payload = {
            "build_version": build_version,
            "config": CONFIG_TIER,
        }
        return self._request_as(
            PacketbeatConfigResponse.model_validate,
            PACKETBEAT_CONFIG_PATH.format(agent_guid=quote(agent_guid, safe="")),
            access_token,
            payload,
            secret,
        )
