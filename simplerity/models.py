"""
Pydantic models for documents exchanged with the Simplerity API.

- AccessTokenResponse / Endpoint: password grant result and selectable agents
- SelectAgentResponse: agent selection result
- PacketbeatConfigResponse: raw packetbeat configuration file content
"""

from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Document(BaseModel):
    """
    Base model for JSON documents.

    A null value is treated like a missing key, so the field keeps its
    default instead of failing validation.
    """

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


# ============================================================================
# Login
# ============================================================================


class Endpoint(Document):
    """An agent the user can select."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str = Field("", description="Agent id passed to the select call")
    title: str = Field("", description="Human-readable agent name")


class AccessTokenResponse(Document):
    """Response of the password grant."""

    access_token: str = Field("", description="Bearer token for later calls")
    expires_in: int = Field(0, description="Token lifetime in seconds")
    refresh_token: str = Field("", description="Refresh token")
    endpoints: List[Endpoint] = Field(
        default_factory=list, description="Agents the user can select"
    )


# ============================================================================
# Agent Selection
# ============================================================================


class SelectAgentResponse(Document):
    """
    Response of the agent selection call.

    Unknown keys are kept so a refusal can be reported in full.
    """

    model_config = ConfigDict(extra="allow")

    ok: bool = Field(False, description="Whether the agent was selected")
    guid: str = Field("", description="GUID of the selected agent")


# ============================================================================
# Config Download
# ============================================================================


class PacketbeatConfigResponse(Document):
    """Response of the per-agent packetbeat config call."""

    data: str = Field("", description="Raw configuration file content")
