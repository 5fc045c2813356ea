"""
Session request and response bodies for /v1/session.
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SessionBehavior(str, Enum):
    """What happens to held locks when a session is invalidated."""
    RELEASE = "release"
    DELETE = "delete"


class Session(BaseModel):
    """
    Body of a session create request.

    Usage:
        session = Session(name="leader-election", ttl="30s")
        created = consul.session_client().create_session(session)

    Unset fields are left out of the request so the agent applies its own
    defaults (for example a 15s lock delay and the serf health check).
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: Optional[str] = Field(default=None, alias="Name")
    node: Optional[str] = Field(default=None, alias="Node")
    lock_delay: Optional[str] = Field(default=None, alias="LockDelay")
    checks: Optional[list[str]] = Field(default=None, alias="Checks")
    behavior: Optional[SessionBehavior] = Field(default=None, alias="Behavior")
    ttl: Optional[str] = Field(default=None, alias="TTL")

    def to_body(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class SessionCreatedResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="ID")


class SessionInfo(BaseModel):
    """A session as reported by the info, list and renew endpoints."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="ID")
    name: Optional[str] = Field(default=None, alias="Name")
    node: Optional[str] = Field(default=None, alias="Node")
    lock_delay: Optional[int] = Field(default=None, alias="LockDelay")
    behavior: Optional[SessionBehavior] = Field(default=None, alias="Behavior")
    ttl: Optional[str] = Field(default=None, alias="TTL")
    checks: Optional[list[str]] = Field(default=None, alias="Checks")
    create_index: int = Field(default=0, alias="CreateIndex")
