"""
Client for the agent's session endpoints (/v1/session).
"""
from typing import Optional
import logging

from consulkv.model.session import Session, SessionCreatedResponse, SessionInfo
from consulkv.transport import API_PREFIX, Transport, key_path

logger = logging.getLogger(__name__)


class SessionClient:
    """
    Session lifecycle operations.

    Usage:
        sessions = consul.session_client()
        session_id = sessions.create_session(Session(name="worker")).id
        kv.acquire_lock("jobs/leader", "worker-1", session_id)
        sessions.destroy_session(session_id)
    """

    def __init__(self, transport: Transport):
        self.transport = transport

    def create_session(self, session: Session) -> SessionCreatedResponse:
        response = self.transport.put(f"{API_PREFIX}/session/create", json=session.to_body())
        created = SessionCreatedResponse.model_validate(response.json())
        logger.info(f"Created session {created.id} (name={session.name!r})")
        return created

    def destroy_session(self, session_id: str) -> None:
        """Invalidate a session; its locks are released or deleted per its behavior."""
        self.transport.put(key_path("session/destroy", session_id))
        logger.info(f"Destroyed session {session_id}")

    def renew_session(self, session_id: str) -> Optional[SessionInfo]:
        """
        Reset a session's TTL.

        Returns:
            The renewed session, or None if it no longer exists
        """
        response = self.transport.put(key_path("session/renew", session_id), allow_not_found=True)
        if response.status_code == 404:
            return None
        return self._first(response.json())

    def get_session_info(self, session_id: str) -> Optional[SessionInfo]:
        response = self.transport.get(key_path("session/info", session_id), allow_not_found=True)
        if response.status_code == 404:
            return None
        return self._first(response.json())

    def list_sessions(self) -> list[SessionInfo]:
        response = self.transport.get(f"{API_PREFIX}/session/list")
        return [SessionInfo.model_validate(item) for item in response.json() or []]

    @staticmethod
    def _first(items) -> Optional[SessionInfo]:
        # info and renew answer with a list (or null) holding at most one session
        if not items:
            return None
        return SessionInfo.model_validate(items[0])
