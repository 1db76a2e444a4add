"""
Explicit sessions for the two backend audiences.

The portal talks to the backend as two different principals: the citizen
who submits and tracks requests, and the back-office officer who reviews
them. Each gets its own Session with an explicit init/teardown lifecycle;
sessions are handed to API clients instead of being read from module state.
"""

import logging
from enum import Enum
from typing import Dict, Optional

from models.errors import create_unauthorized_error
from models.status import ActorRole
from utils.action_policy import is_citizen_role

logger = logging.getLogger(__name__)


class SessionScope(str, Enum):
    """Token namespace a session belongs to."""

    CITIZEN = "citizen"
    PORTAL = "portal"


class Session:
    """Credentials and identity of one principal."""

    def __init__(
        self,
        scope: SessionScope,
        token: Optional[str] = None,
        role: Optional[str] = None,
        user_id: Optional[str] = None,
    ):
        self.scope = scope
        self.token = token
        self.role = role
        self.user_id = user_id
        self._active = False

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def has_token(self) -> bool:
        return bool(self.token)

    def init(self) -> "Session":
        """Activate the session; API calls made before this carry no credentials."""
        self._active = True
        logger.info(
            f"Started {self.scope.value} session (role={self.role}, "
            f"authenticated={self.has_token})"
        )
        return self

    def teardown(self) -> None:
        """Deactivate the session and drop its token."""
        if self._active:
            logger.info(f"Stopped {self.scope.value} session")
        self._active = False
        self.token = None

    def authorization_header(self) -> Dict[str, str]:
        """Bearer header for the session, empty when inactive or anonymous."""
        if not self._active or not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def __repr__(self) -> str:
        # Never include the token
        return (
            f"Session(scope={self.scope.value!r}, role={self.role!r}, "
            f"user_id={self.user_id!r}, active={self._active})"
        )


class SessionRegistry:
    """Owns the citizen and portal sessions for the lifetime of the server."""

    def __init__(self, citizen: Session, portal: Session):
        self._sessions = {
            SessionScope.CITIZEN: citizen,
            SessionScope.PORTAL: portal,
        }

    @classmethod
    def from_config(cls, config) -> "SessionRegistry":
        citizen = Session(
            SessionScope.CITIZEN,
            token=config.citizen_token,
            role=ActorRole.CITIZEN.value,
            user_id=config.citizen_user_id,
        )
        portal = Session(
            SessionScope.PORTAL,
            token=config.portal_token,
            role=config.portal_role,
            user_id=config.portal_user_id,
        )
        return cls(citizen=citizen, portal=portal)

    def start(self) -> None:
        for session in self._sessions.values():
            session.init()

    def stop(self) -> None:
        for session in self._sessions.values():
            session.teardown()

    def get(self, scope) -> Session:
        """
        Return the session for ``scope``.

        Raises:
            ToolError: UNAUTHORIZED if the registry has not been started
        """
        session = self._sessions[SessionScope(scope)]
        if not session.is_active:
            raise create_unauthorized_error(f"{session.scope.value} session is not active")
        return session

    @staticmethod
    def scope_for_role(role) -> SessionScope:
        """Citizen roles use the citizen session; every other role uses the portal session."""
        if is_citizen_role(role):
            return SessionScope.CITIZEN
        return SessionScope.PORTAL
