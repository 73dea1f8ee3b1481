"""
Session gate for authenticated pages.

The gate answers one question per request: who is asking, and which
dashboard should they see? It is framework-agnostic - the route layer
turns a GateDecision into a redirect or a rendered template.

States, decided once per request:
    UNAUTHENTICATED -> redirect to the login page, render nothing else
    STUDENT         -> student dashboard
    TEACHER         -> teacher dashboard
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

from .models import DEFAULT_ROLE, AuthUser, Profile, Role

logger = logging.getLogger(__name__)

LOGIN_PATH = "/login"


# ---------------------------------------------------------------------------
# Protocols (interfaces)
# ---------------------------------------------------------------------------

class AuthProviderError(Exception):
    """Raised when the auth provider can't be reached or misbehaves."""
    pass


class AuthProvider(Protocol):
    """
    Resolves an access token to a user.

    Returns None for missing, expired or rejected tokens. Raises
    AuthProviderError only for transport-level failures.
    """

    async def get_user(self, access_token: Optional[str]) -> Optional[AuthUser]:
        ...


class ProfileStoreError(Exception):
    """Raised when profiles can't be read."""
    pass


class ProfileStore(Protocol):
    """
    Looks up the public profile for a user id. None if there is none.

    The lookup runs as the signed-in user, so row-level rules that only
    expose a user's own profile still return it. Raises ProfileStoreError
    when the store can't be queried.
    """

    async def get_profile(self, user_id: str, access_token: str) -> Optional[Profile]:
        ...


# ---------------------------------------------------------------------------
# Gate
# ---------------------------------------------------------------------------

class GateState(Enum):
    UNAUTHENTICATED = "unauthenticated"
    STUDENT = "student"
    TEACHER = "teacher"


@dataclass(frozen=True)
class GateDecision:
    """Outcome of checking one request."""
    state: GateState
    user: Optional[AuthUser] = None
    profile: Optional[Profile] = None

    @property
    def is_authenticated(self) -> bool:
        return self.state is not GateState.UNAUTHENTICATED

    @property
    def redirect_to(self) -> Optional[str]:
        return None if self.is_authenticated else LOGIN_PATH


_STATE_FOR_ROLE = {
    Role.STUDENT: GateState.STUDENT,
    Role.TEACHER: GateState.TEACHER,
}


class SessionGate:
    """
    Authentication check followed by a role lookup.

    The role comes from the profile store. Users without a profile, or with
    an unrecognized role, get the default student dashboard.
    """

    def __init__(self, auth: AuthProvider, profiles: ProfileStore) -> None:
        self._auth = auth
        self._profiles = profiles

    async def check(self, access_token: Optional[str]) -> GateDecision:
        try:
            user = await self._auth.get_user(access_token)
        except AuthProviderError as e:
            logger.warning(
                "Auth provider unavailable, treating request as signed out",
                extra={"error": str(e)}
            )
            user = None

        if user is None:
            return GateDecision(state=GateState.UNAUTHENTICATED)

        profile = await self._load_profile(user, access_token)
        role = profile.role if profile else DEFAULT_ROLE

        logger.debug(
            "Session gate passed",
            extra={"user_id": user.id, "role": role.value}
        )

        return GateDecision(
            state=_STATE_FOR_ROLE[role],
            user=user,
            profile=profile,
        )

    async def _load_profile(self, user: AuthUser, access_token: str) -> Optional[Profile]:
        try:
            return await self._profiles.get_profile(user.id, access_token)
        except ProfileStoreError as e:
            logger.error(
                "Profile lookup failed, using default role",
                extra={"user_id": user.id, "error": str(e)}
            )
            return None
