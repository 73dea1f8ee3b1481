"""
Supabase auth and profile lookups over the REST API.

We only need two reads from Supabase: "who owns this access token" and
"what does this user's profile say". Both are plain HTTP calls, so httpx
is enough; the full SDK would pull in realtime and storage clients we
don't use.

Mock mode keeps users and profiles in memory.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from src.core.accounts.gate import AuthProviderError, ProfileStoreError
from src.core.accounts.models import AuthUser, Profile

logger = logging.getLogger(__name__)

PROFILE_COLUMNS = "id,full_name,avatar_url,role"


@dataclass
class SupabaseConfig:
    """Configuration for Supabase REST calls."""
    url: str
    anon_key: str
    timeout_seconds: float = 10.0

    @property
    def base_url(self) -> str:
        return self.url.rstrip("/")


class SupabaseAuthClient:
    """
    Resolves access tokens with GET /auth/v1/user.

    Rejected tokens (401/403) mean "no session". Anything else that isn't a
    200 is a provider failure.
    """

    def __init__(
        self,
        config: SupabaseConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config
        self._transport = transport

    async def get_user(self, access_token: Optional[str]) -> Optional[AuthUser]:
        if not access_token:
            return None

        headers = {
            "apikey": self._config.anon_key,
            "Authorization": f"Bearer {access_token}",
        }

        try:
            async with httpx.AsyncClient(
                base_url=self._config.base_url,
                timeout=self._config.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.get("/auth/v1/user", headers=headers)
        except httpx.HTTPError as e:
            logger.error(
                "Supabase auth request failed",
                extra={"error": str(e)}
            )
            raise AuthProviderError(f"Auth request failed: {e}")

        if response.status_code in (401, 403):
            logger.debug("Access token rejected")
            return None

        if response.status_code != 200:
            logger.error(
                "Unexpected Supabase auth response",
                extra={"status_code": response.status_code}
            )
            raise AuthProviderError(f"Auth provider returned {response.status_code}")

        payload = response.json()
        return AuthUser(id=str(payload["id"]), email=payload.get("email"))


class SupabaseProfileStore:
    """
    Reads the profiles table through PostgREST.

    Requests carry the user's own access token so row-level security sees
    the signed-in user, not the anonymous role.
    """

    def __init__(
        self,
        config: SupabaseConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config
        self._transport = transport

    async def get_profile(self, user_id: str, access_token: str) -> Optional[Profile]:
        headers = {
            "apikey": self._config.anon_key,
            "Authorization": f"Bearer {access_token}",
        }
        params = {"id": f"eq.{user_id}", "select": PROFILE_COLUMNS}

        try:
            async with httpx.AsyncClient(
                base_url=self._config.base_url,
                timeout=self._config.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.get("/rest/v1/profiles", headers=headers, params=params)
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(
                "Profile lookup failed",
                extra={"user_id": user_id, "error": str(e)}
            )
            raise ProfileStoreError(f"Profile lookup failed: {e}")

        rows = response.json()
        if not rows:
            return None

        return Profile.from_row(rows[0])


# ---------------------------------------------------------------------------
# Mock Clients for Local Development
# ---------------------------------------------------------------------------

class MockAuthClient:
    """
    In-memory token store.

    Tokens are registered with add_user(); any other token is rejected.
    """

    def __init__(self) -> None:
        self._users: dict[str, AuthUser] = {}
        logger.info("Initialized mock auth client (in-memory)")

    async def get_user(self, access_token: Optional[str]) -> Optional[AuthUser]:
        if not access_token:
            return None
        return self._users.get(access_token)

    def add_user(self, access_token: str, user: AuthUser) -> None:
        self._users[access_token] = user


class MockProfileStore:
    """In-memory profiles keyed by user id."""

    def __init__(self) -> None:
        self._profiles: dict[str, Profile] = {}

    async def get_profile(self, user_id: str, access_token: str) -> Optional[Profile]:
        return self._profiles.get(user_id)

    def add_profile(self, profile: Profile) -> None:
        self._profiles[profile.id] = profile


# ---------------------------------------------------------------------------
# Factory Functions
# ---------------------------------------------------------------------------

def create_auth_client(
    config: Optional[SupabaseConfig] = None,
    mock_mode: bool = False,
):
    """Create an auth provider: Supabase or in-memory."""
    if mock_mode:
        return MockAuthClient()

    if config is None:
        raise ValueError("config is required when not in mock mode")

    return SupabaseAuthClient(config)


def create_profile_store(
    config: Optional[SupabaseConfig] = None,
    mock_mode: bool = False,
):
    """Create a profile store: Supabase or in-memory."""
    if mock_mode:
        return MockProfileStore()

    if config is None:
        raise ValueError("config is required when not in mock mode")

    return SupabaseProfileStore(config)
