"""
FastAPI dependency injection.

Dependencies provide instances of services, repositories, and configuration
to route handlers. Using dependency injection means:
- Routes don't instantiate their own dependencies (easier to test)
- Dependencies can be swapped for fakes in tests
- Configuration is centralized

Long-lived collaborators (database pool, auth provider, profile store,
realtime server) are created once in create_app() and kept on app.state.
The functions here hand them out per request.
"""

import logging
from typing import Annotated, Optional

from fastapi import Depends, Request

from ..config.settings import Settings
from ..core.accounts.gate import AuthProvider, ProfileStore, SessionGate
from ..infrastructure.mongodb.client import MongoPool
from ..infrastructure.mongodb.repositories.videos import VideoRepository

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "


# ---------------------------------------------------------------------------
# Application State
# ---------------------------------------------------------------------------

def get_app_settings(request: Request) -> Settings:
    """Settings the running app was created with."""
    return request.app.state.settings


def get_mongo_pool(request: Request) -> MongoPool:
    return request.app.state.mongo_pool


def get_auth_provider(request: Request) -> AuthProvider:
    return request.app.state.auth


def get_profile_store(request: Request) -> ProfileStore:
    return request.app.state.profiles


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------

def get_access_token(
    request: Request,
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> Optional[str]:
    """
    Read the caller's access token.

    The browser sends it as a cookie; API clients may use an
    Authorization: Bearer header instead. The cookie wins when both exist.
    """
    token = request.cookies.get(settings.session_cookie_name)
    if token:
        return token

    authorization = request.headers.get("authorization", "")
    if authorization.lower().startswith(BEARER_PREFIX):
        return authorization[len(BEARER_PREFIX):].strip() or None

    return None


def get_session_gate(
    auth: Annotated[AuthProvider, Depends(get_auth_provider)],
    profiles: Annotated[ProfileStore, Depends(get_profile_store)],
) -> SessionGate:
    """The gate is stateless, so a new instance per request is fine."""
    return SessionGate(auth=auth, profiles=profiles)


# ---------------------------------------------------------------------------
# Repository Dependencies
# ---------------------------------------------------------------------------

def get_video_repository(
    pool: Annotated[MongoPool, Depends(get_mongo_pool)],
) -> VideoRepository:
    """
    Provide VideoRepository bound to the shared pool.

    The repository acquires a connection per query, so nothing has to be
    released here when the request ends.
    """
    return VideoRepository(pool)


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

# These type aliases make route signatures cleaner
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
AccessTokenDep = Annotated[Optional[str], Depends(get_access_token)]
SessionGateDep = Annotated[SessionGate, Depends(get_session_gate)]
VideoRepositoryDep = Annotated[VideoRepository, Depends(get_video_repository)]
MongoPoolDep = Annotated[MongoPool, Depends(get_mongo_pool)]
