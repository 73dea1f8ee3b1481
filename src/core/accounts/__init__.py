"""
Accounts: authenticated users, profiles, roles and the dashboard gate.
"""

from .gate import (
    AuthProvider,
    AuthProviderError,
    GateDecision,
    GateState,
    ProfileStore,
    ProfileStoreError,
    SessionGate,
)
from .models import DEFAULT_ROLE, AuthUser, Profile, Role, role_from_value

__all__ = [
    "AuthProvider",
    "AuthProviderError",
    "GateDecision",
    "GateState",
    "ProfileStore",
    "ProfileStoreError",
    "SessionGate",
    "DEFAULT_ROLE",
    "AuthUser",
    "Profile",
    "Role",
    "role_from_value",
]
