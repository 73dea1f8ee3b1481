"""
Unit tests for the Supabase REST clients.

httpx.MockTransport stands in for Supabase, so no network is used.
"""

import asyncio

import httpx
import pytest

from src.core.accounts.gate import AuthProviderError
from src.core.accounts.models import Role
from src.infrastructure.supabase.client import (
    MockAuthClient,
    ProfileStoreError,
    SupabaseAuthClient,
    SupabaseConfig,
    SupabaseProfileStore,
    create_auth_client,
)

CONFIG = SupabaseConfig(url="https://project.supabase.co/", anon_key="anon-key")


def transport_returning(status_code: int, payload=None, seen: list | None = None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, json=payload)

    return httpx.MockTransport(handler)


def failing_transport():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    return httpx.MockTransport(handler)


class TestSupabaseAuthClient:

    def test_valid_token_returns_user(self):
        seen: list[httpx.Request] = []
        client = SupabaseAuthClient(
            CONFIG,
            transport=transport_returning(200, {"id": "u1", "email": "ada@example.org"}, seen),
        )

        user = asyncio.run(client.get_user("token-1"))

        assert user.id == "u1"
        assert user.email == "ada@example.org"
        request = seen[0]
        assert str(request.url) == "https://project.supabase.co/auth/v1/user"
        assert request.headers["authorization"] == "Bearer token-1"
        assert request.headers["apikey"] == "anon-key"

    def test_missing_token_skips_the_request(self):
        seen: list[httpx.Request] = []
        client = SupabaseAuthClient(CONFIG, transport=transport_returning(200, {}, seen))

        assert asyncio.run(client.get_user(None)) is None
        assert seen == []

    @pytest.mark.parametrize("status_code", [401, 403])
    def test_rejected_token_means_no_user(self, status_code):
        client = SupabaseAuthClient(CONFIG, transport=transport_returning(status_code, {"msg": "bad jwt"}))
        assert asyncio.run(client.get_user("expired")) is None

    def test_server_error_raises_provider_error(self):
        client = SupabaseAuthClient(CONFIG, transport=transport_returning(502, {}))
        with pytest.raises(AuthProviderError):
            asyncio.run(client.get_user("token-1"))

    def test_transport_error_raises_provider_error(self):
        client = SupabaseAuthClient(CONFIG, transport=failing_transport())
        with pytest.raises(AuthProviderError):
            asyncio.run(client.get_user("token-1"))


class TestSupabaseProfileStore:

    def test_reads_profile_row(self):
        seen: list[httpx.Request] = []
        store = SupabaseProfileStore(
            CONFIG,
            transport=transport_returning(
                200,
                [{"id": "u1", "full_name": "Ada Lovelace", "avatar_url": "avatars/u1.png", "role": "tutor"}],
                seen,
            ),
        )

        profile = asyncio.run(store.get_profile("u1", "user-jwt"))

        assert profile.full_name == "Ada Lovelace"
        assert profile.avatar_url == "avatars/u1.png"
        assert profile.role is Role.TEACHER
        assert seen[0].url.path == "/rest/v1/profiles"
        assert seen[0].url.params["id"] == "eq.u1"

    def test_lookup_runs_as_the_signed_in_user(self):
        """Row-level security only returns a profile to its owner."""
        seen: list[httpx.Request] = []
        store = SupabaseProfileStore(CONFIG, transport=transport_returning(200, [], seen))

        asyncio.run(store.get_profile("u1", "user-jwt"))

        assert seen[0].headers["authorization"] == "Bearer user-jwt"
        assert seen[0].headers["apikey"] == "anon-key"

    def test_missing_profile_returns_none(self):
        store = SupabaseProfileStore(CONFIG, transport=transport_returning(200, []))
        assert asyncio.run(store.get_profile("u1", "user-jwt")) is None

    def test_http_error_raises_profile_store_error(self):
        store = SupabaseProfileStore(CONFIG, transport=transport_returning(500, {"message": "boom"}))
        with pytest.raises(ProfileStoreError):
            asyncio.run(store.get_profile("u1", "user-jwt"))


class TestFactories:

    def test_mock_mode_returns_mock_client(self):
        assert isinstance(create_auth_client(mock_mode=True), MockAuthClient)

    def test_real_client_requires_config(self):
        with pytest.raises(ValueError):
            create_auth_client()
