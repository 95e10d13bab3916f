"""Tests for the google-auth token provider. No network: refresh is patched."""

import asyncio
import json
from datetime import datetime, timedelta, timezone

import pytest
from google.auth.exceptions import RefreshError
from google.oauth2.credentials import Credentials

from dayflow.collectors.auth import GoogleTokenProvider
from dayflow.errors import AuthError

AUTHORIZED_USER = {
    "type": "authorized_user",
    "client_id": "client.apps.googleusercontent.com",
    "client_secret": "secret",
    "refresh_token": "refresh-me",
}


@pytest.fixture
def creds_file(tmp_path):
    path = tmp_path / "credentials.json"
    path.write_text(json.dumps(AUTHORIZED_USER))
    return path


@pytest.fixture
def refresh_calls(monkeypatch):
    """Patch Credentials.refresh to mint tok-N without touching the network."""
    calls = []

    def fake_refresh(self, request):
        calls.append(request)
        self.token = f"tok-{len(calls)}"
        self.expiry = datetime.now(timezone.utc).replace(tzinfo=None) + timedelta(hours=1)

    monkeypatch.setattr(Credentials, "refresh", fake_refresh)
    return calls


class TestGoogleTokenProvider:
    """Test GoogleTokenProvider."""

    def test_missing_file(self, tmp_path):
        provider = GoogleTokenProvider(tmp_path / "absent.json")
        with pytest.raises(AuthError):
            asyncio.run(provider.get_token())

    def test_unreadable_file(self, tmp_path):
        path = tmp_path / "credentials.json"
        path.write_text("{not json")
        with pytest.raises(AuthError):
            asyncio.run(GoogleTokenProvider(path).get_token())

    def test_incomplete_credentials(self, tmp_path):
        """Authorized-user JSON without a refresh token is rejected."""
        path = tmp_path / "credentials.json"
        path.write_text(json.dumps({"type": "authorized_user", "client_id": "x"}))
        with pytest.raises(AuthError):
            asyncio.run(GoogleTokenProvider(path).get_token())

    def test_refreshes_and_caches(self, creds_file, refresh_calls):
        """First call refreshes; a still-valid token is reused."""
        provider = GoogleTokenProvider(creds_file)
        assert asyncio.run(provider.get_token()) == "tok-1"
        assert asyncio.run(provider.get_token()) == "tok-1"
        assert len(refresh_calls) == 1

    def test_invalidate_forces_refresh(self, creds_file, refresh_calls):
        provider = GoogleTokenProvider(creds_file)
        token = asyncio.run(provider.get_token())
        provider.invalidate_token(token)
        assert asyncio.run(provider.get_token()) == "tok-2"

    def test_invalidate_other_token_ignored(self, creds_file, refresh_calls):
        """Invalidating a token that is no longer cached changes nothing."""
        provider = GoogleTokenProvider(creds_file)
        asyncio.run(provider.get_token())
        provider.invalidate_token("stale")
        assert asyncio.run(provider.get_token()) == "tok-1"

    def test_refresh_failure_is_auth_error(self, creds_file, monkeypatch):
        def fail(self, request):
            raise RefreshError("invalid_grant")

        monkeypatch.setattr(Credentials, "refresh", fail)
        with pytest.raises(AuthError):
            asyncio.run(GoogleTokenProvider(creds_file).get_token(interactive=False))
