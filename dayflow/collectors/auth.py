"""
OAuth token provider for the Calendar API.

Reads an authorized-user JSON (written by any Google OAuth installed-app
flow) or a service-account JSON (optionally impersonating a user via
domain-wide delegation) and hands out access tokens, refreshing them with
google-auth when they expire.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Protocol

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2 import service_account
from google.oauth2.credentials import Credentials

from dayflow.config import DELEGATED_USER, SCOPES
from dayflow.errors import AuthError

logger = logging.getLogger(__name__)


class TokenProvider(Protocol):
    async def get_token(self, interactive: bool = True) -> str: ...

    def invalidate_token(self, token: str) -> None: ...


class GoogleTokenProvider:
    """
    Token provider backed by google-auth credentials.

    interactive=False is the background context: failures are logged at
    debug level because the only signal there is an empty badge.
    """

    def __init__(
        self,
        credentials_file: str | Path,
        scopes: list[str] | None = None,
        subject: str | None = None,
    ):
        self.credentials_file = Path(credentials_file).expanduser()
        self.scopes = scopes or SCOPES
        self.subject = subject if subject is not None else DELEGATED_USER
        self._creds = None

    def _load(self):
        if self._creds is not None:
            return self._creds

        if not self.credentials_file.exists():
            raise AuthError(f"No credentials at {self.credentials_file}; sign in first")

        try:
            info = json.loads(self.credentials_file.read_text())
        except (OSError, json.JSONDecodeError) as e:
            raise AuthError(f"Unreadable credentials file {self.credentials_file}: {e}") from e

        try:
            if info.get("type") == "service_account":
                creds = service_account.Credentials.from_service_account_info(
                    info, scopes=self.scopes
                )
                if self.subject:
                    creds = creds.with_subject(self.subject)
            else:
                creds = Credentials.from_authorized_user_info(info, scopes=self.scopes)
        except (ValueError, GoogleAuthError) as e:
            raise AuthError(f"Invalid credentials in {self.credentials_file}: {e}") from e

        self._creds = creds
        return creds

    async def get_token(self, interactive: bool = True) -> str:
        """Return a valid access token, refreshing if needed. Raises AuthError."""
        creds = self._load()
        if creds.valid and creds.token:
            return creds.token

        try:
            # google-auth refreshes over a blocking HTTP call
            await asyncio.to_thread(creds.refresh, Request())
        except GoogleAuthError as e:
            log = logger.warning if interactive else logger.debug
            log(f"Token refresh failed: {e}")
            raise AuthError(f"Auth failed: {e}") from e

        if not creds.token:
            raise AuthError("Auth failed: no token after refresh")
        return creds.token

    def invalidate_token(self, token: str) -> None:
        """Drop a cached token the API rejected so the next get_token refreshes."""
        if self._creds is not None and self._creds.token == token:
            self._creds.token = None
            logger.info("Invalidated cached access token")
