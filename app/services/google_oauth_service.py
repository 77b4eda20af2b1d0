"""
Google OAuth client: ID token verification, code exchange and auth URL
"""
import logging
import secrets
from typing import Optional
from urllib.parse import urlencode

import httpx

from app.core.config import settings
from app.core.exceptions import UnauthorizedError
from app.models.onboarding import GoogleUserInfo, GoogleTokens

logger = logging.getLogger(__name__)

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_TOKENINFO_URL = "https://oauth2.googleapis.com/tokeninfo"
GOOGLE_SCOPES = ("openid", "email", "profile")


class GoogleOAuthService:

    def __init__(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        redirect_uri: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.client_id = client_id if client_id is not None else settings.GOOGLE_CLIENT_ID
        self.client_secret = client_secret if client_secret is not None else settings.GOOGLE_CLIENT_SECRET
        self.redirect_uri = redirect_uri if redirect_uri is not None else settings.GOOGLE_REDIRECT_URI
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=settings.GOOGLE_HTTP_TIMEOUT, transport=self.transport)

    async def verify_token(self, id_token: str) -> GoogleUserInfo:
        """Validate a Google ID token and return its identity claims"""
        try:
            async with self._client() as client:
                response = await client.get(GOOGLE_TOKENINFO_URL, params={"id_token": id_token})
        except httpx.HTTPError as e:
            logger.error(f"GOOGLE: Token verification request failed: {e}")
            raise UnauthorizedError("Invalid Google token")

        if response.status_code != 200:
            logger.warning(f"GOOGLE: Token rejected with status {response.status_code}")
            raise UnauthorizedError("Invalid Google token")

        claims = response.json()
        if not claims or claims.get("aud") != self.client_id:
            logger.warning("GOOGLE: Token audience does not match this client")
            raise UnauthorizedError("Invalid Google token")

        return GoogleUserInfo(
            email=claims.get("email"),
            name=claims.get("name") or "",
            picture=claims.get("picture"),
            email_verified=str(claims.get("email_verified", "")).lower() == "true",
            sub=claims.get("sub", ""),
        )

    async def get_token_from_code(self, code: str) -> GoogleTokens:
        """Exchange an authorization code for Google tokens"""
        data = {
            "code": code,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "redirect_uri": self.redirect_uri,
            "grant_type": "authorization_code",
        }
        try:
            async with self._client() as client:
                response = await client.post(GOOGLE_TOKEN_URL, data=data)
        except httpx.HTTPError as e:
            logger.error(f"GOOGLE: Code exchange request failed: {e}")
            raise UnauthorizedError("Failed to exchange authorization code")

        if response.status_code != 200:
            logger.warning(f"GOOGLE: Code exchange rejected with status {response.status_code}: {response.text}")
            raise UnauthorizedError("Failed to exchange authorization code")

        payload = response.json()
        if not payload.get("id_token"):
            logger.warning("GOOGLE: Code exchange returned no id_token")
            raise UnauthorizedError("Failed to exchange authorization code")

        return GoogleTokens(id_token=payload["id_token"], access_token=payload.get("access_token", ""))

    def generate_auth_url(self, state: Optional[str] = None) -> str:
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": " ".join(GOOGLE_SCOPES),
            "access_type": "offline",
            "state": state or secrets.token_urlsafe(16),
        }
        return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"


google_oauth_service = GoogleOAuthService()
