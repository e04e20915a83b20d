# =============================================================================
# Federated Identity Verification (Google Sign-In)
# =============================================================================
#
# Setup (Google):
#   1. Go to https://console.cloud.google.com/apis/credentials
#   2. Create an OAuth 2.0 Client ID (Web application)
#   3. Set env var:
#      - GOOGLE_OAUTH_CLIENT_ID=...
#
# The frontend signs the user in with Google and sends the resulting ID token
# in the Authorization header. The verifier checks it with Google's tokeninfo
# endpoint and turns it into a FederatedClaim the session layer understands.
#
# =============================================================================

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from gatehouse.config import get_settings
from gatehouse.core.models import FederatedClaim

logger = logging.getLogger(__name__)


class OAuthError(Exception):
    """Credential could not be verified."""
    pass


class IdentityVerifier(ABC):
    """Turns an opaque provider credential into a verified claim."""

    provider: str = ""

    @property
    def is_configured(self) -> bool:
        return True

    @abstractmethod
    async def verify(self, credential: str) -> FederatedClaim:
        """Verify the credential or raise OAuthError."""
        pass


# =============================================================================
# Google
# =============================================================================


class GoogleIdentityVerifier(IdentityVerifier):
    """Verifies Google ID tokens."""

    provider = "google"
    TOKENINFO_URL = "https://oauth2.googleapis.com/tokeninfo"
    ISSUERS = {"accounts.google.com", "https://accounts.google.com"}

    def __init__(self, client_id: str | None = None, http_client: httpx.AsyncClient | None = None):
        self.client_id = client_id if client_id is not None else get_settings().google_oauth_client_id
        self._http_client = http_client

    @property
    def is_configured(self) -> bool:
        return bool(self.client_id)

    async def verify(self, credential: str) -> FederatedClaim:
        if not self.is_configured:
            raise OAuthError("Google authentication has not been configured.")
        if not credential:
            raise OAuthError("No Google credential given.")

        data = await self._fetch_tokeninfo(credential)

        if data.get("aud") != self.client_id:
            raise OAuthError("Google token was issued for another client.")
        if data.get("iss") not in self.ISSUERS:
            raise OAuthError("Google token has an unexpected issuer.")
        if not data.get("sub") or not data.get("email"):
            raise OAuthError("Google token payload is incomplete.")
        if str(data.get("email_verified", "true")).lower() != "true":
            raise OAuthError("Google email address is not verified.")

        return FederatedClaim(
            provider=self.provider,
            subject=data["sub"],
            email=data["email"],
            given_name=data.get("given_name", ""),
            family_name=data.get("family_name", ""),
        )

    @retry(
        retry=retry_if_exception_type(httpx.TransportError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
        reraise=True,
    )
    async def _fetch_tokeninfo(self, credential: str) -> dict[str, Any]:
        if self._http_client is not None:
            response = await self._http_client.get(self.TOKENINFO_URL, params={"id_token": credential})
        else:
            async with httpx.AsyncClient(timeout=10.0) as client:
                response = await client.get(self.TOKENINFO_URL, params={"id_token": credential})

        if response.status_code != 200:
            logger.warning(f"Google tokeninfo rejected credential: {response.status_code}")
            raise OAuthError(f"Invalid Google token: {response.status_code}")
        return response.json()
