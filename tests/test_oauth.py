"""
Tests for Google ID token verification.

The tokeninfo endpoint is replaced with an httpx.MockTransport.
"""

import httpx
import pytest

from gatehouse.integrations.oauth import GoogleIdentityVerifier, OAuthError

CLIENT_ID = "client-123.apps.googleusercontent.com"


def make_verifier(handler, client_id=CLIENT_ID):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GoogleIdentityVerifier(client_id=client_id, http_client=client)


def tokeninfo(**overrides):
    payload = {
        "aud": CLIENT_ID,
        "iss": "https://accounts.google.com",
        "sub": "1001",
        "email": "g@x.com",
        "email_verified": "true",
        "given_name": "Grace",
        "family_name": "Hopper",
    }
    payload.update(overrides)
    return payload


class TestGoogleIdentityVerifier:
    @pytest.mark.asyncio
    async def test_valid_token(self):
        seen = []

        def handler(request):
            seen.append(request.url.params["id_token"])
            return httpx.Response(200, json=tokeninfo())

        claim = await make_verifier(handler).verify("id-token")

        assert seen == ["id-token"]
        assert claim.subject == "1001"
        assert claim.email == "g@x.com"
        assert claim.provider == "google"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            tokeninfo(aud="someone-else"),
            tokeninfo(iss="evil.example"),
            tokeninfo(email_verified="false"),
            tokeninfo(sub=""),
        ],
    )
    async def test_rejected_payloads(self, payload):
        verifier = make_verifier(lambda request: httpx.Response(200, json=payload))

        with pytest.raises(OAuthError):
            await verifier.verify("id-token")

    @pytest.mark.asyncio
    async def test_rejected_by_google(self):
        verifier = make_verifier(lambda request: httpx.Response(400, json={"error": "invalid_token"}))

        with pytest.raises(OAuthError):
            await verifier.verify("id-token")

    @pytest.mark.asyncio
    async def test_unconfigured(self):
        verifier = make_verifier(lambda request: httpx.Response(200, json=tokeninfo()), client_id="")

        assert verifier.is_configured is False
        with pytest.raises(OAuthError):
            await verifier.verify("id-token")

    @pytest.mark.asyncio
    async def test_transport_errors_are_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) < 2:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(200, json=tokeninfo())

        claim = await make_verifier(handler).verify("id-token")

        assert claim.subject == "1001"
        assert len(calls) == 2
