"""
Shared fixtures: in-memory stores, a fake identity provider and a mail
transport that records instead of sending.
"""

import pytest

from gatehouse.auth import AuthServices
from gatehouse.core.models import Account, FederatedClaim, Group
from gatehouse.integrations.email import EmailService, MailMessage, MailTransport
from gatehouse.integrations.oauth import IdentityVerifier, OAuthError
from gatehouse.storage import create_local_storage
from gatehouse.auth.passwords import hash_password


class RecordingTransport(MailTransport):
    def __init__(self):
        self.sent: list[MailMessage] = []

    async def send(self, message: MailMessage) -> bool:
        self.sent.append(message)
        return True


class FakeVerifier(IdentityVerifier):
    """Accepts credentials registered in `claims`."""

    provider = "google"

    def __init__(self):
        self.claims: dict[str, FederatedClaim] = {}

    async def verify(self, credential: str) -> FederatedClaim:
        if credential not in self.claims:
            raise OAuthError("Invalid Google token")
        return self.claims[credential]


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def storage():
    """Fresh in-memory stores."""
    return create_local_storage()


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def verifier():
    return FakeVerifier()


@pytest.fixture
def services(storage, transport, verifier):
    return AuthServices(storage, email_service=EmailService(transport), verifier=verifier)


@pytest.fixture
def acme():
    return Group(name="Acme", ycode="1234567-8", address="Main Street 1", domains="acme.example")


# =============================================================================
# Helpers
# =============================================================================


@pytest.fixture
def add_account(storage):
    """Store an account directly, bypassing registration."""

    async def _add(email, password="p", username=None, active=True, **extra) -> Account:
        account = Account(
            email=email,
            username=username or email.split("@")[0],
            password=hash_password(password, scheme="sha256") if password else None,
            active=active,
            **extra,
        )
        await storage.accounts.insert(account.to_document())
        return account

    return _add
