"""
Session issuing and token confirmation.

``confirm_token`` is the gate every authenticated operation passes through
first. Accounts only leave this module redacted.
"""

from __future__ import annotations

import logging

from gatehouse.auth.passwords import generate_token, verify_password
from gatehouse.config import Settings, get_settings
from gatehouse.core.errors import (
    AccountConflictError,
    AccountNotFoundError,
    InputValidationError,
    InvalidCredentialsError,
    MissingTokenError,
    NotFoundError,
    SessionNotFoundError,
)
from gatehouse.core.models import (
    Account,
    AuthMethod,
    AuthResult,
    Credentials,
    FederatedClaim,
    Session,
)
from gatehouse.storage.base import StorageProvider

logger = logging.getLogger(__name__)

# Identity providers a federated claim may come from
FEDERATED_PROVIDERS = {AuthMethod.GOOGLE.value}


class SessionIssuer:
    """Creates and looks up opaque bearer sessions."""

    def __init__(self, storage: StorageProvider, settings: Settings | None = None):
        self.accounts = storage.accounts
        self.sessions = storage.sessions
        self.settings = settings or get_settings()

    # =========================================================================
    # Local authentication
    # =========================================================================

    async def authenticate(self, credentials: Credentials) -> AuthResult:
        """
        Authenticate with exactly one of email, username or application id.

        Raises:
            InputValidationError: zero or several identity fields given
            NotFoundError: no matching account
            InvalidCredentialsError: no password on record, or wrong password
        """
        identities = {
            AuthMethod.EMAIL: credentials.email,
            AuthMethod.USERNAME: credentials.username,
            AuthMethod.APPLICATION: credentials.application,
        }
        supplied = [m for m, v in identities.items() if v is not None]
        if len(supplied) != 1:
            raise InputValidationError(
                "Provide exactly one of email, username or application."
            )
        method = supplied[0]

        if method == AuthMethod.EMAIL:
            doc = await self.accounts.find_one({"email": credentials.email, "active": True})
        elif method == AuthMethod.USERNAME:
            doc = await self.accounts.find_one({"username": credentials.username, "active": True})
        else:
            # Application credentials match on the applications list alone;
            # the active flag is not part of this lookup.
            doc = await self.accounts.find_one({"applications": credentials.application})

        if doc is None:
            logger.warning(f"Authentication failed: no active account for {method.value} login")
            raise NotFoundError("Failed to fetch account with the provided information.")

        account = Account.from_document(doc)
        if account.is_federated and not account.password:
            logger.warning(f"Authentication failed: account {account.id} signs in through {account.source}")
            raise InvalidCredentialsError(f"Account signs in through {account.source}.")
        if not account.password:
            logger.warning(f"Authentication failed: account {account.id} has no password")
            raise InvalidCredentialsError("Account password is empty.")
        if not verify_password(credentials.password, account.password):
            logger.warning(f"Authentication failed: bad password for account {account.id}")
            raise InvalidCredentialsError("Could not authenticate account.")

        return await self._open_session(account, method)

    # =========================================================================
    # Federated authentication
    # =========================================================================

    async def federated_authenticate(self, claim: FederatedClaim) -> AuthResult:
        """
        Sign in with a verified identity-provider claim.

        Creates the account on first sign-in. An existing account with the
        same email must already be linked to the same provider and subject,
        so a password account cannot be taken over through federation.
        """
        if claim.provider not in FEDERATED_PROVIDERS:
            logger.warning(f"Federated sign-in refused: unsupported provider {claim.provider!r}")
            raise InputValidationError(f"Unsupported identity provider: {claim.provider}")
        method = AuthMethod(claim.provider)

        doc = await self.accounts.find_one({"email": claim.email})

        if doc is None:
            account = Account(
                email=claim.email,
                username=f"{claim.given_name} {claim.family_name}",
                source=claim.provider,
                source_sub=claim.subject,
                active=True,
            )
            await self.accounts.insert(account.to_document())
            logger.info(f"Created {claim.provider} account {account.id}")
        else:
            account = Account.from_document(doc)
            if account.source != claim.provider or account.source_sub != claim.subject:
                logger.warning(
                    f"Federated sign-in refused: account {account.id} is not linked to "
                    f"this {claim.provider} identity"
                )
                raise AccountConflictError(f"Account is not a {claim.provider} account.")

        return await self._open_session(account, method)

    # =========================================================================
    # Token confirmation
    # =========================================================================

    async def confirm_token(self, token: str | None) -> AuthResult:
        """
        Resolve a bearer token to its session and account.

        Raises:
            MissingTokenError: token empty or absent
            SessionNotFoundError: no session holds this token
            AccountNotFoundError: the session's account no longer exists
        """
        if not token:
            raise MissingTokenError("Token is undefined.")

        session_doc = await self.sessions.find_one({"token": token})
        if session_doc is None:
            raise SessionNotFoundError("Session could not be found.")
        session = Session.from_document(session_doc)

        account_doc = await self.accounts.find_one({"id": session.account_id})
        if account_doc is None:
            logger.warning(f"Session {session.id} refers to missing account {session.account_id}")
            raise AccountNotFoundError("Could not find the account for the session.")

        return AuthResult(
            session=session,
            account=Account.from_document(account_doc).redacted(),
        )

    # =========================================================================
    # Internal
    # =========================================================================

    async def _open_session(self, account: Account, method: AuthMethod) -> AuthResult:
        session = Session(
            token=generate_token(self.settings.session_token_length),
            account_id=account.id,
            method=method,
        )
        await self.sessions.insert(session.to_document())
        logger.info(f"Session created for account {account.id} via {method.value}")
        return AuthResult(session=session, account=account.redacted())
