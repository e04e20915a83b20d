"""
Service container.

Builds every core service over one StorageProvider so they share the same
store handles and the same permission resolver.
"""

from __future__ import annotations

from gatehouse.auth.accounts import AccountService
from gatehouse.auth.groups import GroupManager
from gatehouse.auth.members import MembershipManager
from gatehouse.auth.permissions import PermissionResolver
from gatehouse.auth.sessions import SessionIssuer
from gatehouse.config import Settings, get_settings
from gatehouse.integrations.email import EmailService
from gatehouse.integrations.oauth import GoogleIdentityVerifier, IdentityVerifier
from gatehouse.storage.base import StorageProvider


class AuthServices:
    """Everything a request handler needs from the core."""

    def __init__(
        self,
        storage: StorageProvider,
        email_service: EmailService | None = None,
        verifier: IdentityVerifier | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings or get_settings()
        self.storage = storage
        self.resolver = PermissionResolver(storage)
        self.sessions = SessionIssuer(storage, self.settings)
        self.groups = GroupManager(storage, self.resolver)
        self.members = MembershipManager(storage, self.resolver)
        self.accounts = AccountService(storage, email_service, self.settings)
        self.verifier = verifier or GoogleIdentityVerifier()
