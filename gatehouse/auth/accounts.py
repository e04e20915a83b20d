"""
Account registration and activation.
"""

from __future__ import annotations

import logging

from gatehouse.auth.passwords import generate_token, hash_password
from gatehouse.config import Settings, get_settings
from gatehouse.core.errors import AccountConflictError, InputValidationError, NotFoundError
from gatehouse.core.models import Account, AccountCreate
from gatehouse.core.utils import utc_now
from gatehouse.integrations.email import EmailService
from gatehouse.storage.base import StorageProvider

logger = logging.getLogger(__name__)


class AccountService:
    """Creates password accounts and activates them by code."""

    def __init__(
        self,
        storage: StorageProvider,
        email_service: EmailService | None = None,
        settings: Settings | None = None,
    ):
        self.accounts = storage.accounts
        self.email_service = email_service or EmailService()
        self.settings = settings or get_settings()

    async def create_account(self, data: AccountCreate) -> Account:
        """
        Register a password account. It stays inactive until activated.

        Raises:
            InputValidationError: no password given
            AccountConflictError: email already registered
        """
        if not data.password:
            raise InputValidationError("Account password was empty.")
        if await self.accounts.find_one({"email": data.email}) is not None:
            raise AccountConflictError("Email already registered.")

        account = Account(
            email=data.email,
            username=data.username,
            fullname=data.fullname,
            password=hash_password(data.password, settings=self.settings),
            role=data.role,
            applications=data.applications,
            active=False,
            activation_code=generate_token(self.settings.activation_code_length),
        )
        await self.accounts.insert(account.to_document())
        logger.info(f"Account {account.id} created")
        return account

    async def get_account(self, account_id: str) -> Account:
        doc = await self.accounts.find_one({"id": account_id})
        if doc is None:
            raise NotFoundError("Could not find an account with the identifier.")
        return Account.from_document(doc)

    async def activate_account(self, code: str) -> Account:
        """Activate the account holding `code`. Codes are single-use."""
        if not code:
            raise InputValidationError("Activation code is empty.")
        doc = await self.accounts.update(
            {"activation_code": code},
            {"active": True, "activation_code": None, "updated_at": utc_now()},
        )
        if doc is None:
            raise NotFoundError("Failed to activate account.")
        logger.info(f"Account {doc['id']} activated")
        return Account.from_document(doc)

    async def send_activation_link(self, email: str, code: str) -> bool:
        return await self.email_service.send_activation(email, code)
