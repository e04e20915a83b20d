"""
Core data models for the authorization core.

Accounts, Sessions, Groups and Memberships are stored as plain documents;
these models are how the rest of the code reads and writes them.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from gatehouse.core.rights import Right, parse_rights
from gatehouse.core.utils import generate_id, utc_now


# Written over the password field of any account leaving the session layer
REDACTED_PASSWORD = "<redacted>"


# =============================================================================
# Enums
# =============================================================================


class AuthMethod(str, Enum):
    """How a session was established."""

    EMAIL = "email"
    USERNAME = "username"
    APPLICATION = "application"
    GOOGLE = "google"


class Record(BaseModel):
    """Base for stored records."""

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="python")

    @classmethod
    def from_document(cls, doc: dict[str, Any]):
        return cls.model_validate(doc)


# =============================================================================
# Account
# =============================================================================


class Account(Record):
    """
    An identity record.

    Either password-based (has a password hash and must be activated) or
    federated (has source + source_sub and is created active).
    """

    id: str = Field(default_factory=lambda: generate_id("acct"))

    email: str
    username: str
    fullname: str | None = None

    # SHA-256 (or salt:hash PBKDF2) digest; None for federated accounts
    password: str | None = None

    role: str = "none"
    applications: list[str] = Field(default_factory=list)

    active: bool = False
    activation_code: str | None = None
    recovery_code: str | None = None

    # Federation
    source: str | None = None
    source_sub: str | None = None

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def is_federated(self) -> bool:
        return self.source is not None

    def redacted(self) -> Account:
        """Copy safe to hand to callers."""
        return self.model_copy(update={"password": REDACTED_PASSWORD})


class AccountCreate(BaseModel):
    """Registration data."""

    email: str
    username: str
    password: str | None = None
    fullname: str | None = None
    role: str = "none"
    applications: list[str] = Field(default_factory=list)


# =============================================================================
# Session
# =============================================================================


class Session(Record):
    """Proof of authentication. The token is a bearer credential."""

    id: str = Field(default_factory=lambda: generate_id("sess"))
    token: str
    account_id: str
    method: AuthMethod
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


# =============================================================================
# Group / Membership
# =============================================================================


class Group(Record):
    """A tenancy boundary."""

    id: str = Field(default_factory=lambda: generate_id("grp"))
    name: str
    ycode: str  # business / registration code
    address: str
    domains: str
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class Membership(Record):
    """Links one account to one group with a rights string."""

    id: str = Field(default_factory=lambda: generate_id("mbr"))
    group_id: str
    account_id: str
    rights: str
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def right_set(self) -> frozenset[Right]:
        return parse_rights(self.rights)


# =============================================================================
# Inputs / results
# =============================================================================


class Credentials(BaseModel):
    """Exactly one of email, username or application, plus a password."""

    email: str | None = None
    username: str | None = None
    application: str | None = None
    password: str | None = None


class FederatedClaim(BaseModel):
    """Verified identity returned by an external identity provider."""

    subject: str
    email: str
    given_name: str = ""
    family_name: str = ""
    provider: str = AuthMethod.GOOGLE.value


class AuthResult(BaseModel):
    """A session together with its (redacted) account."""

    session: Session
    account: Account


class GroupPermission(BaseModel):
    """Outcome of a permission check. Only ever built with granted=True."""

    group: Group
    account: Account
    right: Right
    granted: bool = True


class GroupCreation(BaseModel):
    """A freshly created group and the creator's membership."""

    group: Group
    membership: Membership
