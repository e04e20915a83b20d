"""
Error taxonomy for the authorization core.

Every core operation either returns a result record or raises one of these.
Callers tell failures apart by class (or by the ``kind`` string, which is what
the HTTP layer reports). None of them is fatal to the process; each aborts the
request that triggered it.
"""

from __future__ import annotations


class GatehouseError(Exception):
    """Base exception for every failure the core reports."""

    kind: str = "Error"

    def __init__(self, message: str | None = None):
        self.message = message or self.__class__.__doc__ or self.kind
        super().__init__(self.message)


# =============================================================================
# Session / credential failures
# =============================================================================


class MissingTokenError(GatehouseError):
    """No session token was supplied."""

    kind = "MissingToken"


class SessionNotFoundError(GatehouseError):
    """Session could not be found."""

    kind = "SessionNotFound"


class AccountNotFoundError(GatehouseError):
    """Could not find the account for the session."""

    kind = "AccountNotFound"


class InvalidCredentialsError(GatehouseError):
    """Could not authenticate account."""

    kind = "InvalidCredentials"


class AccountConflictError(GatehouseError):
    """Account already exists with a different identity."""

    kind = "AccountConflict"


# =============================================================================
# Lookup / authorization failures
# =============================================================================


class NotFoundError(GatehouseError):
    """Requested record was not found."""

    kind = "NotFound"


class PermissionDeniedError(GatehouseError):
    """Could not confirm group permission."""

    kind = "PermissionDenied"


class NoMembershipError(GatehouseError):
    """Could not find membership."""

    kind = "NoMembership"


class MembershipConflictError(GatehouseError):
    """Member already in a group."""

    kind = "MembershipConflict"


class InputValidationError(GatehouseError):
    """Malformed input."""

    kind = "ValidationError"
