"""
Core types: records, rights and errors.
"""

from gatehouse.core.errors import (
    GatehouseError,
    MissingTokenError,
    SessionNotFoundError,
    AccountNotFoundError,
    InvalidCredentialsError,
    AccountConflictError,
    NotFoundError,
    PermissionDeniedError,
    NoMembershipError,
    MembershipConflictError,
    InputValidationError,
)
from gatehouse.core.models import (
    Account,
    AccountCreate,
    AuthMethod,
    AuthResult,
    Credentials,
    FederatedClaim,
    Group,
    GroupCreation,
    GroupPermission,
    Membership,
    Session,
    REDACTED_PASSWORD,
)
from gatehouse.core.rights import Right, FULL_RIGHTS, parse_rights, format_rights, has_right

__all__ = [
    # Errors
    "GatehouseError",
    "MissingTokenError",
    "SessionNotFoundError",
    "AccountNotFoundError",
    "InvalidCredentialsError",
    "AccountConflictError",
    "NotFoundError",
    "PermissionDeniedError",
    "NoMembershipError",
    "MembershipConflictError",
    "InputValidationError",
    # Records
    "Account",
    "AccountCreate",
    "AuthMethod",
    "AuthResult",
    "Credentials",
    "FederatedClaim",
    "Group",
    "GroupCreation",
    "GroupPermission",
    "Membership",
    "Session",
    "REDACTED_PASSWORD",
    # Rights
    "Right",
    "FULL_RIGHTS",
    "parse_rights",
    "format_rights",
    "has_right",
]
