"""
Authorization core - sessions, groups, memberships and the checks between them.

Design principles:
1. Every authenticated operation starts at SessionIssuer.confirm_token
2. Every group-scoped change goes through PermissionResolver
3. Failures raise; nothing returns "denied" for the caller to forget about
4. Services receive their stores; no module-level database handles
"""

from gatehouse.auth.accounts import AccountService
from gatehouse.auth.context import AuthContext
from gatehouse.auth.groups import GroupManager
from gatehouse.auth.members import MembershipManager
from gatehouse.auth.passwords import generate_token, hash_password, verify_password
from gatehouse.auth.permissions import PermissionResolver
from gatehouse.auth.policies import get_bearer_token, require_right, require_session
from gatehouse.auth.services import AuthServices
from gatehouse.auth.sessions import SessionIssuer
from gatehouse.auth.routes import router as auth_router

__all__ = [
    # Services
    "AccountService",
    "AuthServices",
    "GroupManager",
    "MembershipManager",
    "PermissionResolver",
    "SessionIssuer",
    # Request context
    "AuthContext",
    "get_bearer_token",
    "require_right",
    "require_session",
    # Passwords
    "generate_token",
    "hash_password",
    "verify_password",
    # Router
    "auth_router",
]
