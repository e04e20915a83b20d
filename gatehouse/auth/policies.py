"""
Policies - FastAPI dependencies that run the authorization chain.

    ctx: AuthContext = Depends(require_session)           # token only
    ctx: AuthContext = Depends(require_right(Right.WRITE)) # token + right in own group

Any failure raises the core error, which the app's exception handler turns
into a response. Nothing here catches and continues.
"""

from __future__ import annotations

from typing import Callable

from fastapi import Depends, Request

from gatehouse.auth.context import AuthContext
from gatehouse.auth.services import AuthServices
from gatehouse.core.rights import Right


def get_services(request: Request) -> AuthServices:
    """The AuthServices attached to the app at startup."""
    return request.app.state.services


def get_bearer_token(request: Request) -> str | None:
    """
    Read the token from the Authorization header.

    Accepts both "Bearer <token>" and a bare token.
    """
    header = request.headers.get("authorization")
    if not header:
        return None
    scheme, _, value = header.strip().partition(" ")
    if value and scheme.lower() == "bearer":
        return value.strip() or None
    return header.strip() or None


async def require_session(
    token: str | None = Depends(get_bearer_token),
    services: AuthServices = Depends(get_services),
) -> AuthContext:
    """Confirm the bearer token."""
    result = await services.sessions.confirm_token(token)
    return AuthContext(session=result.session, account=result.account)


def require_right(right: Right) -> Callable:
    """
    Confirm the token, then `right` in the caller's own group.

    For single-group callers acting on their group without naming it.
    """

    async def dependency(
        ctx: AuthContext = Depends(require_session),
        services: AuthServices = Depends(get_services),
    ) -> AuthContext:
        permission = await services.resolver.confirm_permission(ctx.account, right)
        ctx.group = permission.group
        ctx.right = permission.right
        return ctx

    return dependency
