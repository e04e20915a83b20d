# =============================================================================
# Authentication API Routes
# =============================================================================
#
# Endpoints:
#   POST /api/authentication/register        - Create account, mail activation link
#   POST /api/authentication/authenticate    - Password login, returns session
#   POST /api/authentication/google          - Google ID token login
#   POST /api/authentication/confirm         - Resolve a session token
#   GET  /api/authentication/activate/{code} - Activate account
#
# Tokens travel in the Authorization header, with or without "Bearer ".
#
# =============================================================================

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from gatehouse.auth.policies import get_bearer_token, get_services
from gatehouse.auth.services import AuthServices
from gatehouse.core.models import Account, AccountCreate, AuthResult, Credentials
from gatehouse.integrations.oauth import OAuthError

router = APIRouter(prefix="/api/authentication", tags=["authentication"])


# =============================================================================
# Request/Response Models
# =============================================================================


class RegisterRequest(BaseModel):
    account: AccountCreate


class AuthenticateRequest(BaseModel):
    credentials: Credentials


def account_payload(account: Account) -> dict[str, Any]:
    """Account fields safe to return to a client."""
    return account.redacted().model_dump(mode="json", exclude={"activation_code", "recovery_code"})


def session_payload(result: AuthResult, message: str) -> dict[str, Any]:
    return {
        "result": "success",
        "message": message,
        "session": result.session.model_dump(mode="json"),
        "account": account_payload(result.account),
    }


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/register")
async def register(data: RegisterRequest, services: AuthServices = Depends(get_services)):
    """
    Create an inactive account and mail its activation link.
    """
    account = await services.accounts.create_account(data.account)
    sent = await services.accounts.send_activation_link(account.email, account.activation_code)
    message = (
        "Account created and activation email has been sent."
        if sent
        else "Account created, but the activation email could not be sent."
    )
    return {"result": "success", "message": message, "account": account_payload(account)}


@router.post("/authenticate")
async def authenticate(data: AuthenticateRequest, services: AuthServices = Depends(get_services)):
    result = await services.sessions.authenticate(data.credentials)
    return session_payload(result, "Session created.")


@router.post("/google")
async def google(
    token: str | None = Depends(get_bearer_token),
    services: AuthServices = Depends(get_services),
):
    """
    Exchange a Google ID token for a session.
    """
    if not services.verifier.is_configured:
        raise OAuthError("Google authentication has not been configured.")
    claim = await services.verifier.verify(token or "")
    result = await services.sessions.federated_authenticate(claim)
    return session_payload(result, "Session created.")


@router.post("/confirm")
async def confirm(
    token: str | None = Depends(get_bearer_token),
    services: AuthServices = Depends(get_services),
):
    result = await services.sessions.confirm_token(token)
    return session_payload(result, "Session token confirmed.")


@router.get("/activate/{code}")
async def activate(code: str, services: AuthServices = Depends(get_services)):
    account = await services.accounts.activate_account(code)
    return {"result": "success", "message": "Account activated.", "account": account_payload(account)}
