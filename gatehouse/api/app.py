"""
FastAPI application for Gatehouse.

This is the HTTP surface over the authorization core. Every group and member
endpoint confirms the bearer token first. Group-scoped endpoints then confirm the
caller's right on the named group before loading it or any account, so an
unknown id is denied like any group the caller has no right on. The group
directory and single-group lookup only need a session.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from gatehouse.auth import AuthContext, require_right, require_session
from gatehouse.auth.policies import get_services
from gatehouse.auth.routes import account_payload, router as auth_router
from gatehouse.auth.services import AuthServices
from gatehouse.config import get_settings
from gatehouse.core.errors import GatehouseError
from gatehouse.core.models import Group, Membership
from gatehouse.core.rights import Right
from gatehouse.integrations.oauth import OAuthError
from gatehouse.storage import create_local_storage

logger = logging.getLogger(__name__)


# Error kind -> HTTP status
STATUS_BY_KIND: dict[str, int] = {
    "MissingToken": 401,
    "SessionNotFound": 401,
    "AccountNotFound": 401,
    "InvalidCredentials": 401,
    "PermissionDenied": 403,
    "NoMembership": 403,
    "NotFound": 404,
    "AccountConflict": 409,
    "MembershipConflict": 409,
    "ValidationError": 422,
}


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Attach services unless a caller (tests, embedding app) already did."""
    settings = get_settings()

    if getattr(app.state, "services", None) is None:
        app.state.services = AuthServices(create_local_storage(), settings=settings)

    logger.info(f"Gatehouse API starting in {settings.environment} mode")

    yield

    logger.info("Gatehouse API shutting down")


# =============================================================================
# App Setup
# =============================================================================


settings = get_settings()

app = FastAPI(
    title="Gatehouse API",
    description="Accounts, sessions, groups and group permissions",
    version="0.1.0",
    debug=settings.debug,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)


# =============================================================================
# Error Handling
# =============================================================================


@app.exception_handler(GatehouseError)
async def gatehouse_error_handler(request: Request, exc: GatehouseError):
    status_code = STATUS_BY_KIND.get(exc.kind, 400)
    logger.info(f"{request.method} {request.url.path} -> {status_code} {exc.kind}")
    return JSONResponse(
        status_code=status_code,
        content={"result": "error", "kind": exc.kind, "message": exc.message},
    )


@app.exception_handler(OAuthError)
async def oauth_error_handler(request: Request, exc: OAuthError):
    logger.info(f"{request.method} {request.url.path} -> 401 OAuthError")
    return JSONResponse(
        status_code=401,
        content={"result": "error", "kind": "InvalidCredentials", "message": str(exc)},
    )


# =============================================================================
# Request Models
# =============================================================================


class GroupFields(BaseModel):
    name: str
    ycode: str
    address: str
    domains: str


class GroupUpdateFields(GroupFields):
    id: str


class CreateGroupRequest(BaseModel):
    group: GroupFields


class UpdateGroupRequest(BaseModel):
    group: GroupUpdateFields


class Ref(BaseModel):
    id: str


class MemberRequest(BaseModel):
    group: Ref
    account: Ref
    rights: str = "READ"


class RemoveMemberRequest(BaseModel):
    group: Ref
    account: Ref


def _group(group: Group) -> dict[str, Any]:
    return group.model_dump(mode="json")


def _members(members: list[Membership]) -> list[dict[str, Any]]:
    return [m.model_dump(mode="json") for m in members]


# =============================================================================
# Health Check
# =============================================================================


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "gatehouse-api"}


# =============================================================================
# Groups
# =============================================================================


@app.post("/api/group/", status_code=201)
async def create_group(
    request: CreateGroupRequest,
    ctx: AuthContext = Depends(require_session),
    services: AuthServices = Depends(get_services),
):
    """Create a group; the caller becomes its full-rights member."""
    created = await services.groups.create_group(Group(**request.group.model_dump()), ctx.account)
    return {
        "result": "success",
        "message": "Created group and added creator as member with full rights.",
        "group": _group(created.group),
        "members": _members([created.membership]),
    }


@app.put("/api/group/")
async def update_group(
    request: UpdateGroupRequest,
    ctx: AuthContext = Depends(require_session),
    services: AuthServices = Depends(get_services),
):
    existing = await services.resolver.resolve_group(request.group.id, ctx.account, Right.WRITE)
    changed = existing.model_copy(update=request.group.model_dump())
    updated = await services.groups.update_group(changed, ctx.account)
    return {"result": "success", "message": "Updated group.", "group": _group(updated)}


@app.get("/api/group/")
async def get_own_group(ctx: AuthContext = Depends(require_right(Right.READ))):
    """The caller's own group."""
    return {"result": "success", "message": "Found group.", "group": _group(ctx.group)}


@app.get("/api/groups/")
async def list_groups(
    ctx: AuthContext = Depends(require_session),
    services: AuthServices = Depends(get_services),
):
    groups = await services.groups.get_groups()
    return {"result": "success", "message": "Found groups.", "groups": [_group(g) for g in groups]}


@app.get("/api/group/{group_id}")
async def get_group(
    group_id: str,
    ctx: AuthContext = Depends(require_session),
    services: AuthServices = Depends(get_services),
):
    group = await services.groups.get_group(group_id)
    return {"result": "success", "message": "Found group.", "group": _group(group)}


@app.delete("/api/group/{group_id}")
async def delete_group(
    group_id: str,
    ctx: AuthContext = Depends(require_session),
    services: AuthServices = Depends(get_services),
):
    """Delete a group (DELETE right) and then its memberships."""
    group = await services.resolver.resolve_group(group_id, ctx.account, Right.DELETE)
    deleted = await services.groups.delete_group(group, ctx.account)
    removed = await services.members.delete_members_by_group(deleted)
    return {
        "result": "success",
        "message": f"Deleted group and {removed} memberships.",
        "group": _group(deleted),
    }


@app.get("/api/group/{group_id}/members")
async def get_group_members(
    group_id: str,
    ctx: AuthContext = Depends(require_session),
    services: AuthServices = Depends(get_services),
):
    group = await services.resolver.resolve_group(group_id, ctx.account, Right.READ)
    members = await services.members.get_members_by_group(ctx.account, group)
    return {"result": "success", "message": "Found members.", "group": _group(group), "members": _members(members)}


# =============================================================================
# Members
# =============================================================================


@app.post("/api/members/")
async def add_member(
    request: MemberRequest,
    ctx: AuthContext = Depends(require_session),
    services: AuthServices = Depends(get_services),
):
    group = await services.resolver.resolve_group(request.group.id, ctx.account, Right.WRITE)
    account = await services.accounts.get_account(request.account.id)
    member = await services.members.add_member(ctx.account, account, group, request.rights)
    return {"result": "success", "message": "Member added to group.", "member": member.model_dump(mode="json")}


@app.put("/api/members/")
async def update_member(
    request: MemberRequest,
    ctx: AuthContext = Depends(require_session),
    services: AuthServices = Depends(get_services),
):
    group = await services.resolver.resolve_group(request.group.id, ctx.account, Right.WRITE)
    account = await services.accounts.get_account(request.account.id)
    member = await services.members.update_member(ctx.account, account, group, request.rights)
    return {"result": "success", "message": "Member updated in group.", "member": member.model_dump(mode="json")}


@app.delete("/api/members/")
async def remove_member(
    request: RemoveMemberRequest,
    ctx: AuthContext = Depends(require_session),
    services: AuthServices = Depends(get_services),
):
    group = await services.resolver.resolve_group(request.group.id, ctx.account, Right.DELETE)
    account = await services.accounts.get_account(request.account.id)
    member = await services.members.delete_member(ctx.account, account, group)
    return {"result": "success", "message": "Member deleted from group.", "member": member.model_dump(mode="json")}


@app.get("/api/members/group/{group_id}")
async def list_members(
    group_id: str,
    ctx: AuthContext = Depends(require_session),
    services: AuthServices = Depends(get_services),
):
    group = await services.resolver.resolve_group(group_id, ctx.account, Right.READ)
    members = await services.members.get_members_by_group(ctx.account, group)
    return {"result": "success", "message": "Found members.", "members": _members(members)}


@app.get("/api/account/")
async def current_account(ctx: AuthContext = Depends(require_session)):
    """The account behind the bearer token."""
    return {"result": "success", "message": "Found account.", "account": account_payload(ctx.account)}
