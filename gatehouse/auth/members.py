"""
Membership management inside a group.

Each operation checks the acting account's right on the group before touching
any membership:

    add / update  -> WRITE
    delete        -> DELETE
    list          -> READ
"""

from __future__ import annotations

import logging
from typing import Iterable

from gatehouse.auth.permissions import PermissionResolver
from gatehouse.core.errors import InputValidationError, MembershipConflictError, NotFoundError
from gatehouse.core.models import Account, Group, Membership
from gatehouse.core.rights import Right, format_rights, parse_rights
from gatehouse.core.utils import utc_now
from gatehouse.storage.base import StorageProvider

logger = logging.getLogger(__name__)


def _normalize(rights: str | Iterable[str]) -> str:
    text = format_rights(parse_rights(rights))
    if not text:
        raise InputValidationError("Rights must name at least one of READ, WRITE, DELETE.")
    return text


class MembershipManager:
    """Adds, updates and removes group members."""

    def __init__(self, storage: StorageProvider, resolver: PermissionResolver | None = None):
        self.members = storage.members
        self.resolver = resolver or PermissionResolver(storage)

    async def add_member(
        self,
        actor: Account,
        account: Account,
        group: Group,
        rights: str | Iterable[str],
    ) -> Membership:
        """Enroll `account` in `group`. An account belongs to at most one group."""
        await self.resolver.confirm_group_permission(Right.WRITE, group, actor)

        if await self.members.find_one({"account_id": account.id}) is not None:
            raise MembershipConflictError("Member already in a group.")

        membership = Membership(
            group_id=group.id,
            account_id=account.id,
            rights=_normalize(rights),
        )
        await self.members.insert(membership.to_document())
        logger.info(f"Account {account.id} added to group {group.id} by {actor.id}")
        return membership

    async def update_member(
        self,
        actor: Account,
        account: Account,
        group: Group,
        rights: str | Iterable[str],
    ) -> Membership:
        await self.resolver.confirm_group_permission(Right.WRITE, group, actor)

        doc = await self.members.update(
            {"account_id": account.id, "group_id": group.id},
            {"rights": _normalize(rights), "updated_at": utc_now()},
        )
        if doc is None:
            raise NotFoundError("Member could not be updated.")
        return Membership.from_document(doc)

    async def delete_member(self, actor: Account, account: Account, group: Group) -> Membership:
        await self.resolver.confirm_group_permission(Right.DELETE, group, actor)

        doc = await self.members.delete({"account_id": account.id, "group_id": group.id})
        if doc is None:
            raise NotFoundError("Member could not be deleted.")
        logger.info(f"Account {account.id} removed from group {group.id} by {actor.id}")
        return Membership.from_document(doc)

    async def get_members_by_group(self, actor: Account, group: Group) -> list[Membership]:
        await self.resolver.confirm_group_permission(Right.READ, group, actor)
        return [Membership.from_document(d) for d in await self.members.find({"group_id": group.id})]

    async def delete_members_by_group(self, group: Group) -> int:
        """Remove every membership of a deleted group. No permission check."""
        removed = await self.members.delete_many({"group_id": group.id})
        logger.info(f"Removed {removed} memberships of group {group.id}")
        return removed
