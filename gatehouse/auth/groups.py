"""
Group lifecycle: create, read, update, delete.

Creating a group enrolls the creator as a full-rights member. Update and delete
are gated on WRITE and DELETE through the permission resolver.
"""

from __future__ import annotations

import logging

from gatehouse.auth.permissions import PermissionResolver
from gatehouse.core.errors import MembershipConflictError, NotFoundError
from gatehouse.core.models import Account, Group, GroupCreation, Membership
from gatehouse.core.rights import FULL_RIGHTS, Right, format_rights
from gatehouse.core.utils import utc_now
from gatehouse.storage.base import StorageProvider

logger = logging.getLogger(__name__)


class GroupManager:
    """Creates and manages groups on behalf of authenticated accounts."""

    def __init__(self, storage: StorageProvider, resolver: PermissionResolver | None = None):
        self.groups = storage.groups
        self.members = storage.members
        self.resolver = resolver or PermissionResolver(storage)

    async def create_group(self, group: Group, creator: Account) -> GroupCreation:
        """
        Persist a group and enroll its creator with full rights.

        The two writes are separate documents. If the membership insert fails
        the group is deleted again, so no ownerless group is left behind. A
        crash between the two writes can still leave one.

        The one-group-per-account check and the inserts are separate awaits,
        so two concurrent creates by the same account can both pass the check
        and leave it with two memberships.
        """
        if await self.members.find_one({"account_id": creator.id}) is not None:
            raise MembershipConflictError("Member already in a group.")

        await self.groups.insert(group.to_document())

        membership = Membership(
            group_id=group.id,
            account_id=creator.id,
            rights=format_rights(FULL_RIGHTS),
        )
        try:
            await self.members.insert(membership.to_document())
        except Exception:
            logger.error(f"Enrolling creator {creator.id} failed, removing group {group.id}")
            await self.groups.delete({"id": group.id})
            raise

        logger.info(f"Group {group.id} created by account {creator.id}")
        return GroupCreation(group=group, membership=membership)

    async def get_group(self, group_id: str) -> Group:
        doc = await self.groups.find_one({"id": group_id})
        if doc is None:
            raise NotFoundError("Could not find a group with the identifier.")
        return Group.from_document(doc)

    async def get_groups(self) -> list[Group]:
        """Directory of every group. Not tenant-scoped."""
        return [Group.from_document(doc) for doc in await self.groups.find({})]

    async def update_group(self, group: Group, account: Account) -> Group:
        """Requires WRITE on the group."""
        await self.resolver.confirm_group_permission(Right.WRITE, group, account)

        changes = group.to_document()
        changes.pop("id")
        changes.pop("created_at")
        changes["updated_at"] = utc_now()

        doc = await self.groups.update({"id": group.id}, changes)
        if doc is None:
            raise NotFoundError("Could not update group.")
        return Group.from_document(doc)

    async def delete_group(self, group: Group, account: Account) -> Group:
        """
        Requires DELETE on the group.

        Memberships are left in place; remove them with
        ``MembershipManager.delete_members_by_group``.
        """
        await self.resolver.confirm_group_permission(Right.DELETE, group, account)

        doc = await self.groups.delete({"id": group.id})
        if doc is None:
            raise NotFoundError("Could not delete group.")
        logger.info(f"Group {group.id} deleted by account {account.id}")
        return Group.from_document(doc)
