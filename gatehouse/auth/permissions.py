"""
Permission resolution - the "may this account do this to this group" check.

Every group-scoped mutation goes through ``confirm_group_permission``. It either
returns a granted result or raises; there is no advisory mode and no
``granted=False`` result, so a caller that forgets to inspect the return value
still cannot proceed past a denial.
"""

from __future__ import annotations

import logging

from gatehouse.core.errors import NoMembershipError, NotFoundError, PermissionDeniedError
from gatehouse.core.models import Account, Group, GroupPermission, Membership
from gatehouse.core.rights import Right, has_right
from gatehouse.storage.base import StorageProvider

logger = logging.getLogger(__name__)


class PermissionResolver:
    """Resolves memberships and checks rights on them."""

    def __init__(self, storage: StorageProvider):
        self.groups = storage.groups
        self.members = storage.members

    async def get_membership(self, account: Account) -> Membership:
        """The account's single membership."""
        doc = await self.members.find_one({"account_id": account.id})
        if doc is None:
            raise NoMembershipError("Could not find membership.")
        return Membership.from_document(doc)

    async def get_group_by_member(self, account: Account) -> Group:
        """
        The one group the account belongs to.

        Raises:
            NoMembershipError: the account belongs to no group
            NotFoundError: the membership points at a group that is gone
        """
        membership = await self.get_membership(account)
        doc = await self.groups.find_one({"id": membership.group_id})
        if doc is None:
            logger.warning(
                f"Membership {membership.id} refers to missing group {membership.group_id}"
            )
            raise NotFoundError("Could not find group for the membership.")
        return Group.from_document(doc)

    async def confirm_group_permission(
        self,
        right: Right | str,
        group: Group,
        account: Account,
    ) -> GroupPermission:
        """
        Confirm the account's membership in `group` carries `right`.

        Raises:
            PermissionDeniedError: no membership, or the right is missing
        """
        doc = await self.members.find_one({"group_id": group.id, "account_id": account.id})
        if doc is None or not has_right(doc.get("rights"), right):
            logger.warning(
                f"Permission denied: {getattr(right, 'value', right)} on group {group.id} "
                f"for account {account.id}"
            )
            raise PermissionDeniedError("Could not confirm group permission.")

        return GroupPermission(group=group, account=account, right=Right(getattr(right, "value", right)))

    async def resolve_group(self, group_id: str, account: Account, right: Right | str) -> Group:
        """
        Load a group by id for an account holding `right` on it.

        The right is checked before the group is read, so an unknown id is
        denied the same way as a group the account has no right on.

        Raises:
            PermissionDeniedError: no membership in that group, or the right is missing
            NotFoundError: the membership points at a group that is gone
        """
        doc = await self.members.find_one({"group_id": group_id, "account_id": account.id})
        if doc is None or not has_right(doc.get("rights"), right):
            logger.warning(
                f"Permission denied: {getattr(right, 'value', right)} on group {group_id} "
                f"for account {account.id}"
            )
            raise PermissionDeniedError("Could not confirm group permission.")

        group_doc = await self.groups.find_one({"id": group_id})
        if group_doc is None:
            raise NotFoundError("Could not find a group with the identifier.")
        return Group.from_document(group_doc)

    async def confirm_permission(self, account: Account, right: Right | str) -> GroupPermission:
        """
        Confirm `right` in whichever group the account belongs to.

        Raises:
            NoMembershipError: the account belongs to no group
            PermissionDeniedError: the right is missing
        """
        group = await self.get_group_by_member(account)
        return await self.confirm_group_permission(right, group, account)
