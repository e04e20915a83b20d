"""
Auth context - who is calling, and in which group they were authorized.

Built by the dependencies in policies.py once the token (and, when asked for,
a right) has been confirmed. Route handlers never build one themselves.
"""

from __future__ import annotations

from dataclasses import dataclass

from gatehouse.core.models import Account, Group, Session
from gatehouse.core.rights import Right


@dataclass
class AuthContext:
    """
    Authorization context for a request.

    Usage in routes:
        async def my_route(ctx: AuthContext = Depends(require_session)):
            print(f"Account {ctx.account_id} via {ctx.session.method.value}")
    """

    session: Session
    account: Account

    # Set when a right was confirmed for the account's group
    group: Group | None = None
    right: Right | None = None

    @property
    def account_id(self) -> str:
        return self.account.id

    @property
    def group_id(self) -> str | None:
        return self.group.id if self.group else None
