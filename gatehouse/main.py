"""
Gatehouse - Main entry point.

Walks through the authorization chain against in-memory stores and can be
run to verify the installation.
"""

from __future__ import annotations

import asyncio
import logging

from gatehouse.auth import AuthServices
from gatehouse.config import get_settings
from gatehouse.core.errors import PermissionDeniedError
from gatehouse.core.models import AccountCreate, Credentials, Group
from gatehouse.core.rights import Right
from gatehouse.storage import create_local_storage


async def demo():
    """
    Register two accounts, create a group with one of them and show
    which permission checks pass.
    """
    print("=" * 60)
    print("GATEHOUSE DEMO")
    print("=" * 60)
    print()

    services = AuthServices(create_local_storage())

    # Register and activate
    print("Registering accounts...")
    alice = await services.accounts.create_account(
        AccountCreate(email="alice@example.com", username="alice", password="correct horse")
    )
    bob = await services.accounts.create_account(
        AccountCreate(email="bob@example.com", username="bob", password="battery staple")
    )
    await services.accounts.activate_account(alice.activation_code)
    await services.accounts.activate_account(bob.activation_code)
    print(f"  ✓ {alice.email} ({alice.id})")
    print(f"  ✓ {bob.email} ({bob.id})")
    print()

    # Authenticate
    print("Authenticating alice...")
    auth = await services.sessions.authenticate(
        Credentials(email="alice@example.com", password="correct horse")
    )
    print(f"  ✓ Session via {auth.session.method.value}, token {auth.session.token[:8]}...")
    print(f"  ✓ Returned password field: {auth.account.password}")
    print()

    # Confirm the token the way a request handler would
    confirmed = await services.sessions.confirm_token(auth.session.token)
    account = confirmed.account

    # Create a group
    print("Creating group...")
    created = await services.groups.create_group(
        Group(name="Acme", ycode="1234567-8", address="Main Street 1", domains="acme.example"),
        account,
    )
    print(f"  ✓ Group {created.group.id}, creator rights: {created.membership.rights}")
    print()

    # Permission checks
    print("Permission checks:")
    for right in Right:
        granted = await services.resolver.confirm_group_permission(right, created.group, account)
        print(f"  ✓ alice {right.value}: granted={granted.granted}")
    try:
        await services.resolver.confirm_group_permission(Right.DELETE, created.group, bob)
    except PermissionDeniedError as e:
        print(f"  ✗ bob DELETE: {e.kind}")
    print()

    print("=" * 60)
    print("Demo complete!")
    print("=" * 60)


def main():
    """Main entry point."""
    logging.basicConfig(level=get_settings().log_level.upper())
    asyncio.run(demo())


if __name__ == "__main__":
    main()
