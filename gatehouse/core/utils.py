"""
Shared helpers for identifiers and timestamps.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone


def generate_id(prefix: str = "") -> str:
    """
    Generate a unique record ID with optional prefix.

    Args:
        prefix: Optional prefix (e.g., "acct", "grp", "mbr")

    Returns:
        A unique ID like "grp_3f2a9c41d07b4e18"
    """
    uid = uuid.uuid4().hex[:16]
    return f"{prefix}_{uid}" if prefix else uid


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)
