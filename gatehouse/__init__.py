"""
Gatehouse - accounts, bearer sessions and group permissions for a
multi-tenant backend.
"""

__version__ = "0.1.0"
