"""
User roles enumeration.

Defines the role types for the EGZIT move platform.
"""

import enum


class UserRole(str, enum.Enum):
    """
    User role enumeration.

    Roles:
        ADMIN: Backoffice staff who quote, approve, schedule and run moves
        CUSTOMER: Household that requests, pays for and tracks its moves (default role)
    """
    ADMIN = "ADMIN"
    CUSTOMER = "CUSTOMER"
