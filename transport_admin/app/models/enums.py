"""
User roles enumeration.

Defines the role types carried in access tokens.
"""

import enum


class UserRole(str, enum.Enum):
    """
    User role enumeration.

    Roles:
        ADMIN: Operates the platform, sees everything
        COMPANY: Ships material, submits transport requests
        MANAGER: Supervises trips assigned to them
        VEHICLE_OWNER: Owns the trucks that run trips
        DRIVER: Drives trips (belongs to a vehicle owner)
    """
    ADMIN = "admin"
    COMPANY = "company"
    MANAGER = "manager"
    VEHICLE_OWNER = "vehicle_owner"
    DRIVER = "driver"


class PartyStatus(str, enum.Enum):
    """Active flag shared by the reference tables."""
    ACTIVE = "active"
    INACTIVE = "inactive"


def enum_values(enum_cls):
    """Persist enum values (lowercase wire strings) rather than member names."""
    return [member.value for member in enum_cls]
