"""
Transport request enumerations.
"""

import enum


class TransportRequestStatus(str, enum.Enum):
    """Transport request status enumeration."""
    PENDING = "pending"  # Submitted by company, awaiting admin review
    APPROVED = "approved"
    REJECTED = "rejected"
    ASSIGNED = "assigned"  # Linked to a trip
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# assigned_trip_id may only be set while the request is in one of these
TRIP_LINKED_STATUSES = frozenset({
    TransportRequestStatus.ASSIGNED,
    TransportRequestStatus.IN_PROGRESS,
    TransportRequestStatus.COMPLETED,
})


class QuantityUnit(str, enum.Enum):
    LITERS = "liters"
    TONS = "tons"
    BARRELS = "barrels"


class Urgency(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"
