"""
Trip-related enumerations.
"""

import enum


class TripStatus(str, enum.Enum):
    """Trip status enumeration, in lifecycle order."""
    PENDING = "pending"  # Created, nothing confirmed yet
    CONFIRMED = "confirmed"  # Accepted by operations
    VEHICLE_ASSIGNED = "vehicle_assigned"
    DRIVER_ASSIGNED = "driver_assigned"
    IN_TRANSIT = "in_transit"  # Goods on the road, start_date stamped
    COMPLETED = "completed"  # Delivered, actual_delivery_date stamped
    CANCELLED = "cancelled"  # Terminal, reachable from any non-terminal status


# Statuses counted as "active" on dashboards
ACTIVE_TRIP_STATUSES = frozenset({
    TripStatus.CONFIRMED,
    TripStatus.VEHICLE_ASSIGNED,
    TripStatus.DRIVER_ASSIGNED,
    TripStatus.IN_TRANSIT,
})

COMPLETED_TRIP_STATUSES = frozenset({TripStatus.COMPLETED})
