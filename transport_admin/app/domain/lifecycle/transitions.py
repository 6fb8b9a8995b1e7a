"""
Status transition tables.

Each lifecycle is a map of current status -> statuses it may move to.
Admins may bypass a table with `force=True`; everyone else gets an
InvalidStatusTransitionError for a move the table does not list.
"""

from typing import Dict, FrozenSet, Mapping

from transport_admin.app.core.exceptions import InvalidStatusTransitionError
from transport_admin.app.models.trip_enums import TripStatus
from transport_admin.app.models.transport_request_enums import TransportRequestStatus
from transport_admin.app.models.billing_enums import PaymentStatus


TRANSPORT_REQUEST_TRANSITIONS: Dict[TransportRequestStatus, FrozenSet[TransportRequestStatus]] = {
    TransportRequestStatus.PENDING: frozenset({
        TransportRequestStatus.APPROVED,
        TransportRequestStatus.REJECTED,
    }),
    TransportRequestStatus.APPROVED: frozenset({
        TransportRequestStatus.ASSIGNED,
        TransportRequestStatus.CANCELLED,
    }),
    TransportRequestStatus.ASSIGNED: frozenset({
        TransportRequestStatus.IN_PROGRESS,
        TransportRequestStatus.CANCELLED,
    }),
    TransportRequestStatus.IN_PROGRESS: frozenset({
        TransportRequestStatus.COMPLETED,
        TransportRequestStatus.CANCELLED,
    }),
    TransportRequestStatus.REJECTED: frozenset(),
    TransportRequestStatus.COMPLETED: frozenset(),
    TransportRequestStatus.CANCELLED: frozenset(),
}


# Forward order of the trip lifecycle; cancelled sits outside it
TRIP_STATUS_ORDER = (
    TripStatus.PENDING,
    TripStatus.CONFIRMED,
    TripStatus.VEHICLE_ASSIGNED,
    TripStatus.DRIVER_ASSIGNED,
    TripStatus.IN_TRANSIT,
    TripStatus.COMPLETED,
)


def _build_trip_transitions() -> Dict[TripStatus, FrozenSet[TripStatus]]:
    table = {}
    for index, current in enumerate(TRIP_STATUS_ORDER):
        later = set(TRIP_STATUS_ORDER[index + 1:])
        if current != TripStatus.COMPLETED:
            later.add(TripStatus.CANCELLED)
        table[current] = frozenset(later)
    table[TripStatus.CANCELLED] = frozenset()
    return table


TRIP_TRANSITIONS: Dict[TripStatus, FrozenSet[TripStatus]] = _build_trip_transitions()


PAYMENT_TRANSITIONS: Dict[PaymentStatus, FrozenSet[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset({
        PaymentStatus.PROCESSING,
        PaymentStatus.COMPLETED,
        PaymentStatus.FAILED,
        PaymentStatus.CANCELLED,
    }),
    PaymentStatus.PROCESSING: frozenset({
        PaymentStatus.COMPLETED,
        PaymentStatus.FAILED,
        PaymentStatus.CANCELLED,
    }),
    # A failed transfer can be retried
    PaymentStatus.FAILED: frozenset({
        PaymentStatus.PENDING,
        PaymentStatus.PROCESSING,
    }),
    PaymentStatus.COMPLETED: frozenset(),
    PaymentStatus.CANCELLED: frozenset(),
}


def is_allowed(table: Mapping, current, requested) -> bool:
    return requested in table.get(current, frozenset())


def ensure_transition(entity: str, table: Mapping, current, requested, force: bool = False) -> None:
    """
    Validate a status change against a transition table.

    Raises:
        InvalidStatusTransitionError: if the move is not listed and not forced
    """
    if force or is_allowed(table, current, requested):
        return
    raise InvalidStatusTransitionError(
        entity=entity,
        current_status=current.value,
        requested_status=requested.value,
        allowed=[status.value for status in table.get(current, frozenset())],
    )
