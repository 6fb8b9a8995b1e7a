"""
Security guards for role-based and ownership-based access control.

Provides dependencies for protecting endpoints and the role scope used to
filter queries down to the rows a principal owns.
"""

from dataclasses import dataclass
from typing import List, Optional

from fastapi import Depends

from transport_admin.app.core.dependencies import get_current_user
from transport_admin.app.core.exceptions import InsufficientPermissionsError
from transport_admin.app.core.jwt import owner_id_from_claims
from transport_admin.app.models.enums import UserRole
from transport_admin.app.models.trip import Trip
from transport_admin.app.models.payment import Payment


def require_role(allowed_roles: List[UserRole]):
    """
    Dependency factory for role-based access control.

    Usage:
        @router.get("/admin/transport-requests")
        async def list_requests(current_user: dict = Depends(require_role([UserRole.ADMIN]))):
            ...

    Raises:
        InsufficientPermissionsError 403 if user role is not in allowed_roles
    """
    async def role_checker(current_user: dict = Depends(get_current_user)) -> dict:
        user_role = UserRole(current_user["role"])

        if user_role not in allowed_roles:
            raise InsufficientPermissionsError(
                f"Access denied. Required role: {', '.join([r.value for r in allowed_roles])}"
            )

        return current_user

    return role_checker


def require_admin(current_user: dict = Depends(get_current_user)) -> dict:
    """Dependency for admin-only endpoints."""
    if current_user.get("role") != UserRole.ADMIN.value:
        raise InsufficientPermissionsError("Admin access required")

    return current_user


@dataclass(frozen=True)
class OwnerScope:
    """
    The slice of data a principal may see.

    owner_id is None for admins (no filtering). For every other role it is
    the id of the company / manager / vehicle owner / driver the token
    belongs to.
    """
    role: UserRole
    owner_id: Optional[int]

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def trip_clause(self):
        """WHERE clause restricting a Trip query to this scope, None for admins."""
        if self.is_admin:
            return None
        column = {
            UserRole.COMPANY: Trip.company_id,
            UserRole.VEHICLE_OWNER: Trip.vehicle_owner_id,
            UserRole.MANAGER: Trip.manager_id,
            UserRole.DRIVER: Trip.driver_id,
        }[self.role]
        return column == self.owner_id

    def scope_trips(self, query):
        clause = self.trip_clause()
        return query if clause is None else query.where(clause)

    def scope_payments(self, query):
        """
        Restrict a Payment query to this scope.

        Managers and drivers have no column on payments; they are scoped
        through the trip the payment belongs to.
        """
        if self.is_admin:
            return query
        if self.role == UserRole.COMPANY:
            return query.where(Payment.company_id == self.owner_id)
        if self.role == UserRole.VEHICLE_OWNER:
            return query.where(Payment.vehicle_owner_id == self.owner_id)
        return query.join_from(Payment, Trip, Payment.trip_id == Trip.id).where(self.trip_clause())

    def owns_trip(self, trip) -> bool:
        if self.is_admin:
            return True
        if self.role == UserRole.COMPANY:
            return trip.company_id == self.owner_id
        if self.role == UserRole.VEHICLE_OWNER:
            return trip.vehicle_owner_id == self.owner_id
        if self.role == UserRole.MANAGER:
            return trip.manager_id == self.owner_id
        if self.role == UserRole.DRIVER:
            return trip.driver_id == self.owner_id
        return False

    def owns_payment(self, payment) -> bool:
        if self.is_admin:
            return True
        if self.role == UserRole.COMPANY:
            return payment.company_id == self.owner_id
        if self.role == UserRole.VEHICLE_OWNER:
            return payment.vehicle_owner_id == self.owner_id
        # Managers and drivers see payments through their trips
        return payment.trip is not None and self.owns_trip(payment.trip)

    def owns_transport_request(self, transport_request) -> bool:
        if self.is_admin:
            return True
        if self.role == UserRole.COMPANY:
            return transport_request.company_id == self.owner_id
        return False


def scope_for(current_user: dict) -> OwnerScope:
    """
    Derive the owner scope from the token payload.

    Role-id claim rules live in `core.jwt.owner_id_from_claims`.
    """
    return OwnerScope(role=UserRole(current_user["role"]), owner_id=owner_id_from_claims(current_user))


async def get_owner_scope(current_user: dict = Depends(get_current_user)) -> OwnerScope:
    """FastAPI dependency returning the caller's OwnerScope."""
    return scope_for(current_user)


def scope_dependency(role: UserRole):
    """
    Dependency factory: require `role` and return its OwnerScope.

    Used by the per-role dashboard routers.
    """
    async def checker(current_user: dict = Depends(require_role([role]))) -> OwnerScope:
        return scope_for(current_user)

    return checker


class OwnershipGuard:
    """
    Class-based ownership guard for single-row reads and writes.

    Usage:
        ownership_guard = OwnershipGuard()

        trip = await service.get_by_id(trip_id)
        ownership_guard.enforce(scope.owns_trip(trip), "trip")
    """

    def enforce(self, allowed: bool, resource_name: str = "resource"):
        """
        Raise 403 when the ownership check failed.

        Raises:
            InsufficientPermissionsError if allowed is False
        """
        if not allowed:
            raise InsufficientPermissionsError(
                f"Access denied. You do not have permission to access this {resource_name}."
            )


def ensure_force_allowed(current_user: dict, force: bool) -> None:
    """Only admins may bypass a status transition table."""
    if force and current_user.get("role") != UserRole.ADMIN.value:
        raise InsufficientPermissionsError("Only admins can force a status change")
