"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from transport_admin.app.api.v1.endpoints import (
    transport_requests, trips, payments, dashboards, notifications, audit
)

router = APIRouter()

# Transport requests (company submissions + admin review)
router.include_router(transport_requests.router)

# Trips
router.include_router(trips.router)

# Payments
router.include_router(payments.router)

# Role dashboards and listings
router.include_router(dashboards.company_router)
router.include_router(dashboards.manager_router)
router.include_router(dashboards.vehicle_owner_router)
router.include_router(dashboards.driver_router)

# In-app notifications
router.include_router(notifications.router)

# Audit trail (admin)
router.include_router(audit.router)
