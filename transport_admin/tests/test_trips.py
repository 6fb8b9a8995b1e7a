"""
Integration tests for trips.

Tests creation, the status state machine, field updates, guarded delete,
role scoping and stats.
"""

import pytest
from sqlalchemy import select

from transport_admin.app.models.audit_log import AuditLog
from transport_admin.app.models.trip import Trip
from transport_admin.app.services.notification_service import NotificationService


# TEST 1: Creation
@pytest.mark.asyncio
async def test_create_trip_derives_total(client, admin_headers, parties):
    """Scenario B, part one: total = base + service charge."""
    response = await client.post("/v1/trips", json={
        "trip_number": "TR-001",
        "company_id": parties.company_a,
        "vehicle_owner_id": parties.owner_a,
        "driver_id": parties.driver_a,
        "route": "Taloja → Chakan",
        "base_amount": 20000,
        "service_charge": 2000,
    }, headers=admin_headers)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["total_amount"] == 22000
    assert data["status"] == "pending"
    assert data["start_date"] is None
    assert data["company_name"] == "Acme Chemicals"
    assert data["driver_name"] == "Ravi Kumar"
    assert data["manager_id"] is None


@pytest.mark.asyncio
async def test_duplicate_trip_number_rejected(client, admin_headers, create_trip):
    trip = await create_trip()

    response = await client.post("/v1/trips", json={
        "trip_number": trip["trip_number"],
        "company_id": trip["company_id"],
        "vehicle_owner_id": trip["vehicle_owner_id"],
        "driver_id": trip["driver_id"],
        "route": "Anywhere",
    }, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Trip number already exists"
    assert response.json()["error_code"] == "ERR_DUPLICATE_001"


@pytest.mark.asyncio
@pytest.mark.parametrize("field, label", [
    ("company_id", "Company"),
    ("vehicle_owner_id", "Vehicle owner"),
    ("driver_id", "Driver"),
    ("manager_id", "Manager"),
])
async def test_create_trip_requires_existing_parties(client, admin_headers, parties, field, label):
    payload = {
        "trip_number": "TR-404",
        "company_id": parties.company_a,
        "vehicle_owner_id": parties.owner_a,
        "driver_id": parties.driver_a,
        "route": "Nowhere",
    }
    payload[field] = 9999

    response = await client.post("/v1/trips", json=payload, headers=admin_headers)

    assert response.status_code == 404
    assert response.json()["message"] == f"{label} not found"


@pytest.mark.asyncio
async def test_missing_required_trip_fields(client, admin_headers, parties):
    response = await client.post("/v1/trips", json={
        "trip_number": "TR-002",
        "company_id": parties.company_a,
    }, headers=admin_headers)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_drivers_cannot_create_trips(client, driver_headers, parties):
    response = await client.post("/v1/trips", json={
        "trip_number": "TR-003",
        "company_id": parties.company_a,
        "vehicle_owner_id": parties.owner_a,
        "driver_id": parties.driver_a,
        "route": "Taloja → Chakan",
    }, headers=driver_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_unknown_trip_is_not_found(client, admin_headers, parties):
    response = await client.get("/v1/trips/424242", headers=admin_headers)
    assert response.status_code == 404
    assert response.json() == {
        "success": False,
        "error_code": "ERR_NOT_FOUND_001",
        "message": "Trip not found",
        "details": {"resource": "Trip", "id": 424242},
    }


@pytest.mark.asyncio
async def test_failed_creation_leaves_nothing_behind(lenient_client, admin_headers, db_session, parties, mocker):
    mocker.patch.object(NotificationService, "notify", side_effect=RuntimeError("notification store down"))

    response = await lenient_client.post("/v1/trips", json={
        "trip_number": "TR-500",
        "company_id": parties.company_a,
        "vehicle_owner_id": parties.owner_a,
        "driver_id": parties.driver_a,
        "route": "Taloja → Chakan",
    }, headers=admin_headers)

    assert response.status_code == 500
    assert response.json()["error_code"] == "ERR_INTERNAL_SERVER"
    assert (await db_session.execute(select(Trip))).scalars().all() == []
    assert (await db_session.execute(select(AuditLog))).scalars().all() == []


# TEST 2: Status lifecycle
@pytest.mark.asyncio
async def test_status_progression_stamps_dates(client, admin_headers, create_trip):
    """Scenario B, part two: in_transit stamps start_date, completed stamps delivery."""
    trip = await create_trip()
    url = f"/v1/trips/{trip['id']}/status"

    response = await client.patch(url, json={"status": "in_transit"}, headers=admin_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "in_transit"
    assert data["start_date"] is not None
    assert data["actual_delivery_date"] is None

    response = await client.patch(url, json={"status": "completed"}, headers=admin_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "completed"
    assert data["actual_delivery_date"] is not None
    assert data["start_date"] is not None


@pytest.mark.asyncio
async def test_backward_transition_rejected(client, admin_headers, create_trip):
    trip = await create_trip()
    url = f"/v1/trips/{trip['id']}/status"
    await client.patch(url, json={"status": "driver_assigned"}, headers=admin_headers)

    response = await client.patch(url, json={"status": "confirmed"}, headers=admin_headers)

    assert response.status_code == 400
    details = response.json()["details"]
    assert details["current_status"] == "driver_assigned"
    assert details["requested_status"] == "confirmed"
    assert details["allowed"] == ["cancelled", "completed", "in_transit"]


@pytest.mark.asyncio
async def test_completed_trip_cannot_be_cancelled(client, admin_headers, create_trip):
    trip = await create_trip()
    url = f"/v1/trips/{trip['id']}/status"
    await client.patch(url, json={"status": "completed"}, headers=admin_headers)

    response = await client.patch(url, json={"status": "cancelled"}, headers=admin_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_unknown_status_value_rejected(client, admin_headers, create_trip):
    trip = await create_trip()
    response = await client.patch(f"/v1/trips/{trip['id']}/status", json={"status": "delivered"}, headers=admin_headers)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_force_is_admin_only(client, admin_headers, driver_headers, create_trip):
    trip = await create_trip()
    url = f"/v1/trips/{trip['id']}/status"
    await client.patch(url, json={"status": "completed"}, headers=admin_headers)

    response = await client.patch(url, json={"status": "in_transit", "force": True}, headers=driver_headers)
    assert response.status_code == 403

    response = await client.patch(url, json={"status": "in_transit", "force": True}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "in_transit"


@pytest.mark.asyncio
async def test_driver_updates_only_own_trip(client, driver_headers, parties, create_trip):
    mine = await create_trip()
    theirs = await create_trip(vehicle_owner_id=parties.owner_b, driver_id=parties.driver_b)

    response = await client.patch(f"/v1/trips/{mine['id']}/status", json={"status": "in_transit"}, headers=driver_headers)
    assert response.status_code == 200

    response = await client.patch(f"/v1/trips/{theirs['id']}/status", json={"status": "in_transit"}, headers=driver_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_status_change_is_audited_and_notified(client, admin_headers, driver_headers, db_session, create_trip):
    trip = await create_trip()
    await client.patch(f"/v1/trips/{trip['id']}/status", json={"status": "confirmed"}, headers=admin_headers)

    result = await db_session.execute(
        select(AuditLog.action)
        .where(AuditLog.entity_type == "trip", AuditLog.entity_id == str(trip["id"]))
        .order_by(AuditLog.id)
    )
    assert result.scalars().all() == ["TRIP_CREATED", "TRIP_STATUS_CHANGED"]

    response = await client.get("/v1/notifications", headers=driver_headers)
    titles = [n["title"] for n in response.json()["data"]]
    assert titles == ["Trip status updated", "New trip"]


# TEST 3: Field updates
@pytest.mark.asyncio
async def test_update_recomputes_total(client, admin_headers, create_trip):
    trip = await create_trip()

    response = await client.put(f"/v1/trips/{trip['id']}", json={"service_charge": 3500}, headers=admin_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["base_amount"] == 20000
    assert data["service_charge"] == 3500
    assert data["total_amount"] == 23500


@pytest.mark.asyncio
async def test_update_route_keeps_total(client, admin_headers, create_trip):
    trip = await create_trip()

    response = await client.put(f"/v1/trips/{trip['id']}", json={"route": "Taloja → Nashik"}, headers=admin_headers)

    assert response.json()["data"]["route"] == "Taloja → Nashik"
    assert response.json()["data"]["total_amount"] == 22000


@pytest.mark.asyncio
async def test_empty_update_rejected(client, admin_headers, create_trip):
    trip = await create_trip()

    response = await client.put(f"/v1/trips/{trip['id']}", json={}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "No fields to update"


@pytest.mark.asyncio
async def test_status_not_patchable_through_update(client, admin_headers, create_trip):
    trip = await create_trip()

    response = await client.put(f"/v1/trips/{trip['id']}", json={"status": "completed"}, headers=admin_headers)

    assert response.status_code == 422
    current = (await client.get(f"/v1/trips/{trip['id']}", headers=admin_headers)).json()["data"]
    assert current["status"] == "pending"


@pytest.mark.asyncio
@pytest.mark.parametrize("field", [
    "trip_number", "company_id", "vehicle_owner_id", "driver_id", "route", "base_amount", "service_charge",
])
async def test_required_fields_cannot_be_nulled(client, admin_headers, create_trip, field):
    trip = await create_trip()

    response = await client.put(f"/v1/trips/{trip['id']}", json={field: None}, headers=admin_headers)

    assert response.status_code == 422
    assert response.json()["error_code"] == "ERR_VALIDATION"
    current = (await client.get(f"/v1/trips/{trip['id']}", headers=admin_headers)).json()["data"]
    assert current[field] == trip[field]


@pytest.mark.asyncio
async def test_manager_can_be_cleared(client, admin_headers, create_trip):
    trip = await create_trip()

    response = await client.put(f"/v1/trips/{trip['id']}", json={"manager_id": None}, headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["data"]["manager_id"] is None


@pytest.mark.asyncio
async def test_update_to_taken_trip_number_rejected(client, admin_headers, create_trip):
    first = await create_trip()
    second = await create_trip()

    response = await client.put(
        f"/v1/trips/{second['id']}", json={"trip_number": first["trip_number"]}, headers=admin_headers
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_manager_updates_only_own_trips(client, manager_headers, parties, create_trip):
    mine = await create_trip()
    theirs = await create_trip(manager_id=parties.manager_b)

    response = await client.put(f"/v1/trips/{mine['id']}", json={"route": "Via Lonavala"}, headers=manager_headers)
    assert response.status_code == 200

    response = await client.put(f"/v1/trips/{theirs['id']}", json={"route": "Via Lonavala"}, headers=manager_headers)
    assert response.status_code == 403


# TEST 4: Delete
@pytest.mark.asyncio
async def test_delete_trip(client, admin_headers, create_trip):
    trip = await create_trip()

    response = await client.delete(f"/v1/trips/{trip['id']}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["success"] is True

    response = await client.get(f"/v1/trips/{trip['id']}", headers=admin_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_blocked_by_payments(client, admin_headers, create_trip, create_payment):
    trip = await create_trip()
    await create_payment(trip)

    response = await client.delete(f"/v1/trips/{trip['id']}", headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["details"] == {"payments": 1}


@pytest.mark.asyncio
async def test_delete_blocked_by_linked_request(
    client, admin_headers, company_headers, parties, transport_request_payload
):
    created = (await client.post(
        "/v1/company/transport-requests", json=transport_request_payload, headers=company_headers
    )).json()["data"]
    assigned = (await client.post(
        f"/v1/company/admin/transport-requests/{created['id']}/assign-trip",
        json={"trip_number": "TR-LINK", "vehicle_owner_id": parties.owner_a, "driver_id": parties.driver_a},
        headers=admin_headers
    )).json()["data"]

    response = await client.delete(f"/v1/trips/{assigned['assigned_trip_id']}", headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["details"] == {"transport_requests": 1}


# TEST 5: Listing and scoping
@pytest.mark.asyncio
async def test_list_is_scoped_by_role(
    client, admin_headers, company_headers, vehicle_owner_headers, driver_headers, parties, create_trip
):
    a = await create_trip()
    b = await create_trip(company_id=parties.company_b, vehicle_owner_id=parties.owner_b, driver_id=parties.driver_b)

    admin_ids = {t["id"] for t in (await client.get("/v1/trips", headers=admin_headers)).json()["data"]["trips"]}
    assert admin_ids == {a["id"], b["id"]}

    for headers in (company_headers, vehicle_owner_headers, driver_headers):
        body = (await client.get("/v1/trips", headers=headers)).json()["data"]
        assert [t["id"] for t in body["trips"]] == [a["id"]]
        assert body["total"] == 1

    response = await client.get(f"/v1/trips/{b['id']}", headers=company_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_list_filters_and_pagination(client, admin_headers, parties, create_trip):
    for _ in range(3):
        await create_trip()
    other = await create_trip(company_id=parties.company_b)
    await client.patch(f"/v1/trips/{other['id']}/status", json={"status": "confirmed"}, headers=admin_headers)

    body = (await client.get("/v1/trips", params={"page": 1, "limit": 2}, headers=admin_headers)).json()["data"]
    assert body["total"] == 4
    assert len(body["trips"]) == 2
    assert body["page"] == 1 and body["limit"] == 2

    body = (await client.get("/v1/trips", params={"page": 2, "limit": 2}, headers=admin_headers)).json()["data"]
    assert len(body["trips"]) == 2

    body = (await client.get("/v1/trips", params={"status": "confirmed"}, headers=admin_headers)).json()["data"]
    assert [t["id"] for t in body["trips"]] == [other["id"]]

    body = (await client.get(
        "/v1/trips", params={"company_id": parties.company_a}, headers=admin_headers
    )).json()["data"]
    assert body["total"] == 3


# TEST 6: Stats
@pytest.mark.asyncio
async def test_trip_stats(client, admin_headers, create_trip):
    first = await create_trip(base_amount=10000, service_charge=1000)
    second = await create_trip(base_amount=30000, service_charge=3000)
    await create_trip()
    for trip in (first, second):
        await client.patch(f"/v1/trips/{trip['id']}/status", json={"status": "completed"}, headers=admin_headers)

    response = await client.get("/v1/trips/stats", headers=admin_headers)

    assert response.status_code == 200
    stats = response.json()["data"]
    by_status = {group["status"]: group for group in stats["by_status"]}
    assert by_status["completed"]["count"] == 2
    assert by_status["completed"]["total_revenue"] == 44000
    assert by_status["completed"]["total_base_amount"] == 40000
    assert by_status["pending"]["count"] == 1
    assert stats["completed"] == {
        "completed_trips": 2,
        "total_revenue": 44000,
        "average_trip_cost": 22000,
    }


@pytest.mark.asyncio
async def test_trip_stats_restricted(client, company_headers):
    response = await client.get("/v1/trips/stats", headers=company_headers)
    assert response.status_code == 403


# TEST 7: Audit trail
@pytest.mark.asyncio
async def test_admin_reads_trip_audit_trail(client, admin_headers, create_trip):
    trip = await create_trip()
    await client.patch(f"/v1/trips/{trip['id']}/status", json={"status": "confirmed"}, headers=admin_headers)

    response = await client.get(
        "/v1/admin/audit-logs",
        params={"entity_type": "trip", "entity_id": trip["id"]},
        headers=admin_headers
    )

    assert response.status_code == 200
    trail = response.json()["data"]
    assert trail["total"] == 2
    assert [log["action"] for log in trail["logs"]] == ["TRIP_STATUS_CHANGED", "TRIP_CREATED"]
    assert trail["logs"][0]["actor_role"] == "admin"
    assert trail["logs"][0]["meta_data"]["to"] == "confirmed"


@pytest.mark.asyncio
async def test_audit_trail_is_admin_only(client, manager_headers):
    response = await client.get("/v1/admin/audit-logs", headers=manager_headers)
    assert response.status_code == 403


# TEST 8: Repeated reads
@pytest.mark.asyncio
async def test_reads_without_writes_are_stable(
    client, admin_headers, company_headers, transport_request_payload, create_trip, create_payment
):
    trip = await create_trip()
    payment = await create_payment(trip)
    created = await client.post("/v1/company/transport-requests", json=transport_request_payload, headers=company_headers)
    request_id = created.json()["data"]["id"]

    for url in (
        f"/v1/trips/{trip['id']}",
        f"/v1/payments/{payment['id']}",
        f"/v1/company/admin/transport-requests/{request_id}",
    ):
        first = await client.get(url, headers=admin_headers)
        second = await client.get(url, headers=admin_headers)
        assert first.status_code == 200
        assert first.json() == second.json()
