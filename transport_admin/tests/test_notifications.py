"""
Integration tests for in-app notifications.
"""

import pytest


async def confirm(client, admin_headers, trip):
    response = await client.patch(f"/v1/trips/{trip['id']}/status", json={"status": "confirmed"}, headers=admin_headers)
    assert response.status_code == 200


# TEST 1: Delivery
@pytest.mark.asyncio
async def test_trip_events_reach_parties(client, admin_headers, vehicle_owner_headers, company_headers, create_trip):
    trip = await create_trip()
    await confirm(client, admin_headers, trip)

    response = await client.get("/v1/notifications", headers=vehicle_owner_headers)

    assert response.status_code == 200
    notifications = response.json()["data"]
    assert [n["title"] for n in notifications] == ["Trip status updated", "New trip"]
    assert notifications[0]["type"] == "trip_update"
    assert notifications[0]["metadata_payload"] == {"trip_id": trip["id"], "status": "confirmed"}
    assert all(n["is_read"] is False for n in notifications)

    # The company is not told about trip creation, only about status changes
    response = await client.get("/v1/notifications", headers=company_headers)
    assert [n["title"] for n in response.json()["data"]] == ["Trip status updated"]


@pytest.mark.asyncio
async def test_request_decision_notifies_company(client, admin_headers, company_headers, transport_request_payload):
    created = await client.post("/v1/company/transport-requests", json=transport_request_payload, headers=company_headers)
    request_id = created.json()["data"]["id"]

    await client.put(
        f"/v1/company/admin/transport-requests/{request_id}/status",
        json={"status": "approved"},
        headers=admin_headers
    )

    notifications = (await client.get("/v1/notifications", headers=company_headers)).json()["data"]
    assert len(notifications) == 1
    assert notifications[0]["type"] == "request_update"
    assert notifications[0]["metadata_payload"]["status"] == "approved"


@pytest.mark.asyncio
async def test_notifications_are_per_recipient(client, other_company_headers, driver_headers, create_trip):
    await create_trip()

    assert (await client.get("/v1/notifications", headers=other_company_headers)).json()["data"] == []
    assert len((await client.get("/v1/notifications", headers=driver_headers)).json()["data"]) == 1


# TEST 2: Read state
@pytest.mark.asyncio
async def test_mark_single_notification_read(client, admin_headers, vehicle_owner_headers, create_trip):
    await confirm(client, admin_headers, await create_trip())
    newest = (await client.get("/v1/notifications", headers=vehicle_owner_headers)).json()["data"][0]

    response = await client.patch(f"/v1/notifications/{newest['id']}/read", headers=vehicle_owner_headers)
    assert response.status_code == 200
    assert response.json()["data"] == {"updated": 1}

    unread = (await client.get("/v1/notifications", params={"unread_only": True}, headers=vehicle_owner_headers)).json()["data"]
    assert [n["title"] for n in unread] == ["New trip"]


@pytest.mark.asyncio
async def test_cannot_mark_someone_elses_notification(client, vehicle_owner_headers, driver_headers, create_trip):
    await create_trip()
    owner_notification = (await client.get("/v1/notifications", headers=vehicle_owner_headers)).json()["data"][0]

    response = await client.patch(f"/v1/notifications/{owner_notification['id']}/read", headers=driver_headers)

    assert response.status_code == 404
    assert response.json()["message"] == "Notification not found"


@pytest.mark.asyncio
async def test_mark_all_read(client, admin_headers, vehicle_owner_headers, create_trip):
    trip = await create_trip()
    await confirm(client, admin_headers, trip)

    response = await client.patch("/v1/notifications/read-all", headers=vehicle_owner_headers)
    assert response.json()["data"] == {"updated": 2}

    response = await client.patch("/v1/notifications/read-all", headers=vehicle_owner_headers)
    assert response.json()["data"] == {"updated": 0}

    notifications = (await client.get("/v1/notifications", headers=vehicle_owner_headers)).json()["data"]
    assert all(n["is_read"] and n["read_at"] for n in notifications)
