"""
Integration tests for the move lifecycle over HTTP.

Covers Submit -> Quote -> Approve -> Schedule/Pay -> Start -> Complete,
cancellation, stale writes, ownership and the route service fallback.
"""

from datetime import datetime, timedelta

import pytest
from sqlalchemy import select, update

from egzit.app.core.timeutils import utcnow
from egzit.app.models.move import Move
from egzit.app.models.move_enums import VehicleClass
from egzit.app.models.move_performance import MovePerformance
from egzit.app.models.mover import Mover

# Start times are Jamaica wall-clock (UTC-5); stored arrivals are UTC
MOVE_DATE = "2030-06-15"


async def submit(client, headers, **overrides):
    payload = {
        "name": "Marcia Campbell",
        "pickup_address": "22 Main Street, Kingston",
        "delivery_address": "8 Church Street, Montego Bay",
        "move_date": MOVE_DATE,
        "inventory_size": "2br",
    }
    payload.update(overrides)
    response = await client.post("/v1/moves", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


async def quote(client, admin_headers, move_id, base_price=45000, **fees):
    payload = {"base_price": base_price}
    payload.update(fees)
    response = await client.post(f"/v1/admin/moves/{move_id}/quote", json=payload, headers=admin_headers)
    assert response.status_code == 200, response.text
    return response.json()


async def approve(client, admin_headers, move_id):
    response = await client.post(f"/v1/admin/moves/{move_id}/approve", headers=admin_headers)
    assert response.status_code == 200, response.text
    return response.json()


async def schedule(client, admin_headers, move_id, mover_id, at="09:00"):
    response = await client.post(
        f"/v1/admin/moves/{move_id}/schedule",
        json={"scheduled_time": at, "mover_id": mover_id},
        headers=admin_headers
    )
    assert response.status_code == 200, response.text
    return response.json()


async def start(client, admin_headers, move_id):
    response = await client.post(f"/v1/admin/moves/{move_id}/start", headers=admin_headers)
    assert response.status_code == 200, response.text
    return response.json()


async def event_types(client, admin_headers, move_id):
    response = await client.get(f"/v1/admin/moves/{move_id}/events", headers=admin_headers)
    assert response.status_code == 200
    return [e["event_type"] for e in response.json()]


@pytest.mark.asyncio
async def test_full_lifecycle(client, admin_headers, customer_headers, mover_id):
    move = await submit(client, customer_headers)
    assert move["status"] == "pending"
    assert move["progress"] == 0.0
    assert move["eta"] is None

    quoted = await quote(client, admin_headers, move["id"])
    assert quoted["move"]["quote_id"] == quoted["quote"]["id"]

    approved = await approve(client, admin_headers, move["id"])
    assert approved["status"] == "approved"
    assert approved["approved_at"] is not None

    scheduled = await schedule(client, admin_headers, move["id"], mover_id)
    assert scheduled["status"] == "scheduled"
    assert scheduled["assigned_mover_id"] == mover_id
    assert scheduled["scheduled_time"] == "09:00:00"
    assert scheduled["estimated_duration"] == 5400
    assert scheduled["estimated_arrival_time"] == f"{MOVE_DATE}T15:30:00"
    assert scheduled["progress"] == 25.0

    started = await start(client, admin_headers, move["id"])
    assert started["status"] == "in_progress"
    assert started["actual_start_time"] is not None
    assert 25.0 <= started["progress"] <= 90.0
    assert started["eta"] == f"{MOVE_DATE}T15:30:00"

    completed = await client.post(f"/v1/admin/moves/{move['id']}/complete", headers=admin_headers)
    assert completed.status_code == 200
    assert completed.json()["status"] == "completed"
    assert completed.json()["progress"] == 100.0
    assert completed.json()["actual_end_time"] is not None

    assert await event_types(client, admin_headers, move["id"]) == [
        "created", "quote_sent", "approved", "scheduled", "started", "completed"
    ]

    stats = await client.get("/v1/admin/analytics/performance", headers=admin_headers)
    assert stats.status_code == 200
    assert stats.json()["completed_moves"] == 1
    assert stats.json()["on_time_moves"] == 1


@pytest.mark.asyncio
async def test_version_increases_with_each_change(client, admin_headers, customer_headers):
    move = await submit(client, customer_headers)
    quoted = await quote(client, admin_headers, move["id"])
    approved = await approve(client, admin_headers, move["id"])
    assert move["version"] < quoted["move"]["version"] < approved["version"]


@pytest.mark.asyncio
async def test_submit_rejects_incomplete_request(client, customer_headers):
    response = await client.post("/v1/moves", json={
        "name": "Al",
        "pickup_address": "Kgn",
        "delivery_address": "8 Church Street, Montego Bay",
    }, headers=customer_headers)
    assert response.status_code == 400
    body = response.json()
    assert body["error_code"] == "ERR_MOVE_002"
    assert set(body["details"]["fields"]) == {"name", "pickup_address", "move_date"}

    listing = await client.get("/v1/moves", headers=customer_headers)
    assert listing.json() == []


@pytest.mark.asyncio
async def test_approve_without_quote_rejected(client, admin_headers, customer_headers):
    move = await submit(client, customer_headers)

    response = await client.post(f"/v1/admin/moves/{move['id']}/approve", headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["details"]["reason"] == "quote_missing"

    detail = await client.get(f"/v1/moves/{move['id']}", headers=customer_headers)
    assert detail.json()["status"] == "pending"
    assert await event_types(client, admin_headers, move["id"]) == ["created"]


@pytest.mark.asyncio
async def test_schedule_requires_time_and_mover(client, admin_headers, customer_headers, mover_id):
    move = await submit(client, customer_headers)
    await quote(client, admin_headers, move["id"])
    await approve(client, admin_headers, move["id"])

    response = await client.post(f"/v1/admin/moves/{move['id']}/schedule", json={}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["details"]["missing"] == ["scheduled_time", "mover_id"]

    response = await client.post(
        f"/v1/admin/moves/{move['id']}/schedule",
        json={"scheduled_time": "09:00", "mover_id": mover_id + 100},
        headers=admin_headers
    )
    assert response.status_code == 404

    detail = await client.get(f"/v1/moves/{move['id']}", headers=customer_headers)
    assert detail.json()["status"] == "approved"
    assert detail.json()["estimated_duration"] is None


@pytest.mark.asyncio
async def test_schedule_falls_back_when_route_service_fails(
    client, admin_headers, customer_headers, mover_id, route_service
):
    """An unavailable route service still schedules the move, with the default duration."""
    route_service.fail_status = 503
    move = await submit(client, customer_headers)
    await quote(client, admin_headers, move["id"])
    await approve(client, admin_headers, move["id"])

    scheduled = await schedule(client, admin_headers, move["id"], mover_id)
    assert scheduled["status"] == "scheduled"
    assert scheduled["estimated_duration"] == 3600
    assert scheduled["estimated_arrival_time"] == f"{MOVE_DATE}T15:00:00"
    assert route_service.requests

    events = (await client.get(f"/v1/admin/moves/{move['id']}/events", headers=admin_headers)).json()
    scheduled_event = events[-1]
    assert scheduled_event["event_type"] == "scheduled"
    assert scheduled_event["metadata"]["estimate_source"] == "default"
    assert scheduled_event["metadata"]["estimated_duration"] == 3600

    ops = await client.get("/v1/admin/ops/route-estimates", headers=admin_headers)
    assert ops.status_code == 200
    assert ops.json()["defaulted_estimates"] == 1
    recent = ops.json()["recent"][0]
    assert recent["move_id"] == move["id"]
    assert recent["operation"] == "schedule"
    assert recent["reason"].startswith("http_error")


@pytest.mark.asyncio
async def test_unresolved_address_uses_default_without_calling_route_service(
    client, admin_headers, customer_headers, mover_id, route_service
):
    move = await submit(client, customer_headers, delivery_address="Unit 4, Somewhere Unmapped")
    await quote(client, admin_headers, move["id"])
    await approve(client, admin_headers, move["id"])

    scheduled = await schedule(client, admin_headers, move["id"], mover_id)
    assert scheduled["estimated_duration"] == 3600
    assert route_service.requests == []


@pytest.mark.asyncio
async def test_customer_pay_books_and_schedules(client, admin_headers, customer_headers):
    move = await submit(client, customer_headers)
    quoted = await quote(client, admin_headers, move["id"], base_price=40000, insurance_fee=2500, tax=6375)
    await approve(client, admin_headers, move["id"])

    response = await client.post(f"/v1/moves/{move['id']}/pay", headers=customer_headers)
    assert response.status_code == 200, response.text
    paid = response.json()

    assert paid["move"]["status"] == "scheduled"
    assert paid["move"]["scheduled_time"] == "08:00:00"
    assert paid["move"]["estimated_duration"] == 5400
    assert paid["move"]["estimated_arrival_time"] == f"{MOVE_DATE}T14:30:00"
    assert paid["move"]["assigned_mover_id"] is None

    booking = paid["booking"]
    assert booking["quoted_price"] == quoted["quote"]["total_price"] == 48875
    assert booking["final_price"] == 48875
    assert booking["payment_status"] == "paid"
    assert booking["status"] == "confirmed"
    assert booking["payment_reference"].startswith(f"DEMO-{move['id']}-")

    tracking = (await client.get(f"/v1/moves/{move['id']}/tracking", headers=customer_headers)).json()
    assert tracking["quote"]["status"] == "accepted"
    assert tracking["current_event"]["event_type"] == "payment_received"
    assert tracking["current_event"]["metadata"]["amount"] == 48875
    assert tracking["current_event"]["metadata"]["estimate_source"] == "route_service"
    assert tracking["allowed_actions"] == ["cancel"]


@pytest.mark.asyncio
async def test_pay_requires_approval(client, admin_headers, customer_headers):
    move = await submit(client, customer_headers)
    await quote(client, admin_headers, move["id"])

    response = await client.post(f"/v1/moves/{move['id']}/pay", headers=customer_headers)
    assert response.status_code == 409
    assert response.json()["error_code"] == "ERR_MOVE_001"


@pytest.mark.asyncio
async def test_customer_cancels_before_start(client, customer_headers):
    move = await submit(client, customer_headers)

    response = await client.post(
        f"/v1/moves/{move['id']}/cancel", json={"reason": "Changed plans"}, headers=customer_headers
    )
    assert response.status_code == 200
    cancelled = response.json()
    assert cancelled["status"] == "cancelled"
    assert cancelled["cancellation_reason"] == "Changed plans"
    assert cancelled["cancelled_at"] is not None
    assert cancelled["progress"] == 0.0

    again = await client.post(f"/v1/moves/{move['id']}/cancel", headers=customer_headers)
    assert again.status_code == 409


@pytest.mark.asyncio
async def test_cancel_rejected_after_start(client, admin_headers, customer_headers, mover_id):
    move = await submit(client, customer_headers)
    await quote(client, admin_headers, move["id"])
    await approve(client, admin_headers, move["id"])
    await schedule(client, admin_headers, move["id"], mover_id)
    await start(client, admin_headers, move["id"])

    response = await client.post(f"/v1/moves/{move['id']}/cancel", headers=customer_headers)
    assert response.status_code == 409
    assert response.json()["details"] == {"current_status": "in_progress", "event": "cancel"}

    admin_attempt = await client.post(f"/v1/admin/moves/{move['id']}/cancel", headers=admin_headers)
    assert admin_attempt.status_code == 409


@pytest.mark.asyncio
async def test_stale_expected_version_rejected(client, admin_headers, customer_headers):
    move = await submit(client, customer_headers)
    quoted = await quote(client, admin_headers, move["id"])

    stale = await client.post(
        f"/v1/admin/moves/{move['id']}/approve",
        json={"expected_version": move["version"]},
        headers=admin_headers
    )
    assert stale.status_code == 409
    assert stale.json()["error_code"] == "ERR_MOVE_003"
    assert stale.json()["details"]["current_version"] == quoted["move"]["version"]

    unchanged = await client.get(f"/v1/moves/{move['id']}", headers=customer_headers)
    assert unchanged.json()["status"] == "pending"

    fresh = await client.post(
        f"/v1/admin/moves/{move['id']}/approve",
        json={"expected_version": quoted["move"]["version"]},
        headers=admin_headers
    )
    assert fresh.status_code == 200
    assert fresh.json()["status"] == "approved"


@pytest.mark.asyncio
async def test_customers_cannot_see_each_others_moves(client, admin_headers, customer_headers, register_customer):
    move = await submit(client, customer_headers)
    await quote(client, admin_headers, move["id"])
    await approve(client, admin_headers, move["id"])
    other_headers = await register_customer("devon")

    for method, path in (
        ("get", f"/v1/moves/{move['id']}"),
        ("get", f"/v1/moves/{move['id']}/tracking"),
        ("post", f"/v1/moves/{move['id']}/pay"),
        ("post", f"/v1/moves/{move['id']}/cancel"),
    ):
        response = await getattr(client, method)(path, headers=other_headers)
        assert response.status_code == 404, path

    assert (await client.get("/v1/moves", headers=other_headers)).json() == []
    still_approved = await client.get(f"/v1/moves/{move['id']}", headers=customer_headers)
    assert still_approved.json()["status"] == "approved"


@pytest.mark.asyncio
async def test_location_only_accepted_in_progress(client, admin_headers, customer_headers, mover_id):
    move = await submit(client, customer_headers)
    await quote(client, admin_headers, move["id"])
    await approve(client, admin_headers, move["id"])
    scheduled = await schedule(client, admin_headers, move["id"], mover_id)

    ping = {"lat": 18.0123, "lng": -76.9001}
    early = await client.post(f"/v1/admin/moves/{move['id']}/location", json=ping, headers=admin_headers)
    assert early.status_code == 409

    await start(client, admin_headers, move["id"])
    response = await client.post(f"/v1/admin/moves/{move['id']}/location", json=ping, headers=admin_headers)
    assert response.status_code == 200
    updated = response.json()
    assert updated["current_lat"] == 18.0123
    assert updated["current_lng"] == -76.9001
    assert updated["estimated_arrival_time"] != scheduled["estimated_arrival_time"]
    assert updated["eta"] == updated["estimated_arrival_time"]

    tracking = (await client.get(f"/v1/admin/moves/{move['id']}", headers=admin_headers)).json()
    current = tracking["current_event"]
    assert current["event_type"] == "location_update"
    assert current["location_lat"] == 18.0123
    assert current["metadata"]["remaining_km"] > 100


@pytest.mark.asyncio
async def test_cancelled_moves_hidden_from_list_by_default(client, customer_headers):
    kept = await submit(client, customer_headers)
    dropped = await submit(client, customer_headers, move_date="2030-07-01")
    await client.post(f"/v1/moves/{dropped['id']}/cancel", headers=customer_headers)

    listing = await client.get("/v1/moves", headers=customer_headers)
    assert [m["id"] for m in listing.json()] == [kept["id"]]

    everything = await client.get("/v1/moves", params={"include_cancelled": True}, headers=customer_headers)
    assert [m["id"] for m in everything.json()] == [kept["id"], dropped["id"]]


@pytest.mark.asyncio
async def test_tracking_view_depends_on_viewer(client, admin_headers, customer_headers):
    move = await submit(client, customer_headers)
    await quote(client, admin_headers, move["id"])

    mine = (await client.get(f"/v1/moves/{move['id']}/tracking", headers=customer_headers)).json()
    assert mine["progress"] == 0.0
    assert mine["eta"] is None
    assert mine["eta_display"] == "calculating..."
    assert mine["distance_display"].endswith(" km")
    assert 125 < mine["distance_km"] < 135
    assert mine["travel_time_display"].startswith("3h")
    assert mine["quote"]["status"] == "pending"
    assert mine["allowed_actions"] == ["cancel"]
    assert [e["event_type"] for e in mine["events"]] == ["created", "quote_sent"]

    admin_view = (await client.get(f"/v1/admin/moves/{move['id']}", headers=admin_headers)).json()
    assert admin_view["allowed_actions"] == ["quote", "approve", "cancel"]


@pytest.mark.asyncio
async def test_admin_list_filters_by_status(client, admin_headers, customer_headers):
    pending = await submit(client, customer_headers)
    cancelled = await submit(client, customer_headers)
    await client.post(f"/v1/admin/moves/{cancelled['id']}/cancel", headers=admin_headers)

    legacy = await client.get("/v1/admin/moves", params={"status": "planning"}, headers=admin_headers)
    assert [m["id"] for m in legacy.json()] == [pending["id"]]

    everything = await client.get("/v1/admin/moves", headers=admin_headers)
    assert len(everything.json()) == 2

    bogus = await client.get("/v1/admin/moves", params={"status": "teleported"}, headers=admin_headers)
    assert bogus.status_code == 400


@pytest.mark.asyncio
async def test_owner_notified_of_admin_actions(client, admin_headers, customer_headers):
    move = await submit(client, customer_headers)
    await quote(client, admin_headers, move["id"], base_price=30000)
    await approve(client, admin_headers, move["id"])

    notifications = (await client.get("/v1/notifications", headers=customer_headers)).json()
    titles = {n["title"] for n in notifications}
    assert titles == {"Your quote is ready", "Move approved"}
    quote_note = next(n for n in notifications if n["type"] == "QUOTE_UPDATE")
    assert "JMD $30,000" in quote_note["message"]
    assert quote_note["metadata_payload"]["move_id"] == move["id"]

    count = await client.get("/v1/notifications/unread-count", headers=customer_headers)
    assert count.json()["count"] == 2

    marked = await client.patch("/v1/notifications/read-all", headers=customer_headers)
    assert marked.json()["count"] == 2
    count = await client.get("/v1/notifications/unread-count", headers=customer_headers)
    assert count.json()["count"] == 0


@pytest.mark.asyncio
async def test_self_cancel_does_not_notify_owner(client, customer_headers):
    move = await submit(client, customer_headers)
    await client.post(f"/v1/moves/{move['id']}/cancel", headers=customer_headers)

    notifications = (await client.get("/v1/notifications", headers=customer_headers)).json()
    assert notifications == []


@pytest.mark.asyncio
async def test_unavailable_mover_cannot_be_scheduled(client, admin_headers, customer_headers, db_session):
    busy = Mover(name="Booked Solid Ltd", vehicle_class=VehicleClass.TRUCK, available=False)
    db_session.add(busy)
    await db_session.commit()
    await db_session.refresh(busy)

    move = await submit(client, customer_headers)
    await quote(client, admin_headers, move["id"])
    await approve(client, admin_headers, move["id"])

    response = await client.post(
        f"/v1/admin/moves/{move['id']}/schedule",
        json={"scheduled_time": "09:00", "mover_id": busy.id},
        headers=admin_headers
    )
    assert response.status_code == 400
    assert response.json()["details"] == {"mover_id": busy.id, "reason": "mover_unavailable"}

    detail = await client.get(f"/v1/moves/{move['id']}", headers=customer_headers)
    assert detail.json()["status"] == "approved"
    assert detail.json()["assigned_mover_id"] is None


@pytest.mark.asyncio
async def test_late_completion_recorded_as_not_on_time(
    client, admin_headers, customer_headers, mover_id, db_session
):
    """A 6000 s move against a 5400 s estimate is late."""
    move = await submit(client, customer_headers)
    await quote(client, admin_headers, move["id"])
    await approve(client, admin_headers, move["id"])
    await schedule(client, admin_headers, move["id"], mover_id)
    await start(client, admin_headers, move["id"])

    await db_session.execute(
        update(Move).where(Move.id == move["id"]).values(actual_start_time=utcnow() - timedelta(seconds=6000))
    )
    await db_session.commit()

    completed = await client.post(f"/v1/admin/moves/{move['id']}/complete", headers=admin_headers)
    assert completed.status_code == 200

    performance = (await db_session.execute(
        select(MovePerformance).where(MovePerformance.move_id == move["id"])
    )).scalar_one()
    assert performance.estimated_duration == 5400
    assert performance.actual_duration == 6000
    assert performance.on_time is False

    stats = (await client.get("/v1/admin/analytics/performance", headers=admin_headers)).json()
    assert stats["completed_moves"] == 1
    assert stats["on_time_moves"] == 0


@pytest.mark.asyncio
async def test_eta_stays_on_one_clock_after_location_ping(client, admin_headers, customer_headers, mover_id):
    """The scheduled ETA and a GPS-derived ETA are both UTC."""
    move = await submit(client, customer_headers)
    await quote(client, admin_headers, move["id"])
    await approve(client, admin_headers, move["id"])
    await schedule(client, admin_headers, move["id"], mover_id)
    await start(client, admin_headers, move["id"])

    # At the pickup, the remaining drive is Kingston to Montego Bay by truck
    response = await client.post(
        f"/v1/admin/moves/{move['id']}/location",
        json={"lat": 17.9714, "lng": -76.7920},
        headers=admin_headers
    )
    assert response.status_code == 200
    body = response.json()

    eta = datetime.fromisoformat(body["estimated_arrival_time"])
    started = datetime.fromisoformat(body["actual_start_time"])
    assert timedelta(hours=2) < eta - started < timedelta(hours=5)

    tracking = (await client.get(f"/v1/moves/{move['id']}/tracking", headers=customer_headers)).json()
    local_eta = eta - timedelta(hours=5)
    assert tracking["eta_display"] == local_eta.strftime("%Y-%m-%d %H:%M")
