"""
Integration tests for quoting.
"""

from datetime import datetime, timedelta

import pytest
from sqlalchemy import select, update

from egzit.app.models.quote import Quote


async def pending_move(client, customer_headers):
    response = await client.post("/v1/moves", json={
        "name": "Marcia Campbell",
        "pickup_address": "22 Main Street, Kingston",
        "delivery_address": "4 Bay Road, Ocho Rios",
        "move_date": "2030-06-15",
    }, headers=customer_headers)
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_total_is_sum_of_components(client, admin_headers, customer_headers):
    move = await pending_move(client, customer_headers)
    response = await client.post(f"/v1/admin/moves/{move['id']}/quote", json={
        "base_price": 25000,
        "distance_fee": 8000,
        "weight_fee": 3500,
        "special_items_fee": 4000,
        "insurance_fee": 1500,
        "tax": 6300,
        "valid_days": 3,
        "notes": "Piano on second floor",
    }, headers=admin_headers)
    assert response.status_code == 200
    quote = response.json()["quote"]

    assert quote["total_price"] == 48300
    assert quote["status"] == "pending"
    assert quote["notes"] == "Piano on second floor"
    created = datetime.fromisoformat(quote["created_at"])
    valid_until = datetime.fromisoformat(quote["valid_until"])
    assert valid_until - created == timedelta(days=3)

    events = (await client.get(f"/v1/admin/moves/{move['id']}/events", headers=admin_headers)).json()
    assert events[-1]["event_type"] == "quote_sent"
    assert events[-1]["notes"] == "Quote sent: JMD $48,300"
    assert events[-1]["metadata"] == {"quote_id": quote["id"], "total_price": 48300}


@pytest.mark.asyncio
async def test_requote_points_move_at_latest_quote(client, admin_headers, customer_headers, db_session):
    move = await pending_move(client, customer_headers)
    first = await client.post(f"/v1/admin/moves/{move['id']}/quote", json={"base_price": 30000}, headers=admin_headers)
    second = await client.post(f"/v1/admin/moves/{move['id']}/quote", json={"base_price": 27500}, headers=admin_headers)
    assert second.status_code == 200

    assert second.json()["move"]["quote_id"] == second.json()["quote"]["id"]
    assert second.json()["quote"]["id"] != first.json()["quote"]["id"]

    tracking = (await client.get(f"/v1/moves/{move['id']}/tracking", headers=customer_headers)).json()
    assert tracking["move"]["status"] == "pending"
    assert tracking["quote"]["total_price"] == 27500

    quotes = (await db_session.execute(select(Quote).where(Quote.move_id == move["id"]))).scalars().all()
    assert len(quotes) == 2


@pytest.mark.asyncio
async def test_quote_only_while_pending(client, admin_headers, customer_headers):
    move = await pending_move(client, customer_headers)
    await client.post(f"/v1/admin/moves/{move['id']}/quote", json={"base_price": 30000}, headers=admin_headers)
    await client.post(f"/v1/admin/moves/{move['id']}/approve", headers=admin_headers)

    response = await client.post(f"/v1/admin/moves/{move['id']}/quote", json={"base_price": 1}, headers=admin_headers)
    assert response.status_code == 409
    assert response.json()["details"] == {"current_status": "approved", "event": "quote"}


@pytest.mark.asyncio
async def test_negative_fee_rejected(client, admin_headers, customer_headers):
    move = await pending_move(client, customer_headers)
    response = await client.post(
        f"/v1/admin/moves/{move['id']}/quote",
        json={"base_price": 30000, "tax": -5},
        headers=admin_headers
    )
    assert response.status_code == 422
    assert response.json()["error_code"] == "ERR_VALIDATION"


@pytest.mark.asyncio
async def test_lapsed_quote_reads_as_expired_but_can_still_be_paid(
    client, admin_headers, customer_headers, db_session
):
    """Expiry is derived on read; it does not block approval or payment."""
    move = await pending_move(client, customer_headers)
    created = await client.post(f"/v1/admin/moves/{move['id']}/quote", json={"base_price": 30000}, headers=admin_headers)
    quote_id = created.json()["quote"]["id"]

    await db_session.execute(
        update(Quote).where(Quote.id == quote_id).values(valid_until=datetime(2020, 1, 1))
    )
    await db_session.commit()

    tracking = (await client.get(f"/v1/moves/{move['id']}/tracking", headers=customer_headers)).json()
    assert tracking["quote"]["status"] == "expired"

    await client.post(f"/v1/admin/moves/{move['id']}/approve", headers=admin_headers)
    paid = await client.post(f"/v1/moves/{move['id']}/pay", headers=customer_headers)
    assert paid.status_code == 200
    assert paid.json()["booking"]["quoted_price"] == 30000
