"""
Public statistics and admin dashboard tests.
"""
from breakfast4u.models.order import Order, OrderStatus


async def test_public_stats(unauth_client, seed_data):
    r = await unauth_client.get("/api/stats/")
    assert r.status_code == 200
    data = r.json()["data"]

    overview = data["overview"]
    assert overview["total_users"] == 5
    assert overview["total_meals"] == 2
    assert overview["total_stores"] == 1
    assert overview["total_orders"] == 0
    assert overview["average_rating"] == 4.7  # (4.5 + 4.8) / 2, one decimal

    assert data["popular_categories"] == [{"category": "Maharashtrian", "count": 2}]
    assert data["service_areas"] == ["Islampur"]


async def test_dashboard_requires_admin(client, seed_data):
    r = await client.get("/api/stats/dashboard")
    assert r.status_code == 403


async def test_dashboard_aggregates(client, admin_client, db_session, seed_data):
    payload = {
        "store_id": seed_data["store"].id,
        "items": [{"meal_id": seed_data["misal"].id, "quantity": 2}],
        "order_type": "Pickup",
        "payment_method": "UPI",
    }
    first = (await client.post("/api/orders/", json=payload)).json()["data"]
    await client.post("/api/orders/", json=payload)

    order = await db_session.get(Order, first["id"])
    order.status = OrderStatus.DELIVERED
    await db_session.commit()

    r = await admin_client.get("/api/stats/dashboard")
    assert r.status_code == 200
    data = r.json()["data"]

    assert data["totals"]["orders"] == 2
    assert data["totals"]["users"] == 5
    assert data["this_month"]["orders"] == 2
    assert data["this_month"]["revenue"] == first["final_amount"]

    statuses = {row["status"]: row["count"] for row in data["order_status_distribution"]}
    assert statuses == {"Delivered": 1, "Pending": 1}

    assert sum(day["orders"] for day in data["daily_orders"]) == 2

    assert data["top_stores"][0]["name"] == "Morning Glory Cafe"
    assert data["top_stores"][0]["orders"] == 1

    assert data["top_meals"][0] == {
        "meal_id": seed_data["misal"].id,
        "name": "Misal Pav",
        "quantity": 4,
        "revenue": 240,
    }

    roles = {row["role"]: row["count"] for row in data["user_role_distribution"]}
    assert roles == {"user": 2, "owner": 2, "admin": 1}
    assert len(data["recent_orders"]) == 2
