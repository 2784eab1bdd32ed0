"""
Meal catalog and store directory tests.
"""
import math
from datetime import datetime

import pytest
from sqlalchemy import select

from breakfast4u.models.meal import Meal, MealCategory, TimeOfDay
from breakfast4u.models.order import OrderItem
from breakfast4u.models.store import Store, StoreArea, store_popular_meals
from breakfast4u.models.user import user_favorites
from breakfast4u.services import catalog
from breakfast4u.utils.errors import InvalidInputError
from breakfast4u.utils.pagination import Page, paginate


async def add_meals(db_session, count, **overrides):
    for i in range(count):
        fields = dict(
            name=f"Idli Plate {i}",
            description="Steamed rice cakes with sambar and chutney",
            price=20 + i,
            category=MealCategory.SOUTH_INDIAN,
            time_of_day=[TimeOfDay.MORNING.value],
            tags=[],
            preparation_time=8,
            rating=3.0,
        )
        fields.update(overrides)
        db_session.add(Meal(**fields))
    await db_session.commit()


# ===================== MEALS =====================


async def test_list_meals_excludes_unavailable(unauth_client, seed_data):
    r = await unauth_client.get("/api/meals/")
    body = r.json()
    assert r.status_code == 200
    names = [m["name"] for m in body["data"]]
    assert "Sabudana Vada" not in names
    assert body["total"] == 2


async def test_default_sort_highest_rated(unauth_client, seed_data):
    r = await unauth_client.get("/api/meals/")
    names = [m["name"] for m in r.json()["data"]]
    assert names == ["Misal Pav", "Kanda Poha"]


@pytest.mark.parametrize("sort_by,expected", [
    ("Price: Low to High", ["Kanda Poha", "Misal Pav"]),
    ("Price: High to Low", ["Misal Pav", "Kanda Poha"]),
    ("Most Popular", ["Misal Pav", "Kanda Poha"]),
])
async def test_meal_sorts(unauth_client, seed_data, sort_by, expected):
    r = await unauth_client.get("/api/meals/", params={"sortBy": sort_by})
    assert [m["name"] for m in r.json()["data"]] == expected


async def test_filter_by_time_of_day(unauth_client, seed_data):
    r = await unauth_client.get("/api/meals/", params={"timeOfDay": "Afternoon"})
    assert [m["name"] for m in r.json()["data"]] == ["Misal Pav"]

    r = await unauth_client.get("/api/meals/", params={"timeOfDay": "Any Time"})
    assert r.json()["total"] == 2


async def test_filter_by_tags_matches_any(unauth_client, seed_data):
    r = await unauth_client.get("/api/meals/", params={"tags": "Spicy,Healthy"})
    assert r.json()["total"] == 2

    r = await unauth_client.get("/api/meals/", params={"tags": "Healthy"})
    assert [m["name"] for m in r.json()["data"]] == ["Kanda Poha"]


async def test_filter_by_price_range(unauth_client, seed_data):
    r = await unauth_client.get("/api/meals/", params={"minPrice": 35, "maxPrice": 100})
    assert [m["name"] for m in r.json()["data"]] == ["Misal Pav"]


async def test_filter_by_category(unauth_client, seed_data, db_session):
    await add_meals(db_session, 2)
    r = await unauth_client.get("/api/meals/", params={"category": "South Indian"})
    assert r.json()["total"] == 2

    r = await unauth_client.get("/api/meals/category/Maharashtrian")
    assert r.json()["total"] == 2


async def test_invalid_category_rejected(unauth_client, seed_data):
    r = await unauth_client.get("/api/meals/", params={"category": "Dessert Pizza"})
    assert r.status_code == 400
    assert r.json()["success"] is False


async def test_search_text_matches_name_and_description(unauth_client, seed_data):
    r = await unauth_client.get("/api/meals/", params={"search": "moth bean"})
    assert [m["name"] for m in r.json()["data"]] == ["Misal Pav"]


async def test_search_endpoint(unauth_client, seed_data):
    r = await unauth_client.get("/api/meals/search", params={"q": "vegetarian"})
    assert r.json()["total"] == 2

    r = await unauth_client.get("/api/meals/search", params={"q": "   "})
    assert r.status_code == 400


async def test_search_treats_wildcards_literally(unauth_client, seed_data):
    r = await unauth_client.get("/api/meals/search", params={"q": "%"})
    assert r.json()["total"] == 0


async def test_meals_by_time_route(unauth_client, seed_data):
    r = await unauth_client.get("/api/meals/time/Evening")
    assert r.json()["total"] == 0  # the only evening meal is unavailable


@pytest.mark.parametrize("limit", [1, 3, 5, 12])
async def test_pagination_covers_every_row_once(unauth_client, seed_data, db_session, limit):
    await add_meals(db_session, 9)

    first = (await unauth_client.get("/api/meals/", params={"limit": limit})).json()
    total = first["total"]
    assert first["pagination"]["pages"] == math.ceil(total / limit)

    seen = []
    for page in range(1, first["pagination"]["pages"] + 1):
        body = (await unauth_client.get("/api/meals/", params={"limit": limit, "page": page})).json()
        assert body["count"] == len(body["data"])
        seen.extend(m["id"] for m in body["data"])

    assert len(seen) == total == 11
    assert len(set(seen)) == total


async def test_meal_page_size_defaults_to_twelve(unauth_client, seed_data, db_session):
    await add_meals(db_session, 15)
    body = (await unauth_client.get("/api/meals/")).json()
    assert body["count"] == 12
    assert body["pagination"] == {"page": 1, "pages": 2}


async def test_paginate_helper(db_session, seed_data):
    query = catalog.meal_query(sort=catalog.MealSort.PRICE_LOW_TO_HIGH)
    items, total = await paginate(db_session, query, Page(page=2, limit=1))
    assert total == 2
    assert [m.name for m in items] == ["Misal Pav"]


def test_meal_query_rejects_unknown_time():
    with pytest.raises(InvalidInputError):
        catalog.meal_query(time_of_day="Midnight")


async def test_get_meal_reports_favorite(client, seed_data):
    meal_id = seed_data["poha"].id
    r = await client.get(f"/api/meals/{meal_id}")
    assert r.json()["data"]["is_favorited"] is False

    await client.post(f"/api/users/favorites/{meal_id}")
    r = await client.get(f"/api/meals/{meal_id}")
    assert r.json()["data"]["is_favorited"] is True


async def test_get_missing_meal(unauth_client, seed_data):
    r = await unauth_client.get("/api/meals/9999")
    assert r.status_code == 404
    assert r.json() == {"success": False, "message": "Meal not found"}


# ===================== MEAL MANAGEMENT =====================

NEW_MEAL = {
    "name": "Thalipeeth",
    "description": "Multigrain flatbread with butter and curd",
    "price": 55,
    "category": "Maharashtrian",
    "time_of_day": ["Morning", "Morning"],
    "tags": ["Healthy"],
    "preparation_time": 15,
}


async def test_owner_creates_meal(owner_client, seed_data):
    r = await owner_client.post("/api/meals/", json=NEW_MEAL)
    assert r.status_code == 201
    data = r.json()["data"]
    assert data["created_by_id"] == seed_data["owner"].id
    assert data["time_of_day"] == ["Morning"]


async def test_customer_cannot_create_meal(client, seed_data):
    r = await client.post("/api/meals/", json=NEW_MEAL)
    assert r.status_code == 403
    assert r.json()["message"] == "User role user is not authorized to access this route"


async def test_meal_requires_time_of_day(owner_client, seed_data):
    r = await owner_client.post("/api/meals/", json={**NEW_MEAL, "time_of_day": []})
    assert r.status_code == 400
    assert r.json()["message"] == "Validation failed"
    assert r.json()["errors"]


async def test_meal_text_is_trimmed_before_length_checks(owner_client, seed_data):
    r = await owner_client.post("/api/meals/", json={**NEW_MEAL, "name": "  a  ", "description": "   short    "})
    assert r.status_code == 400
    assert {e["field"] for e in r.json()["errors"]} == {"name", "description"}

    r = await owner_client.post("/api/meals/", json={**NEW_MEAL, "name": "  Thalipeeth  "})
    assert r.status_code == 201
    assert r.json()["data"]["name"] == "Thalipeeth"


async def test_meal_update_ownership(owner_client, other_owner_client, admin_client, seed_data):
    url = f"/api/meals/{seed_data['poha'].id}"
    assert (await other_owner_client.put(url, json={"price": 35})).status_code == 403

    r = await owner_client.put(url, json={"price": 35})
    assert r.status_code == 200
    assert r.json()["data"]["price"] == 35

    r = await admin_client.put(url, json={"is_available": False})
    assert r.status_code == 200
    assert r.json()["data"]["is_available"] is False


async def test_meal_delete_is_hard(owner_client, client, unauth_client, db_session, seed_data):
    meal_id = (await owner_client.post("/api/meals/", json=NEW_MEAL)).json()["data"]["id"]
    store_url = f"/api/stores/{seed_data['store'].id}"

    await client.post(f"/api/users/favorites/{meal_id}")
    await owner_client.put(store_url, json={"popular_items": [meal_id]})
    r = await client.post(
        "/api/orders/",
        json={
            "store_id": seed_data["store"].id,
            "items": [{"meal_id": meal_id, "quantity": 1}],
            "order_type": "Pickup",
            "payment_method": "UPI",
        },
    )
    assert r.status_code == 201, r.text

    r = await owner_client.delete(f"/api/meals/{meal_id}")
    assert r.status_code == 200
    assert (await unauth_client.get(f"/api/meals/{meal_id}")).status_code == 404

    # A later meal may be given the same id; nothing may still point at it
    await owner_client.post("/api/meals/", json={**NEW_MEAL, "name": "Rava Dosa"})

    lines = (await db_session.execute(select(OrderItem.meal_id, OrderItem.meal_name))).all()
    assert [tuple(row) for row in lines] == [(None, "Thalipeeth")]
    favorites = (await db_session.execute(select(user_favorites.c.meal_id))).scalars().all()
    assert favorites == []
    popular = (await db_session.execute(select(store_popular_meals.c.meal_id))).scalars().all()
    assert popular == []


# ===================== STORES =====================


async def add_store(db_session, owner_id, **overrides):
    fields = dict(
        name="Udupi Corner",
        street="3 Market Yard",
        area=StoreArea.WALWA,
        phone="9000000001",
        hours={},
        owner_id=owner_id,
        rating=3.9,
        latitude=17.0600,
        longitude=74.2700,
    )
    fields.update(overrides)
    store = Store(**fields)
    db_session.add(store)
    await db_session.commit()
    return store


async def test_list_stores_active_only(unauth_client, seed_data, db_session):
    await add_store(db_session, seed_data["owner"].id, name="Closed Shop", is_active=False)
    r = await unauth_client.get("/api/stores/")
    names = [s["name"] for s in r.json()["data"]]
    assert names == ["Morning Glory Cafe"]
    assert r.json()["data"][0]["address"]["area"] == "Islampur"


async def test_filter_stores_by_area_and_rating(unauth_client, seed_data, db_session):
    await add_store(db_session, seed_data["owner"].id)

    r = await unauth_client.get("/api/stores/", params={"area": "Walwa"})
    assert [s["name"] for s in r.json()["data"]] == ["Udupi Corner"]

    r = await unauth_client.get("/api/stores/", params={"minRating": 4.5})
    assert [s["name"] for s in r.json()["data"]] == ["Morning Glory Cafe"]

    r = await unauth_client.get("/api/stores/area/Islampur")
    assert r.json()["total"] == 1


def test_open_now_window_bounds():
    assert catalog.is_open_now_window(datetime(2026, 5, 1, 6, 0))
    assert catalog.is_open_now_window(datetime(2026, 5, 1, 22, 59))
    assert not catalog.is_open_now_window(datetime(2026, 5, 1, 5, 59))
    assert not catalog.is_open_now_window(datetime(2026, 5, 1, 23, 0))


def test_open_now_outside_window_excludes_everything():
    assert catalog.store_query(open_now=True, now=datetime(2026, 5, 1, 2, 0)) is None
    assert catalog.store_query(open_now=True, now=datetime(2026, 5, 1, 9, 0)) is not None


async def test_store_search(unauth_client, seed_data):
    r = await unauth_client.get("/api/stores/search", params={"q": "misal"})
    assert r.json()["total"] == 1

    r = await unauth_client.get("/api/stores/search", params={"q": "islampur"})
    assert r.json()["total"] == 1

    r = await unauth_client.get("/api/stores/search")
    assert r.status_code == 400


async def test_nearby_stores_sorted_by_distance(unauth_client, seed_data, db_session):
    await add_store(db_session, seed_data["owner"].id)
    await add_store(db_session, seed_data["owner"].id, name="Far Away Dhaba", latitude=18.5204, longitude=73.8567)

    r = await unauth_client.get("/api/stores/nearby", params={"lat": 17.0500, "lng": 74.2600, "radius": 5})
    body = r.json()
    assert r.status_code == 200
    assert [s["name"] for s in body["data"]] == ["Morning Glory Cafe", "Udupi Corner"]
    assert body["count"] == 2
    assert body["data"][0]["distance_km"] == 0
    assert 0 < body["data"][1]["distance_km"] <= 5


async def test_nearby_requires_coordinates(unauth_client, seed_data):
    r = await unauth_client.get("/api/stores/nearby", params={"lat": 17.05})
    assert r.status_code == 400
    assert r.json()["message"] == "Latitude and longitude are required"


async def test_nearby_is_capped(db_session, seed_data):
    for i in range(25):
        await add_store(db_session, seed_data["owner"].id, name=f"Stall {i}", latitude=17.05 + i * 0.001)
    hits = await catalog.nearby_stores(db_session, 17.05, 74.26, 50)
    assert len(hits) == catalog.NEARBY_LIMIT
    distances = [d for _, d in hits]
    assert distances == sorted(distances)


async def test_get_store_reports_open_state(unauth_client, seed_data):
    r = await unauth_client.get(f"/api/stores/{seed_data['store'].id}")
    data = r.json()["data"]
    assert data["is_currently_open"] is True
    assert data["owner"]["name"] == "Sunil More"


def test_store_hours_closed_day():
    store = Store(hours={"friday": {"open": "07:00", "close": "11:00", "closed": True}})
    assert store.is_open_at(datetime(2026, 5, 1, 8, 0)) is False  # a Friday
    store.hours = {"friday": {"open": "07:00", "close": "11:00", "closed": False}}
    assert store.is_open_at(datetime(2026, 5, 1, 8, 0)) is True
    assert store.is_open_at(datetime(2026, 5, 1, 12, 0)) is False


NEW_STORE = {
    "name": "Sakhrale Snacks",
    "address": {"street": "Main Road", "area": "Sakhrale"},
    "location": {"latitude": 17.02, "longitude": 74.3},
    "phone": "9123400000",
    "hours": {"monday": {"open": "06:30", "close": "12:00"}},
    "features": ["WiFi"],
    "minimum_order": 100,
    "delivery_fee": 15,
}


async def test_owner_creates_store_with_popular_items(owner_client, seed_data):
    r = await owner_client.post(
        "/api/stores/", json={**NEW_STORE, "popular_items": [seed_data["poha"].id]}
    )
    assert r.status_code == 201
    data = r.json()["data"]
    assert data["owner_id"] == seed_data["owner"].id
    assert data["location"] == {"latitude": 17.02, "longitude": 74.3}
    assert [m["name"] for m in data["popular_items"]] == ["Kanda Poha"]


async def test_store_rejects_unknown_weekday(owner_client, seed_data):
    r = await owner_client.post("/api/stores/", json={**NEW_STORE, "hours": {"funday": {"open": "06:00"}}})
    assert r.status_code == 400


async def test_customer_cannot_create_store(client, seed_data):
    r = await client.post("/api/stores/", json=NEW_STORE)
    assert r.status_code == 403


async def test_store_update_ownership(owner_client, other_owner_client, seed_data):
    url = f"/api/stores/{seed_data['store'].id}"
    assert (await other_owner_client.put(url, json={"delivery_fee": 5})).status_code == 403

    r = await owner_client.put(url, json={"delivery_fee": 5, "address": {"street": "New St", "area": "Takari"}})
    assert r.status_code == 200
    assert r.json()["data"]["delivery_fee"] == 5
    assert r.json()["data"]["address"]["area"] == "Takari"


async def test_store_delete_is_soft(owner_client, unauth_client, seed_data, db_session):
    store_id = seed_data["store"].id
    r = await owner_client.delete(f"/api/stores/{store_id}")
    assert r.status_code == 200
    assert r.json()["message"] == "Store deactivated successfully"

    store = await db_session.get(Store, store_id)
    assert store.is_active is False
    assert (await unauth_client.get("/api/stores/")).json()["total"] == 0
