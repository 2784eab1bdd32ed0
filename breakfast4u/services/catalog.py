"""
Query construction for the meal catalog and the store directory.

Every builder returns a SQLAlchemy Select; callers paginate it with
utils.pagination.paginate. Sorts end on the primary key so pages never
overlap or skip rows.
"""
from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple

from sqlalchemy import Select, String, cast, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from breakfast4u.config import get_settings
from breakfast4u.models.meal import Meal, MealCategory, TimeOfDay
from breakfast4u.models.store import Store, StoreArea
from breakfast4u.utils.db_compat import icontains, json_array_contains, json_array_icontains
from breakfast4u.utils.errors import InvalidInputError
from breakfast4u.utils.helpers import bounding_box, haversine_km

settings = get_settings()

ALL_CATEGORIES = "All Categories"
ANY_TIME = "Any Time"
ALL_AREAS = "All Areas"
NEARBY_LIMIT = 20


class MealSort(str, Enum):
    HIGHEST_RATED = "Highest Rated"
    PRICE_LOW_TO_HIGH = "Price: Low to High"
    PRICE_HIGH_TO_LOW = "Price: High to Low"
    MOST_POPULAR = "Most Popular"


MEAL_SORTS = {
    MealSort.HIGHEST_RATED: (Meal.rating.desc(), Meal.review_count.desc()),
    MealSort.PRICE_LOW_TO_HIGH: (Meal.price.asc(),),
    MealSort.PRICE_HIGH_TO_LOW: (Meal.price.desc(),),
    MealSort.MOST_POPULAR: (Meal.review_count.desc(),),
}


def _parse(enum_cls, raw: str, label: str):
    try:
        return enum_cls(raw)
    except ValueError:
        raise InvalidInputError(f"Invalid {label}: {raw}")


# --- Meals ---

def meal_query(
    category: Optional[str] = None,
    time_of_day: Optional[str] = None,
    tags: Optional[List[str]] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    search: Optional[str] = None,
    sort: MealSort = MealSort.HIGHEST_RATED,
) -> Select:
    query = select(Meal).where(Meal.is_available == True)

    if category and category != ALL_CATEGORIES:
        query = query.where(Meal.category == _parse(MealCategory, category, "category"))
    if time_of_day and time_of_day != ANY_TIME:
        query = query.where(json_array_contains(Meal.time_of_day, _parse(TimeOfDay, time_of_day, "time of day").value))
    if tags:
        query = query.where(or_(*[json_array_contains(Meal.tags, t) for t in tags]))
    if min_price is not None:
        query = query.where(Meal.price >= min_price)
    if max_price is not None:
        query = query.where(Meal.price <= max_price)
    if search:
        query = query.where(or_(icontains(Meal.name, search), icontains(Meal.description, search)))

    return query.order_by(*MEAL_SORTS[sort], Meal.id.asc())


def meal_search_query(q: str) -> Select:
    """Free-text search over name, description and tags"""
    return (
        select(Meal)
        .where(
            Meal.is_available == True,
            or_(
                icontains(Meal.name, q),
                icontains(Meal.description, q),
                json_array_icontains(Meal.tags, q),
            ),
        )
        .order_by(Meal.rating.desc(), Meal.id.asc())
    )


# --- Stores ---

def _store_base() -> Select:
    return (
        select(Store)
        .options(selectinload(Store.owner), selectinload(Store.popular_items))
        .where(Store.is_active == True)
    )


def is_open_now_window(now: datetime) -> bool:
    """Directory-wide approximation: every store is open inside a fixed local-hour window"""
    return settings.OPEN_NOW_START_HOUR <= now.hour <= settings.OPEN_NOW_END_HOUR


def store_query(
    area: Optional[str] = None,
    min_rating: Optional[float] = None,
    open_now: bool = False,
    now: Optional[datetime] = None,
) -> Optional[Select]:
    """Directory listing. None means the filter excludes everything (openNow after hours)."""
    if open_now and not is_open_now_window(now or datetime.now()):
        return None

    query = _store_base()
    if area and area != ALL_AREAS:
        query = query.where(Store.area == _parse(StoreArea, area, "area"))
    if min_rating is not None:
        query = query.where(Store.rating >= min_rating)

    return query.order_by(Store.rating.desc(), Store.review_count.desc(), Store.id.asc())


def store_search_query(q: str) -> Select:
    return (
        _store_base()
        .where(
            or_(
                icontains(Store.name, q),
                icontains(Store.description, q),
                json_array_icontains(Store.specialties, q),
                icontains(cast(Store.area, String), q),
            )
        )
        .order_by(Store.rating.desc(), Store.id.asc())
    )


async def nearby_stores(
    db: AsyncSession,
    lat: float,
    lng: float,
    radius_km: float,
    limit: int = NEARBY_LIMIT,
) -> List[Tuple[Store, float]]:
    """Active stores within radius_km, nearest first, as (store, distance_km)"""
    min_lat, max_lat, min_lng, max_lng = bounding_box(lat, lng, radius_km)
    query = _store_base().where(
        Store.latitude.isnot(None),
        Store.longitude.isnot(None),
        Store.latitude.between(min_lat, max_lat),
        Store.longitude.between(min_lng, max_lng),
    )
    result = await db.execute(query)

    hits = []
    for store in result.scalars().unique().all():
        distance = haversine_km(lat, lng, store.latitude, store.longitude)
        if distance <= radius_km:
            hits.append((store, distance))

    hits.sort(key=lambda hit: (hit[1], hit[0].id))
    return hits[:limit]
