"""
Store directory API endpoints
"""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from breakfast4u.api.auth import require_roles
from breakfast4u.database import get_db
from breakfast4u.models.meal import Meal
from breakfast4u.models.store import Store, StoreArea
from breakfast4u.models.user import UserRole
from breakfast4u.schemas.common import envelope, paginated
from breakfast4u.schemas.store import StoreCreate, StoreUpdate, StoreDetailResponse
from breakfast4u.services import catalog
from breakfast4u.services.access import Actor, ensure_can_act_on
from breakfast4u.utils.errors import InvalidInputError, NotFoundError
from breakfast4u.utils.logger import get_logger
from breakfast4u.utils.pagination import Page, default_page, paginate

logger = get_logger(__name__)

router = APIRouter()


def _page_of(stores, total: int, page: Page) -> dict:
    return paginated([StoreDetailResponse.model_validate(s) for s in stores], total, page.page, page.limit)


async def _get_store_or_404(db: AsyncSession, store_id: int) -> Store:
    result = await db.execute(
        select(Store)
        .options(selectinload(Store.owner), selectinload(Store.popular_items))
        .where(Store.id == store_id)
    )
    store = result.scalar_one_or_none()
    if not store:
        raise NotFoundError("Store not found")
    return store


async def _resolve_meals(db: AsyncSession, meal_ids: List[int]) -> List[Meal]:
    if not meal_ids:
        return []
    result = await db.execute(select(Meal).where(Meal.id.in_(set(meal_ids))))
    meals = result.scalars().all()
    missing = set(meal_ids) - {m.id for m in meals}
    if missing:
        raise NotFoundError(f"Meal(s) not found: {', '.join(str(i) for i in sorted(missing))}")
    return list(meals)


def _apply_address(store: Store, address) -> None:
    store.street = address.street
    store.area = address.area
    store.city = address.city
    store.state = address.state
    store.pincode = address.pincode


def _apply_location(store: Store, location) -> None:
    store.latitude = location.latitude if location else None
    store.longitude = location.longitude if location else None


@router.get("/")
async def list_stores(
    area: Optional[str] = None,
    open_now: bool = Query(False, alias="openNow"),
    min_rating: Optional[float] = Query(None, alias="minRating", ge=0, le=5),
    page: Page = Depends(default_page),
    db: AsyncSession = Depends(get_db),
):
    """Active stores, best rated first"""
    query = catalog.store_query(area=area, min_rating=min_rating, open_now=open_now, now=datetime.now())
    if query is None:
        return paginated([], 0, page.page, page.limit)

    stores, total = await paginate(db, query, page)
    return _page_of(stores, total, page)


@router.get("/search")
async def search_stores(
    q: Optional[str] = None,
    page: Page = Depends(default_page),
    db: AsyncSession = Depends(get_db),
):
    if not q or not q.strip():
        raise InvalidInputError("Search query is required")
    stores, total = await paginate(db, catalog.store_search_query(q.strip()), page)
    return _page_of(stores, total, page)


@router.get("/area/{area}")
async def list_stores_by_area(
    area: StoreArea,
    page: Page = Depends(default_page),
    db: AsyncSession = Depends(get_db),
):
    stores, total = await paginate(db, catalog.store_query(area=area.value), page)
    return _page_of(stores, total, page)


@router.get("/nearby")
async def list_nearby_stores(
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lng: Optional[float] = Query(None, ge=-180, le=180),
    radius: float = Query(10, gt=0, le=100, description="Kilometres"),
    db: AsyncSession = Depends(get_db),
):
    """Active stores within radius, nearest first"""
    if lat is None or lng is None:
        raise InvalidInputError("Latitude and longitude are required")

    hits = await catalog.nearby_stores(db, lat, lng, radius)
    data = [
        StoreDetailResponse.model_validate(store).model_copy(update={"distance_km": round(distance, 2)})
        for store, distance in hits
    ]
    return {"success": True, "count": len(data), "data": data}


@router.post("/", status_code=201)
async def create_store(
    data: StoreCreate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(require_roles(UserRole.OWNER, UserRole.ADMIN)),
):
    fields = data.model_dump(mode="json", exclude={"address", "location", "popular_items"})
    store = Store(**fields, owner_id=actor.id)
    _apply_address(store, data.address)
    _apply_location(store, data.location)
    store.popular_items = await _resolve_meals(db, data.popular_items)

    db.add(store)
    await db.commit()
    logger.info(f"Store {store.id} '{store.name}' created by user {actor.id}")

    store = await _get_store_or_404(db, store.id)
    return envelope(StoreDetailResponse.model_validate(store), message="Store created successfully")


@router.get("/{store_id}")
async def get_store(
    store_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Single store with its live open/closed state from its own hours"""
    store = await _get_store_or_404(db, store_id)
    data = StoreDetailResponse.model_validate(store).model_copy(
        update={"is_currently_open": store.is_open_at(datetime.now())}
    )
    return envelope(data)


@router.put("/{store_id}")
async def update_store(
    store_id: int,
    data: StoreUpdate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(require_roles(UserRole.OWNER, UserRole.ADMIN)),
):
    store = await _get_store_or_404(db, store_id)
    ensure_can_act_on(actor, store.owner_id, "Not authorized to update this store")

    updates = data.model_dump(
        mode="json",
        exclude_unset=True,
        exclude_none=True,
        exclude={"address", "location", "popular_items"},
    )
    for key, value in updates.items():
        setattr(store, key, value)
    if data.address is not None:
        _apply_address(store, data.address)
    if data.location is not None:
        _apply_location(store, data.location)
    if data.popular_items is not None:
        store.popular_items = await _resolve_meals(db, data.popular_items)

    await db.commit()
    store = await _get_store_or_404(db, store_id)
    return envelope(StoreDetailResponse.model_validate(store), message="Store updated successfully")


@router.delete("/{store_id}")
async def delete_store(
    store_id: int,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(require_roles(UserRole.OWNER, UserRole.ADMIN)),
):
    """Soft delete: the store is deactivated, never removed"""
    store = await _get_store_or_404(db, store_id)
    ensure_can_act_on(actor, store.owner_id, "Not authorized to delete this store")

    store.is_active = False
    await db.commit()
    logger.info(f"Store {store_id} deactivated by user {actor.id}")
    return envelope(message="Store deactivated successfully")
