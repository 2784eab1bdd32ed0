"""
Meal catalog API endpoints
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from breakfast4u.api.auth import get_optional_actor, require_roles
from breakfast4u.database import get_db
from breakfast4u.models.meal import Meal, MealCategory, TimeOfDay
from breakfast4u.models.user import UserRole, user_favorites
from breakfast4u.schemas.common import envelope, paginated
from breakfast4u.schemas.meal import MealCreate, MealUpdate, MealResponse
from breakfast4u.services import catalog
from breakfast4u.services.access import Actor, ensure_can_act_on
from breakfast4u.utils.errors import InvalidInputError, NotFoundError
from breakfast4u.utils.logger import get_logger
from breakfast4u.utils.pagination import Page, meal_page, paginate

logger = get_logger(__name__)

router = APIRouter()


def _page_of(meals, total: int, page: Page) -> dict:
    return paginated([MealResponse.model_validate(m) for m in meals], total, page.page, page.limit)


async def _get_meal_or_404(db: AsyncSession, meal_id: int) -> Meal:
    meal = await db.get(Meal, meal_id)
    if not meal:
        raise NotFoundError("Meal not found")
    return meal


@router.get("/")
async def list_meals(
    category: Optional[str] = None,
    time_of_day: Optional[str] = Query(None, alias="timeOfDay"),
    tags: Optional[str] = Query(None, description="Comma-separated, matches any"),
    min_price: Optional[float] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[float] = Query(None, alias="maxPrice", ge=0),
    search: Optional[str] = None,
    sort_by: catalog.MealSort = Query(catalog.MealSort.HIGHEST_RATED, alias="sortBy"),
    page: Page = Depends(meal_page),
    db: AsyncSession = Depends(get_db),
):
    """Available meals with filtering, sorting and pagination"""
    tag_list = [t.strip() for t in tags.split(",") if t.strip()] if tags else None
    query = catalog.meal_query(
        category=category,
        time_of_day=time_of_day,
        tags=tag_list,
        min_price=min_price,
        max_price=max_price,
        search=search,
        sort=sort_by,
    )
    meals, total = await paginate(db, query, page)
    return _page_of(meals, total, page)


@router.get("/search")
async def search_meals(
    q: Optional[str] = None,
    page: Page = Depends(meal_page),
    db: AsyncSession = Depends(get_db),
):
    if not q or not q.strip():
        raise InvalidInputError("Search query is required")
    meals, total = await paginate(db, catalog.meal_search_query(q.strip()), page)
    return _page_of(meals, total, page)


@router.get("/category/{category}")
async def list_meals_by_category(
    category: MealCategory,
    page: Page = Depends(meal_page),
    db: AsyncSession = Depends(get_db),
):
    query = catalog.meal_query(category=category.value)
    meals, total = await paginate(db, query, page)
    return _page_of(meals, total, page)


@router.get("/time/{time_of_day}")
async def list_meals_by_time(
    time_of_day: TimeOfDay,
    page: Page = Depends(meal_page),
    db: AsyncSession = Depends(get_db),
):
    query = catalog.meal_query(time_of_day=time_of_day.value)
    meals, total = await paginate(db, query, page)
    return _page_of(meals, total, page)


@router.post("/", status_code=201)
async def create_meal(
    data: MealCreate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(require_roles(UserRole.ADMIN, UserRole.OWNER)),
):
    meal = Meal(**data.model_dump(mode="json"), created_by_id=actor.id)
    db.add(meal)
    await db.commit()
    await db.refresh(meal)
    logger.info(f"Meal {meal.id} '{meal.name}' created by user {actor.id}")
    return envelope(MealResponse.model_validate(meal), message="Meal created successfully")


@router.get("/{meal_id}")
async def get_meal(
    meal_id: int,
    db: AsyncSession = Depends(get_db),
    actor: Optional[Actor] = Depends(get_optional_actor),
):
    """Single meal; is_favorited reflects the caller's favorites when signed in"""
    meal = await _get_meal_or_404(db, meal_id)

    is_favorited = False
    if actor:
        result = await db.execute(
            select(user_favorites.c.meal_id).where(
                user_favorites.c.user_id == actor.id,
                user_favorites.c.meal_id == meal.id,
            )
        )
        is_favorited = result.first() is not None

    data = MealResponse.model_validate(meal).model_dump()
    data["is_favorited"] = is_favorited
    return envelope(data)


@router.put("/{meal_id}")
async def update_meal(
    meal_id: int,
    data: MealUpdate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(require_roles(UserRole.ADMIN, UserRole.OWNER)),
):
    meal = await _get_meal_or_404(db, meal_id)
    ensure_can_act_on(actor, meal.created_by_id, "Not authorized to update this meal")

    for key, value in data.model_dump(mode="json", exclude_unset=True, exclude_none=True).items():
        setattr(meal, key, value)

    await db.commit()
    await db.refresh(meal)
    return envelope(MealResponse.model_validate(meal), message="Meal updated successfully")


@router.delete("/{meal_id}")
async def delete_meal(
    meal_id: int,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(require_roles(UserRole.ADMIN, UserRole.OWNER)),
):
    """Hard delete; past orders keep their own name and price snapshot"""
    meal = await _get_meal_or_404(db, meal_id)
    ensure_can_act_on(actor, meal.created_by_id, "Not authorized to delete this meal")

    await db.delete(meal)
    await db.commit()
    logger.info(f"Meal {meal_id} deleted by user {actor.id}")
    return envelope(message="Meal deleted successfully")
