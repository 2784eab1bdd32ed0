"""
User management (admin) and favorites API endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from breakfast4u.api.auth import get_current_actor, require_roles
from breakfast4u.database import get_db
from breakfast4u.models.meal import Meal
from breakfast4u.models.user import User, UserRole
from breakfast4u.schemas.common import envelope, paginated
from breakfast4u.schemas.meal import MealResponse
from breakfast4u.schemas.user import AdminUserUpdate, UserResponse
from breakfast4u.services.access import Actor
from breakfast4u.utils.errors import InvalidStateError, NotFoundError
from breakfast4u.utils.logger import get_logger
from breakfast4u.utils.pagination import Page, default_page, paginate

logger = get_logger(__name__)

router = APIRouter()

admin_only = require_roles(UserRole.ADMIN)


async def _load_user(db: AsyncSession, user_id: int, with_favorites: bool = False) -> User:
    query = select(User).where(User.id == user_id)
    if with_favorites:
        query = query.options(selectinload(User.favorite_meals))
    user = (await db.execute(query)).scalar_one_or_none()
    if not user:
        raise NotFoundError("User not found")
    return user


def _favorites_payload(user: User) -> list:
    return [MealResponse.model_validate(m) for m in user.favorite_meals]


# --- Favorites (registered before /{user_id} so the literal path wins) ---

@router.get("/favorites")
async def get_favorites(
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    user = await _load_user(db, actor.id, with_favorites=True)
    favorites = _favorites_payload(user)
    return {"success": True, "count": len(favorites), "data": favorites}


@router.post("/favorites/{meal_id}")
async def add_favorite(
    meal_id: int,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    meal = await db.get(Meal, meal_id)
    if not meal:
        raise NotFoundError("Meal not found")

    user = await _load_user(db, actor.id, with_favorites=True)
    if any(m.id == meal_id for m in user.favorite_meals):
        raise InvalidStateError("Meal already in favorites")

    user.favorite_meals.append(meal)
    await db.commit()
    return envelope(_favorites_payload(user), message="Meal added to favorites")


@router.delete("/favorites/{meal_id}")
async def remove_favorite(
    meal_id: int,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    user = await _load_user(db, actor.id, with_favorites=True)
    remaining = [m for m in user.favorite_meals if m.id != meal_id]
    if len(remaining) == len(user.favorite_meals):
        raise InvalidStateError("Meal not in favorites")

    user.favorite_meals = remaining
    await db.commit()
    return envelope(_favorites_payload(user), message="Meal removed from favorites")


# --- Admin ---

@router.get("/")
async def list_users(
    page: Page = Depends(default_page),
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(admin_only),
):
    query = select(User).order_by(User.created_at.desc(), User.id.desc())
    users, total = await paginate(db, query, page)
    return paginated([UserResponse.model_validate(u) for u in users], total, page.page, page.limit)


@router.get("/{user_id}")
async def get_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(admin_only),
):
    user = await _load_user(db, user_id, with_favorites=True)
    data = UserResponse.model_validate(user).model_dump()
    data["favorite_meals"] = _favorites_payload(user)
    return envelope(data)


@router.put("/{user_id}")
async def update_user(
    user_id: int,
    data: AdminUserUpdate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(admin_only),
):
    user = await _load_user(db, user_id)
    for key, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(user, key, value)

    await db.commit()
    await db.refresh(user)
    return envelope(UserResponse.model_validate(user), message="User updated successfully")


@router.delete("/{user_id}")
async def deactivate_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(admin_only),
):
    """Soft delete"""
    user = await _load_user(db, user_id)
    user.is_active = False
    await db.commit()
    logger.info(f"User {user_id} deactivated by admin {actor.id}")
    return envelope(message="User deactivated successfully")
