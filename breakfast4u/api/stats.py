"""
Statistics API - public overview and admin dashboard aggregates
"""
from datetime import timedelta

from fastapi import APIRouter, Depends
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from breakfast4u.api.auth import require_roles
from breakfast4u.database import get_db
from breakfast4u.models.contact import Contact
from breakfast4u.models.meal import Meal
from breakfast4u.models.order import Order, OrderItem, OrderStatus
from breakfast4u.models.store import Store
from breakfast4u.models.user import User, UserRole
from breakfast4u.schemas.common import envelope
from breakfast4u.schemas.order import OrderDetailResponse
from breakfast4u.services.access import Actor
from breakfast4u.utils.db_compat import format_day
from breakfast4u.utils.helpers import round_money, utcnow

router = APIRouter()

DAILY_WINDOW_DAYS = 7


def _value(v):
    return v.value if hasattr(v, "value") else v


async def _count(db: AsyncSession, query) -> int:
    result = await db.execute(query)
    return result.scalar() or 0


@router.get("/")
async def get_public_stats(db: AsyncSession = Depends(get_db)):
    """Headline numbers for the landing page"""
    total_users = await _count(db, select(func.count(User.id)).where(User.is_active == True))
    total_meals = await _count(db, select(func.count(Meal.id)).where(Meal.is_available == True))
    total_stores = await _count(db, select(func.count(Store.id)).where(Store.is_active == True))
    total_orders = await _count(db, select(func.count(Order.id)))
    delivered_orders = await _count(
        db, select(func.count(Order.id)).where(Order.status == OrderStatus.DELIVERED)
    )

    avg_rating = (await db.execute(
        select(func.avg(Meal.rating)).where(Meal.is_available == True)
    )).scalar()

    categories = await db.execute(
        select(Meal.category, func.count(Meal.id).label("count"))
        .where(Meal.is_available == True)
        .group_by(Meal.category)
        .order_by(func.count(Meal.id).desc())
        .limit(5)
    )

    areas = await db.execute(
        select(Store.area).where(Store.is_active == True).distinct().order_by(Store.area)
    )

    return envelope({
        "overview": {
            "total_users": total_users,
            "total_meals": total_meals,
            "total_stores": total_stores,
            "total_orders": total_orders,
            "delivered_orders": delivered_orders,
            "average_rating": round(avg_rating, 1) if avg_rating is not None else 0,
        },
        "popular_categories": [
            {"category": _value(c), "count": n} for c, n in categories.all()
        ],
        "service_areas": [_value(a) for a in areas.scalars().all()],
    })


@router.get("/dashboard")
async def get_dashboard_stats(
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(require_roles(UserRole.ADMIN)),
):
    """Admin dashboard: totals, this month, trends and leaderboards"""
    now = utcnow()
    month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    window_start = (now - timedelta(days=DAILY_WINDOW_DAYS - 1)).replace(
        hour=0, minute=0, second=0, microsecond=0
    )

    totals = {
        "users": await _count(db, select(func.count(User.id))),
        "meals": await _count(db, select(func.count(Meal.id))),
        "stores": await _count(db, select(func.count(Store.id))),
        "orders": await _count(db, select(func.count(Order.id))),
        "contacts": await _count(db, select(func.count(Contact.id))),
    }

    new_users = await _count(
        db, select(func.count(User.id)).where(User.created_at >= month_start)
    )
    month_orders = await _count(
        db, select(func.count(Order.id)).where(Order.created_at >= month_start)
    )
    month_revenue = (await db.execute(
        select(func.coalesce(func.sum(Order.final_amount), 0)).where(
            Order.created_at >= month_start,
            Order.status == OrderStatus.DELIVERED,
        )
    )).scalar() or 0

    # Order status distribution
    status_rows = await db.execute(
        select(Order.status, func.count(Order.id)).group_by(Order.status)
    )

    # Daily orders for the trailing window
    day = format_day(Order.created_at)
    daily_rows = await db.execute(
        select(day.label("day"), func.count(Order.id), func.coalesce(func.sum(Order.final_amount), 0))
        .where(Order.created_at >= window_start)
        .group_by(day)
        .order_by(day)
    )

    # Top stores by delivered revenue
    revenue = func.sum(Order.final_amount)
    top_store_rows = await db.execute(
        select(Store.id, Store.name, func.count(Order.id), revenue.label("revenue"))
        .join(Order, Order.store_id == Store.id)
        .where(Order.status == OrderStatus.DELIVERED)
        .group_by(Store.id, Store.name)
        .order_by(revenue.desc())
        .limit(5)
    )

    # Top meals by quantity ordered
    quantity = func.sum(OrderItem.quantity)
    top_meal_rows = await db.execute(
        select(OrderItem.meal_id, OrderItem.meal_name, quantity.label("quantity"),
               func.sum(OrderItem.quantity * OrderItem.price))
        .group_by(OrderItem.meal_id, OrderItem.meal_name)
        .order_by(quantity.desc())
        .limit(10)
    )

    contact_rows = await db.execute(
        select(Contact.status, func.count(Contact.id)).group_by(Contact.status)
    )
    role_rows = await db.execute(
        select(User.role, func.count(User.id)).group_by(User.role)
    )

    recent = await db.execute(
        select(Order)
        .options(selectinload(Order.items), selectinload(Order.user), selectinload(Order.store))
        .order_by(Order.created_at.desc(), Order.id.desc())
        .limit(10)
    )

    return envelope({
        "totals": totals,
        "this_month": {
            "new_users": new_users,
            "orders": month_orders,
            "revenue": round_money(month_revenue),
        },
        "order_status_distribution": [
            {"status": _value(s), "count": n} for s, n in status_rows.all()
        ],
        "daily_orders": [
            {"date": d, "orders": n, "revenue": round_money(r)} for d, n, r in daily_rows.all()
        ],
        "top_stores": [
            {"store_id": sid, "name": name, "orders": n, "revenue": round_money(r)}
            for sid, name, n, r in top_store_rows.all()
        ],
        "top_meals": [
            {"meal_id": mid, "name": name, "quantity": q, "revenue": round_money(r)}
            for mid, name, q, r in top_meal_rows.all()
        ],
        "contact_status_distribution": [
            {"status": _value(s), "count": n} for s, n in contact_rows.all()
        ],
        "user_role_distribution": [
            {"role": _value(r), "count": n} for r, n in role_rows.all()
        ],
        "recent_orders": [
            OrderDetailResponse.model_validate(o) for o in recent.scalars().all()
        ],
        "generated_at": now.isoformat(),
    })
