"""
Orders API endpoints
"""
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from breakfast4u.api.auth import get_current_actor, require_roles
from breakfast4u.database import get_db
from breakfast4u.models.order import OrderStatus
from breakfast4u.models.user import UserRole
from breakfast4u.schemas.common import envelope, paginated
from breakfast4u.schemas.order import (
    OrderCreate, OrderStatusUpdate, OrderReviewCreate, OrderDetailResponse
)
from breakfast4u.services import order_service
from breakfast4u.services.access import Actor
from breakfast4u.utils.pagination import Page, default_page

router = APIRouter()


def _detail(order) -> OrderDetailResponse:
    return OrderDetailResponse.model_validate(order)


@router.post("/", status_code=201)
async def create_order(
    data: OrderCreate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Place an order; prices are snapshotted from the current menu"""
    order = await order_service.create_order(db, actor, data)
    return envelope(_detail(order), message="Order placed successfully")


@router.get("/")
async def list_orders(
    status: Optional[OrderStatus] = None,
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    page: Page = Depends(default_page),
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(require_roles(UserRole.ADMIN)),
):
    """All orders (admin only), newest first"""
    orders, total = await order_service.list_orders(db, page, status, start_date, end_date)
    return paginated([_detail(o) for o in orders], total, page.page, page.limit)


@router.get("/my-orders")
async def list_my_orders(
    page: Page = Depends(default_page),
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    orders, total = await order_service.list_user_orders(db, actor, page)
    return paginated([_detail(o) for o in orders], total, page.page, page.limit)


@router.get("/store/{store_id}")
async def list_store_orders(
    store_id: int,
    status: Optional[OrderStatus] = None,
    page: Page = Depends(default_page),
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(require_roles(UserRole.OWNER, UserRole.ADMIN)),
):
    orders, total = await order_service.list_store_orders(db, actor, store_id, page, status)
    return paginated([_detail(o) for o in orders], total, page.page, page.limit)


@router.get("/{order_id}")
async def get_order(
    order_id: int,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    order = await order_service.get_order(db, actor, order_id)
    return envelope(_detail(order))


@router.put("/{order_id}/status")
async def update_order_status(
    order_id: int,
    data: OrderStatusUpdate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(require_roles(UserRole.OWNER, UserRole.ADMIN)),
):
    order = await order_service.update_order_status(db, actor, order_id, data.status)
    return envelope(_detail(order), message="Order status updated successfully")


@router.put("/{order_id}/cancel")
async def cancel_order(
    order_id: int,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    order = await order_service.cancel_order(db, actor, order_id)
    return envelope(_detail(order), message="Order cancelled successfully")


@router.post("/{order_id}/review")
async def add_order_review(
    order_id: int,
    data: OrderReviewCreate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    order = await order_service.add_review(db, actor, order_id, data.rating, data.review)
    return envelope(_detail(order), message="Review added successfully")
