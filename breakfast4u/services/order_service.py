"""
Order lifecycle: pricing and validation at creation, order-number allocation,
status transitions, cancellation and the single post-delivery review.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import Select, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from breakfast4u.config import get_settings
from breakfast4u.models.meal import Meal
from breakfast4u.models.order import Order, OrderItem, OrderStatus, OrderType
from breakfast4u.models.store import Store
from breakfast4u.schemas.order import OrderCreate
from breakfast4u.services import email_templates
from breakfast4u.services.access import Actor, can_act_on, ensure_can_act_on
from breakfast4u.services.email_service import notify
from breakfast4u.utils.errors import ForbiddenError, InvalidStateError, NotFoundError, UnexpectedError
from breakfast4u.utils.helpers import round_money, utcnow
from breakfast4u.utils.logger import get_logger
from breakfast4u.utils.pagination import Page, paginate

settings = get_settings()
logger = get_logger(__name__)

TAX_RATE = 0.05
ESTIMATED_READY_MINUTES = 30
CANCELLABLE_STATUSES = {OrderStatus.PENDING, OrderStatus.CONFIRMED}


@dataclass(frozen=True)
class PricedLine:
    meal_id: int
    meal_name: str
    quantity: int
    price: float  # unit price snapshot

    @property
    def amount(self) -> float:
        return self.price * self.quantity


@dataclass(frozen=True)
class OrderTotals:
    total_amount: float
    delivery_fee: float
    tax: float
    final_amount: float


def compute_totals(lines: Iterable[PricedLine], order_type: OrderType, store_delivery_fee: float) -> OrderTotals:
    """Item total, delivery fee (Delivery only), 5% tax on the item total, and their sum"""
    total = round_money(sum(line.amount for line in lines))
    delivery_fee = round_money(store_delivery_fee or 0) if order_type == OrderType.DELIVERY else 0.0
    tax = round_money(total * TAX_RATE)
    return OrderTotals(
        total_amount=total,
        delivery_fee=delivery_fee,
        tax=tax,
        final_amount=round_money(total + delivery_fee + tax),
    )


def format_order_number(prefix: str, at: datetime, sequence: int) -> str:
    """PREFIX + epoch milliseconds + zero-padded sequence, e.g. B4U17290000000000042"""
    millis = int(at.replace(tzinfo=timezone.utc).timestamp() * 1000)
    return f"{prefix}{millis}{sequence:04d}"


def _is_order_number_conflict(error: IntegrityError) -> bool:
    return "order_number" in str(error.orig)


def _order_detail_query() -> Select:
    return select(Order).options(
        selectinload(Order.items),
        selectinload(Order.user),
        selectinload(Order.store),
    )


async def _count_orders(db: AsyncSession) -> int:
    return (await db.execute(select(func.count(Order.id)))).scalar() or 0


async def _load_order(db: AsyncSession, order_id: int) -> Order:
    result = await db.execute(_order_detail_query().where(Order.id == order_id))
    order = result.scalar_one_or_none()
    if not order:
        raise NotFoundError("Order not found")
    return order


async def _price_lines(db: AsyncSession, payload: OrderCreate) -> List[PricedLine]:
    meal_ids = {item.meal_id for item in payload.items}
    result = await db.execute(select(Meal).where(Meal.id.in_(meal_ids)))
    meals = {meal.id: meal for meal in result.scalars().all()}

    lines = []
    for item in payload.items:
        meal = meals.get(item.meal_id)
        if meal is None:
            raise NotFoundError(f"Meal with ID {item.meal_id} not found")
        if not meal.is_available:
            raise InvalidStateError(f"{meal.name} is currently not available")
        lines.append(PricedLine(meal_id=meal.id, meal_name=meal.name, quantity=item.quantity, price=meal.price))
    return lines


async def _insert_with_unique_number(
    db: AsyncSession,
    build_order,
    now: Optional[datetime] = None,
) -> int:
    """
    Insert the order under a freshly allocated number.

    The count-then-format step can race with another request; the unique
    index on order_number catches that, and we retry with a re-derived
    count plus the attempt offset.
    """
    max_attempts = max(settings.ORDER_NUMBER_MAX_ATTEMPTS, 1)
    for attempt in range(max_attempts):
        sequence = await _count_orders(db) + 1 + attempt
        number = format_order_number(settings.ORDER_NUMBER_PREFIX, now or utcnow(), sequence)

        order = build_order(number)
        db.add(order)
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            if not _is_order_number_conflict(e):
                raise
            logger.warning(f"Order number {number} already taken (attempt {attempt + 1}/{max_attempts})")
            continue
        return order.id

    raise UnexpectedError("Could not allocate a unique order number, please retry")


async def create_order(
    db: AsyncSession,
    actor: Actor,
    payload: OrderCreate,
    now: Optional[datetime] = None,
) -> Order:
    store = await db.get(Store, payload.store_id)
    if store is None or not store.is_active:
        raise NotFoundError("Store not found")

    lines = await _price_lines(db, payload)
    totals = compute_totals(lines, payload.order_type, store.delivery_fee)

    if totals.total_amount < store.minimum_order:
        raise InvalidStateError(f"Minimum order amount is ₹{store.minimum_order:g}")

    created_at = now or utcnow()
    address = payload.delivery_address if payload.order_type == OrderType.DELIVERY else None

    def build_order(order_number: str) -> Order:
        order = Order(
            order_number=order_number,
            user_id=actor.id,
            store_id=payload.store_id,
            total_amount=totals.total_amount,
            delivery_fee=totals.delivery_fee,
            tax=totals.tax,
            final_amount=totals.final_amount,
            status=OrderStatus.PENDING,
            order_type=payload.order_type,
            customer_notes=payload.customer_notes,
            payment_method=payload.payment_method,
            estimated_delivery_time=created_at + timedelta(minutes=ESTIMATED_READY_MINUTES),
            created_at=created_at,
        )
        if address is not None:
            order.delivery_street = address.street
            order.delivery_area = address.area
            order.delivery_city = address.city
            order.delivery_pincode = address.pincode
            order.delivery_landmark = address.landmark
        order.items = [
            OrderItem(meal_id=line.meal_id, meal_name=line.meal_name, quantity=line.quantity, price=line.price)
            for line in lines
        ]
        return order

    order_id = await _insert_with_unique_number(db, build_order, now)
    order = await _load_order(db, order_id)
    logger.info(f"Order {order.order_number} created by user {actor.id} at store {order.store_id}")

    await notify(
        actor.email,
        email_templates.order_confirmation(
            order.order_number,
            [email_templates.OrderLine(line.meal_name, line.quantity, line.amount) for line in lines],
            order.final_amount,
        ),
    )
    return order


async def get_order(db: AsyncSession, actor: Actor, order_id: int) -> Order:
    """Visible to the purchaser, the store's owner and admins"""
    order = await _load_order(db, order_id)
    if order.user_id != actor.id and not can_act_on(actor, order.store.owner_id):
        raise ForbiddenError("Not authorized to view this order")
    return order


async def update_order_status(db: AsyncSession, actor: Actor, order_id: int, status: OrderStatus) -> Order:
    """
    Move an order to any listed status. Transitions are deliberately
    unrestricted for the store owner and admins; Delivered (re)stamps the
    actual delivery time.
    """
    order = await _load_order(db, order_id)
    ensure_can_act_on(actor, order.store.owner_id, "Not authorized to update this order")

    previous = order.status
    order.status = status
    if status == OrderStatus.DELIVERED:
        order.actual_delivery_time = utcnow()

    await db.commit()
    logger.info(f"Order {order.order_number}: {previous.value} -> {status.value} by user {actor.id}")
    return await _load_order(db, order_id)


async def cancel_order(db: AsyncSession, actor: Actor, order_id: int) -> Order:
    order = await _load_order(db, order_id)
    if order.user_id != actor.id:
        raise ForbiddenError("Not authorized to cancel this order")
    if order.status not in CANCELLABLE_STATUSES:
        raise InvalidStateError("Order cannot be cancelled at this stage")

    order.status = OrderStatus.CANCELLED
    await db.commit()
    logger.info(f"Order {order.order_number} cancelled by user {actor.id}")
    return await _load_order(db, order_id)


async def add_review(
    db: AsyncSession,
    actor: Actor,
    order_id: int,
    rating: int,
    review: Optional[str] = None,
) -> Order:
    if not 1 <= rating <= 5:
        raise InvalidStateError("Rating must be between 1 and 5")

    order = await _load_order(db, order_id)
    if order.user_id != actor.id:
        raise ForbiddenError("Not authorized to review this order")
    if order.status != OrderStatus.DELIVERED:
        raise InvalidStateError("Can only review delivered orders")
    if order.rating is not None:
        raise InvalidStateError("Order already reviewed")

    order.rating = rating
    order.review = review
    await db.commit()
    return await _load_order(db, order_id)


# --- Listings ---

async def list_orders(
    db: AsyncSession,
    page: Page,
    status: Optional[OrderStatus] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
) -> Tuple[List[Order], int]:
    query = _order_detail_query()
    if status:
        query = query.where(Order.status == status)
    if start_date:
        query = query.where(Order.created_at >= start_date)
    if end_date:
        query = query.where(Order.created_at <= end_date)
    return await paginate(db, query.order_by(Order.created_at.desc(), Order.id.desc()), page)


async def list_user_orders(db: AsyncSession, actor: Actor, page: Page) -> Tuple[List[Order], int]:
    query = (
        _order_detail_query()
        .where(Order.user_id == actor.id)
        .order_by(Order.created_at.desc(), Order.id.desc())
    )
    return await paginate(db, query, page)


async def list_store_orders(
    db: AsyncSession,
    actor: Actor,
    store_id: int,
    page: Page,
    status: Optional[OrderStatus] = None,
) -> Tuple[List[Order], int]:
    store = await db.get(Store, store_id)
    if store is None:
        raise NotFoundError("Store not found")
    ensure_can_act_on(actor, store.owner_id, "Not authorized to view orders for this store")

    query = _order_detail_query().where(Order.store_id == store_id)
    if status:
        query = query.where(Order.status == status)
    return await paginate(db, query.order_by(Order.created_at.desc(), Order.id.desc()), page)
