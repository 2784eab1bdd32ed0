"""
Order and order line item models
"""
from enum import Enum

from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship

from breakfast4u.database import Base
from breakfast4u.utils.db_compat import enum_type
from breakfast4u.utils.helpers import utcnow


class OrderStatus(str, Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    PREPARING = "Preparing"
    READY = "Ready"
    OUT_FOR_DELIVERY = "Out for Delivery"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class OrderType(str, Enum):
    PICKUP = "Pickup"
    DELIVERY = "Delivery"


class PaymentMethod(str, Enum):
    CASH_ON_DELIVERY = "Cash on Delivery"
    ONLINE_PAYMENT = "Online Payment"
    UPI = "UPI"


class PaymentStatus(str, Enum):
    PENDING = "Pending"
    PAID = "Paid"
    FAILED = "Failed"
    REFUNDED = "Refunded"


class Order(Base):
    __tablename__ = "orders"
    __table_args__ = (
        CheckConstraint("rating IS NULL OR (rating >= 1 AND rating <= 5)", name="ck_orders_rating"),
    )

    id = Column(Integer, primary_key=True, index=True)
    order_number = Column(String, unique=True, nullable=False, index=True)

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    store_id = Column(Integer, ForeignKey("stores.id"), nullable=False, index=True)

    # Financial, computed once at creation
    total_amount = Column(Float, nullable=False)
    delivery_fee = Column(Float, nullable=False, default=0)
    tax = Column(Float, nullable=False, default=0)
    final_amount = Column(Float, nullable=False)

    status = Column(enum_type(OrderStatus), nullable=False, default=OrderStatus.PENDING, index=True)
    order_type = Column(enum_type(OrderType), nullable=False)

    # Delivery address, Delivery orders only
    delivery_street = Column(String, nullable=True)
    delivery_area = Column(String, nullable=True)
    delivery_city = Column(String, nullable=True)
    delivery_pincode = Column(String, nullable=True)
    delivery_landmark = Column(String, nullable=True)

    customer_notes = Column(String(200), nullable=True)
    estimated_delivery_time = Column(DateTime, nullable=True)
    actual_delivery_time = Column(DateTime, nullable=True)

    payment_method = Column(enum_type(PaymentMethod), nullable=False)
    payment_status = Column(enum_type(PaymentStatus), nullable=False, default=PaymentStatus.PENDING)

    rating = Column(Integer, nullable=True)
    review = Column(String(500), nullable=True)

    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    user = relationship("User", foreign_keys=[user_id])
    store = relationship("Store", foreign_keys=[store_id])
    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )

    @property
    def delivery_address(self):
        if self.delivery_street is None and self.delivery_area is None:
            return None
        return {
            "street": self.delivery_street,
            "area": self.delivery_area,
            "city": self.delivery_city,
            "pincode": self.delivery_pincode,
            "landmark": self.delivery_landmark,
        }


class OrderItem(Base):
    """Line item; price is the meal's price at the moment of ordering"""
    __tablename__ = "order_items"
    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_order_items_quantity"),
        CheckConstraint("price >= 0", name="ck_order_items_price"),
    )

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    meal_id = Column(Integer, ForeignKey("meals.id", ondelete="SET NULL"), nullable=True, index=True)

    meal_name = Column(String, nullable=False)
    quantity = Column(Integer, nullable=False)
    price = Column(Float, nullable=False)

    order = relationship("Order", back_populates="items")
    meal = relationship("Meal")

    @property
    def line_total(self) -> float:
        return self.price * self.quantity
