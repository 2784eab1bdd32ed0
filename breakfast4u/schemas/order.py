"""
Order schemas
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from breakfast4u.models.order import OrderStatus, OrderType, PaymentMethod, PaymentStatus
from breakfast4u.schemas.common import PINCODE_PATTERN
from breakfast4u.schemas.store import StoreSummary
from breakfast4u.schemas.user import UserSummary


class DeliveryAddress(BaseModel):
    street: str = Field(min_length=1)
    area: Optional[str] = None
    city: Optional[str] = None
    pincode: Optional[str] = Field(default=None, pattern=PINCODE_PATTERN)
    landmark: Optional[str] = None


class OrderItemCreate(BaseModel):
    meal_id: int = Field(gt=0)
    quantity: int = Field(ge=1)


class OrderCreate(BaseModel):
    store_id: int = Field(gt=0)
    items: List[OrderItemCreate] = Field(min_length=1)
    order_type: OrderType
    delivery_address: Optional[DeliveryAddress] = None
    customer_notes: Optional[str] = Field(default=None, max_length=200)
    payment_method: PaymentMethod

    @model_validator(mode="after")
    def address_matches_order_type(self):
        if self.order_type == OrderType.DELIVERY and self.delivery_address is None:
            raise ValueError("Delivery address is required for delivery orders")
        if self.order_type == OrderType.PICKUP:
            self.delivery_address = None
        return self


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class OrderReviewCreate(BaseModel):
    rating: int = Field(ge=1, le=5, strict=True)
    review: Optional[str] = Field(default=None, max_length=500)


class OrderItemResponse(BaseModel):
    id: int
    meal_id: Optional[int]
    meal_name: str
    quantity: int
    price: float
    line_total: float

    class Config:
        from_attributes = True


class OrderResponse(BaseModel):
    id: int
    order_number: str
    user_id: int
    store_id: int
    items: List[OrderItemResponse]
    total_amount: float
    delivery_fee: float
    tax: float
    final_amount: float
    status: OrderStatus
    order_type: OrderType
    delivery_address: Optional[DeliveryAddress] = None
    customer_notes: Optional[str] = None
    estimated_delivery_time: Optional[datetime] = None
    actual_delivery_time: Optional[datetime] = None
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    rating: Optional[int] = None
    review: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class OrderDetailResponse(OrderResponse):
    user: Optional[UserSummary] = None
    store: Optional[StoreSummary] = None
