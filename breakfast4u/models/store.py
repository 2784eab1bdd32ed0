"""
Store directory model
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Column, Integer, String, Text, Float, Boolean, DateTime, ForeignKey, JSON, Table
from sqlalchemy.orm import relationship

from breakfast4u.database import Base
from breakfast4u.utils.db_compat import enum_type
from breakfast4u.utils.helpers import utcnow

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


class StoreArea(str, Enum):
    SAKHRALE = "Sakhrale"
    TAKARI = "Takari"
    ISLAMPUR = "Islampur"
    WALWA = "Walwa"


class StoreFeature(str, Enum):
    WIFI = "WiFi"
    OUTDOOR_SEATING = "Outdoor Seating"
    VEGAN_OPTIONS = "Vegan Options"
    TAKEOUT = "Takeout"
    FAMILY_FRIENDLY = "Family-Friendly"
    FRESH_BAKED_DAILY = "Fresh Baked Daily"
    AUTHENTIC = "Authentic"
    ORGANIC = "Organic"
    GLUTEN_FREE = "Gluten-Free"
    SUSTAINABLE = "Sustainable"
    DINER_STYLE = "Diner Style"
    LARGE_PORTIONS = "Large Portions"
    CLASSIC_MENU = "Classic Menu"


store_popular_meals = Table(
    "store_popular_meals",
    Base.metadata,
    Column("store_id", Integer, ForeignKey("stores.id", ondelete="CASCADE"), primary_key=True),
    Column("meal_id", Integer, ForeignKey("meals.id", ondelete="CASCADE"), primary_key=True),
)


class Store(Base):
    __tablename__ = "stores"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=True)

    # Address
    street = Column(String, nullable=False)
    area = Column(enum_type(StoreArea), nullable=False, index=True)
    city = Column(String, nullable=False, default="Sangli")
    state = Column(String, nullable=False, default="Maharashtra")
    pincode = Column(String(6), nullable=True)

    # Location
    latitude = Column(Float, nullable=True, index=True)
    longitude = Column(Float, nullable=True, index=True)

    phone = Column(String(10), nullable=False)
    email = Column(String, nullable=True)

    # {"monday": {"open": "07:00", "close": "21:00", "closed": false}, ...}
    hours = Column(JSON, nullable=False, default=dict)

    rating = Column(Float, nullable=False, default=0, index=True)
    review_count = Column(Integer, nullable=False, default=0)
    specialties = Column(JSON, nullable=False, default=list)
    features = Column(JSON, nullable=False, default=list)
    images = Column(JSON, nullable=False, default=list)

    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    is_active = Column(Boolean, nullable=False, default=True)
    is_verified = Column(Boolean, nullable=False, default=False)

    delivery_radius = Column(Float, nullable=False, default=5)  # km
    minimum_order = Column(Float, nullable=False, default=0)
    delivery_fee = Column(Float, nullable=False, default=0)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    owner = relationship("User", foreign_keys=[owner_id])
    popular_items = relationship("Meal", secondary=store_popular_meals)

    def is_open_at(self, now: Optional[datetime] = None) -> bool:
        """Check today's entry in this store's own hours table"""
        now = now or datetime.now()
        today = (self.hours or {}).get(WEEKDAYS[now.weekday()])
        if not today or today.get("closed"):
            return False
        opens, closes = today.get("open"), today.get("close")
        if not opens or not closes:
            return False
        current = now.strftime("%H:%M")
        return opens <= current <= closes

    @property
    def address(self) -> dict:
        return {
            "street": self.street,
            "area": self.area,
            "city": self.city,
            "state": self.state,
            "pincode": self.pincode,
        }

    @property
    def location(self) -> Optional[dict]:
        if self.latitude is None or self.longitude is None:
            return None
        return {"latitude": self.latitude, "longitude": self.longitude}
