"""
Meal catalog model
"""
from enum import Enum

from sqlalchemy import Column, Integer, String, Text, Float, Boolean, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship

from breakfast4u.database import Base
from breakfast4u.utils.db_compat import enum_type
from breakfast4u.utils.helpers import utcnow


class MealCategory(str, Enum):
    PANCAKES = "Pancakes"
    STREET_FOOD = "Street Food"
    SOUTH_INDIAN = "South Indian"
    MAHARASHTRIAN = "Maharashtrian"
    SNACKS = "Snacks"
    CHAATS = "Chaats"
    BREAKFAST = "Breakfast"
    BEVERAGES = "Beverages"


class TimeOfDay(str, Enum):
    MORNING = "Morning"
    AFTERNOON = "Afternoon"
    EVENING = "Evening"


class MealTag(str, Enum):
    VEGETARIAN = "Vegetarian"
    VEGAN = "Vegan"
    GLUTEN_FREE = "Gluten-Free"
    HEALTHY = "Healthy"
    PROTEIN_RICH = "Protein-Rich"
    SPICY = "Spicy"
    SWEET = "Sweet"


class Meal(Base):
    __tablename__ = "meals"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=False)
    price = Column(Float, nullable=False)
    image = Column(String, nullable=True)
    category = Column(enum_type(MealCategory), nullable=False, index=True)

    # Lists of enum values, e.g. ["Morning", "Evening"]
    time_of_day = Column(JSON, nullable=False, default=list)
    tags = Column(JSON, nullable=False, default=list)

    preparation_time = Column(Integer, nullable=False, default=10)  # minutes

    # Seeded/maintained by admins; order reviews do not feed these
    rating = Column(Float, nullable=False, default=0)
    review_count = Column(Integer, nullable=False, default=0)

    is_available = Column(Boolean, nullable=False, default=True)
    nutritional_info = Column(JSON, nullable=True)  # {calories, protein, carbs, fat}
    ingredients = Column(JSON, nullable=False, default=list)
    allergens = Column(JSON, nullable=False, default=list)

    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    created_by = relationship("User", foreign_keys=[created_by_id])
