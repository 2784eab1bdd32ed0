"""
Meal schemas
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from breakfast4u.models.meal import MealCategory, MealTag, TimeOfDay


class NutritionalInfo(BaseModel):
    calories: Optional[float] = None
    protein: Optional[float] = None
    carbs: Optional[float] = None
    fat: Optional[float] = None


def _dedupe(values):
    seen = []
    for v in values:
        if v not in seen:
            seen.append(v)
    return seen


class MealCreate(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    description: str = Field(min_length=10, max_length=500)
    price: float = Field(ge=0)
    image: Optional[str] = None
    category: MealCategory
    time_of_day: List[TimeOfDay] = Field(min_length=1)
    tags: List[MealTag] = []
    preparation_time: int = Field(ge=1)
    rating: float = Field(default=0, ge=0, le=5)
    review_count: int = Field(default=0, ge=0)
    is_available: bool = True
    nutritional_info: Optional[NutritionalInfo] = None
    ingredients: List[str] = []
    allergens: List[str] = []

    @field_validator("name", "description", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("time_of_day", "tags")
    @classmethod
    def unique_values(cls, v):
        return _dedupe(v)


class MealUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    description: Optional[str] = Field(default=None, min_length=10, max_length=500)
    price: Optional[float] = Field(default=None, ge=0)
    image: Optional[str] = None
    category: Optional[MealCategory] = None
    time_of_day: Optional[List[TimeOfDay]] = Field(default=None, min_length=1)
    tags: Optional[List[MealTag]] = None
    preparation_time: Optional[int] = Field(default=None, ge=1)
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    review_count: Optional[int] = Field(default=None, ge=0)
    is_available: Optional[bool] = None
    nutritional_info: Optional[NutritionalInfo] = None
    ingredients: Optional[List[str]] = None
    allergens: Optional[List[str]] = None

    @field_validator("name", "description", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("time_of_day", "tags")
    @classmethod
    def unique_values(cls, v):
        return _dedupe(v) if v is not None else v


class MealResponse(BaseModel):
    id: int
    name: str
    description: str
    price: float
    image: Optional[str]
    category: MealCategory
    time_of_day: List[TimeOfDay]
    tags: List[MealTag]
    preparation_time: int
    rating: float
    review_count: int
    is_available: bool
    nutritional_info: Optional[NutritionalInfo] = None
    ingredients: List[str] = []
    allergens: List[str] = []
    created_by_id: Optional[int] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MealSummary(BaseModel):
    id: int
    name: str
    price: float
    image: Optional[str] = None
    rating: float = 0

    class Config:
        from_attributes = True
