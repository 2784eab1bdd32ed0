"""
Store schemas
"""
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from breakfast4u.models.store import StoreArea, StoreFeature, WEEKDAYS
from breakfast4u.schemas.common import HHMM_PATTERN, PHONE_PATTERN, PINCODE_PATTERN
from breakfast4u.schemas.meal import MealSummary
from breakfast4u.schemas.user import UserSummary


class StoreAddress(BaseModel):
    street: str = Field(min_length=1)
    area: StoreArea
    city: str = "Sangli"
    state: str = "Maharashtra"
    pincode: Optional[str] = Field(default=None, pattern=PINCODE_PATTERN)

    @field_validator("street", mode="before")
    @classmethod
    def strip_street(cls, v):
        return v.strip() if isinstance(v, str) else v


class GeoPoint(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class DayHours(BaseModel):
    open: Optional[str] = Field(default=None, pattern=HHMM_PATTERN)
    close: Optional[str] = Field(default=None, pattern=HHMM_PATTERN)
    closed: bool = False


def _check_weekdays(hours: Optional[Dict[str, DayHours]]):
    if hours:
        unknown = set(hours) - set(WEEKDAYS)
        if unknown:
            raise ValueError(f"Unknown weekday(s): {', '.join(sorted(unknown))}")
    return hours


class StoreCreate(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    address: StoreAddress
    location: Optional[GeoPoint] = None
    phone: str = Field(pattern=PHONE_PATTERN)
    email: Optional[EmailStr] = None
    hours: Dict[str, DayHours] = {}
    specialties: List[str] = []
    features: List[StoreFeature] = []
    images: List[str] = []
    popular_items: List[int] = []
    delivery_radius: float = Field(default=5, gt=0)
    minimum_order: float = Field(default=0, ge=0)
    delivery_fee: float = Field(default=0, ge=0)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("hours")
    @classmethod
    def known_weekdays(cls, v):
        return _check_weekdays(v)


class StoreUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    address: Optional[StoreAddress] = None
    location: Optional[GeoPoint] = None
    phone: Optional[str] = Field(default=None, pattern=PHONE_PATTERN)
    email: Optional[EmailStr] = None
    hours: Optional[Dict[str, DayHours]] = None
    specialties: Optional[List[str]] = None
    features: Optional[List[StoreFeature]] = None
    images: Optional[List[str]] = None
    popular_items: Optional[List[int]] = None
    delivery_radius: Optional[float] = Field(default=None, gt=0)
    minimum_order: Optional[float] = Field(default=None, ge=0)
    delivery_fee: Optional[float] = Field(default=None, ge=0)
    is_active: Optional[bool] = None
    is_verified: Optional[bool] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("hours")
    @classmethod
    def known_weekdays(cls, v):
        return _check_weekdays(v)


class StoreResponse(BaseModel):
    id: int
    name: str
    description: Optional[str]
    address: StoreAddress
    location: Optional[GeoPoint]
    phone: str
    email: Optional[str]
    hours: Dict[str, DayHours]
    rating: float
    review_count: int
    specialties: List[str]
    features: List[StoreFeature]
    images: List[str]
    owner_id: int
    is_active: bool
    is_verified: bool
    delivery_radius: float
    minimum_order: float
    delivery_fee: float
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class StoreDetailResponse(StoreResponse):
    owner: Optional[UserSummary] = None
    popular_items: List[MealSummary] = []
    is_currently_open: Optional[bool] = None
    distance_km: Optional[float] = None


class StoreSummary(BaseModel):
    id: int
    name: str
    address: StoreAddress
    phone: str

    class Config:
        from_attributes = True
