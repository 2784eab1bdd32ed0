"""
Contact form schemas
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from breakfast4u.models.contact import ContactCategory, ContactPriority, ContactStatus
from breakfast4u.schemas.common import PHONE_PATTERN
from breakfast4u.schemas.user import UserSummary


class ContactCreate(BaseModel):
    name: str = Field(min_length=2, max_length=50)
    email: EmailStr
    phone: Optional[str] = Field(default=None, pattern=PHONE_PATTERN)
    category: ContactCategory
    subject: str = Field(min_length=5, max_length=100)
    message: str = Field(min_length=10, max_length=1000)

    @field_validator("name", "subject", "message", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class ContactUpdate(BaseModel):
    status: Optional[ContactStatus] = None
    priority: Optional[ContactPriority] = None
    assigned_to_id: Optional[int] = Field(default=None, gt=0)
    response: Optional[str] = Field(default=None, min_length=1)


class ContactResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str]
    category: ContactCategory
    subject: str
    message: str
    status: ContactStatus
    priority: ContactPriority
    assigned_to_id: Optional[int] = None
    response: Optional[str] = None
    responded_at: Optional[datetime] = None
    responded_by_id: Optional[int] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ContactDetailResponse(ContactResponse):
    assigned_to: Optional[UserSummary] = None
    responded_by: Optional[UserSummary] = None
