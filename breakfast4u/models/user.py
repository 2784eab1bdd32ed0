"""
User accounts: customers, store owners and administrators
"""
from enum import Enum

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Table
from sqlalchemy.orm import relationship

from breakfast4u.database import Base
from breakfast4u.utils.db_compat import enum_type
from breakfast4u.utils.helpers import utcnow


class UserRole(str, Enum):
    USER = "user"
    OWNER = "owner"
    ADMIN = "admin"


user_favorites = Table(
    "user_favorites",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("meal_id", Integer, ForeignKey("meals.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False)
    email = Column(String, unique=True, nullable=False, index=True)
    phone = Column(String(10), nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(enum_type(UserRole), nullable=False, default=UserRole.USER)

    # Owners only
    business_name = Column(String, nullable=True)
    address = Column(String, nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)
    last_login = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    favorite_meals = relationship("Meal", secondary=user_favorites)
