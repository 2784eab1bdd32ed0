from breakfast4u.models.user import User, UserRole, user_favorites
from breakfast4u.models.meal import Meal, MealCategory, MealTag, TimeOfDay
from breakfast4u.models.store import Store, StoreArea, StoreFeature, store_popular_meals
from breakfast4u.models.order import Order, OrderItem, OrderStatus, OrderType, PaymentMethod, PaymentStatus
from breakfast4u.models.contact import Contact, ContactCategory, ContactPriority, ContactStatus

__all__ = [
    "User",
    "UserRole",
    "user_favorites",
    "Meal",
    "MealCategory",
    "MealTag",
    "TimeOfDay",
    "Store",
    "StoreArea",
    "StoreFeature",
    "store_popular_meals",
    "Order",
    "OrderItem",
    "OrderStatus",
    "OrderType",
    "PaymentMethod",
    "PaymentStatus",
    "Contact",
    "ContactCategory",
    "ContactPriority",
    "ContactStatus",
]
