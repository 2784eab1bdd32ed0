"""
Database setup script: create tables and seed a demo marketplace
"""
import asyncio

from sqlalchemy import select

from breakfast4u.database import AsyncSessionLocal, init_models
from breakfast4u.models.meal import Meal, MealCategory, MealTag, TimeOfDay
from breakfast4u.models.store import Store, StoreArea, StoreFeature
from breakfast4u.models.user import User, UserRole
from breakfast4u.api.auth import get_password_hash

WEEK = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def _hours(opens: str, closes: str, closed_on=()):
    return {day: {"open": opens, "close": closes, "closed": day in closed_on} for day in WEEK}


MEALS = [
    ("Kanda Poha", "Flattened rice tempered with onions, peanuts and curry leaves", 30,
     MealCategory.MAHARASHTRIAN, [TimeOfDay.MORNING], [MealTag.VEGETARIAN, MealTag.HEALTHY], 10),
    ("Misal Pav", "Spicy sprouted moth bean curry topped with farsan, served with pav", 60,
     MealCategory.MAHARASHTRIAN, [TimeOfDay.MORNING, TimeOfDay.AFTERNOON], [MealTag.SPICY, MealTag.VEGETARIAN], 15),
    ("Masala Dosa", "Crisp rice crepe filled with spiced potato, with sambar and chutney", 70,
     MealCategory.SOUTH_INDIAN, [TimeOfDay.MORNING], [MealTag.VEGETARIAN, MealTag.GLUTEN_FREE], 15),
    ("Idli Sambar", "Steamed rice cakes with lentil sambar and coconut chutney", 45,
     MealCategory.SOUTH_INDIAN, [TimeOfDay.MORNING], [MealTag.VEGAN, MealTag.HEALTHY], 8),
    ("Vada Pav", "Spiced potato fritter in a soft bun with garlic chutney", 20,
     MealCategory.STREET_FOOD, [TimeOfDay.MORNING, TimeOfDay.EVENING], [MealTag.SPICY], 5),
    ("Banana Pancakes", "Fluffy pancakes with caramelised banana and honey", 90,
     MealCategory.PANCAKES, [TimeOfDay.MORNING], [MealTag.SWEET], 12),
    ("Sabudana Khichdi", "Tapioca pearls with peanuts, cumin and green chilli", 50,
     MealCategory.MAHARASHTRIAN, [TimeOfDay.MORNING], [MealTag.GLUTEN_FREE], 12),
    ("Masala Chai", "Milk tea brewed with ginger and cardamom", 15,
     MealCategory.BEVERAGES, [TimeOfDay.MORNING, TimeOfDay.AFTERNOON, TimeOfDay.EVENING], [MealTag.VEGETARIAN], 5),
]

STORES = [
    ("Morning Glory Cafe", StoreArea.ISLAMPUR, "12 Station Road", 17.0495, 74.2641,
     [StoreFeature.TAKEOUT, StoreFeature.FAMILY_FRIENDLY], ["Misal Pav", "Kanda Poha"], 50, 20),
    ("Udupi Corner", StoreArea.WALWA, "3 Market Yard", 16.9960, 74.4370,
     [StoreFeature.VEGAN_OPTIONS, StoreFeature.CLASSIC_MENU], ["Masala Dosa", "Idli Sambar"], 80, 25),
    ("Sakhrale Snack House", StoreArea.SAKHRALE, "Main Road, Near Temple", 17.0812, 74.2205,
     [StoreFeature.LARGE_PORTIONS], ["Vada Pav"], 0, 10),
]


async def setup_database():
    """Create tables and seed initial data"""
    print("Creating database tables...")
    await init_models()
    print("Tables created")

    async with AsyncSessionLocal() as session:
        existing = await session.execute(select(User).where(User.email == "admin@breakfast4u.in"))
        if existing.scalar_one_or_none():
            print("Seed data already present, skipping")
            return

        hashed = get_password_hash("admin123")
        admin = User(name="Breakfast4U Admin", email="admin@breakfast4u.in", phone="9000000000",
                     hashed_password=hashed, role=UserRole.ADMIN)
        owner = User(name="Sunil More", email="owner@breakfast4u.in", phone="9000000001",
                     hashed_password=hashed, role=UserRole.OWNER, business_name="Morning Foods")
        customer = User(name="Asha Patil", email="asha@breakfast4u.in", phone="9000000002",
                        hashed_password=hashed, role=UserRole.USER)
        session.add_all([admin, owner, customer])
        await session.flush()

        meals = {}
        for name, description, price, category, times, tags, prep in MEALS:
            meal = Meal(
                name=name,
                description=description,
                price=price,
                category=category,
                time_of_day=[t.value for t in times],
                tags=[t.value for t in tags],
                preparation_time=prep,
                created_by_id=owner.id,
            )
            session.add(meal)
            meals[name] = meal
        await session.flush()

        for name, area, street, lat, lng, features, popular, minimum, fee in STORES:
            session.add(Store(
                name=name,
                street=street,
                area=area,
                latitude=lat,
                longitude=lng,
                phone="9123456780",
                hours=_hours("06:30", "13:00", closed_on=("monday",)),
                features=[f.value for f in features],
                specialties=popular,
                popular_items=[meals[p] for p in popular],
                owner_id=owner.id,
                is_verified=True,
                minimum_order=minimum,
                delivery_fee=fee,
            ))

        await session.commit()
        print(f"Seed data created: {len(MEALS)} meals, {len(STORES)} stores")

    print("\nDatabase setup complete!")
    print("\nDefault logins (password: admin123):")
    print("  Admin: admin@breakfast4u.in")
    print("  Owner: owner@breakfast4u.in")
    print("  Customer: asha@breakfast4u.in")


if __name__ == "__main__":
    asyncio.run(setup_database())
