"""
Test fixtures - in-memory SQLite database + per-role authenticated HTTP clients
"""
from contextlib import asynccontextmanager

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

import breakfast4u.models  # noqa: F401
from breakfast4u.database import Base, enable_sqlite_foreign_keys, get_db
from breakfast4u.main import app
from breakfast4u.api.auth import get_password_hash, token_for
from breakfast4u.models.meal import Meal, MealCategory, MealTag, TimeOfDay
from breakfast4u.models.store import Store, StoreArea
from breakfast4u.models.user import User, UserRole

PASSWORD = "testpass123"

ALL_WEEK = {
    day: {"open": "00:00", "close": "23:59", "closed": False}
    for day in ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
}


@pytest_asyncio.fixture()
async def db_session():
    """Create a fresh in-memory SQLite database for each test"""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    enable_sqlite_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture()
async def seed_data(db_session):
    """Baseline data: customers, two owners, an admin, one store and its meals"""
    hashed = get_password_hash(PASSWORD)

    def make_user(name, email, role):
        return User(name=name, email=email, phone="9876543210", hashed_password=hashed, role=role)

    customer = make_user("Asha Patil", "asha@example.com", UserRole.USER)
    other_customer = make_user("Ravi Jadhav", "ravi@example.com", UserRole.USER)
    owner = make_user("Sunil More", "sunil@example.com", UserRole.OWNER)
    other_owner = make_user("Meera Kulkarni", "meera@example.com", UserRole.OWNER)
    admin = make_user("Admin", "admin@example.com", UserRole.ADMIN)
    db_session.add_all([customer, other_customer, owner, other_owner, admin])
    await db_session.flush()

    poha = Meal(
        name="Kanda Poha",
        description="Flattened rice with onions, peanuts and curry leaves",
        price=30,
        category=MealCategory.MAHARASHTRIAN,
        time_of_day=[TimeOfDay.MORNING.value],
        tags=[MealTag.VEGETARIAN.value, MealTag.HEALTHY.value],
        preparation_time=10,
        rating=4.5,
        review_count=20,
        created_by_id=owner.id,
    )
    misal = Meal(
        name="Misal Pav",
        description="Spicy sprouted moth bean curry with pav",
        price=60,
        category=MealCategory.MAHARASHTRIAN,
        time_of_day=[TimeOfDay.MORNING.value, TimeOfDay.AFTERNOON.value],
        tags=[MealTag.SPICY.value, MealTag.VEGETARIAN.value],
        preparation_time=15,
        rating=4.8,
        review_count=50,
        created_by_id=owner.id,
    )
    vada = Meal(
        name="Sabudana Vada",
        description="Crisp tapioca pearl fritters with peanuts",
        price=40,
        category=MealCategory.SNACKS,
        time_of_day=[TimeOfDay.EVENING.value],
        tags=[MealTag.GLUTEN_FREE.value],
        preparation_time=12,
        rating=4.0,
        review_count=5,
        is_available=False,
        created_by_id=owner.id,
    )
    db_session.add_all([poha, misal, vada])
    await db_session.flush()

    store = Store(
        name="Morning Glory Cafe",
        description="Traditional Maharashtrian breakfast",
        street="12 Station Road",
        area=StoreArea.ISLAMPUR,
        pincode="415409",
        latitude=17.0500,
        longitude=74.2600,
        phone="9123456780",
        hours=ALL_WEEK,
        rating=4.6,
        review_count=30,
        specialties=["Misal Pav", "Poha"],
        features=["Takeout"],
        owner_id=owner.id,
        minimum_order=50,
        delivery_fee=20,
    )
    db_session.add(store)
    await db_session.commit()

    return {
        "customer": customer,
        "other_customer": other_customer,
        "owner": owner,
        "other_owner": other_owner,
        "admin": admin,
        "store": store,
        "poha": poha,
        "misal": misal,
        "vada": vada,
    }


@asynccontextmanager
async def _client(db_session, user=None):
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", follow_redirects=True) as ac:
        if user is not None:
            ac.headers["Authorization"] = f"Bearer {token_for(user)}"
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def client(db_session, seed_data):
    """Authenticated as the regular customer"""
    async with _client(db_session, seed_data["customer"]) as ac:
        yield ac


@pytest_asyncio.fixture()
async def other_client(db_session, seed_data):
    async with _client(db_session, seed_data["other_customer"]) as ac:
        yield ac


@pytest_asyncio.fixture()
async def owner_client(db_session, seed_data):
    """Authenticated as the owner of the seeded store"""
    async with _client(db_session, seed_data["owner"]) as ac:
        yield ac


@pytest_asyncio.fixture()
async def other_owner_client(db_session, seed_data):
    async with _client(db_session, seed_data["other_owner"]) as ac:
        yield ac


@pytest_asyncio.fixture()
async def admin_client(db_session, seed_data):
    async with _client(db_session, seed_data["admin"]) as ac:
        yield ac


@pytest_asyncio.fixture()
async def unauth_client(db_session):
    """Unauthenticated httpx AsyncClient"""
    async with _client(db_session) as ac:
        yield ac
