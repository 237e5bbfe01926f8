import os
from datetime import date, timedelta
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

# --- SETUP: Set a testing flag before importing app components ---
os.environ["TESTING"] = "True"

from main import app
from app.database.connection import Base, get_db
from app.database.models import Island, Hotel, Event

DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    engine = create_async_engine(DATABASE_URL, connect_args={"check_same_thread": False}, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    TestingSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with TestingSessionLocal() as session:
        yield session
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    del app.dependency_overrides[get_db]


@pytest_asyncio.fixture(scope="function")
async def seeded_catalog(db_session: AsyncSession):
    """Two islands, three events and three hotels."""
    bali = Island(id="isl-1", name="Bali", slug="bali", description="Temples and surf", country="Indonesia",
                  climate="Tropical", area_km2=5780, image_url="/bali.jpg")
    crete = Island(id="isl-2", name="Crete", slug="crete", description="Minoan ruins", country="Greece",
                   climate="Mediterranean", area_km2=8336)
    db_session.add_all([bali, crete])
    db_session.add_all([
        Event(id="evt-1", island_id="isl-1", title="Sunrise Surf Lesson", description="Learn to surf",
              type="Water Sports", start_date=date(2030, 3, 1), start_time="06:30", location="Kuta", price=150),
        Event(id="evt-2", island_id="isl-2", title="Palace Tour", description="Knossos guided walk",
              type="Cultural", start_date=date(2030, 4, 10), location="Heraklion", price=40),
        Event(id="evt-3", title="Night Market", description=None, type=None, start_date=date(2030, 5, 5),
              location="Ubud", price=None),
    ])
    db_session.add_all([
        Hotel(id="htl-1", island_id="isl-1", name="Ocean Resort", description="Beachfront resort", type="Resort",
              star_rating=5, rating=4.8, price_range="$$$$", price_per_night=450,
              amenities=["Pool", "Spa", "Free WiFi"], location="Nusa Dua"),
        Hotel(id="htl-2", island_id="isl-2", name="Old Town Boutique", description="Stone house rooms",
              type="Boutique", star_rating=4, rating=4.4, price_range="$$", price_per_night=120,
              amenities=["Free WiFi"], location="Chania"),
        Hotel(id="htl-3", island_id="isl-1", name="Surf Hostel", description=None, type="Hostel",
              star_rating=2, rating=None, price_range="$", price_per_night=None, location="Canggu"),
    ])
    await db_session.commit()


@pytest.fixture
def future_dates():
    start = date.today() + timedelta(days=10)
    return start, start + timedelta(days=4)


@pytest.fixture
def mock_db_session():
    session = AsyncMock()
    session.add = MagicMock()
    session.add_all = MagicMock()
    mock_result = MagicMock()
    session.execute = AsyncMock(return_value=mock_result)
    mock_result.scalar_one_or_none.return_value = None
    mock_result.scalars.return_value.first.return_value = None
    return session
