import uuid
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from mongomock_motor import AsyncMongoMockClient

from database import get_db
from main import app
from services.student_store import StudentStore


@pytest_asyncio.fixture
async def test_db():
    """
    In-memory MongoDB database with the production indexes applied.
    Each test gets its own database so state never leaks between tests.
    """
    client = AsyncMongoMockClient()
    db = client[f"tutor_desk_test_{uuid.uuid4().hex}"]
    await StudentStore(db).ensure_indexes()
    yield db


@pytest_asyncio.fixture
async def store(test_db) -> StudentStore:
    return StudentStore(test_db)


@pytest_asyncio.fixture
async def client(test_db) -> AsyncGenerator[AsyncClient, None]:
    """
    Yield an AsyncClient with the app and overridden DB dependency.
    """
    async def _test_db():
        return test_db

    app.dependency_overrides[get_db] = _test_db

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def student_payload() -> dict:
    return {
        "name": "John Doe",
        "email": "john.doe@example.com",
        "phone": "+1234567890",
        "course": "Advanced Mathematics",
        "level": "Intermediate",
        "monthly_fee": 150.0,
        "payment_day": 15,
        "start_date": "2024-01-15",
        "subscription_expiry": "2024-12-15",
        "notes": "Student shows strong analytical skills",
    }
