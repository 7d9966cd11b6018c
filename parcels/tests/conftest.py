"""
Centralized Test Configuration.
"""

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from parcels.app.models.parcel_enums import ParcelStatus
from parcels.app.schemas.parcel import ParcelRecord, utc_timestamp
from parcels.app.services.parcel_store import ParcelStore

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def engine():
    """Fresh in-memory database per test."""
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
async def store(engine):
    return await ParcelStore.open(engine)


@pytest.fixture
def make_parcel():
    """Factory for a registered test parcel."""
    def _make(client: int = 1000, **overrides) -> ParcelRecord:
        fields = {
            "client": client,
            "status": ParcelStatus.REGISTERED,
            "address": "test",
            "created_at": utc_timestamp(),
        }
        fields.update(overrides)
        return ParcelRecord(**fields)
    return _make
