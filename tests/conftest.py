"""Pytest configuration and fixtures."""

from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from grubprint_api.db.dataset import FoodDataset
from grubprint_api.db.stores.memory import MemoryRecordStore
from grubprint_api.loader import load_dataset
from grubprint_api.main import create_app
from grubprint_api.models.food import FoodRecord

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "sr28"


def make_food(food_id: str, long_desc: str, **fields) -> FoodRecord:
    """Build a minimal food record."""
    return FoodRecord(
        id=food_id,
        food_group_id=fields.pop("food_group_id", "0100"),
        long_desc=long_desc,
        short_desc=fields.pop("short_desc", long_desc.upper()[:25]),
        **fields,
    )


@pytest.fixture
def sample_foods() -> list[FoodRecord]:
    """The three-record scenario used throughout the search tests."""
    return [
        make_food("1", "cheddar cheese block"),
        make_food("2", "cheese spread"),
        make_food("3", "apple pie"),
    ]


@pytest.fixture
def sample_store(sample_foods) -> MemoryRecordStore:
    return MemoryRecordStore(FoodDataset.build(sample_foods))


@pytest.fixture(scope="session")
def sr_dataset() -> FoodDataset:
    """Dataset loaded from the SR fixture files."""
    return load_dataset(FIXTURES_DIR)


@pytest.fixture
def sr_store(sr_dataset) -> MemoryRecordStore:
    return MemoryRecordStore(sr_dataset)


@pytest_asyncio.fixture
async def client(sr_store) -> AsyncGenerator[AsyncClient, None]:
    """
    Create async test client over the SR fixture data.

    Usage:
        async def test_endpoint(client: AsyncClient):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    app = create_app(store=sr_store)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
