"""
Test Suite Configuration
"""
from datetime import datetime, timezone
from typing import AsyncGenerator, Generator

import pytest
from fastapi.testclient import TestClient

from foodchop.config import Settings
from foodchop.config.settings import MonitoringSettings, SecuritySettings, StorageSettings
from foodchop.domain import CustomerInteractionPayload, FoodPayload, OrderPayload
from foodchop.serving.api import create_api_app
from foodchop.services import FoodMarketplace
from foodchop.storage import MemoryBackend

OWNER = "owner-principal"
CUSTOMER = "customer-a"
OTHER_CUSTOMER = "customer-b"

FIXED_NOW = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings"""
    return Settings(
        app_env="testing",
        debug=True,
        storage=StorageSettings(backend="memory"),
        security=SecuritySettings(owner_id=OWNER, rate_limit_requests=1000),
        monitoring=MonitoringSettings(log_level="WARNING", log_format="console"),
    )


@pytest.fixture
async def memory_backend() -> AsyncGenerator[MemoryBackend, None]:
    """Create a connected in-memory backend"""
    backend = MemoryBackend()
    await backend.connect()
    yield backend
    await backend.close()


@pytest.fixture
def marketplace(memory_backend) -> FoodMarketplace:
    """Marketplace on an in-memory backend with a fixed clock"""
    return FoodMarketplace(memory_backend, owner=OWNER, clock=lambda: FIXED_NOW)


@pytest.fixture
def burger_payload() -> FoodPayload:
    return FoodPayload(
        name="Burger",
        description="Beef patty, cheddar, pickles",
        price=500,
        quantity_available=10,
    )


@pytest.fixture
async def burger(marketplace, burger_payload):
    """A Burger product already in the catalog"""
    result = await marketplace.catalog.add_product(burger_payload)
    return result.value


@pytest.fixture
async def placed_order(marketplace, burger):
    """A placed order for 3 burgers by CUSTOMER"""
    result = await marketplace.orders.place_order(
        OrderPayload(product_id=burger.id, quantity=3), CUSTOMER
    )
    return result.value


@pytest.fixture
def review_payload(burger) -> CustomerInteractionPayload:
    return CustomerInteractionPayload(product_id=burger.id, rating=5, review="Great burger")


@pytest.fixture
def client(test_settings) -> Generator[TestClient, None, None]:
    """API client with the application lifespan running"""
    app = create_api_app(test_settings)
    with TestClient(app) as test_client:
        yield test_client
