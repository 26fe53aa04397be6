"""
Pytest configuration and fixtures for tests.

This file is automatically loaded by pytest and provides shared fixtures
and configuration for all tests.
"""

import sys
import os

import pytest
import pytest_asyncio
from fakeredis import FakeAsyncRedis
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

# Add parent directory to Python path so tests can import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# Minimal configuration required by config.py, set before any project import
os.environ.setdefault("RUNTIME_ENVIRONMENT", "TEST")
os.environ.setdefault("CURRENCY", "USD")
os.environ.setdefault("COMMISSION_RATE", "0.10")
os.environ.setdefault("FRONTEND_URL", "https://photomarket.test")
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_1234567890abcdef")
os.environ.setdefault("CART_STORAGE_KEY", "photomarket_cart")

from models.price_tier import PricingPackageDTO  # noqa: E402
from repositories.cart_persistence import InMemoryCartPersistence  # noqa: E402
from services.cart import CartStore  # noqa: E402


# ============================================================================
# Pricing Fixtures
# ============================================================================

@pytest.fixture
def volume_package():
    """Tiers 1+ → $10, 5+ → $8, 10+ → $6."""
    return PricingPackageDTO(
        id="pkg-volume",
        name="Race day volume",
        package_type="digital",
        tiers=[
            {"quantity": 1, "price": 10},
            {"quantity": 5, "price": 8},
            {"quantity": 10, "price": 6},
        ]
    )


@pytest.fixture
def flat_album():
    """Album sold as a whole for $30, no pricing package."""
    return {
        "id": "album-flat",
        "title": "Finish Line",
        "photographer_id": "ph-1",
        "profiles": {"full_name": "Ana Lens"},
        "price": "30.00",
        "pricing_packages": None,
    }


@pytest.fixture
def tiered_album(volume_package):
    """Album priced per photo with the volume package."""
    return {
        "id": "album-tiered",
        "title": "Start Line",
        "photographer_id": "ph-2",
        "profiles": {"full_name": "Ben Shutter"},
        "price": "50.00",
        "pricing_packages": volume_package.model_dump(),
    }


def make_photo(photo_id: str) -> dict:
    return {
        "id": photo_id,
        "title": f"Photo {photo_id}",
        "watermarked_url": f"https://cdn.photomarket.test/wm/{photo_id}.jpg",
    }


@pytest.fixture
def photo_factory():
    return make_photo


# ============================================================================
# Cart Fixtures
# ============================================================================

@pytest.fixture
def memory_persistence():
    return InMemoryCartPersistence()


@pytest_asyncio.fixture
async def cart_store(memory_persistence):
    """Empty cart backed by in-memory storage."""
    return await CartStore.restore(memory_persistence, "photomarket_cart")


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest_asyncio.fixture
async def test_engine():
    """Create test database engine (in-memory SQLite)."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False
    )

    from db import create_tables
    await create_tables(engine)

    yield engine

    # Cleanup
    await engine.dispose()


@pytest.fixture
def test_session_maker(test_engine):
    """Create test database session factory."""
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )


# ============================================================================
# Redis Fixtures
# ============================================================================

@pytest_asyncio.fixture
async def redis_client():
    """Create fake Redis client for testing (no real Redis server needed)."""
    client = FakeAsyncRedis(decode_responses=True)
    yield client
    await client.aclose()
