"""
Test configuration and fixtures for the Kingsman storefront backend
"""

import os
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from unittest.mock import patch

import pytest

from src.domain.entities.coupon_entity import Coupon
from src.domain.entities.customer_entity import Customer
from src.domain.entities.product_entity import Product
from src.domain.value_objects.multilingual_text import MultilingualText, PlainText
from src.infrastructure.configuration.config import get_config, reset_config
from src.infrastructure.database.operations import DatabaseManager


@pytest.fixture(autouse=True)
def mock_env(tmp_path):
    """Pin environment variables for every test"""
    test_env = {
        "DATABASE_URL": "sqlite:///:memory:",
        "ENVIRONMENT": "test",
        "LOG_LEVEL": "DEBUG",
        "LOG_DIR": str(tmp_path / "logs"),
        "ADMIN_USER_IDS": '["admin-1"]',
        "CORS_ORIGINS": '["http://localhost:5173"]',
    }

    with patch.dict(os.environ, test_env, clear=True):
        reset_config()
        yield test_env
    reset_config()


@pytest.fixture
def config():
    return get_config()


@pytest.fixture
def db_manager(config):
    """Fresh in-memory database with all tables"""
    manager = DatabaseManager(config, database_url="sqlite:///:memory:")
    manager.create_tables()
    yield manager
    manager.drop_tables()
    manager.close()


@pytest.fixture
def now():
    return datetime.now(UTC)


@pytest.fixture
def saddle():
    return Product(
        id="saddle-1",
        name=MultilingualText({"en": "Saddle pad", "ar": "لبادة سرج", "he": "מדרס אוכף"}),
        price=Decimal("22.00"),
        description=MultilingualText({"en": "Cotton saddle pad", "he": ""}),
    )


@pytest.fixture
def bridle():
    return Product(
        id="bridle-1",
        name=PlainText("Leather bridle"),
        price=Decimal("300.00"),
        sale=True,
        sale_price=Decimal("250.00"),
    )


@pytest.fixture
def new_customer(now):
    return Customer(uid="user-new", email="new@example.com", display_name="New Rider", created_at=now - timedelta(days=10))


@pytest.fixture
def old_customer(now):
    return Customer(uid="user-old", email="old@example.com", display_name="Old Rider", created_at=now - timedelta(days=400))


@pytest.fixture
def big_coupon():
    return Coupon(code="BIG90", discount_percentage=Decimal("90"))
