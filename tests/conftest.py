"""
Pytest fixtures and test configuration.
"""

import pytest
from unittest.mock import Mock

import storefront
from storefront import create_app
from storefront.clients.commerce_client import CommerceClient
from storefront.clients.search_client import MeiliSearchClient
from storefront.clients.storefront_client import StorefrontRevalidator
from storefront.config import Config
from storefront.notifications.base import NotificationProvider
from storefront.notifications.service import NotificationService
from storefront.services.promotional_content import PromotionalContentService
from storefront.services.search_indexer import SearchIndexer
from storefront.web.cache import TaggedCache
from storefront.web.data import StorefrontData
from storefront.web.regions import RegionMapCache
from storefront.web.revalidation import RevalidationPlanner

ADMIN_TOKEN = "test-admin-token"
WEBHOOK_SECRET = "test-webhook-secret"
REVALIDATE_SECRET = "test-revalidate-secret"

VIETNAM_REGION = {
    "id": "reg_vn",
    "name": "Vietnam",
    "currency_code": "vnd",
    "countries": [{"iso_2": "vn"}],
}
US_REGION = {
    "id": "reg_us",
    "name": "United States",
    "currency_code": "usd",
    "countries": [{"iso_2": "us"}],
}


class TestConfig(Config):
    DATABASE_URL = "sqlite:///:memory:"
    COMMERCE_BACKEND_URL = "http://commerce.test"
    DEFAULT_REGION = "vn"
    ADMIN_API_TOKEN = ADMIN_TOKEN
    WEBHOOK_SECRET = WEBHOOK_SECRET
    REVALIDATE_SECRET = REVALIDATE_SECRET
    REVALIDATE_ENDPOINT = ""
    GMAIL_USER = ""
    STORE_NAME = "Test Store"
    STORE_URL = "https://store.test"
    TESTING = True


@pytest.fixture
def mock_commerce_client():
    """Mock commerce backend client."""
    client = Mock(spec=CommerceClient)
    client.configured = True
    client.list_regions.return_value = [VIETNAM_REGION, US_REGION]
    return client


@pytest.fixture
def mock_search_client():
    """Mock search client."""
    return Mock(spec=MeiliSearchClient)


@pytest.fixture
def mock_revalidator():
    """Mock storefront revalidator."""
    revalidator = Mock(spec=StorefrontRevalidator)
    revalidator.trigger.return_value = True
    return revalidator


@pytest.fixture
def mock_provider():
    """Mock email provider."""
    provider = Mock(spec=NotificationProvider)
    provider.is_configured.return_value = True
    provider.send.return_value = "<msg-1@store.test>"
    return provider


@pytest.fixture
def notification_service(mock_provider):
    """Notification service with a mocked provider."""
    return NotificationService(
        mock_provider,
        store_name="Test Store",
        store_url="https://store.test"
    )


@pytest.fixture
def app(monkeypatch, mock_commerce_client, mock_search_client, mock_revalidator, notification_service):
    """Application wired to mocked external services."""
    app = create_app(TestConfig)

    cache = TaggedCache()
    monkeypatch.setattr(storefront, "_commerce_client", mock_commerce_client)
    monkeypatch.setattr(storefront, "_search_client", mock_search_client)
    monkeypatch.setattr(
        storefront, "_search_indexer",
        SearchIndexer(mock_commerce_client, mock_search_client)
    )
    monkeypatch.setattr(storefront, "_revalidator", mock_revalidator)
    monkeypatch.setattr(storefront, "_storefront_cache", cache)
    monkeypatch.setattr(
        storefront, "_storefront_data",
        StorefrontData(mock_commerce_client, cache)
    )
    monkeypatch.setattr(
        storefront, "_region_cache",
        RegionMapCache(mock_commerce_client, "vn", 3600)
    )
    monkeypatch.setattr(
        storefront, "_revalidation_planner",
        RevalidationPlanner(mock_commerce_client)
    )
    monkeypatch.setattr(storefront, "_notification_service", notification_service)

    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.fixture
def content_service(app):
    """Promotional content service bound to the in-memory database."""
    return PromotionalContentService()


@pytest.fixture
def sample_banner():
    return {
        "title": "iPhone 17 Pro Max",
        "image_url": "https://cdn.test/iphone.jpg",
        "position": "hero",
        "display_order": 1,
    }


@pytest.fixture
def sample_product():
    """Commerce product as returned by the store API."""
    return {
        "id": "prod_1",
        "title": "iPhone 17",
        "handle": "iphone-17",
        "description": "Latest iPhone",
        "thumbnail": "https://cdn.test/iphone.jpg",
        "collection_id": "pcol_1",
        "collection": {"id": "pcol_1", "title": "Apple", "handle": "apple"},
        "categories": [{"id": "pcat_1", "name": "Phones", "handle": "phones"}],
        "variants": [
            {"id": "var_1", "sku": "IP17-128", "title": "128GB", "price": 999, "inventory_quantity": 5},
            {"id": "var_2", "sku": "IP17-256", "title": "256GB", "price": 1099, "inventory_quantity": 0},
        ],
    }
