"""
Tests for the revalidation planner and webhook endpoint.
"""

from unittest.mock import patch

from storefront.clients.commerce_client import CommerceAPIError
from storefront.web.revalidation import RevalidationPlanner, extract_ids

SECRET = "test-revalidate-secret"


def test_extract_ids_from_nested_payloads():
    ids = extract_ids({
        "data": {"id": "var_1"},
        "variant": {"product_id": "prod_1"},
        "product": {"collection_id": "pcol_1", "categories": [{"id": "pcat_1"}]},
    })

    assert ids == {
        "id": "var_1",
        "product_id": "prod_1",
        "collection_id": "pcol_1",
        "category_ids": ["pcat_1"],
    }


def test_extract_ids_scalar_category():
    assert extract_ids({"category_ids": "pcat_9"})["category_ids"] == ["pcat_9"]


def test_plan_promotional_banner(mock_commerce_client):
    targets = RevalidationPlanner(mock_commerce_client).plan(
        "promotional-banner.updated", {"id": "b1", "position": "hero"}
    )

    assert targets.paths == ["/", "/products"]
    assert targets.tags == ["banners", "promotional-content", "homepage", "banners:hero"]
    mock_commerce_client.get_product.assert_not_called()


def test_plan_product_event(mock_commerce_client, sample_product):
    """Test product events resolve handles for product, collection and category."""
    mock_commerce_client.get_product.return_value = sample_product
    mock_commerce_client.get_collection.return_value = {"id": "pcol_1", "handle": "apple"}
    mock_commerce_client.get_category.return_value = {"id": "pcat_1", "handle": "phones"}

    targets = RevalidationPlanner(mock_commerce_client).plan("product.updated", {"id": "prod_1"})

    assert targets.paths == ["/", "/products", "/products/iphone-17", "/collections/apple", "/categories/phones"]
    assert "product:iphone-17" in targets.tags
    assert "collection:apple" in targets.tags
    assert "category:phones" in targets.tags


def test_plan_survives_lookup_errors(mock_commerce_client):
    mock_commerce_client.get_product.side_effect = CommerceAPIError("down", 503)

    targets = RevalidationPlanner(mock_commerce_client).plan("product.deleted", {"id": "prod_1"})

    assert targets.paths == ["/", "/products"]
    assert targets.tags == ["products", "collections", "categories"]


def test_plan_product_without_collection_still_drops_listings(mock_commerce_client):
    mock_commerce_client.get_product.return_value = {"id": "p1", "handle": "h"}

    targets = RevalidationPlanner(mock_commerce_client).plan("product.updated", {"id": "p1"})

    assert targets.tags == ["products", "collections", "categories", "product:h"]
    mock_commerce_client.get_collection.assert_not_called()


def test_plan_collection_event_prefers_collection_id(mock_commerce_client):
    mock_commerce_client.get_collection.return_value = {"id": "pcol_1", "handle": "apple"}

    targets = RevalidationPlanner(mock_commerce_client).plan(
        "product-collection.updated", {"id": "evt_1", "collection_id": "pcol_1"}
    )

    mock_commerce_client.get_collection.assert_called_once_with("pcol_1")
    assert targets.paths == ["/", "/products", "/collections/apple"]
    assert targets.tags == ["collections", "collection:pcol_1", "collection:apple"]


def test_plan_collection_event_falls_back_to_id(mock_commerce_client):
    mock_commerce_client.get_collection.return_value = {"id": "pcol_2", "handle": "samsung"}

    targets = RevalidationPlanner(mock_commerce_client).plan("collection.created", {"id": "pcol_2"})

    mock_commerce_client.get_collection.assert_called_once_with("pcol_2")
    assert "/collections/samsung" in targets.paths


def test_plan_collection_event_without_id(mock_commerce_client):
    targets = RevalidationPlanner(mock_commerce_client).plan("collection.deleted", {})

    assert targets.paths == ["/", "/products"]
    assert targets.tags == ["collections"]
    mock_commerce_client.get_collection.assert_not_called()


def test_plan_category_event_uses_slug(mock_commerce_client):
    mock_commerce_client.get_category.return_value = {"id": "pcat_2", "slug": "laptops"}

    targets = RevalidationPlanner(mock_commerce_client).plan("product-category.updated", {"id": "pcat_2"})

    assert "/categories/laptops" in targets.paths


def test_plan_price_list(mock_commerce_client):
    targets = RevalidationPlanner(mock_commerce_client).plan("price_list.updated", {})

    assert targets.tags == ["products"]


def test_revalidate_rejects_bad_secret(client):
    response = client.post("/api/revalidate?secret=wrong&event=product.updated")

    assert response.status_code == 401
    assert response.get_data(as_text=True) == "Invalid token"


def test_revalidate_evicts_cache(client, app):
    """Test the endpoint drops cached entries by tag and path."""
    from storefront import get_storefront_cache
    cache = get_storefront_cache()
    cache.get_or_fetch("banners", lambda: ["b"], tags=["banners"], path="/")
    cache.get_or_fetch("other", lambda: ["x"], tags=["other"], path="/about")

    response = client.post(
        f"/api/revalidate?secret={SECRET}&event=Promotional-Banner.Created",
        json={"id": "b1"}
    )

    data = response.get_json()
    assert response.status_code == 200
    assert data["ok"] is True
    assert data["event"] == "promotional-banner.created"
    assert data["count"] == 2
    assert data["paths"] == ["/", "/products"]
    assert len(cache) == 1


def test_revalidate_requires_backend_url(client, app):
    app.config["COMMERCE_BACKEND_URL"] = ""

    response = client.post(f"/api/revalidate?secret={SECRET}&event=product.updated")

    assert response.status_code == 500
    assert response.get_data(as_text=True) == "COMMERCE_BACKEND_URL is not configured"


def test_revalidate_falls_back_to_core_paths(client):
    with patch("storefront.web.revalidation.RevalidationPlanner.plan", side_effect=RuntimeError("boom")):
        response = client.post(f"/api/revalidate?secret={SECRET}&event=product.updated")

    assert response.status_code == 200
    assert response.get_json()["paths"] == ["/", "/products"]
    assert response.get_json()["tags"] == []


def test_manual_path_revalidation(client):
    response = client.get(f"/api/revalidate?secret={SECRET}&path=/products")

    assert response.get_json() == {"ok": True, "path": "/products"}
