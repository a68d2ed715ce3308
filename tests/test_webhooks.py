"""
Tests for event and test-email webhooks.
"""

from unittest.mock import Mock, patch

import storefront
from storefront.clients.storefront_client import StorefrontRevalidator

HEADERS = {"X-Webhook-Token": "test-webhook-secret"}


def test_events_requires_token(client):
    response = client.post("/webhook/events", json={"name": "order.placed"})

    assert response.status_code == 401


def test_events_requires_name(client):
    response = client.post("/webhook/events", json={"data": {}}, headers=HEADERS)

    assert response.status_code == 400


def test_order_event_sends_email(client, mock_provider, mock_revalidator):
    """Test an order event reaches the email provider."""
    response = client.post("/webhook/events", json={
        "name": "order.placed",
        "data": {"id": "order_1", "email": "c@d.e", "total": 1000, "currency_code": "usd"},
    }, headers=HEADERS)

    data = response.get_json()
    assert response.status_code == 200
    assert data["email_sent"] is True
    assert data["revalidated"] is False
    assert mock_provider.send.call_args.args[0].to == "c@d.e"
    mock_revalidator.trigger.assert_not_called()


def test_product_event_indexes_and_revalidates(client, mock_commerce_client, mock_search_client,
                                               mock_revalidator, sample_product):
    mock_commerce_client.get_product.return_value = sample_product
    mock_search_client.index_product.return_value = True

    response = client.post("/webhook/events", json={
        "name": "product.updated",
        "data": {"id": "prod_1"},
    }, headers=HEADERS)

    data = response.get_json()
    assert data["indexed"] is True
    assert data["revalidated"] is True
    mock_search_client.index_product.assert_called_once_with(sample_product)
    mock_revalidator.trigger.assert_called_once_with("product.updated", id="prod_1", data={"id": "prod_1"})


def test_product_delete_removes_document(client, mock_search_client):
    mock_search_client.delete_product.return_value = True

    client.post("/webhook/events", json={"name": "product.deleted", "data": {"id": "prod_1"}}, headers=HEADERS)

    mock_search_client.delete_product.assert_called_once_with("prod_1")


def test_collection_event_only_revalidates(client, mock_search_client, mock_revalidator):
    client.post("/webhook/events", json={"name": "collection.updated", "data": {"id": "pcol_1"}}, headers=HEADERS)

    mock_search_client.index_product.assert_not_called()
    mock_revalidator.trigger.assert_called_once_with("collection.updated", id="pcol_1", data={"id": "pcol_1"})


def test_events_rejects_non_string_name(client):
    response = client.post("/webhook/events", json={"name": 5, "data": {}}, headers=HEADERS)

    assert response.status_code == 400
    assert response.get_json()["message"] == "Missing event name"


def test_variant_event_revalidates_product_page(client, monkeypatch, mock_commerce_client, sample_product):
    """Test a variant change reaches the product page through the revalidation round trip."""
    mock_commerce_client.get_product.side_effect = (
        lambda product_id: sample_product if product_id == "prod_1" else None
    )
    mock_commerce_client.get_collection.return_value = None
    mock_commerce_client.get_category.return_value = None

    revalidator = StorefrontRevalidator("https://store.test/api/revalidate", "test-revalidate-secret")
    monkeypatch.setattr(storefront, "_revalidator", revalidator)
    sent = []

    def post(url, params, json, timeout):
        sent.append((params, json))
        return Mock(ok=True, json=Mock(return_value={"ok": True}))

    with patch.object(revalidator.session, "post", side_effect=post):
        client.post("/webhook/events", json={
            "name": "product-variant.updated",
            "data": {"id": "var_1", "product_id": "prod_1"},
        }, headers=HEADERS)

    params, body = sent[0]
    assert body["product_id"] == "prod_1"

    response = client.post("/api/revalidate", query_string=params, json=body)

    data = response.get_json()
    assert "/products/iphone-17" in data["paths"]
    assert "product:iphone-17" in data["tags"]


def test_events_unexpected_error(client):
    with patch("storefront.webhooks.events.handle_event", side_effect=RuntimeError("boom")):
        response = client.post("/webhook/events", json={"name": "order.placed"}, headers=HEADERS)

    assert response.status_code == 500


def test_test_email_usage(client):
    response = client.get("/test-email")

    assert response.status_code == 200
    assert "usage" in response.get_json()


def test_test_email_requires_address(client):
    response = client.post("/test-email", json={})

    assert response.status_code == 400


def test_test_email_sends(client, mock_provider):
    response = client.post("/test-email", json={"email": "me@example.com"})

    assert response.status_code == 200
    assert response.get_json()["success"] is True
    email = mock_provider.send.call_args.args[0]
    assert email.subject.startswith("Order Confirmation #TEST-")
    assert "99.99" in email.html


def test_test_email_unconfigured(client, mock_provider):
    mock_provider.is_configured.return_value = False

    response = client.post("/test-email", json={"email": "me@example.com"})

    assert response.status_code == 500
