"""
Tests for admin promotional content routes.
"""

BASE = "/admin/promotional-content"


def test_requires_bearer_token(client):
    response = client.get(f"{BASE}/banners")

    assert response.status_code == 401
    assert response.get_json() == {"message": "Unauthorized"}


def test_rejects_wrong_token(client):
    response = client.get(f"{BASE}/banners", headers={"Authorization": "Bearer nope"})

    assert response.status_code == 401


def test_unknown_resource(client, admin_headers):
    response = client.get(f"{BASE}/coupons", headers=admin_headers)

    assert response.status_code == 404


def test_create_banner_triggers_revalidation(client, admin_headers, mock_revalidator, sample_banner):
    """Test successful creation."""
    response = client.post(f"{BASE}/banners", json=sample_banner, headers=admin_headers)

    assert response.status_code == 201
    banner = response.get_json()["banner"]
    assert banner["title"] == sample_banner["title"]
    assert banner["metadata"] is None
    mock_revalidator.trigger.assert_called_once_with(
        "promotional-banner.created", id=banner["id"], position="hero"
    )


def test_create_missing_fields(client, admin_headers, mock_revalidator):
    response = client.post(f"{BASE}/banners", json={"title": "Sale"}, headers=admin_headers)

    assert response.status_code == 400
    assert response.get_json()["message"] == "Missing required fields: title, image_url, position"
    mock_revalidator.trigger.assert_not_called()


def test_create_single_required_field_message(client, admin_headers):
    response = client.post(f"{BASE}/service-features", json={}, headers=admin_headers)

    assert response.status_code == 400
    assert response.get_json()["message"] == "Missing required field: title"


def test_create_invalid_enum(client, admin_headers, sample_banner):
    response = client.post(
        f"{BASE}/banners",
        json=dict(sample_banner, position="footer"),
        headers=admin_headers
    )

    assert response.status_code == 400


def test_list_filters(client, admin_headers, sample_banner):
    client.post(f"{BASE}/banners", json=sample_banner, headers=admin_headers)
    client.post(
        f"{BASE}/banners",
        json=dict(sample_banner, position="sidebar", is_active=False),
        headers=admin_headers
    )

    everything = client.get(f"{BASE}/banners", headers=admin_headers).get_json()
    inactive = client.get(f"{BASE}/banners?is_active=false", headers=admin_headers).get_json()
    hero = client.get(f"{BASE}/banners?position=hero", headers=admin_headers).get_json()

    assert everything["count"] == 2
    assert inactive["count"] == 1
    assert hero["banners"][0]["position"] == "hero"


def test_retrieve_update_delete(client, admin_headers, mock_revalidator):
    """Test the full lifecycle of a testimonial."""
    created = client.post(
        f"{BASE}/testimonials",
        json={"customer_name": "An", "comment": "Great", "rating": 5},
        headers=admin_headers
    ).get_json()["testimonial"]

    fetched = client.get(f"{BASE}/testimonials/{created['id']}", headers=admin_headers)
    assert fetched.get_json()["testimonial"]["customer_name"] == "An"

    updated = client.post(
        f"{BASE}/testimonials/{created['id']}",
        json={"rating": 4},
        headers=admin_headers
    )
    assert updated.status_code == 200
    assert updated.get_json()["testimonial"]["rating"] == 4

    deleted = client.delete(f"{BASE}/testimonials/{created['id']}", headers=admin_headers)
    assert deleted.get_json() == {"id": created["id"], "object": "testimonial", "deleted": True}

    events = [c.args[0] for c in mock_revalidator.trigger.call_args_list]
    assert events == ["testimonial.created", "testimonial.updated", "testimonial.deleted"]


def test_delete_banner_sends_position(client, admin_headers, mock_revalidator, sample_banner):
    banner = client.post(f"{BASE}/banners", json=sample_banner, headers=admin_headers).get_json()["banner"]
    mock_revalidator.reset_mock()

    client.delete(f"{BASE}/banners/{banner['id']}", headers=admin_headers)

    mock_revalidator.trigger.assert_called_once_with(
        "promotional-banner.deleted", id=banner["id"], position="hero"
    )


def test_missing_item_is_404(client, admin_headers):
    assert client.get(f"{BASE}/banners/missing", headers=admin_headers).status_code == 404
    assert client.post(f"{BASE}/banners/missing", json={}, headers=admin_headers).status_code == 404
    assert client.delete(f"{BASE}/banners/missing", headers=admin_headers).status_code == 404


def test_revalidation_failure_does_not_fail_request(client, admin_headers, mock_revalidator):
    mock_revalidator.trigger.return_value = False

    response = client.post(
        f"{BASE}/service-features",
        json={"title": "Free shipping"},
        headers=admin_headers
    )

    assert response.status_code == 201
