"""
Tests for region routing and storefront page data.
"""

from storefront.clients.commerce_client import CommerceAPIError
from storefront.web.cache import TaggedCache
from storefront.web.middleware import CACHE_ID_COOKIE
from storefront.web.regions import RegionMapCache, available_locales, get_country_code, locale_for_country


def _backend(responses):
    def fetch_json(path, params=None):
        if path in responses:
            return responses[path]
        raise CommerceAPIError("not found", 404)
    return fetch_json


def test_get_country_code_order():
    region_map = {"vn": {}, "us": {}}

    assert get_country_code("/us/store", "vn", region_map, "vn") == "us"
    assert get_country_code("/store", "us", region_map, "vn") == "us"
    assert get_country_code("/store", None, region_map, "vn") == "vn"
    assert get_country_code("/store", None, {"us": {}}, "vn") == "us"
    assert get_country_code("/store", None, {}, "vn") is None


def test_locale_for_country():
    assert locale_for_country("vn") == "vi"
    assert locale_for_country("xx") == "en"


def test_available_locales_map_to_countries():
    locales = {entry["code"]: entry for entry in available_locales()}
    assert list(locales) == ["en", "vi", "ja", "zh"]
    assert locales["vi"]["country_code"] == "vn"
    assert locales["zh"]["country_code"] == "cn"
    assert locales["ja"]["name"] == "日本語"


def test_region_cache_refreshes_after_ttl(mock_commerce_client):
    now = [1000.0]
    cache = RegionMapCache(mock_commerce_client, "vn", ttl=3600, clock=lambda: now[0])

    cache.get_region_map()
    cache.get_region_map()
    assert mock_commerce_client.list_regions.call_count == 1

    now[0] += 3601
    cache.get_region_map()
    assert mock_commerce_client.list_regions.call_count == 2


def test_region_cache_fallback(mock_commerce_client):
    mock_commerce_client.list_regions.side_effect = CommerceAPIError("down", 503)

    region_map = RegionMapCache(mock_commerce_client, "vn").get_region_map()

    assert list(region_map) == ["vn"]
    assert region_map["vn"]["id"] == "vn-region"


def test_redirects_to_country_prefix(client):
    response = client.get("/products/iphone-17?ref=mail")

    assert response.status_code == 307
    assert response.headers["Location"].endswith("/vn/products/iphone-17?ref=mail")


def test_redirect_uses_ip_country(client):
    response = client.get("/", headers={"x-vercel-ip-country": "US"})

    assert response.status_code == 307
    assert response.headers["Location"].endswith("/us")


def test_backend_paths_are_not_redirected(client):
    assert client.get("/health").status_code == 200


def test_home_page_sets_cache_cookie(client, mock_commerce_client):
    mock_commerce_client.fetch_json.side_effect = _backend({
        "/store/homepage-content": {"hero_banners": [{"id": "b1"}]},
        "/store/collections": {"collections": [{"id": "pcol_1"}]},
    })

    response = client.get("/vn")

    data = response.get_json()
    assert response.status_code == 200
    assert data["country_code"] == "vn"
    assert data["locale"] == "vi"
    assert data["locale_name"] == "Tiếng Việt"
    assert len(data["locales"]) == 4
    assert data["region"]["id"] == "reg_vn"
    assert data["homepage"]["hero_banners"] == [{"id": "b1"}]
    assert data["homepage"]["testimonials"] == []
    assert CACHE_ID_COOKIE in response.headers.get("Set-Cookie", "")


def test_existing_cache_cookie_is_kept(client, mock_commerce_client):
    mock_commerce_client.fetch_json.side_effect = _backend({})
    client.set_cookie(CACHE_ID_COOKIE, "abc")

    response = client.get("/vn")

    assert "Set-Cookie" not in response.headers


def test_product_page_not_found(client, mock_commerce_client):
    mock_commerce_client.fetch_json.side_effect = _backend({"/store/products": {"products": []}})

    response = client.get("/vn/products/unknown")

    assert response.status_code == 404
    assert response.get_json()["message"] == "Product not found"


def test_category_page_uses_leaf_handle(client, mock_commerce_client):
    mock_commerce_client.fetch_json.side_effect = _backend({
        "/store/product-categories": {"product_categories": [{"id": "pcat_1", "handle": "iphone"}]},
    })

    response = client.get("/vn/categories/phones/iphone")

    assert response.status_code == 200
    params = mock_commerce_client.fetch_json.call_args.args[1]
    assert params["handle"] == "iphone"


def test_cached_reads_hit_backend_once(mock_commerce_client):
    from storefront.web.data import StorefrontData

    mock_commerce_client.fetch_json.return_value = {"testimonials": [{"id": "t1"}]}
    cache = TaggedCache()
    data = StorefrontData(mock_commerce_client, cache)

    assert data.get_testimonials() == [{"id": "t1"}]
    assert data.get_testimonials() == [{"id": "t1"}]
    assert mock_commerce_client.fetch_json.call_count == 1

    cache.revalidate_tag("testimonials")
    data.get_testimonials()
    assert mock_commerce_client.fetch_json.call_count == 2


def test_data_helpers_degrade_on_error(mock_commerce_client):
    from storefront.web.data import StorefrontData

    mock_commerce_client.fetch_json.side_effect = CommerceAPIError("down", 503)
    data = StorefrontData(mock_commerce_client, TaggedCache())

    assert data.get_hero_banners() == []
    assert data.get_collection_by_handle("apple") is None
    assert data.search_products("iphone")["hits"] == []


def test_cache_revalidate_path_counts():
    cache = TaggedCache()
    cache.get_or_fetch("a", lambda: 1, tags=["x"], path="products")
    cache.get_or_fetch("b", lambda: 2, tags=["x"], path="/")

    assert cache.revalidate_path("/products") == 1
    assert cache.revalidate_tag("x") == 1
    assert len(cache) == 0


def test_revalidation_during_fetch_is_not_cached():
    cache = TaggedCache()
    values = iter([["stale"], ["fresh"]])

    def fetch():
        value = next(values)
        # content changes while the backend read is still in flight
        if value == ["stale"]:
            cache.revalidate_tag("testimonials")
        return value

    assert cache.get_or_fetch("t", fetch, tags=["testimonials"]) == ["stale"]
    assert len(cache) == 0
    assert cache.get_or_fetch("t", fetch, tags=["testimonials"]) == ["fresh"]
    assert len(cache) == 1


def test_cache_does_not_store_missing_values():
    cache = TaggedCache()

    assert cache.get_or_fetch("missing", lambda: None, tags=["products"]) is None
    assert len(cache) == 0


def test_cache_drops_least_recently_used_entries():
    cache = TaggedCache(max_entries=2)
    cache.get_or_fetch("a", lambda: 1)
    cache.get_or_fetch("b", lambda: 2)
    cache.get_or_fetch("a", lambda: 99)
    cache.get_or_fetch("c", lambda: 3)

    assert len(cache) == 2
    assert cache.get_or_fetch("a", lambda: 99) == 1
    assert cache.get_or_fetch("b", lambda: 20) == 20


def test_cache_entries_expire_after_ttl():
    now = [1000.0]
    cache = TaggedCache(ttl=60, clock=lambda: now[0])
    cache.get_or_fetch("a", lambda: 1)

    now[0] += 61
    assert cache.get_or_fetch("a", lambda: 2) == 2


def test_unknown_product_handles_are_not_cached(app, client, mock_commerce_client):
    from storefront import get_storefront_cache

    mock_commerce_client.fetch_json.side_effect = _backend({"/store/products": {"products": []}})

    for i in range(50):
        assert client.get(f"/vn/products/nope-{i}").status_code == 404

    assert len(get_storefront_cache()) == 0


def test_store_page_clamps_paging(client, mock_commerce_client):
    mock_commerce_client.fetch_json.side_effect = _backend({"/store/products": {"products": [], "count": 0}})

    response = client.get("/vn/store?limit=100000&offset=-5")

    assert response.status_code == 200
    params = mock_commerce_client.fetch_json.call_args.args[1]
    assert params == {"limit": 100, "offset": 0}
