"""
Storefront data access: cached, tagged reads of the store API.

Every helper degrades to an empty/default value when the backend is
unavailable so the page renders without the affected section.
"""

import json
from typing import Any, Callable, Dict, Iterable, List, Optional

from storefront.clients.commerce_client import CommerceAPIError, CommerceClient
from storefront.utils.logger import get_logger, log_with_context
from storefront.web.cache import TaggedCache

logger = get_logger(__name__)


def empty_homepage_content() -> Dict[str, list]:
    return {
        "hero_banners": [],
        "homepage_sections": [],
        "service_features": [],
        "testimonials": [],
    }


class StorefrontData:
    """Read helpers used by the storefront page routes."""

    def __init__(self, commerce_client: CommerceClient, cache: TaggedCache):
        self.commerce_client = commerce_client
        self.cache = cache

    def _cached(
        self,
        path: str,
        params: Optional[Dict[str, Any]],
        tags: Iterable[str],
        page_path: Optional[str],
        extract: Callable[[Dict[str, Any]], Any],
        default: Any
    ) -> Any:
        key = f"{path}?{json.dumps(params or {}, sort_keys=True)}"

        def fetch():
            return extract(self.commerce_client.fetch_json(path, params))

        try:
            return self.cache.get_or_fetch(key, fetch, tags=tags, path=page_path)
        except CommerceAPIError as e:
            log_with_context(
                logger, "WARNING",
                "Storefront fetch failed, returning default",
                path=path,
                error=str(e)
            )
            return default

    # ------------------------------------------------------------------
    # Promotional content
    # ------------------------------------------------------------------

    def get_homepage_content(self, page_path: Optional[str] = "/") -> Dict[str, list]:
        def extract(data):
            content = empty_homepage_content()
            for key in content:
                content[key] = data.get(key) or []
            return content

        return self._cached(
            "/store/homepage-content", None,
            ["homepage", "promotional-content"], page_path,
            extract, empty_homepage_content()
        )

    def get_hero_banners(self, position: str = "hero", page_path: Optional[str] = "/") -> List[dict]:
        return self._cached(
            "/store/banners", {"position": position, "is_active": "true"},
            ["banners", f"banners:{position}"], page_path,
            lambda data: data.get("banners") or [], []
        )

    def get_service_features(self, page_path: Optional[str] = "/") -> List[dict]:
        return self._cached(
            "/store/service-features", None,
            ["service-features"], page_path,
            lambda data: data.get("features") or [], []
        )

    def get_testimonials(self, page_path: Optional[str] = "/") -> List[dict]:
        return self._cached(
            "/store/testimonials", None,
            ["testimonials"], page_path,
            lambda data: data.get("testimonials") or [], []
        )

    def get_homepage_sections(self, page_path: Optional[str] = "/") -> List[dict]:
        return self._cached(
            "/store/homepage-sections", None,
            ["homepage-sections"], page_path,
            lambda data: data.get("sections") or [], []
        )

    # ------------------------------------------------------------------
    # Catalogue
    # ------------------------------------------------------------------

    def list_categories(self, page_path: Optional[str] = None) -> List[dict]:
        return self._cached(
            "/store/product-categories", {"limit": 100},
            ["categories"], page_path,
            lambda data: data.get("product_categories") or [], []
        )

    def get_category_by_handle(self, handle: str, page_path: Optional[str] = None) -> Optional[dict]:
        def extract(data):
            categories = data.get("product_categories") or []
            return categories[0] if categories else None

        return self._cached(
            "/store/product-categories", {"handle": handle, "fields": "*category_children"},
            ["categories", f"category:{handle}"], page_path,
            extract, None
        )

    def list_collections(self, page_path: Optional[str] = None) -> List[dict]:
        return self._cached(
            "/store/collections", {"limit": 100},
            ["collections"], page_path,
            lambda data: data.get("collections") or [], []
        )

    def get_collection_by_handle(self, handle: str, page_path: Optional[str] = None) -> Optional[dict]:
        def extract(data):
            collections = data.get("collections") or []
            return collections[0] if collections else None

        return self._cached(
            "/store/collections", {"handle": handle},
            ["collections", f"collection:{handle}"], page_path,
            extract, None
        )

    def get_product_by_handle(self, handle: str, page_path: Optional[str] = None) -> Optional[dict]:
        def extract(data):
            products = data.get("products") or []
            return products[0] if products else None

        return self._cached(
            "/store/products", {"handle": handle, "fields": "*variants,*categories,*collection"},
            ["products", f"product:{handle}"], page_path,
            extract, None
        )

    def list_products(
        self,
        params: Optional[Dict[str, Any]] = None,
        page_path: Optional[str] = None
    ) -> Dict[str, Any]:
        return self._cached(
            "/store/products", params or {"limit": 12},
            ["products"], page_path,
            lambda data: {"products": data.get("products") or [], "count": data.get("count", 0)},
            {"products": [], "count": 0}
        )

    def search_products(
        self,
        query: str,
        limit: int = 20,
        offset: int = 0,
        filter: Optional[str] = None,
        sort: Optional[List[str]] = None
    ) -> Dict[str, Any]:
        """Uncached search through the backend's /store/search proxy."""
        params: Dict[str, Any] = {"q": query, "limit": limit, "offset": offset}
        if filter:
            params["filters"] = filter
        if sort:
            params["sort"] = ",".join(sort)

        empty = {"hits": [], "totalHits": 0, "query": query, "limit": limit, "offset": offset}
        try:
            data = self.commerce_client.fetch_json("/store/search", params)
        except CommerceAPIError as e:
            log_with_context(logger, "WARNING", "Search request failed", query=query, error=str(e))
            return empty

        return {
            "hits": data.get("hits") or [],
            "totalHits": data.get("totalHits", 0),
            "query": query,
            "limit": limit,
            "offset": offset,
        }
