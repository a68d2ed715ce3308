"""
Meilisearch REST API client for the product search index.
"""

import requests
from typing import Any, Dict, List, Optional

from storefront.utils.logger import get_logger, log_with_context

logger = get_logger(__name__)

SEARCHABLE_ATTRIBUTES = [
    "title",
    "description",
    "handle",
    "variant_sku",
    "variant_title",
    "collection_title",
    "category_title",
]

DISPLAYED_ATTRIBUTES = [
    "id",
    "title",
    "description",
    "handle",
    "thumbnail",
    "variants",
    "collection",
    "category",
]

FILTERABLE_ATTRIBUTES = [
    "collection_id",
    "category_id",
    "variant_price",
    "variant_inventory_quantity",
]

SORTABLE_ATTRIBUTES = [
    "created_at",
    "updated_at",
    "variant_price",
]


class SearchAPIError(Exception):
    """Meilisearch API error."""
    pass


class MeiliSearchClient:
    """
    Thin wrapper over the hosted search engine.

    Indexing calls are fire-and-forget from the caller's point of view:
    failures are logged and swallowed so catalogue updates never fail
    because search is down. search_products() degrades to an empty result.
    """

    def __init__(
        self,
        host: str,
        api_key: str = "",
        index_name: str = "products",
        timeout: int = 10
    ):
        """
        Initialize search client.

        Args:
            host: Meilisearch URL (e.g., http://localhost:7700)
            api_key: Master or admin API key
            index_name: Index holding product documents
            timeout: Request timeout in seconds
        """
        self.host = (host or "").rstrip('/')
        self.index_name = index_name
        self.timeout = timeout

        self.session = requests.Session()
        self.session.headers.update({
            "Accept": "application/json",
            "Content-Type": "application/json",
        })
        if api_key:
            self.session.headers["Authorization"] = f"Bearer {api_key}"

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.host}/{path.lstrip('/')}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
        except requests.RequestException as e:
            raise SearchAPIError(f"{method} {url} failed: {str(e)}")

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise SearchAPIError(f"{method} {url} returned invalid JSON: {str(e)}")

    def _index_path(self, suffix: str = "") -> str:
        return f"/indexes/{self.index_name}{suffix}"

    def initialize_index(self) -> bool:
        """
        Create the products index if missing and configure its attributes.

        Returns:
            True if the index exists (or was created) and is configured
        """
        try:
            data = self._request("GET", "/indexes", params={"limit": 1000})
            exists = any(
                index.get("uid") == self.index_name
                for index in data.get("results", [])
            )

            if exists:
                log_with_context(logger, "INFO", "Search index already exists", index=self.index_name)
                return True

            self._request("POST", "/indexes", json={
                "uid": self.index_name,
                "primaryKey": "id"
            })
            self._request("PUT", self._index_path("/settings/searchable-attributes"), json=SEARCHABLE_ATTRIBUTES)
            self._request("PUT", self._index_path("/settings/displayed-attributes"), json=DISPLAYED_ATTRIBUTES)
            self._request("PUT", self._index_path("/settings/filterable-attributes"), json=FILTERABLE_ATTRIBUTES)
            self._request("PUT", self._index_path("/settings/sortable-attributes"), json=SORTABLE_ATTRIBUTES)

            log_with_context(logger, "INFO", "Search index created", index=self.index_name)
            return True

        except SearchAPIError as e:
            log_with_context(
                logger, "ERROR",
                "Error initializing search index",
                index=self.index_name,
                error=str(e)
            )
            return False

    def index_product(self, product: Dict[str, Any]) -> bool:
        return self.index_products([product])

    def index_products(self, products: List[Dict[str, Any]]) -> bool:
        """
        Add or replace product documents.

        Returns:
            True if the documents were accepted
        """
        if not products:
            return True

        try:
            documents = [self.transform_product_for_search(p) for p in products]
            self._request("POST", self._index_path("/documents"), json=documents)
            log_with_context(
                logger, "INFO",
                "Products indexed",
                index=self.index_name,
                count=len(documents)
            )
            return True
        except SearchAPIError as e:
            log_with_context(
                logger, "ERROR",
                "Error indexing products",
                index=self.index_name,
                count=len(products),
                error=str(e)
            )
            return False

    def delete_product(self, product_id: str) -> bool:
        try:
            self._request("DELETE", self._index_path(f"/documents/{product_id}"))
            return True
        except SearchAPIError as e:
            log_with_context(
                logger, "ERROR",
                "Error deleting product from search",
                product_id=product_id,
                error=str(e)
            )
            return False

    def search_products(
        self,
        query: str,
        limit: int = 20,
        offset: int = 0,
        filters: Optional[str] = "",
        sort: Optional[List[str]] = None
    ) -> Dict[str, Any]:
        """
        Search products.

        Args:
            query: Free-text query
            limit: Page size
            offset: Number of hits to skip
            filters: Meilisearch filter expression; blank means no filter
            sort: Sort rules such as ["variant_price:asc"]

        Returns:
            {"hits": [...], "totalHits": int}
        """
        payload: Dict[str, Any] = {
            "q": query,
            "limit": limit,
            "offset": offset,
        }
        sort = [rule for rule in (sort or []) if rule]
        if sort:
            payload["sort"] = sort
        if filters and filters.strip():
            payload["filter"] = filters

        try:
            data = self._request("POST", self._index_path("/search"), json=payload)
        except SearchAPIError as e:
            log_with_context(
                logger, "ERROR",
                "Error searching products",
                query=query,
                error=str(e)
            )
            return {"hits": [], "totalHits": 0}

        total = data.get("totalHits")
        if total is None:
            total = data.get("estimatedTotalHits", 0)

        return {
            "hits": data.get("hits", []),
            "totalHits": total,
        }

    @staticmethod
    def transform_product_for_search(product: Dict[str, Any]) -> Dict[str, Any]:
        """
        Flatten a commerce product into a search document.

        Variant SKUs and titles are joined into single searchable strings;
        prices and stock are kept as lists for filtering. The first
        category becomes the document's category.
        """
        variants = product.get("variants") or []
        collection = product.get("collection")

        category = product.get("category")
        if not category:
            categories = product.get("categories") or []
            category = categories[0] if categories else None

        def _ref(entity):
            if not entity:
                return None
            return {
                "id": entity.get("id"),
                "title": entity.get("title") or entity.get("name"),
                "handle": entity.get("handle"),
            }

        collection_ref = _ref(collection)
        category_ref = _ref(category)

        return {
            "id": product.get("id"),
            "title": product.get("title"),
            "description": product.get("description"),
            "handle": product.get("handle"),
            "thumbnail": product.get("thumbnail"),
            "created_at": product.get("created_at"),
            "updated_at": product.get("updated_at"),
            "variants": [
                {
                    "id": v.get("id"),
                    "sku": v.get("sku"),
                    "title": v.get("title"),
                    "price": v.get("price"),
                    "inventory_quantity": v.get("inventory_quantity"),
                }
                for v in variants
            ],
            "variant_sku": " ".join(v.get("sku") or "" for v in variants).strip(),
            "variant_title": " ".join(v.get("title") or "" for v in variants).strip(),
            "variant_price": [v.get("price") for v in variants],
            "variant_inventory_quantity": [v.get("inventory_quantity") for v in variants],
            "collection": collection_ref,
            "collection_id": collection_ref["id"] if collection_ref else None,
            "collection_title": (collection_ref or {}).get("title") or "",
            "category": category_ref,
            "category_id": category_ref["id"] if category_ref else None,
            "category_title": (category_ref or {}).get("title") or "",
        }
