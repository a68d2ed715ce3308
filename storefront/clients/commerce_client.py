"""
Commerce backend (Medusa v2 store API) REST client.
"""

import requests
from typing import Any, Dict, List, Optional


class CommerceAPIError(Exception):
    """Commerce backend API error."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class CommerceClient:
    """Store API client used by the storefront data layer and middleware."""

    def __init__(self, base_url: str, publishable_key: str = "", timeout: int = 10):
        """
        Initialize commerce client.

        Args:
            base_url: Backend URL (e.g., http://localhost:9000)
            publishable_key: Store publishable API key
            timeout: HTTP request timeout in seconds
        """
        self.base_url = (base_url or "").rstrip('/')
        self.publishable_key = publishable_key
        self.timeout = timeout

        self.session = requests.Session()
        self.session.headers.update({
            "Accept": "application/json",
            "Content-Type": "application/json",
            "User-Agent": "Electronics-Storefront/1.0"
        })
        if publishable_key:
            self.session.headers["x-publishable-api-key"] = publishable_key

    @property
    def configured(self) -> bool:
        return bool(self.base_url)

    def fetch_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        GET a store endpoint and decode the JSON body.

        Args:
            path: Path relative to the backend URL (e.g., /store/regions)
            params: Optional query parameters

        Returns:
            Decoded JSON object

        Raises:
            CommerceAPIError: If the request fails or returns a non-2xx status
        """
        if not self.configured:
            raise CommerceAPIError("Commerce backend URL is not configured")

        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise CommerceAPIError(f"GET {url} failed: {str(e)}")

        if not response.ok:
            raise CommerceAPIError(
                f"GET {url} -> {response.status_code} {response.reason}",
                status_code=response.status_code
            )

        try:
            return response.json()
        except ValueError as e:
            raise CommerceAPIError(f"GET {url} returned invalid JSON: {str(e)}")

    def _get_optional(self, path: str, params: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        try:
            return self.fetch_json(path, params)
        except CommerceAPIError as e:
            if e.status_code == 404:
                return None
            raise

    def get_product(self, product_id: str) -> Optional[Dict[str, Any]]:
        """
        GET /store/products/{id}

        Returns:
            Product dict or None if not found
        """
        data = self._get_optional(f"/store/products/{product_id}")
        if data is None:
            return None
        return data.get("product") or data

    def get_collection(self, collection_id: str) -> Optional[Dict[str, Any]]:
        """GET /store/collections/{id}"""
        data = self._get_optional(f"/store/collections/{collection_id}")
        if data is None:
            return None
        return data.get("collection") or data

    def get_category(self, category_id: str) -> Optional[Dict[str, Any]]:
        """GET /store/product-categories/{id}"""
        data = self._get_optional(f"/store/product-categories/{category_id}")
        if data is None:
            return None
        return data.get("product_category") or data.get("category") or data

    def list_regions(self) -> List[Dict[str, Any]]:
        """GET /store/regions"""
        data = self.fetch_json("/store/regions")
        return data.get("regions") or []

    def list_products(
        self,
        limit: int = 100,
        offset: int = 0,
        params: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        GET /store/products with pagination.

        Returns:
            {"products": [...], "count": int or None when the backend omits it}
        """
        query = {
            "limit": limit,
            "offset": offset,
            "fields": "*variants,*collection,*categories",
        }
        query.update(params or {})
        data = self.fetch_json("/store/products", query)
        return {
            "products": data.get("products") or [],
            "count": data.get("count"),
        }
