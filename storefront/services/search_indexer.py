"""
Keeps the product search index in step with catalogue events.
"""

from typing import Any, Dict, Optional

from storefront.clients.commerce_client import CommerceAPIError, CommerceClient
from storefront.clients.search_client import MeiliSearchClient
from storefront.utils.logger import get_logger, log_with_context

logger = get_logger(__name__)

INDEX_EVENTS = ("product.created", "product.updated")
DELETE_EVENTS = ("product.deleted",)
VARIANT_EVENTS = (
    "product-variant.created",
    "product-variant.updated",
    "product-variant.deleted",
    "variant.created",
    "variant.updated",
    "variant.deleted",
)


class SearchIndexer:
    """Applies product events to the search index."""

    def __init__(self, commerce_client: CommerceClient, search_client: MeiliSearchClient):
        self.commerce_client = commerce_client
        self.search_client = search_client

    def handles(self, event: str) -> bool:
        return event in INDEX_EVENTS or event in DELETE_EVENTS or event in VARIANT_EVENTS

    def _reindex(self, product_id: str) -> bool:
        try:
            product = self.commerce_client.get_product(product_id)
        except CommerceAPIError as e:
            log_with_context(
                logger, "ERROR",
                "Failed to fetch product for indexing",
                product_id=product_id,
                error=str(e)
            )
            return False

        if product is None:
            log_with_context(logger, "WARNING", "Product not found for indexing", product_id=product_id)
            return False

        return self.search_client.index_product(product)

    def handle_event(self, event: str, data: Optional[Dict[str, Any]]) -> bool:
        """
        Index, re-index or delete the product an event refers to.

        Returns:
            True if the index was updated
        """
        data = data or {}

        if event in INDEX_EVENTS:
            product_id = data.get("id")
            return bool(product_id) and self._reindex(product_id)

        if event in DELETE_EVENTS:
            product_id = data.get("id")
            return bool(product_id) and self.search_client.delete_product(product_id)

        if event in VARIANT_EVENTS:
            product_id = data.get("product_id")
            return bool(product_id) and self._reindex(product_id)

        return False

    def reindex_all(self, batch_size: int = 100) -> int:
        """
        Page through every store product and index it.

        Returns:
            Number of products sent to the index

        Raises:
            CommerceAPIError: If the product listing fails
        """
        offset = 0
        indexed = 0

        while True:
            page = self.commerce_client.list_products(limit=batch_size, offset=offset)
            products = page["products"]
            if not products:
                break

            if self.search_client.index_products(products):
                indexed += len(products)

            offset += len(products)
            # count is optional, a short page always ends the listing
            count = page.get("count")
            if len(products) < batch_size or (count and offset >= count):
                break

        log_with_context(logger, "INFO", "Search reindex finished", indexed=indexed)
        return indexed
