"""
Map commerce / promotional-content events onto the cache paths and tags
that must be dropped.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from storefront.clients.commerce_client import CommerceAPIError, CommerceClient
from storefront.utils.logger import get_logger, log_with_context

logger = get_logger(__name__)

# Always refreshed, whatever the event.
CORE_PATHS = ("/", "/products")

PROMOTIONAL_EVENT_TAGS: Dict[str, List[str]] = {
    "promotional-banner": ["banners", "promotional-content", "homepage"],
    "homepage-section": ["homepage-sections", "promotional-content", "homepage"],
    "service-feature": ["service-features", "promotional-content", "homepage"],
    "testimonial": ["testimonials", "promotional-content", "homepage"],
}

PRODUCT_EVENT_PREFIXES = ("product.", "product-variant.", "variant.", "inventory_item.")
COLLECTION_EVENT_PREFIXES = ("collection.", "product-collection.")
CATEGORY_EVENT_PREFIXES = ("category.", "product-category.")


@dataclass
class RevalidationTargets:
    """Insertion-ordered, de-duplicated paths and tags."""

    paths: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)

    def add_path(self, path: Optional[str]) -> None:
        if not path:
            return
        path = path if path.startswith("/") else f"/{path}"
        if path not in self.paths:
            self.paths.append(path)

    def add_tag(self, tag: Optional[str]) -> None:
        if tag and tag not in self.tags:
            self.tags.append(tag)


def _dig(body: Dict[str, Any], *keys: str) -> Any:
    value: Any = body
    for key in keys:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def _first(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


def extract_ids(body: Dict[str, Any]) -> Dict[str, Any]:
    """
    Pull entity ids out of the loosely-shaped webhook payloads.

    Returns:
        {"id", "product_id", "collection_id", "category_ids"}
    """
    body = body if isinstance(body, dict) else {}

    entity_id = _first(
        body.get("id"),
        _dig(body, "data", "id"),
        body.get("resource_id"),
        _dig(body, "product", "id"),
    )

    product_id = _first(
        body.get("product_id"),
        _dig(body, "variant", "product_id"),
        _dig(body, "inventory_item", "product_id"),
        entity_id,
    )

    collection_id = _first(
        body.get("collection_id"),
        _dig(body, "collection", "id"),
        _dig(body, "product", "collection_id"),
    )

    category_ids = body.get("category_ids")
    if category_ids is None:
        categories = _dig(body, "product", "categories") or []
        category_ids = [c.get("id") for c in categories if isinstance(c, dict) and c.get("id")]
    elif not isinstance(category_ids, list):
        category_ids = [category_ids]

    return {
        "id": entity_id,
        "product_id": product_id,
        "collection_id": collection_id,
        "category_ids": [c for c in category_ids if c],
    }


class RevalidationPlanner:
    """Resolves handles through the store API to build RevalidationTargets."""

    def __init__(self, commerce_client: CommerceClient):
        self.commerce_client = commerce_client

    def _lookup(self, kind: str, entity_id: str) -> Optional[Dict[str, Any]]:
        getter = {
            "product": self.commerce_client.get_product,
            "collection": self.commerce_client.get_collection,
            "category": self.commerce_client.get_category,
        }[kind]
        try:
            return getter(entity_id)
        except CommerceAPIError as e:
            log_with_context(
                logger, "WARNING",
                "Revalidation lookup failed",
                kind=kind,
                id=entity_id,
                error=str(e)
            )
            return None

    def _add_collection(self, targets: RevalidationTargets, collection_id: str) -> None:
        targets.add_tag("collections")
        targets.add_tag(f"collection:{collection_id}")
        collection = self._lookup("collection", collection_id)
        handle = (collection or {}).get("handle")
        if handle:
            targets.add_path(f"/collections/{handle}")
            targets.add_tag(f"collection:{handle}")

    def _add_category(self, targets: RevalidationTargets, category_id: str) -> None:
        targets.add_tag("categories")
        targets.add_tag(f"category:{category_id}")
        category = self._lookup("category", category_id) or {}
        handle = category.get("handle") or category.get("slug")
        if handle:
            targets.add_path(f"/categories/{handle}")
            targets.add_tag(f"category:{handle}")

    def plan(self, event: str, body: Optional[Dict[str, Any]] = None) -> RevalidationTargets:
        """
        Work out what to revalidate for one event.

        Lookup failures are logged and skipped; the core listing paths are
        always part of the result.
        """
        event = (event or "").lower()
        body = body if isinstance(body, dict) else {}
        ids = extract_ids(body)

        targets = RevalidationTargets()
        for path in CORE_PATHS:
            targets.add_path(path)

        prefix = event.split(".", 1)[0]
        if prefix in PROMOTIONAL_EVENT_TAGS:
            for tag in PROMOTIONAL_EVENT_TAGS[prefix]:
                targets.add_tag(tag)
            if prefix == "promotional-banner" and body.get("position"):
                targets.add_tag(f"banners:{body['position']}")

        elif event.startswith(PRODUCT_EVENT_PREFIXES):
            # a product may have left its collection or categories
            for tag in ("products", "collections", "categories"):
                targets.add_tag(tag)
            product_id = ids["product_id"]
            if product_id:
                product = self._lookup("product", product_id) or {}
                handle = product.get("handle")
                if handle:
                    targets.add_path(f"/products/{handle}")
                    targets.add_tag(f"product:{handle}")

                collection_id = ids["collection_id"] or product.get("collection_id")
                if collection_id:
                    self._add_collection(targets, collection_id)

                category_ids = ids["category_ids"]
                if not category_ids:
                    categories = product.get("categories") or product.get("product_categories") or []
                    category_ids = [c.get("id") for c in categories if isinstance(c, dict) and c.get("id")]
                for category_id in category_ids:
                    self._add_category(targets, category_id)

        elif event.startswith(COLLECTION_EVENT_PREFIXES):
            collection_id = ids["collection_id"] or ids["id"]
            if collection_id:
                self._add_collection(targets, collection_id)
            else:
                targets.add_tag("collections")

        elif event.startswith(CATEGORY_EVENT_PREFIXES):
            category_id = ids["category_ids"][0] if ids["category_ids"] else ids["id"]
            if category_id:
                self._add_category(targets, category_id)
            else:
                targets.add_tag("categories")

        elif event.startswith("price_list."):
            # pricing can touch any listing
            targets.add_tag("products")

        return targets
