"""
Storefront HTTP surface: the revalidation webhook and region-prefixed
page-data routes.
"""

from flask import Blueprint, Response, current_app, jsonify, request

from storefront.utils.logger import get_logger, log_with_context
from storefront.utils.validators import validate_secret
from storefront.web.regions import LOCALE_NAMES, available_locales, locale_for_country

bp = Blueprint('storefront', __name__)
logger = get_logger(__name__)

MAX_PAGE_LIMIT = 100


def _authorized() -> bool:
    return validate_secret(
        request.args.get("secret"),
        current_app.config.get("REVALIDATE_SECRET")
    )


@bp.route('/api/revalidate', methods=['POST'])
def revalidate():
    """
    Drop cached pages and data for a commerce or promotional-content event.

    Query: secret, event. Body: optional JSON payload describing the entity.

    Returns:
    {
        "ok": true,
        "event": "product.updated",
        "count": 3,
        "paths": ["/", "/products", "/products/iphone-17"],
        "tags": ["products", "product:iphone-17"]
    }
    """
    if not _authorized():
        log_with_context(
            logger, "WARNING",
            "Unauthorized revalidation attempt",
            ip=request.remote_addr
        )
        return Response("Invalid token", status=401, mimetype="text/plain")

    if not current_app.config.get("COMMERCE_BACKEND_URL"):
        return Response(
            "COMMERCE_BACKEND_URL is not configured",
            status=500,
            mimetype="text/plain"
        )

    event = (request.args.get("event") or "").lower()
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        body = {}

    from storefront import get_revalidation_planner, get_storefront_cache
    cache = get_storefront_cache()

    try:
        targets = get_revalidation_planner().plan(event, body)
    except Exception:
        # generic pages are still refreshed below
        logger.exception("Revalidation planning failed")
        from storefront.web.revalidation import CORE_PATHS, RevalidationTargets
        targets = RevalidationTargets()
        for path in CORE_PATHS:
            targets.add_path(path)

    revalidated_paths = []
    for path in targets.paths:
        try:
            cache.revalidate_path(path)
            revalidated_paths.append(path)
        except Exception:
            logger.exception("Failed to revalidate path %s", path)

    revalidated_tags = []
    for tag in targets.tags:
        try:
            cache.revalidate_tag(tag)
            revalidated_tags.append(tag)
        except Exception:
            logger.exception("Failed to revalidate tag %s", tag)

    log_with_context(
        logger, "INFO",
        "Storefront revalidated",
        event=event,
        paths=revalidated_paths,
        tags=revalidated_tags
    )

    return jsonify({
        "ok": True,
        "event": event,
        "count": len(revalidated_paths),
        "paths": revalidated_paths,
        "tags": revalidated_tags,
    }), 200


@bp.route('/api/revalidate', methods=['GET'])
def revalidate_path():
    """Manual single-path revalidation: ?secret=...&path=/products"""
    if not _authorized():
        return Response("Invalid token", status=401, mimetype="text/plain")

    path = request.args.get("path") or "/"

    from storefront import get_storefront_cache
    try:
        get_storefront_cache().revalidate_path(path)
    except Exception as e:
        logger.exception("Manual revalidation failed")
        return Response(f"Error revalidating: {e}", status=500, mimetype="text/plain")

    return jsonify({"ok": True, "path": path}), 200


# ----------------------------------------------------------------------
# Page data
# ----------------------------------------------------------------------

def _page(country_code: str, **payload):
    from storefront import get_region_cache

    country_code = country_code.lower()
    locale = locale_for_country(country_code)
    data = {
        "country_code": country_code,
        "locale": locale,
        "locale_name": LOCALE_NAMES[locale],
        "locales": available_locales(),
        "region": get_region_cache().get_region(country_code),
    }
    data.update(payload)
    return jsonify(data)


def _not_found(country_code: str, message: str):
    response = _page(country_code, message=message)
    response.status_code = 404
    return response


@bp.route('/<country_code>', methods=['GET'])
@bp.route('/<country_code>/', methods=['GET'])
def home_page(country_code):
    from storefront import get_storefront_data
    data = get_storefront_data()

    return _page(
        country_code,
        homepage=data.get_homepage_content(page_path="/"),
        collections=data.list_collections(page_path="/"),
    )


@bp.route('/<country_code>/store', methods=['GET'])
def store_page(country_code):
    from storefront import get_storefront_data

    try:
        limit = int(request.args.get("limit", 12))
        offset = int(request.args.get("offset", 0))
    except ValueError:
        return _page(country_code, message="limit and offset must be integers"), 400

    limit = min(max(limit, 1), MAX_PAGE_LIMIT)
    offset = max(offset, 0)

    products = get_storefront_data().list_products(
        {"limit": limit, "offset": offset},
        page_path="/products"
    )
    return _page(country_code, **products)


@bp.route('/<country_code>/products/<handle>', methods=['GET'])
def product_page(country_code, handle):
    from storefront import get_storefront_data

    product = get_storefront_data().get_product_by_handle(
        handle, page_path=f"/products/{handle}"
    )
    if product is None:
        return _not_found(country_code, "Product not found")
    return _page(country_code, product=product)


@bp.route('/<country_code>/categories/<path:handle>', methods=['GET'])
def category_page(country_code, handle):
    from storefront import get_storefront_data

    # nested category URLs resolve to the deepest handle
    leaf = handle.strip("/").split("/")[-1]
    category = get_storefront_data().get_category_by_handle(
        leaf, page_path=f"/categories/{leaf}"
    )
    if category is None:
        return _not_found(country_code, "Category not found")
    return _page(country_code, category=category)


@bp.route('/<country_code>/collections/<handle>', methods=['GET'])
def collection_page(country_code, handle):
    from storefront import get_storefront_data

    collection = get_storefront_data().get_collection_by_handle(
        handle, page_path=f"/collections/{handle}"
    )
    if collection is None:
        return _not_found(country_code, "Collection not found")
    return _page(country_code, collection=collection)


@bp.route('/<country_code>/search', methods=['GET'])
def search_page(country_code):
    from storefront import get_storefront_data

    query = (request.args.get("q") or "").strip()
    if not query:
        return _page(country_code, hits=[], totalHits=0, query="")

    try:
        limit = int(request.args.get("limit", 20))
        offset = int(request.args.get("offset", 0))
    except ValueError:
        return _page(country_code, message="limit and offset must be integers"), 400

    sort = [s for s in (request.args.get("sort") or "").split(",") if s]
    results = get_storefront_data().search_products(
        query,
        limit=limit,
        offset=offset,
        filter=request.args.get("filter"),
        sort=sort,
    )
    return _page(country_code, **results)
