"""
Public store routes consumed by the storefront.

Read failures never surface as errors here: the storefront hides a
section when its list comes back empty.
"""

from flask import Blueprint, jsonify, request

from storefront.normalizers.content import normalize_many
from storefront.utils.logger import get_logger
from storefront.utils.validators import parse_bool_param

bp = Blueprint('store', __name__, url_prefix='/store')
logger = get_logger(__name__)


def _get_service():
    from storefront import get_content_service
    return get_content_service()


@bp.route('/banners', methods=['GET'])
def list_banners():
    """
    Active banners, optionally for one position.

    Query: position, is_active (defaults to "true")
    """
    try:
        service = _get_service()
        position = request.args.get("position")

        if position:
            banners = service.get_active_banners_by_position(position)
        else:
            is_active = parse_bool_param(request.args.get("is_active"))
            banners = service.list_banners(is_active=True if is_active is None else is_active)

        return jsonify({"banners": normalize_many(banners), "count": len(banners)})

    except Exception:
        logger.exception("Error fetching banners")
        return jsonify({"banners": [], "count": 0})


@bp.route('/homepage-content', methods=['GET'])
def homepage_content():
    """All active homepage content in one response."""
    try:
        content = _get_service().get_homepage_content()
        return jsonify({key: normalize_many(items) for key, items in content.items()})

    except Exception:
        logger.exception("Error fetching homepage content")
        return jsonify({
            "hero_banners": [],
            "homepage_sections": [],
            "service_features": [],
            "testimonials": [],
        })


@bp.route('/homepage-sections', methods=['GET'])
def homepage_sections():
    try:
        sections = _get_service().list_active_homepage_sections()
        return jsonify({"sections": normalize_many(sections), "count": len(sections)})

    except Exception:
        logger.exception("Error fetching homepage sections")
        return jsonify({"sections": [], "count": 0})


@bp.route('/service-features', methods=['GET'])
def service_features():
    try:
        features = _get_service().list_active_service_features()
        return jsonify({"features": normalize_many(features), "count": len(features)})

    except Exception:
        logger.exception("Error fetching service features")
        return jsonify({"features": [], "count": 0})


@bp.route('/testimonials', methods=['GET'])
def testimonials():
    try:
        items = _get_service().list_active_testimonials()
        return jsonify({"testimonials": normalize_many(items), "count": len(items)})

    except Exception:
        logger.exception("Error fetching testimonials")
        return jsonify({"testimonials": [], "count": 0})


def _search_params():
    if request.method == 'POST':
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            data = {}
        sort = data.get("sort") or []
        if isinstance(sort, str):
            sort = [sort]
        return (
            data.get("q"),
            data.get("limit", 20),
            data.get("offset", 0),
            data.get("filters") or "",
            sort,
        )

    sort = []
    for value in request.args.getlist("sort"):
        sort.extend(s for s in value.split(",") if s)
    return (
        request.args.get("q"),
        request.args.get("limit", 20),
        request.args.get("offset", 0),
        request.args.get("filters") or "",
        sort,
    )


@bp.route('/search', methods=['GET', 'POST'])
def search():
    """
    Product search proxy.

    Parameters (query string for GET, JSON body for POST):
        q, limit=20, offset=0, filters, sort

    Returns:
    {
        "hits": [...],
        "totalHits": 42,
        "query": "iphone",
        "limit": 20,
        "offset": 0
    }
    """
    query, limit, offset, filters, sort = _search_params()

    if not query or not str(query).strip():
        return jsonify({
            "hits": [],
            "totalHits": 0,
            "message": "Search query is required"
        })

    try:
        limit = int(limit)
        offset = int(offset)
    except (TypeError, ValueError):
        return jsonify({
            "error": "Bad request",
            "message": "limit and offset must be integers"
        }), 400

    try:
        from storefront import get_search_client
        results = get_search_client().search_products(
            str(query),
            limit=limit,
            offset=offset,
            filters=filters,
            sort=sort,
        )

        return jsonify({
            "hits": results["hits"],
            "totalHits": results["totalHits"],
            "query": query,
            "limit": limit,
            "offset": offset,
        })

    except Exception:
        logger.exception("Search API error")
        return jsonify({
            "error": "Internal server error",
            "message": "Failed to perform search"
        }), 500
