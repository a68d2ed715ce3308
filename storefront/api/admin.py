"""
Admin REST routes for promotional content.

    GET    /admin/promotional-content/<resource>        list
    POST   /admin/promotional-content/<resource>        create
    GET    /admin/promotional-content/<resource>/<id>   retrieve
    POST   /admin/promotional-content/<resource>/<id>   update
    DELETE /admin/promotional-content/<resource>/<id>   delete

Every successful mutation asks the storefront to revalidate its cache.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from flask import Blueprint, jsonify, request

from storefront.errors import ContentNotFoundError, ContentValidationError
from storefront.normalizers.content import normalize_content, normalize_many
from storefront.services.promotional_content import (
    BANNER,
    HOMEPAGE_SECTION,
    SERVICE_FEATURE,
    TESTIMONIAL,
    ContentKind,
)
from storefront.utils.decorators import admin_required
from storefront.utils.logger import get_logger, log_with_context
from storefront.utils.validators import parse_bool_param

bp = Blueprint('admin', __name__, url_prefix='/admin/promotional-content')
logger = get_logger(__name__)


@dataclass(frozen=True)
class AdminResource:
    slug: str
    kind: ContentKind
    plural: str
    singular: str
    required: Tuple[str, ...]
    label: str


RESOURCES = {
    resource.slug: resource
    for resource in (
        AdminResource("banners", BANNER, "banners", "banner",
                      ("title", "image_url", "position"), "banner"),
        AdminResource("homepage-sections", HOMEPAGE_SECTION, "sections", "section",
                      ("section_type", "title"), "homepage section"),
        AdminResource("service-features", SERVICE_FEATURE, "features", "feature",
                      ("title",), "service feature"),
        AdminResource("testimonials", TESTIMONIAL, "testimonials", "testimonial",
                      ("customer_name", "comment", "rating"), "testimonial"),
    )
}


def _resource(slug: str) -> Optional[AdminResource]:
    return RESOURCES.get(slug)


def _unknown_resource(slug: str):
    return jsonify({"message": f"Unknown promotional content type: {slug}"}), 404


def _server_error(action: str, resource: AdminResource, error: Exception):
    logger.exception("Error %s %s", action, resource.label)
    return jsonify({
        "message": f"Failed to {action} {resource.label}",
        "error": str(error),
    }), 500


def _revalidate(resource: AdminResource, action: str, item_id: str, position: Optional[str] = None) -> None:
    from storefront import get_revalidator

    get_revalidator().trigger(
        f"{resource.kind.event_prefix}.{action}",
        id=item_id,
        position=position,
    )


def _get_service():
    from storefront import get_content_service
    return get_content_service()


@bp.route('/<slug>', methods=['GET'])
@admin_required
def list_content(slug):
    resource = _resource(slug)
    if resource is None:
        return _unknown_resource(slug)

    try:
        filters = {"is_active": parse_bool_param(request.args.get("is_active"))}
        if resource.kind is BANNER:
            filters["position"] = request.args.get("position") or None

        items = _get_service().list(resource.kind.name, filters)
        return jsonify({
            resource.plural: normalize_many(items),
            "count": len(items),
        }), 200

    except Exception as e:
        return _server_error("fetch", resource, e)


@bp.route('/<slug>', methods=['POST'])
@admin_required
def create_content(slug):
    resource = _resource(slug)
    if resource is None:
        return _unknown_resource(slug)

    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}

    missing = [key for key in resource.required if data.get(key) in (None, "")]
    if missing:
        noun = "field" if len(resource.required) == 1 else "fields"
        return jsonify({
            "message": f"Missing required {noun}: {', '.join(resource.required)}"
        }), 400

    try:
        item = _get_service().create(resource.kind.name, data)
    except ContentValidationError:
        raise
    except Exception as e:
        return _server_error("create", resource, e)

    _revalidate(resource, "created", item.id, getattr(item, "position", None))

    return jsonify({resource.singular: normalize_content(item)}), 201


@bp.route('/<slug>/<item_id>', methods=['GET'])
@admin_required
def retrieve_content(slug, item_id):
    resource = _resource(slug)
    if resource is None:
        return _unknown_resource(slug)

    try:
        item = _get_service().retrieve(resource.kind.name, item_id)
    except ContentNotFoundError:
        raise
    except Exception as e:
        return _server_error("fetch", resource, e)

    return jsonify({resource.singular: normalize_content(item)}), 200


@bp.route('/<slug>/<item_id>', methods=['POST'])
@admin_required
def update_content(slug, item_id):
    resource = _resource(slug)
    if resource is None:
        return _unknown_resource(slug)

    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    data.pop("id", None)

    try:
        item = _get_service().update(resource.kind.name, item_id, data)
    except (ContentNotFoundError, ContentValidationError):
        raise
    except Exception as e:
        return _server_error("update", resource, e)

    position = data.get("position") or getattr(item, "position", None)
    _revalidate(resource, "updated", item.id, position)

    return jsonify({resource.singular: normalize_content(item)}), 200


@bp.route('/<slug>/<item_id>', methods=['DELETE'])
@admin_required
def delete_content(slug, item_id):
    resource = _resource(slug)
    if resource is None:
        return _unknown_resource(slug)

    service = _get_service()
    try:
        # read position before the row disappears
        item = service.retrieve(resource.kind.name, item_id)
        position = getattr(item, "position", None)
        service.delete(resource.kind.name, item_id)
    except ContentNotFoundError:
        raise
    except Exception as e:
        return _server_error("delete", resource, e)

    _revalidate(resource, "deleted", item_id, position)

    log_with_context(
        logger, "INFO",
        "Admin deleted promotional content",
        kind=resource.kind.name,
        id=item_id
    )

    return jsonify({
        "id": item_id,
        "object": resource.kind.object_name,
        "deleted": True,
    }), 200

